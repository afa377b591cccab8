import os
import sys
import tempfile
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Settings are read at import time, so the test database must be set first.
_TEST_DIR = tempfile.mkdtemp(prefix="rehabkit-tests-")
os.environ["SQL_DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
os.environ["SESSION_LOG_ENABLED"] = "false"


def make_angles(knee: float = 170, hip: float = 170, **extra) -> dict:
    """Symmetric lower-body angles."""
    angles = {
        "leftKnee": knee,
        "rightKnee": knee,
        "leftHip": hip,
        "rightHip": hip,
    }
    angles.update(extra)
    return angles


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from rehabkit.main import app

    with TestClient(app) as test_client:
        yield test_client
