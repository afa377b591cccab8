"""
Logger Module for RehabKit.

Structured event log for one exercise session. Entries are kept in memory
while the session runs and can be dumped to a JSON file when it ends.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum
import json
import time
from pathlib import Path


class LogLevel(Enum):
    """Log levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogCategory(Enum):
    """Log categories."""
    POSE = "pose"
    PHASE = "phase"
    SCORE = "score"
    SESSION = "session"
    SYSTEM = "system"


@dataclass
class LogEntry:
    """Log entry."""
    timestamp: float
    level: LogLevel
    category: LogCategory
    message: str
    data: Optional[Dict] = None

    def to_dict(self) -> dict:
        return {
            'timestamp': self.timestamp,
            'level': self.level.value,
            'category': self.category.value,
            'message': self.message,
            'data': self.data,
        }


@dataclass
class SessionLogger:
    """
    Logger for exercise sessions.
    """

    session_id: str
    log_dir: str = "./data/logs"
    entries: List[LogEntry] = field(default_factory=list)

    def __post_init__(self):
        self.log_dir = Path(self.log_dir)

    def log(self, level: LogLevel, category: LogCategory, message: str, data: Optional[Dict] = None):
        """
        Log a message.

        Args:
            level: Log level
            category: Log category
            message: Log message
            data: Optional data
        """
        entry = LogEntry(
            timestamp=time.time(),
            level=level,
            category=category,
            message=message,
            data=data
        )
        self.entries.append(entry)

    def info(self, category: LogCategory, message: str, data: Optional[Dict] = None):
        """Log info message."""
        self.log(LogLevel.INFO, category, message, data)

    def warning(self, category: LogCategory, message: str, data: Optional[Dict] = None):
        """Log warning message."""
        self.log(LogLevel.WARNING, category, message, data)

    def error(self, category: LogCategory, message: str, data: Optional[Dict] = None):
        """Log error message."""
        self.log(LogLevel.ERROR, category, message, data)

    def log_scoring_frame(self, frame_number: int, angles: Optional[Dict] = None, state: Optional[Dict] = None):
        """Log the classifier result of one frame."""
        data = {
            'frame_number': frame_number,
        }
        if angles:
            data['angles'] = dict(angles)
        if state:
            data['state'] = state
        if state and state.get('score') == 0:
            self.warning(LogCategory.POSE, f"Frame {frame_number} not scored", data)
        else:
            self.info(LogCategory.SCORE, f"Scoring frame {frame_number}", data)

    def log_phase_change(self, frame_number: int, old_phase: Optional[str], new_phase: Optional[str]):
        """Log a phase transition."""
        self.info(LogCategory.PHASE, f"Phase {old_phase} -> {new_phase}", {
            'frame_number': frame_number,
            'from': old_phase,
            'to': new_phase,
        })

    def log_rep(self, rep_number: int, score: int):
        """Log a completed repetition."""
        self.info(LogCategory.SCORE, f"Rep {rep_number} completed", {
            'rep_number': rep_number,
            'score': score,
        })

    def to_dict(self) -> dict:
        return {
            'session_id': self.session_id,
            'timestamp': time.time(),
            'entries': [entry.to_dict() for entry in self.entries],
        }

    def save_session_log(self) -> Path:
        """
        Save session log to file.

        Returns:
            Path of the written JSON file.
        """
        self.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = self.log_dir / f"session_{self.session_id}_{int(time.time())}.json"

        with open(log_file, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

        return log_file


def create_session_logger(session_id: str, log_dir: str = "./data/logs") -> SessionLogger:
    """
    Create a session logger.

    Args:
        session_id: Session ID
        log_dir: Log directory

    Returns:
        SessionLogger instance
    """
    return SessionLogger(session_id, log_dir)
