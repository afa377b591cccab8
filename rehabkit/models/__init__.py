from rehabkit.models.model_base import Base
from rehabkit.models.model_session_report import SessionReport

__all__ = ['Base', 'SessionReport']
