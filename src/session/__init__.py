"""
Session Module - round-scoped state and answer handling.

Components:
- manager: SessionStateManager (answer events, metrics, pause/resume)
- state: SessionState and its snapshot
- missed: per-round missed-card bookkeeping
- history: completed-round results and statistics
"""

from src.session.history import SessionHistory, SessionResults, SessionStatistics
from src.session.manager import AnswerOutcome, SessionMetrics, SessionStateManager
from src.session.missed import MissedCardTracker
from src.session.state import SessionSnapshot, SessionState

__all__ = [
    "SessionStateManager",
    "SessionMetrics",
    "AnswerOutcome",
    "SessionState",
    "SessionSnapshot",
    "MissedCardTracker",
    "SessionHistory",
    "SessionResults",
    "SessionStatistics",
]
