"""
Completed-round results and aggregate statistics.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime

# Rounds kept for statistics
HISTORY_LIMIT = 50


@dataclass(frozen=True)
class SessionResults:
    """Outcome of one finished round."""

    deck_id: str
    total_questions: int
    correct_answers: int
    max_streak: int
    duration_seconds: float
    completed_at: datetime

    @property
    def accuracy(self) -> float:
        """Correct answers as a percentage."""
        if self.total_questions == 0:
            return 0.0
        return self.correct_answers / self.total_questions * 100


@dataclass(frozen=True)
class SessionStatistics:
    total_sessions: int = 0
    average_accuracy: float = 0.0
    total_questions_answered: int = 0
    total_correct_answers: int = 0
    best_streak: int = 0
    average_session_duration: float = 0.0


class SessionHistory:
    """Rolling window of the most recent round results."""

    def __init__(self, max_entries: int = HISTORY_LIMIT):
        self._results: deque[SessionResults] = deque(maxlen=max_entries)

    def add(self, results: SessionResults) -> None:
        self._results.append(results)

    def results(self, deck_id: str | None = None) -> list[SessionResults]:
        if deck_id is None:
            return list(self._results)
        return [r for r in self._results if r.deck_id == deck_id]

    def statistics(self, deck_id: str | None = None) -> SessionStatistics:
        """
        Aggregate statistics, optionally for one deck.

        Accuracy is pooled over all answers rather than averaged per round.
        """
        sessions = self.results(deck_id)
        if not sessions:
            return SessionStatistics()

        total_questions = sum(s.total_questions for s in sessions)
        total_correct = sum(s.correct_answers for s in sessions)

        return SessionStatistics(
            total_sessions=len(sessions),
            average_accuracy=(
                total_correct / total_questions * 100 if total_questions else 0.0
            ),
            total_questions_answered=total_questions,
            total_correct_answers=total_correct,
            best_streak=max(s.max_streak for s in sessions),
            average_session_duration=sum(s.duration_seconds for s in sessions) / len(sessions),
        )

    def __len__(self) -> int:
        return len(self._results)
