"""
Mastery Module - consecutive-correct mastery per card and its persistence.
"""

from src.mastery.repository import (
    InMemoryMasteryRepository,
    JsonFileMasteryRepository,
    MasteryRepository,
)
from src.mastery.serialization import deck_mastery_from_dict, deck_mastery_to_dict
from src.mastery.tracker import (
    DEFAULT_MASTERY_THRESHOLD,
    DeckMastery,
    MasteryRecord,
    MasteryTracker,
)

__all__ = [
    "DEFAULT_MASTERY_THRESHOLD",
    "DeckMastery",
    "MasteryRecord",
    "MasteryTracker",
    "MasteryRepository",
    "InMemoryMasteryRepository",
    "JsonFileMasteryRepository",
    "deck_mastery_to_dict",
    "deck_mastery_from_dict",
]
