"""
Mastery persistence.

The scheduling core never touches storage directly; it goes through a
repository with `load(deck_id)` / `save(deck)`. Two implementations:

- InMemoryMasteryRepository: keeps serialized payloads in a dict (tests,
  embedding in a host app that persists elsewhere)
- JsonFileMasteryRepository: one JSON file per deck, by default in
  ~/.drill/mastery/
"""

from __future__ import annotations

import hashlib
import json
import re
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

from src.core.errors import MasteryDataError
from src.mastery.serialization import deck_mastery_from_dict, deck_mastery_to_dict
from src.mastery.tracker import DeckMastery

MASTERY_DIR = Path.home() / ".drill" / "mastery"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class MasteryRepository(Protocol):
    """Storage interface for deck mastery."""

    def load(self, deck_id: str) -> DeckMastery | None:
        ...

    def save(self, deck: DeckMastery) -> None:
        ...

    def delete(self, deck_id: str) -> bool:
        ...


class InMemoryMasteryRepository:
    """Repository that keeps flat payloads in memory."""

    def __init__(self):
        self._payloads: dict[str, dict[str, Any]] = {}

    def load(self, deck_id: str) -> DeckMastery | None:
        payload = self._payloads.get(deck_id)
        if payload is None:
            return None
        return deck_mastery_from_dict(payload)

    def save(self, deck: DeckMastery) -> None:
        self._payloads[deck.deck_id] = deck_mastery_to_dict(deck)

    def delete(self, deck_id: str) -> bool:
        return self._payloads.pop(deck_id, None) is not None

    def deck_ids(self) -> list[str]:
        return sorted(self._payloads)


class JsonFileMasteryRepository:
    """
    Stores each deck as {deck}.json.

    Deck ids are sanitized for the filesystem; ids that need sanitizing
    get a short hash suffix so distinct ids never share a file.
    """

    def __init__(self, mastery_dir: Path | None = None):
        self.mastery_dir = mastery_dir or MASTERY_DIR
        self.mastery_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, deck_id: str) -> Path:
        safe = _UNSAFE_CHARS.sub("_", deck_id)
        if safe != deck_id or not safe:
            digest = hashlib.sha1(deck_id.encode("utf-8")).hexdigest()[:8]
            safe = f"{safe}-{digest}"
        return self.mastery_dir / f"{safe}.json"

    def load(self, deck_id: str) -> DeckMastery | None:
        """
        Load a deck's mastery.

        Returns None if the deck has never been saved.

        Raises:
            MasteryDataError: If the file exists but cannot be decoded
        """
        filepath = self._path_for(deck_id)
        if not filepath.exists():
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise MasteryDataError(f"Corrupted mastery file {filepath}: {e}") from e

        return deck_mastery_from_dict(data)

    def save(self, deck: DeckMastery) -> None:
        filepath = self._path_for(deck.deck_id)
        tmp_path = filepath.with_suffix(".json.tmp")

        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(deck_mastery_to_dict(deck), f, indent=2)
        tmp_path.replace(filepath)

        logger.debug(f"Saved mastery for deck {deck.deck_id} to {filepath}")

    def delete(self, deck_id: str) -> bool:
        filepath = self._path_for(deck_id)
        if filepath.exists():
            filepath.unlink()
            return True
        return False

    def list_decks(self) -> list[str]:
        """Deck ids of all readable mastery files."""
        deck_ids = []
        for filepath in sorted(self.mastery_dir.glob("*.json")):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)
                deck_ids.append(deck_mastery_from_dict(data).deck_id)
            except (json.JSONDecodeError, MasteryDataError):
                logger.warning(f"Skipping unreadable mastery file {filepath}")
                continue
        return deck_ids
