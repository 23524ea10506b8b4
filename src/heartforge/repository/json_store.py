"""JSON-based repository for heartforge characters.

Each character is one document holding its full level-up history and
loadout.  Saves are written to a sibling temporary file and renamed over
the snapshot, so an interrupted write leaves the previous history intact.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from pydantic import TypeAdapter

from heartforge.domain import models as dm

_SNAPSHOT = re.compile(r"character_(\d+)\.json")


class JsonCharacterRepository:
    """Persist characters as JSON snapshots on disk."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._adapter: TypeAdapter[dm.Character] = TypeAdapter(dm.Character)

    def path_for(self, character_id: dm.CharacterID) -> Path:
        return self.base_path / f"character_{int(character_id)}.json"

    def save(self, character: dm.Character) -> Path:
        """Atomically replace the character's snapshot and return its path."""

        path = self.path_for(character.id)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_bytes(self._adapter.dump_json(character, indent=2))
        os.replace(tmp_path, path)
        return path

    def load(self, character_id: dm.CharacterID) -> dm.Character:
        """Load a snapshot; raises ``FileNotFoundError`` for unknown ids."""

        return self._adapter.validate_json(self.path_for(character_id).read_bytes())

    def list_characters(self) -> list[dm.CharacterID]:
        """Ids of every stored snapshot, ascending.  Leftover temp files are skipped."""

        ids: list[dm.CharacterID] = []
        for path in self.base_path.iterdir():
            match = _SNAPSHOT.fullmatch(path.name)
            if match is not None:
                ids.append(dm.CharacterID(int(match.group(1))))
        return sorted(ids)

    def delete(self, character_id: dm.CharacterID) -> bool:
        """Remove a snapshot; returns ``False`` when there was nothing to remove."""

        try:
            self.path_for(character_id).unlink()
        except FileNotFoundError:
            return False
        return True
