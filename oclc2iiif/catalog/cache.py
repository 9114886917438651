"""Flat directory cache of raw catalog records, one ``{oclc}.json`` per record."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Set

LOGGER = logging.getLogger(__name__)


class RecordCache:
    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self._keys: Set[str] = set()
        if self.directory.is_dir():
            self._keys = {path.stem for path in self.directory.glob("*.json")}
        LOGGER.debug("Record cache at %s holds %s entries", self.directory, len(self._keys))

    def __contains__(self, oclc_number: object) -> bool:
        return str(oclc_number) in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def path_for(self, oclc_number: int) -> Path:
        return self.directory / f"{oclc_number}.json"

    def load(self, oclc_number: int) -> Dict[str, Any]:
        with self.path_for(oclc_number).open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def store(self, oclc_number: int, payload: Dict[str, Any]) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(oclc_number)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=4, ensure_ascii=False)
        self._keys.add(str(oclc_number))
        return path
