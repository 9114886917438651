"""Per-run audit log of data-quality anomalies."""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional


def log_filename(input_name: str, *, moment: Optional[datetime] = None) -> str:
    """``2024-05-01T12.30.00-<input stem>.txt`` for the given mapping file name."""
    stamp = (moment or datetime.now()).strftime("%Y-%m-%dT%H.%M.%S")
    return f"{stamp}-{Path(input_name).stem}.txt"


class AuditLog:
    """Append-only text log backed by a dedicated, non-propagating logger."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.count = 0
        self._handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        self._handler.setFormatter(logging.Formatter("%(message)s"))
        self._logger = logging.Logger(f"{__name__}.{self.path.name}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._logger.addHandler(self._handler)

    def write(self, line: str) -> None:
        self._logger.info(line)
        self.count += 1

    def extend(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.write(line)

    def close(self) -> None:
        self._handler.flush()
        self._logger.removeHandler(self._handler)
        self._handler.close()

    def __enter__(self) -> "AuditLog":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()
