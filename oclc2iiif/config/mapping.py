"""Discovery, selection and loading of shelf mapping files."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

import yaml

from ..domain.records import ShelfEntry

MAPPING_PATTERNS: tuple[str, ...] = ("*.yml", "*.yaml")


def list_mapping_files(input_dir: str | Path) -> List[Path]:
    """Return the mapping files in ``input_dir`` sorted by name."""
    directory = Path(input_dir)
    files: set[Path] = set()
    if directory.is_dir():
        for pattern in MAPPING_PATTERNS:
            files.update(directory.glob(pattern))
    if not files:
        raise FileNotFoundError("No input files found")
    return sorted(files, key=lambda path: path.name)


def prompt_for_mapping(
    files: Sequence[Path],
    *,
    input_fn: Optional[Callable[[str], str]] = None,
    output_fn: Callable[[str], None] = print,
) -> Path:
    """Ask the operator to pick one of ``files`` by number."""
    input_fn = input_fn or input
    if not files:
        raise FileNotFoundError("No input files found")
    output_fn("Select input file: ")
    for index, path in enumerate(files, start=1):
        output_fn(f"  {index}. {path.name}")
    while True:
        answer = input_fn(f"[1-{len(files)}]: ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(files):
            return files[int(answer) - 1]
        output_fn(f"Please enter a number between 1 and {len(files)}.")


def load_mapping(path: str | Path) -> List[Dict[str, Any]]:
    """Load a mapping file; the top level must be a list of rows."""
    mapping_path = Path(path)
    if not mapping_path.exists():
        raise FileNotFoundError(f"Mapping file not found at {mapping_path}")
    with mapping_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"{mapping_path.name} must define a list of shelf entries.")
    return list(data)


def iter_shelf_entries(rows: Iterable[Any]) -> Iterator[ShelfEntry]:
    """Yield entries for complete rows; incomplete rows are skipped."""
    for row in rows:
        entry = ShelfEntry.from_row(row)
        if entry is not None:
            yield entry
