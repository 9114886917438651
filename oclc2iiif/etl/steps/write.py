"""Manifest assembly and output step."""
from __future__ import annotations

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from ...domain.records import BibRecord, ShelfEntry
from ...manifest.presentation import clean_manifest
from .normalize import DEFAULT_PUBLIC_BASE, manifest_label, normalize

LOGGER = logging.getLogger(__name__)

# Shared reading-room shelf; many items carry it, so names need the OCLC number.
SHARED_SHELF = "Tresorleeszaal"


def output_filename(entry: ShelfEntry) -> str:
    name = entry.shelf_number.lower().replace(" ", "-")
    if entry.shelf_number == SHARED_SHELF:
        name = f"{name}-{entry.oclc_numbers[0]}"
    return name


def build_manifest(
    skeleton: Dict[str, Any],
    records: Sequence[BibRecord],
    entry: ShelfEntry,
    *,
    public_base: str = DEFAULT_PUBLIC_BASE,
) -> Tuple[Dict[str, Any], List[str]]:
    """Return the enriched manifest and the anomalies found on the way."""
    manifest = clean_manifest(deepcopy(skeleton))
    manifest["label"] = manifest_label(records)
    result = normalize(records, entry.shelf_number, public_base=public_base)
    manifest["metadata"] = result.metadata
    return manifest, result.anomalies


def write_manifest(manifest: Dict[str, Any], directory: str | Path, name: str) -> bool:
    """Write ``{name}.json`` and return whether an existing file was replaced."""
    output_dir = Path(directory)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{name}.json"
    existed = path.exists()
    with path.open("w", encoding="utf-8") as handle:
        json.dump(manifest, handle, indent=4, ensure_ascii=False)
    if existed:
        LOGGER.info("Existing file %s was overwritten", path.name)
    else:
        LOGGER.info("File %s has been created successfully", path.name)
    return existed
