"""Sequential batch driver: mapping rows in, enriched manifests out."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List

import requests
from tqdm import tqdm

from .catalog.auth import default_token_provider
from .catalog.cache import RecordCache
from .catalog.client import CatalogClient
from .config.mapping import load_mapping
from .config.settings import Settings
from .domain.records import BibRecord, Oclc2IiifError, ShelfEntry
from .etl.audit import AuditLog, log_filename
from .etl.steps.normalize import DEFAULT_PUBLIC_BASE
from .etl.steps.write import build_manifest, output_filename, write_manifest
from .manifest.source import ManifestSource

LOGGER = logging.getLogger(__name__)

ENTRY_ERRORS = (
    Oclc2IiifError,
    requests.RequestException,
    ValueError,
    TypeError,
    KeyError,
    AttributeError,
    IndexError,
    OSError,
)


@dataclass
class RunSummary:
    rows: int = 0
    processed: int = 0
    written: int = 0
    overwritten: int = 0
    skipped: int = 0
    failed: int = 0


def resolve_records(
    entry: ShelfEntry,
    *,
    catalog: CatalogClient,
    cache: RecordCache,
    fetch_delay: float = 0.0,
) -> List[BibRecord]:
    """Return records for the entry's OCLC numbers, preferring the cache."""
    records: List[BibRecord] = []
    for number in entry.oclc_numbers:
        if number in cache:
            records.append(BibRecord.from_payload(cache.load(number)))
            continue
        payload = catalog.fetch_bib(number)
        if payload:
            records.append(BibRecord.from_payload(payload))
            cache.store(number, payload)
        if fetch_delay > 0:
            time.sleep(fetch_delay)
    return records


def run(
    rows: Iterable[Any],
    *,
    manifest_source: ManifestSource,
    catalog: CatalogClient,
    cache: RecordCache,
    audit: AuditLog,
    output_dir: str | Path,
    public_base: str = DEFAULT_PUBLIC_BASE,
    fetch_delay: float = 0.0,
    progress: bool = False,
) -> RunSummary:
    """Process mapping rows one at a time; one failing entry never stops the batch."""
    rows = list(rows)
    summary = RunSummary(rows=len(rows))
    for row in tqdm(rows, desc="Manifests", unit="entry", disable=not progress):
        entry = ShelfEntry.from_row(row)
        if entry is None:
            summary.skipped += 1
            continue
        summary.processed += 1
        try:
            skeleton = manifest_source.fetch(entry.dlcs_id)
            records = resolve_records(entry, catalog=catalog, cache=cache, fetch_delay=fetch_delay)
            if not (skeleton and records):
                LOGGER.warning("No records for %s (%s)", entry.shelf_number, _numbers(entry))
                continue
            manifest, anomalies = build_manifest(skeleton, records, entry, public_base=public_base)
            audit.extend(anomalies)
            overwritten = write_manifest(manifest, output_dir, output_filename(entry))
        except ENTRY_ERRORS as exc:
            summary.failed += 1
            LOGGER.error("Error: %s %s %s", entry.shelf_number, _numbers(entry), exc)
            continue
        summary.written += 1
        if overwritten:
            summary.overwritten += 1
    return summary


def _numbers(entry: ShelfEntry) -> str:
    return ", ".join(str(number) for number in entry.oclc_numbers)


def run_from_settings(settings: Settings, mapping_path: str | Path, *, progress: bool = True) -> RunSummary:
    """Wire the real collaborators from ``settings`` and run one mapping file."""
    mapping_path = Path(mapping_path)
    rows = load_mapping(mapping_path)

    token_provider = default_token_provider(
        settings.api_key,
        token_url=settings.token_url,
        scope=settings.token_scope,
        timeout=settings.catalog_timeout,
    )
    catalog = CatalogClient(token_provider, api_base=settings.catalog_api_base, timeout=settings.catalog_timeout)
    manifest_source = ManifestSource(settings.manifest_base, timeout=settings.manifest_timeout)
    cache = RecordCache(settings.cache_dir)
    log_path = settings.log_dir / log_filename(mapping_path.name)

    with AuditLog(log_path) as audit:
        summary = run(
            rows,
            manifest_source=manifest_source,
            catalog=catalog,
            cache=cache,
            audit=audit,
            output_dir=settings.output_dir,
            public_base=settings.public_base,
            fetch_delay=settings.fetch_delay,
            progress=progress,
        )

    LOGGER.info("Done. %s files written (%s overwritten, %s failed).", summary.written, summary.overwritten, summary.failed)
    LOGGER.info("Log: %s", log_path.name)
    return summary
