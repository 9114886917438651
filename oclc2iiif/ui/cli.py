"""Command line interface for building enriched IIIF manifests."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from ..config.mapping import list_mapping_files, prompt_for_mapping
from ..config.settings import load_settings
from ..pipeline import run_from_settings

LOGGER = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oclc2iiif",
        description="Build IIIF manifests enriched with WorldCat metadata from a shelf mapping.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    build_parser = subparsers.add_parser("build", help="Write one manifest per shelf entry")
    build_parser.add_argument("--input", dest="input_path", help="Mapping file (default: pick interactively).")
    build_parser.add_argument("--config", dest="config_path", help="Settings file (default: configs/settings.yaml).")
    build_parser.add_argument("--workspace", default=".", help="Directory holding input/, output/, .cache/ and logs/.")
    build_parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    build_parser.set_defaults(func=_run_build)
    return parser


def _run_build(args: argparse.Namespace) -> int:
    settings = load_settings(args.config_path, workspace=args.workspace)
    if args.input_path:
        mapping_path = Path(args.input_path)
        if not mapping_path.exists():
            raise FileNotFoundError(f"Mapping file not found at {mapping_path}")
    else:
        mapping_path = prompt_for_mapping(list_mapping_files(settings.input_dir))
    summary = run_from_settings(settings, mapping_path, progress=not args.no_progress)
    return 0 if summary.failed == 0 else 1


def main(argv: Sequence[str] | None = None) -> None:
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        sys.exit(args.func(args))
    except FileNotFoundError as exc:
        LOGGER.error("%s", exc)
        sys.exit(2)


if __name__ == "__main__":
    main()
