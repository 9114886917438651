"""Runtime configuration loaded from YAML with environment overrides."""
from __future__ import annotations

import os
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from dotenv import load_dotenv

from ..domain.records import Oclc2IiifError

DEFAULT_CONFIG_PATH = Path("configs") / "settings.yaml"

DEFAULTS: Dict[str, Any] = {
    "catalog": {
        "api_base": "https://americas.discovery.api.oclc.org/worldcat/search/v2",
        "token_url": "https://oauth.oclc.org/token",
        "scope": "wcapi",
        "public_base": "https://tudelft.on.worldcat.org/oclc/",
        "timeout": 30,
    },
    "manifests": {
        "source_base": "https://dlc.services/iiif-resource/7/string1string2string3/",
        "timeout": 30,
    },
    "paths": {
        "input_dir": "input",
        "output_dir": "output",
        "cache_dir": ".cache",
        "log_dir": "logs",
    },
    "fetch_delay": 0,
}


class ConfigurationError(Oclc2IiifError):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    catalog_api_base: str
    token_url: str
    token_scope: str
    public_base: str
    catalog_timeout: float
    manifest_base: str
    manifest_timeout: float
    input_dir: Path
    output_dir: Path
    cache_dir: Path
    log_dir: Path
    fetch_delay: float

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("No API key found in environmental variables (OCLC_SEARCH_API_TOKEN)")
        return self.api_key


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config_file(config_path: str | Path) -> Dict[str, Any]:
    """Read the YAML configuration; a missing file yields an empty mapping."""
    path = Path(config_path)
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError("settings.yaml must define a mapping at the top level.")
    return data


def _float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Setting '{name}' must be a number, got {value!r}") from exc


def load_settings(
    config_path: str | Path | None = None,
    *,
    workspace: str | Path = ".",
    use_dotenv: bool = True,
) -> Settings:
    """Build settings from defaults, the YAML file and the environment."""
    if use_dotenv:
        load_dotenv()
    root = Path(workspace)
    path = Path(config_path) if config_path else root / DEFAULT_CONFIG_PATH
    data = _merge(DEFAULTS, load_config_file(path))

    catalog = data["catalog"]
    manifests = data["manifests"]
    paths = data["paths"]

    def resolve(value: str) -> Path:
        candidate = Path(value)
        return candidate if candidate.is_absolute() else root / candidate

    return Settings(
        api_key=os.getenv("OCLC_SEARCH_API_TOKEN") or None,
        catalog_api_base=os.getenv("OCLC_API_BASE") or str(catalog["api_base"]),
        token_url=str(catalog["token_url"]),
        token_scope=str(catalog["scope"]),
        public_base=os.getenv("OCLC_PUBLIC_BASE") or str(catalog["public_base"]),
        catalog_timeout=_float(catalog["timeout"], "catalog.timeout"),
        manifest_base=os.getenv("DLCS_MANIFEST_BASE") or str(manifests["source_base"]),
        manifest_timeout=_float(manifests["timeout"], "manifests.timeout"),
        input_dir=resolve(paths["input_dir"]),
        output_dir=resolve(paths["output_dir"]),
        cache_dir=resolve(paths["cache_dir"]),
        log_dir=resolve(paths["log_dir"]),
        fetch_delay=_float(os.getenv("FETCH_DELAY") or data.get("fetch_delay") or 0, "fetch_delay"),
    )
