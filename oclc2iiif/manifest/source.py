"""Skeleton manifests from the digitization service (DLCS)."""
from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from ..domain.records import Oclc2IiifError
from .presentation import to_presentation3

LOGGER = logging.getLogger(__name__)

DEFAULT_MANIFEST_BASE = "https://dlc.services/iiif-resource/7/string1string2string3/"


class ManifestError(Oclc2IiifError):
    """Raised when a skeleton manifest could not be loaded."""


class ManifestSource:
    def __init__(self, base_url: str = DEFAULT_MANIFEST_BASE, *, timeout: float = 30, session: Any = None) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests

    def url_for(self, dlcs_id: str) -> str:
        return f"{self.base_url}{dlcs_id}"

    def fetch(self, dlcs_id: str) -> Dict[str, Any]:
        """Load the manifest for ``dlcs_id`` as Presentation 3.0."""
        url = self.url_for(dlcs_id)
        LOGGER.debug("Fetching manifest %s", url)
        try:
            resp = self.session.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise ManifestError(f"Manifest request for {dlcs_id} failed: {exc}") from exc
        except ValueError as exc:
            raise ManifestError(f"Manifest for {dlcs_id} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"Manifest for {dlcs_id} is not a JSON object")
        try:
            return to_presentation3(data)
        except (AttributeError, TypeError, KeyError, IndexError) as exc:
            raise ManifestError(f"Manifest for {dlcs_id} has an unexpected structure: {exc}") from exc
