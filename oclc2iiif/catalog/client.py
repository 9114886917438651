"""Client for the WorldCat Search v2 ``/bibs/{oclcNumber}`` endpoint."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..domain.records import Oclc2IiifError
from .auth import TokenProvider

LOGGER = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://americas.discovery.api.oclc.org/worldcat/search/v2"


class CatalogError(Oclc2IiifError):
    """Raised when a bibliographic record could not be retrieved."""


class CatalogClient:
    def __init__(
        self,
        token_provider: TokenProvider,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 30,
        session: Any = None,
    ) -> None:
        self.token_provider = token_provider
        self.api_base = api_base
        self.timeout = timeout
        self.session = session or requests

    def fetch_bib(self, oclc_number: int) -> Optional[Dict[str, Any]]:
        """Return the raw record for ``oclc_number`` or ``None`` when it does not exist."""
        url = f"{self.api_base.rstrip('/')}/bibs/{int(oclc_number)}"
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.token_provider.token()}",
        }
        LOGGER.debug("Fetching %s", url)
        try:
            resp = self.session.get(url, headers=headers, timeout=self.timeout)
            if resp.status_code == 401:
                self.token_provider.reset()
            if resp.status_code == 404:
                LOGGER.warning("No record found for OCLC number %s", oclc_number)
                return None
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise CatalogError(f"Catalog request for {oclc_number} failed: {exc}") from exc
        except ValueError as exc:
            raise CatalogError(f"Catalog response for {oclc_number} is not valid JSON") from exc
        if not data:
            return None
        if not isinstance(data, dict):
            raise CatalogError(f"Unexpected catalog response for {oclc_number}: {type(data).__name__}")
        return data
