from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from oclc2iiif.manifest.presentation import (
    PRESENTATION_3_CONTEXT,
    clean_manifest,
    language_map,
    to_presentation3,
)
from oclc2iiif.manifest.source import ManifestError, ManifestSource


def presentation2_manifest() -> Dict[str, Any]:
    return {
        "@context": "http://iiif.io/api/presentation/2/context.json",
        "@id": "https://dlc.services/iiif-resource/7/x/abc",
        "@type": "sc:Manifest",
        "label": "Skeleton",
        "metadata": [{"label": "Old", "value": "data"}],
        "service": {"@id": "https://dlc.services/auth/login", "profile": "http://iiif.io/api/auth/0/login"},
        "sequences": [
            {
                "@type": "sc:Sequence",
                "canvases": [
                    {
                        "@id": "https://dlc.services/canvas/c0",
                        "@type": "sc:Canvas",
                        "label": "p. 1",
                        "height": 1000,
                        "width": 800,
                        "metadata": [{"label": "page", "value": "1"}],
                        "service": {"@id": "https://dlc.services/legacy/c0"},
                        "images": [
                            {
                                "@id": "https://dlc.services/anno/a0",
                                "@type": "oa:Annotation",
                                "motivation": "sc:painting",
                                "on": "https://dlc.services/canvas/c0",
                                "resource": {
                                    "@id": "https://dlc.services/iiif-img/c0/full/full/0/default.jpg",
                                    "@type": "dctypes:Image",
                                    "format": "image/jpeg",
                                    "height": 1000,
                                    "width": 800,
                                    "service": {
                                        "@context": "http://iiif.io/api/image/2/context.json",
                                        "@id": "https://dlc.services/iiif-img/c0",
                                        "profile": "http://iiif.io/api/image/2/level1.json",
                                    },
                                },
                            }
                        ],
                    }
                ],
            }
        ],
    }


def test_language_map_variants() -> None:
    assert language_map("Foo") == {"none": ["Foo"]}
    assert language_map([{"@value": "Titel", "@language": "nl"}, "Bar"]) == {"nl": ["Titel"], "none": ["Bar"]}
    assert language_map({"en": ["Title"]}) == {"en": ["Title"]}
    assert language_map(None) == {"none": [""]}


def test_presentation2_is_upgraded() -> None:
    manifest = to_presentation3(presentation2_manifest())

    assert manifest["@context"] == PRESENTATION_3_CONTEXT
    assert manifest["id"] == "https://dlc.services/iiif-resource/7/x/abc"
    assert manifest["type"] == "Manifest"
    assert manifest["label"] == {"none": ["Skeleton"]}
    assert manifest["metadata"] == [{"label": {"none": ["Old"]}, "value": {"none": ["data"]}}]

    canvas = manifest["items"][0]
    assert canvas["type"] == "Canvas"
    assert canvas["label"] == {"none": ["p. 1"]}
    assert (canvas["height"], canvas["width"]) == (1000, 800)
    annotation = canvas["items"][0]["items"][0]
    assert canvas["items"][0]["type"] == "AnnotationPage"
    assert annotation["motivation"] == "painting"
    assert annotation["target"] == "https://dlc.services/canvas/c0"
    assert annotation["body"]["type"] == "Image"
    assert annotation["body"]["service"] == [
        {"id": "https://dlc.services/iiif-img/c0", "type": "ImageService2", "profile": "level1"}
    ]


def test_presentation3_is_copied() -> None:
    original = {"@context": PRESENTATION_3_CONTEXT, "id": "m", "type": "Manifest", "items": []}
    upgraded = to_presentation3(original)
    assert upgraded == original
    assert upgraded is not original


def test_clean_manifest_drops_legacy_services_and_canvas_metadata() -> None:
    manifest = clean_manifest(to_presentation3(presentation2_manifest()))

    assert "service" not in manifest
    canvas = manifest["items"][0]
    assert "service" not in canvas
    assert "metadata" not in canvas
    # image services on the painting annotation stay in place
    assert canvas["items"][0]["items"][0]["body"]["service"]


class MockResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def json(self) -> Any:
        return self.payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response: MockResponse) -> None:
        self.response = response
        self.urls: list[str] = []

    def get(self, url: str, **_kwargs: Any) -> MockResponse:
        self.urls.append(url)
        return self.response


def test_manifest_source_fetches_and_upgrades() -> None:
    session = FakeSession(MockResponse(presentation2_manifest()))
    source = ManifestSource("https://dlc.services/iiif-resource/7/x/", session=session)

    manifest = source.fetch("abc")

    assert session.urls == ["https://dlc.services/iiif-resource/7/x/abc"]
    assert manifest["type"] == "Manifest"


def test_manifest_source_wraps_failures() -> None:
    source = ManifestSource("https://dlc.services/", session=FakeSession(MockResponse({}, status_code=502)))
    with pytest.raises(ManifestError):
        source.fetch("abc")


def test_manifest_source_rejects_malformed_sequences() -> None:
    malformed = {"@context": "http://iiif.io/api/presentation/2/context.json", "@id": "m", "sequences": ["oops"]}
    source = ManifestSource("https://dlc.services/", session=FakeSession(MockResponse(malformed)))
    with pytest.raises(ManifestError, match="unexpected structure"):
        source.fetch("abc")
