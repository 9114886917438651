"""Presentation API helpers: upgrade 2.x manifests to 3.0 and tidy skeletons."""
from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Iterator, List

PRESENTATION_2_CONTEXT = "http://iiif.io/api/presentation/2/context.json"
PRESENTATION_3_CONTEXT = "http://iiif.io/api/presentation/3/context.json"

IMAGE_2_PROFILE_PREFIX = "http://iiif.io/api/image/2/"

COPIED_KEYS: tuple[str, ...] = ("height", "width", "format", "duration")


def is_presentation3(manifest: Dict[str, Any]) -> bool:
    context = manifest.get("@context")
    contexts = context if isinstance(context, list) else [context]
    return PRESENTATION_3_CONTEXT in contexts or manifest.get("type") == "Manifest"


def language_map(value: Any) -> Dict[str, List[str]]:
    """Convert a 2.x label or value into a 3.0 language map."""
    if value is None:
        return {"none": [""]}
    if isinstance(value, dict) and "@value" not in value:
        return {str(lang): list(texts) if isinstance(texts, list) else [str(texts)] for lang, texts in value.items()}
    items = value if isinstance(value, list) else [value]
    result: Dict[str, List[str]] = {}
    for item in items:
        if isinstance(item, dict):
            lang = item.get("@language") or "none"
            text = item.get("@value", "")
        else:
            lang, text = "none", item
        result.setdefault(str(lang), []).append(str(text))
    return result or {"none": [""]}


def _services(value: Any) -> List[Dict[str, Any]]:
    services = value if isinstance(value, list) else [value]
    converted: List[Dict[str, Any]] = []
    for service in services:
        if not isinstance(service, dict):
            continue
        profile = service.get("profile")
        if isinstance(profile, list):
            profile = next((item for item in profile if isinstance(item, str)), None)
        item: Dict[str, Any] = {"id": service.get("@id") or service.get("id")}
        if isinstance(profile, str) and profile.startswith(IMAGE_2_PROFILE_PREFIX):
            item["type"] = "ImageService2"
            item["profile"] = profile.rsplit("/", 1)[-1].replace(".json", "")
        else:
            item["type"] = service.get("@type") or service.get("type") or "Service"
            if profile:
                item["profile"] = profile
        converted.append(item)
    return converted


def _image_body(resource: Dict[str, Any]) -> Dict[str, Any]:
    body: Dict[str, Any] = {"id": resource.get("@id") or resource.get("id"), "type": "Image"}
    for key in COPIED_KEYS:
        if key in resource:
            body[key] = resource[key]
    if resource.get("service"):
        body["service"] = _services(resource["service"])
    return body


def _canvas(canvas: Dict[str, Any], index: int) -> Dict[str, Any]:
    canvas_id = canvas.get("@id") or canvas.get("id") or f"canvas/{index}"
    converted: Dict[str, Any] = {
        "id": canvas_id,
        "type": "Canvas",
        "label": language_map(canvas.get("label", str(index + 1))),
    }
    for key in COPIED_KEYS:
        if key in canvas:
            converted[key] = canvas[key]
    if "metadata" in canvas:
        converted["metadata"] = _metadata(canvas["metadata"])
    if canvas.get("thumbnail"):
        converted["thumbnail"] = _thumbnails(canvas["thumbnail"])
    if canvas.get("service"):
        converted["service"] = _services(canvas["service"])

    annotations = []
    for number, image in enumerate(canvas.get("images") or [], start=1):
        resource = image.get("resource") or {}
        annotations.append(
            {
                "id": image.get("@id") or f"{canvas_id}/annotation/{number}",
                "type": "Annotation",
                "motivation": "painting",
                "body": _image_body(resource),
                "target": canvas_id,
            }
        )
    converted["items"] = [{"id": f"{canvas_id}/page", "type": "AnnotationPage", "items": annotations}]
    return converted


def _thumbnails(value: Any) -> List[Dict[str, Any]]:
    thumbnails = value if isinstance(value, list) else [value]
    converted = []
    for thumb in thumbnails:
        if isinstance(thumb, str):
            converted.append({"id": thumb, "type": "Image"})
        elif isinstance(thumb, dict):
            converted.append(_image_body(thumb))
    return converted


def _metadata(value: Any) -> List[Dict[str, Any]]:
    return [
        {"label": language_map(pair.get("label")), "value": language_map(pair.get("value"))}
        for pair in value or []
        if isinstance(pair, dict)
    ]


def to_presentation3(manifest: Dict[str, Any]) -> Dict[str, Any]:
    """Return a Presentation 3.0 copy of ``manifest``."""
    if is_presentation3(manifest):
        return deepcopy(manifest)

    converted: Dict[str, Any] = {
        "@context": PRESENTATION_3_CONTEXT,
        "id": manifest.get("@id") or manifest.get("id"),
        "type": "Manifest",
        "label": language_map(manifest.get("label")),
    }
    if "metadata" in manifest:
        converted["metadata"] = _metadata(manifest["metadata"])
    if manifest.get("description"):
        converted["summary"] = language_map(manifest["description"])
    if manifest.get("attribution"):
        converted["requiredStatement"] = {
            "label": {"none": ["Attribution"]},
            "value": language_map(manifest["attribution"]),
        }
    if manifest.get("license"):
        converted["rights"] = manifest["license"]
    if manifest.get("thumbnail"):
        converted["thumbnail"] = _thumbnails(manifest["thumbnail"])
    if manifest.get("service"):
        converted["service"] = _services(manifest["service"])

    canvases: List[Dict[str, Any]] = []
    for sequence in manifest.get("sequences") or []:
        canvases.extend(sequence.get("canvases") or [])
    converted["items"] = [_canvas(canvas, index) for index, canvas in enumerate(canvases)]
    return converted


def iter_canvases(manifest: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    for item in manifest.get("items") or []:
        if isinstance(item, dict) and item.get("type") == "Canvas":
            yield item


def clean_manifest(manifest: Dict[str, Any]) -> Dict[str, Any]:
    """Drop legacy image-service references and canvas-level metadata in place."""
    manifest.pop("service", None)
    for canvas in iter_canvases(manifest):
        canvas.pop("service", None)
        canvas.pop("metadata", None)
    return manifest
