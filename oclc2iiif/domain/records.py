"""Domain records shared by the catalog, normalizer and pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


class Oclc2IiifError(Exception):
    """Base class for errors raised while building manifests."""


class ValidationError(Oclc2IiifError, ValueError):
    """Raised when a record lacks data that a manifest cannot do without."""


SHELF_KEYS: tuple[str, ...] = ("tresor", "shelfNumber", "shelf_number")
DLCS_KEYS: tuple[str, ...] = ("dlcs", "dlcsId", "dlcs_id")
OCLC_KEYS: tuple[str, ...] = ("oclc", "oclcNumbers", "oclc_numbers")


def _first_value(row: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if key in row:
            return row[key]
    return None


@dataclass(frozen=True)
class ShelfEntry:
    """One row of the shelf mapping file."""

    shelf_number: str
    dlcs_id: str
    oclc_numbers: Tuple[int, ...]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Optional["ShelfEntry"]:
        """Build an entry, or return ``None`` when a required field is missing."""
        if not isinstance(row, Mapping):
            return None
        shelf_number = _first_value(row, SHELF_KEYS)
        dlcs_id = _first_value(row, DLCS_KEYS)
        oclc = _first_value(row, OCLC_KEYS)
        if not (shelf_number and dlcs_id and oclc):
            return None
        if not isinstance(oclc, (list, tuple)):
            oclc = [oclc]
        try:
            numbers = tuple(int(number) for number in oclc)
        except (TypeError, ValueError):
            return None
        if not numbers:
            return None
        return cls(shelf_number=str(shelf_number), dlcs_id=str(dlcs_id), oclc_numbers=numbers)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _optional_list(value: Any) -> Optional[List[Any]]:
    if value is None:
        return None
    if isinstance(value, list):
        return value
    return [value]


def _text_of(value: Any) -> Optional[str]:
    """Return the ``text`` member of a ``{"text": ...}`` object."""
    text = _mapping(value).get("text")
    if text is None:
        return None
    return str(text)


def _texts(items: Optional[List[Any]]) -> Optional[List[Optional[str]]]:
    if items is None:
        return None
    return [_text_of(item) for item in items]


def _string(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class Creator:
    non_person_name: Optional[str] = None
    first_name: Optional[str] = None
    second_name: Optional[str] = None
    creator_notes: Optional[List[str]] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Creator":
        data = _mapping(payload)
        notes = _optional_list(data.get("creatorNotes"))
        return cls(
            non_person_name=_text_of(data.get("nonPersonName")),
            first_name=_text_of(data.get("firstName")),
            second_name=_text_of(data.get("secondName")),
            creator_notes=[str(note) for note in notes] if notes is not None else None,
        )


@dataclass(frozen=True)
class Publisher:
    name: Optional[str] = None
    place: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Publisher":
        data = _mapping(payload)
        return cls(
            name=_text_of(data.get("publisherName")),
            place=_string(data.get("publicationPlace")),
        )


@dataclass(frozen=True)
class BibRecord:
    """A single union-catalog record with every field optional.

    List fields distinguish absence (``None``) from presence with no items
    (``[]``); several anomaly rules depend on that difference.
    """

    oclc_number: Optional[str] = None
    main_titles: Optional[List[Optional[str]]] = None
    creators: Optional[List[Creator]] = None
    publishers: Optional[List[Publisher]] = None
    publication_date: Optional[str] = None
    bibliographies: Optional[List[Optional[str]]] = None
    physical_description: Optional[str] = None
    contents: Any = None
    general_notes: Optional[List[Optional[str]]] = None
    general_format: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "BibRecord":
        if not isinstance(payload, Mapping):
            raise ValidationError("Bibliographic payload must be a mapping.")
        identifier = _mapping(payload.get("identifier"))
        title = _mapping(payload.get("title"))
        contributor = _mapping(payload.get("contributor"))
        date = _mapping(payload.get("date"))
        description = _mapping(payload.get("description"))
        note = _mapping(payload.get("note"))
        fmt = _mapping(payload.get("format"))

        creators = _optional_list(contributor.get("creators"))
        publishers = _optional_list(payload.get("publishers"))
        return cls(
            oclc_number=_string(identifier.get("oclcNumber")),
            main_titles=_texts(_optional_list(title.get("mainTitles"))),
            creators=[Creator.from_payload(item) for item in creators] if creators is not None else None,
            publishers=[Publisher.from_payload(item) for item in publishers] if publishers is not None else None,
            publication_date=_string(date.get("publicationDate")),
            bibliographies=_texts(_optional_list(description.get("bibliographies"))),
            physical_description=_string(description.get("physicalDescription")),
            contents=description.get("contents"),
            general_notes=_texts(_optional_list(note.get("generalNotes"))),
            general_format=_string(fmt.get("generalFormat")),
            raw=dict(payload),
        )


__all__ = [
    "BibRecord",
    "Creator",
    "Oclc2IiifError",
    "Publisher",
    "ShelfEntry",
    "ValidationError",
]
