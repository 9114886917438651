"""Fold union-catalog records into IIIF Presentation 3 metadata entries."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence

from ...domain.formats import translate_format
from ...domain.records import BibRecord, Creator, ValidationError

DEFAULT_PUBLIC_BASE = "https://tudelft.on.worldcat.org/oclc/"
UNDEFINED = "undefined"

MetadataEntry = Dict[str, Dict[str, List[Any]]]


class NormalizeResult(NamedTuple):
    metadata: List[MetadataEntry]
    anomalies: List[str]


def _present(value: Any) -> bool:
    """Presence as the catalog JSON means it: empty text is absent, empty lists are not."""
    if value is None:
        return False
    if isinstance(value, (list, tuple, dict)):
        return True
    return bool(value)


def _shown(value: Optional[str]) -> str:
    return UNDEFINED if value is None else value


def _unique(values: Iterable[Any]) -> List[Any]:
    return list(dict.fromkeys(values))


def _entry(en: str, nl: str, values: Sequence[Any]) -> MetadataEntry:
    return {
        "label": {"en": [en], "nl": [nl]},
        "value": {"none": list(values) if values else [""]},
    }


def _creator_name(creator: Creator, shelf_number: str, url: str, anomalies: List[str]) -> Optional[str]:
    name: Optional[str] = None
    if creator.non_person_name:
        name = creator.non_person_name
    elif creator.first_name and creator.second_name:
        name = f"{creator.first_name} {creator.second_name}"
    elif creator.first_name:
        name = creator.first_name
        anomalies.append(f"{shelf_number} heeft een auteur met alleen een voornaam ({url})")
    elif creator.second_name:
        name = creator.second_name
        anomalies.append(f"{shelf_number} heeft een auteur met alleen een achternaam ({url})")
    if name and creator.creator_notes is not None:
        name = f"{name} ({', '.join(creator.creator_notes)})"
    return name


def normalize(
    records: Sequence[BibRecord],
    shelf_number: str,
    *,
    public_base: str = DEFAULT_PUBLIC_BASE,
) -> NormalizeResult:
    """Build the nine fixed metadata entries for one shelf item.

    Multiple records occur for multi-volume works that carry one OCLC number
    per volume. Data-quality problems never raise; they are returned as
    human-readable Dutch lines in ``anomalies``.
    """
    anomalies: List[str] = []
    oclc_numbers: List[str] = []
    titles: List[str] = []
    contributors: List[str] = []
    publishers: List[str] = []
    years: List[str] = []
    formats: List[Optional[str]] = []
    descriptions: List[str] = []
    notes: List[str] = []

    if len(records) > 1:
        urls = [public_base + _shown(record.oclc_number) for record in records]
        anomalies.append(f"{shelf_number} heeft meerdere OCLC nummers ({', '.join(urls)})")

    for record in records:
        number = _shown(record.oclc_number)
        url = public_base + number
        oclc_numbers.append(f'<a href="{url}">{number}</a>')

        if record.main_titles is not None:
            titles.extend(text for text in record.main_titles if text is not None)

        if record.creators is not None:
            for creator in record.creators:
                name = _creator_name(creator, shelf_number, url, anomalies)
                if name:
                    contributors.append(name)
        else:
            anomalies.append(f"{shelf_number} heeft geen auteur ({url})")

        if record.publishers is not None:
            for publisher in record.publishers:
                publishers.append(f"{_shown(publisher.name)}, {_shown(publisher.place)}")

        if record.publication_date:
            year = record.publication_date
            years.append(year)
            if len(year) < 4 or "?" in year:
                anomalies.append(f'{shelf_number} heeft als jaartal "{year}" ({url})')

        # Physical descriptions are sometimes catalogued as bibliographies
        if record.bibliographies is not None:
            content = [text for text in record.bibliographies if text is not None]
            descriptions.extend(content)
            anomalies.append(
                f'{shelf_number} bevat de volgende informatie onder "Bibliografieën": '
                f'"{", ".join(content)}" ({url})'
            )
        elif record.physical_description:
            descriptions.append(record.physical_description)
        if _present(record.contents):
            anomalies.append(f'{shelf_number} bevat informatie onder "Inhoud" ({url})')

        if record.general_notes is not None:
            notes.extend(text for text in record.general_notes if text is not None)

        if record.general_format:
            formats.append(translate_format(record.general_format))

    contributors = _unique(contributors)
    plural_contributors = len(contributors) > 1
    plural_numbers = len(oclc_numbers) > 1

    metadata = [
        _entry("Title", "Titel", titles),
        _entry(
            "Contributors" if plural_contributors else "Contributor",
            "Makers" if plural_contributors else "Maker",
            contributors,
        ),
        _entry("Publisher", "Uitgever", _unique(publishers)),
        _entry("Year", "Jaar", _unique(years)),
        _entry("Format", "Formaat", _unique(formats)),
        _entry("Description", "Omschrijving", descriptions),
        _entry("Notes", "Noot", notes),
        _entry(
            "OCLC Numbers" if plural_numbers else "OCLC Number",
            "OCLC nummers" if plural_numbers else "OCLC nummer",
            oclc_numbers,
        ),
        _entry("Shelf Number", "Plaatsnummer", [shelf_number.replace("-", " ")]),
    ]
    return NormalizeResult(metadata=metadata, anomalies=anomalies)


def manifest_label(records: Sequence[BibRecord]) -> Dict[str, List[str]]:
    """Return the display label: the first main title of the first record."""
    if records:
        titles = records[0].main_titles or []
        if titles and titles[0] is not None:
            return {"none": [titles[0]]}
    raise ValidationError("First bibliographic record has no main title.")
