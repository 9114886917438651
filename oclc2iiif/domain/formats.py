"""Readable labels for WorldCat general format codes."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

FORMATS: Mapping[str, str] = MappingProxyType(
    {
        "Archv": "Archival Material",
        "ArtChap": "Article, Chapter",
        "AudioBook": "Audiobook",
        "Book": "Book",
        "CompFile": "Computer File",
        "Encyc": "Encyclopedia Article",
        "Game": "Game",
        "Image": "Image",
        "IntMM": "Interactive Multimedia",
        "Intvw": "Interview",
        "Jrnl": "Journal, Magazine",
        "Kit": "Kit",
        "Map": "Map",
        "MsScr": "Musical Score",
        "Music": "Music",
        "News": "Newspaper",
        "Object": "Object",
        "Snd": "Sound Recording",
        "Thsis": "Thesis, Dissertation",
        "Toy": "Toy",
        "Video": "Video",
        "Vis": "Visual Material",
        "Web": "Website",
    }
)


def translate_format(code: str) -> Optional[str]:
    """Return the label for ``code``; unknown codes yield ``None``."""
    return FORMATS.get(code)
