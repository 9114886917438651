"""Domain layer for the OCLC to IIIF manifest tool."""

from .formats import FORMATS, translate_format
from .records import (
    BibRecord,
    Creator,
    Oclc2IiifError,
    Publisher,
    ShelfEntry,
    ValidationError,
)

__all__ = [
    "FORMATS",
    "BibRecord",
    "Creator",
    "Oclc2IiifError",
    "Publisher",
    "ShelfEntry",
    "ValidationError",
    "translate_format",
]
