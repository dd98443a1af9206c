"""Per-source adapters that map raw dictionary entries into ProcessedWordData."""

from lexigraph.services.sources.base import SourceAdapter
from lexigraph.services.sources.danish import DanishAdapter
from lexigraph.services.sources.merriam import MerriamAdapter
from lexigraph.services.sources.validator import ValidationReport, validate_danish_entry

ADAPTERS: dict[str, type[SourceAdapter]] = {
    "danish": DanishAdapter,
    "merriam": MerriamAdapter,
}

__all__ = [
    "ADAPTERS",
    "DanishAdapter",
    "MerriamAdapter",
    "SourceAdapter",
    "ValidationReport",
    "validate_danish_entry",
]
