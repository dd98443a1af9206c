"""Base class for dictionary source adapters."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from lexigraph.errors import SourceFormatError
from lexigraph.services.lexicon.types import ProcessedWordData


class SourceAdapter(ABC):
    """Maps one raw entry of a dictionary source into ``ProcessedWordData``."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this source."""
        ...  # pragma: no cover

    @abstractmethod
    def process(self, raw: Mapping[str, Any]) -> ProcessedWordData:
        """
        Turn a raw entry into the canonical shape.

        Args:
            raw: The entry exactly as the source delivered it

        Returns:
            ProcessedWordData with the headword, its definitions and sub-words

        Raises:
            SourceFormatError: If the entry has no usable headword
        """
        ...  # pragma: no cover

    def _require_mapping(self, raw: Any) -> Mapping[str, Any]:
        if not isinstance(raw, Mapping):
            raise SourceFormatError(f"{self.name} entry must be an object, got {type(raw).__name__}")
        return raw
