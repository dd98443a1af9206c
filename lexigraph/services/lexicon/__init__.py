"""Source-agnostic lexical shapes and the pure graph-building steps."""

from lexigraph.services.lexicon.builder import SubWordCollector, expand_composition
from lexigraph.services.lexicon.forms import FormRelation, apply_ending, transform_forms
from lexigraph.services.lexicon.types import (
    DefinitionData,
    ExampleData,
    PartOfSpeech,
    ProcessedWordData,
    Relationship,
    RelationshipType,
    SourceType,
    SubWordData,
    WordData,
)

__all__ = [
    "DefinitionData",
    "ExampleData",
    "FormRelation",
    "PartOfSpeech",
    "ProcessedWordData",
    "Relationship",
    "RelationshipType",
    "SourceType",
    "SubWordCollector",
    "SubWordData",
    "WordData",
    "apply_ending",
    "expand_composition",
    "transform_forms",
]
