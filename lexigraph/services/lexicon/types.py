"""Canonical shapes shared by source adapters and the persistence engine."""

from dataclasses import dataclass, field
from enum import StrEnum


class PartOfSpeech(StrEnum):
    NOUN = "noun"
    VERB = "verb"
    PHRASAL_VERB = "phrasal_verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PRONOUN = "pronoun"
    PREPOSITION = "preposition"
    CONJUNCTION = "conjunction"
    INTERJECTION = "interjection"
    NUMERAL = "numeral"
    ARTICLE = "article"
    EXCLAMATION = "exclamation"
    ABBREVIATION = "abbreviation"
    SUFFIX = "suffix"
    PHRASE = "phrase"
    SENTENCE = "sentence"
    UNDEFINED = "undefined"


class SourceType(StrEnum):
    AI_GENERATED = "ai-generated"
    MERRIAM_LEARNERS = "merriam_learners"
    MERRIAM_INTERMEDIATE = "merriam_intermediate"
    HELSINKI_NLP = "helsinki_nlp"
    DANISH_DICTIONARY = "danish_dictionary"
    USER = "user"
    ADMIN = "admin"


class Gender(StrEnum):
    MASCULINE = "masculine"
    FEMININE = "feminine"
    COMMON = "common"
    NEUTER = "neuter"


class RelationshipType(StrEnum):
    SYNONYM = "synonym"
    ANTONYM = "antonym"
    RELATED = "related"
    STEM = "stem"
    COMPOSITION = "composition"
    PHRASAL_VERB = "phrasal_verb"
    PHRASE = "phrase"
    ALTERNATIVE_SPELLING = "alternative_spelling"
    ABBREVIATION = "abbreviation"
    DERIVED_FORM = "derived_form"
    DIALECT_VARIANT = "dialect_variant"
    TRANSLATION = "translation"
    # English forms
    PLURAL_EN = "plural_en"
    PAST_TENSE_EN = "past_tense_en"
    PAST_PARTICIPLE_EN = "past_participle_en"
    PRESENT_PARTICIPLE_EN = "present_participle_en"
    THIRD_PERSON_EN = "third_person_en"
    VARIANT_FORM_PHRASAL_VERB_EN = "variant_form_phrasal_verb_en"
    # Danish forms
    DEFINITE_FORM_DA = "definite_form_da"
    PLURAL_DA = "plural_da"
    PLURAL_DEFINITE_DA = "plural_definite_da"
    COMMON_GENDER_DA = "common_gender_da"
    NEUTER_GENDER_DA = "neuter_gender_da"
    GENITIVE_FORM_DA = "genitive_form_da"
    PRESENT_TENSE_DA = "present_tense_da"
    PAST_TENSE_DA = "past_tense_da"
    PAST_PARTICIPLE_DA = "past_participle_da"
    IMPERATIVE_DA = "imperative_da"
    ADJECTIVE_NEUTER_DA = "adjective_neuter_da"
    ADJECTIVE_PLURAL_DA = "adjective_plural_da"
    COMPARATIVE_DA = "comparative_da"
    SUPERLATIVE_DA = "superlative_da"
    ADVERBIAL_FORM_DA = "adverbial_form_da"
    ADVERB_COMPARATIVE_DA = "adverb_comparative_da"
    ADVERB_SUPERLATIVE_DA = "adverb_superlative_da"
    NEUTER_PRONOUN_DA = "neuter_pronoun_da"
    PLURAL_PRONOUN_DA = "plural_pronoun_da"
    PRONOUN_ACCUSATIVE_DA = "pronoun_accusative_da"
    PRONOUN_GENITIVE_DA = "pronoun_genitive_da"
    CONTEXTUAL_USAGE_DA = "contextual_usage_da"
    OTHER_FORM_DA = "other_form_da"


RELATIONSHIP_DESCRIPTIONS: dict[RelationshipType, str] = {
    RelationshipType.SYNONYM: "Synonym relationship",
    RelationshipType.ANTONYM: "Antonym relationship",
    RelationshipType.RELATED: "Related term",
    RelationshipType.STEM: "Stem relationship",
    RelationshipType.COMPOSITION: "Composition",
    RelationshipType.PHRASAL_VERB: "Phrasal verb",
    RelationshipType.PHRASE: "Phrase",
    RelationshipType.ALTERNATIVE_SPELLING: "Alternative spelling",
    RelationshipType.ABBREVIATION: "Abbreviation",
    RelationshipType.DERIVED_FORM: "Derived form",
    RelationshipType.DIALECT_VARIANT: "Dialect variant",
    RelationshipType.TRANSLATION: "Translation",
    RelationshipType.PLURAL_EN: "Plural form",
    RelationshipType.PAST_TENSE_EN: "Past tense form",
    RelationshipType.PAST_PARTICIPLE_EN: "Past participle form",
    RelationshipType.PRESENT_PARTICIPLE_EN: "Present participle form",
    RelationshipType.THIRD_PERSON_EN: "Third person singular form",
    RelationshipType.VARIANT_FORM_PHRASAL_VERB_EN: "Variant form of phrasal verb",
    RelationshipType.DEFINITE_FORM_DA: "Definite form (bestemt form)",
    RelationshipType.PLURAL_DA: "Plural form (flertal)",
    RelationshipType.PLURAL_DEFINITE_DA: "Plural definite form (bestemt form flertal)",
    RelationshipType.COMMON_GENDER_DA: "Common gender form (fælleskøn)",
    RelationshipType.NEUTER_GENDER_DA: "Neuter gender form (intetkøn)",
    RelationshipType.GENITIVE_FORM_DA: "Genitive form (ejefald)",
    RelationshipType.PRESENT_TENSE_DA: "Present tense form (nutid)",
    RelationshipType.PAST_TENSE_DA: "Past tense form (datid)",
    RelationshipType.PAST_PARTICIPLE_DA: "Past participle form (tillægsform)",
    RelationshipType.IMPERATIVE_DA: "Imperative form (bydeform)",
    RelationshipType.ADJECTIVE_NEUTER_DA: "Neuter form (intetkønsform)",
    RelationshipType.ADJECTIVE_PLURAL_DA: "Plural and definite form (flertal og bestemt form)",
    RelationshipType.COMPARATIVE_DA: "Comparative form (komparativ)",
    RelationshipType.SUPERLATIVE_DA: "Superlative form (superlativ)",
    RelationshipType.ADVERBIAL_FORM_DA: "Adverbial form",
    RelationshipType.ADVERB_COMPARATIVE_DA: "Adverb comparative form",
    RelationshipType.ADVERB_SUPERLATIVE_DA: "Adverb superlative form",
    RelationshipType.NEUTER_PRONOUN_DA: "Neuter form of the pronoun",
    RelationshipType.PLURAL_PRONOUN_DA: "Plural form of the pronoun",
    RelationshipType.PRONOUN_ACCUSATIVE_DA: "Object form of the pronoun (genstandsform)",
    RelationshipType.PRONOUN_GENITIVE_DA: "Possessive form of the pronoun (ejefald)",
    RelationshipType.CONTEXTUAL_USAGE_DA: "Contextual usage",
    RelationshipType.OTHER_FORM_DA: "Other form",
}

PLURAL_RELATIONSHIPS = frozenset(
    {
        RelationshipType.PLURAL_EN,
        RelationshipType.PLURAL_DA,
        RelationshipType.PLURAL_DEFINITE_DA,
        RelationshipType.ADJECTIVE_PLURAL_DA,
        RelationshipType.PLURAL_PRONOUN_DA,
    }
)

SEMANTIC_RELATIONSHIPS = frozenset(
    {RelationshipType.RELATED, RelationshipType.SYNONYM, RelationshipType.ANTONYM}
)

# Grammatical forms carry a language suffix; alternative spelling ranks with them
FORM_RELATIONSHIPS = frozenset(
    {t for t in RelationshipType if t.value.endswith(("_en", "_da"))}
    | {RelationshipType.ALTERNATIVE_SPELLING}
)


def relationship_description(relationship_type: RelationshipType) -> str:
    """Return the fixed human-readable description for an edge type."""
    return RELATIONSHIP_DESCRIPTIONS.get(
        relationship_type, relationship_type.value.replace("_", " ").capitalize()
    )


def relationship_priority(relationship_type: RelationshipType) -> int:
    """Resolution order: forms first, then stems, then semantic links, then the rest."""
    if relationship_type in FORM_RELATIONSHIPS:
        return 1
    if relationship_type == RelationshipType.STEM:
        return 2
    if relationship_type in SEMANTIC_RELATIONSHIPS:
        return 3
    return 4


# Symbolic relationship endpoints


@dataclass(frozen=True)
class MainWord:
    """The headword's Word row."""

    details = False


@dataclass(frozen=True)
class MainWordDetails:
    """The headword's canonical WordDetails row."""

    details = True


@dataclass(frozen=True)
class SubWord:
    """The Word row of the sub-word that owns the relationship."""

    details = False


@dataclass(frozen=True)
class SubWordDetails:
    """A WordDetails row of the sub-word that owns the relationship."""

    details = True


@dataclass(frozen=True)
class LiteralWord:
    """Another sub-word of the same ingestion, referenced by its text."""

    text: str
    details = True


Endpoint = MainWord | MainWordDetails | SubWord | SubWordDetails | LiteralWord

MAIN_WORD = MainWord()
MAIN_WORD_DETAILS = MainWordDetails()
SUB_WORD = SubWord()
SUB_WORD_DETAILS = SubWordDetails()


@dataclass(frozen=True)
class Relationship:
    """A typed edge between two symbolic endpoints."""

    source: Endpoint
    target: Endpoint
    type: RelationshipType

    @property
    def is_details_level(self) -> bool:
        """Details-level when either side names a WordDetails row."""
        return self.source.details or self.target.details

    @property
    def priority(self) -> int:
        return relationship_priority(self.type)


@dataclass
class ExampleData:
    """An example sentence attached to a definition."""

    example: str
    language: str
    grammatical_note: str | None = None
    source_of_example: str | None = None


@dataclass
class DefinitionData:
    """A definition with its labels and examples."""

    definition: str
    source: SourceType
    language: str
    subject_status_labels: str | None = None
    general_labels: str | None = None
    grammatical_note: str | None = None
    usage_note: str | None = None
    is_in_short_def: bool = False
    examples: list[ExampleData] = field(default_factory=list)


@dataclass
class AudioFile:
    """An externally hosted pronunciation file."""

    url: str
    word: str | None = None  # source-specific tag, e.g. "grundform"
    audio_type: str | None = None
    phonetic: str | None = None


@dataclass
class WordData:
    """The headword and the sense it is ingested under."""

    word: str
    language: str
    source: SourceType
    part_of_speech: PartOfSpeech = PartOfSpeech.UNDEFINED
    variant: str = ""
    phonetic: str | None = None
    gender: Gender | None = None
    forms: str | None = None
    etymology: str | None = None
    is_highlighted: bool = False
    source_entity_id: str | None = None
    audio_files: list[AudioFile] = field(default_factory=list)


@dataclass
class SubWordData:
    """A word derived from or related to the headword during one ingestion."""

    word: str
    language: str
    source: SourceType
    part_of_speech: PartOfSpeech = PartOfSpeech.UNDEFINED
    variant: str = ""
    phonetic: str | None = None
    gender: Gender | None = None
    forms: str | None = None
    etymology: str | None = None
    audio_files: list[AudioFile] = field(default_factory=list)
    definitions: list[DefinitionData] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    source_data: list[str] = field(default_factory=list)  # "form", "stem", "synonym", ...


@dataclass
class ProcessedWordData:
    """Source-agnostic result of running an adapter over one raw entry."""

    word: WordData
    definitions: list[DefinitionData] = field(default_factory=list)
    sub_words: list[SubWordData] = field(default_factory=list)
    stems: list[str] = field(default_factory=list)

    @property
    def headword(self) -> str:
        return self.word.word
