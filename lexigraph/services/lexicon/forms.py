"""Derive inflected word forms from a headword and its ending list.

Endings follow the Danish dictionary convention:

- ``"-et"`` appends ``et`` to the headword (``hus`` -> ``huset``);
- ``"-"`` alone means the form is identical to the headword;
- a bare value (``"bedre"``) or a ``".."``-prefixed value is a full-word override.

Malformed or empty ending lists produce no forms; nothing here raises.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from lexigraph.services.lexicon.types import Gender, PartOfSpeech, RelationshipType

# base -> (comparative, superlative)
IRREGULAR_ADJECTIVES: dict[str, tuple[str, str]] = {
    "god": ("bedre", "bedst"),
    "gammel": ("ældre", "ældst"),
    "lille": ("mindre", "mindst"),
    "stor": ("større", "størst"),
    "ung": ("yngre", "yngst"),
    "lang": ("længere", "længst"),
    "få": ("færre", "færrest"),
    "mange": ("flere", "flest"),
    "meget": ("mere", "mest"),
    "dårlig": ("værre", "værst"),
    "nær": ("nærmere", "nærmest"),
}

ACCUSATIVE_PRONOUNS = frozenset({"mig", "dig", "ham", "hende", "os", "jer", "dem", "sig"})
GENITIVE_PRONOUNS = frozenset(
    {"min", "din", "hans", "hendes", "vores", "jeres", "deres", "dens", "dets", "sin", "hvis"}
)

NOUN_POSITIONS = (
    RelationshipType.DEFINITE_FORM_DA,
    RelationshipType.PLURAL_DA,
    RelationshipType.PLURAL_DEFINITE_DA,
)
VERB_POSITIONS = (
    RelationshipType.PRESENT_TENSE_DA,
    RelationshipType.PAST_TENSE_DA,
    RelationshipType.PAST_PARTICIPLE_DA,
    RelationshipType.IMPERATIVE_DA,
)

_DIGITS_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class FormRelation:
    """One derived form and how it relates to the headword."""

    related_word: str
    relationship_type: RelationshipType
    usage_note: str | None = None
    definition_numbers: tuple[int, ...] = ()

    @property
    def key(self) -> tuple[str, RelationshipType, str, frozenset[int]]:
        return (
            self.related_word,
            self.relationship_type,
            self.usage_note or "",
            frozenset(self.definition_numbers),
        )


def _normalize_ending(ending: str | None) -> str:
    if not ending or not isinstance(ending, str):
        return ""
    ending = ending.strip()
    # "(-est)" marks an optional form, "-en/-et" lists alternatives
    if ending.startswith("(") and ending.endswith(")"):
        ending = ending[1:-1].strip()
    if "/" in ending:
        ending = ending.split("/", 1)[0].strip()
    return ending


def apply_ending(base_word: str, ending: str | None) -> str:
    """Build the full word for one ending.

    On a multi-word base the suffix attaches to the last token only.
    """
    ending = _normalize_ending(ending)
    if not ending or ending == "-":
        return base_word
    if ending.startswith(".."):
        return ending[2:].strip()
    if not ending.startswith("-"):
        return ending
    suffix = ending[1:]
    if " " in base_word.strip():
        head, last = base_word.strip().rsplit(" ", 1)
        return f"{head} {last}{suffix}"
    return base_word + suffix


class _FormCollector:
    """Accumulates relations, dropping duplicates and noise self-references."""

    def __init__(self, base_word: str) -> None:
        self.base_word = base_word
        self.relations: list[FormRelation] = []
        self._seen: set[tuple[str, RelationshipType, str, frozenset[int]]] = set()

    def add(
        self,
        related_word: str,
        relationship_type: RelationshipType,
        usage_note: str | None = None,
        definition_numbers: Sequence[int] = (),
        allow_identical: bool = False,
    ) -> None:
        related_word = related_word.strip()
        if not related_word:
            return
        if related_word == self.base_word and not allow_identical:
            return
        relation = FormRelation(
            related_word, relationship_type, usage_note or None, tuple(definition_numbers)
        )
        if relation.key in self._seen:
            return
        self._seen.add(relation.key)
        self.relations.append(relation)


def _gender_tag(ending: str, genders: frozenset[Gender]) -> RelationshipType | None:
    ending = _normalize_ending(ending)
    has_common = Gender.COMMON in genders
    has_neuter = Gender.NEUTER in genders
    if has_common and not has_neuter:
        return RelationshipType.COMMON_GENDER_DA
    if has_neuter and not has_common:
        return RelationshipType.NEUTER_GENDER_DA
    if ending.endswith("-en") or ending == "-en":
        return RelationshipType.COMMON_GENDER_DA
    if ending.endswith("-et") or ending == "-et":
        return RelationshipType.NEUTER_GENDER_DA
    return None


def _noun_forms(
    collector: _FormCollector, forms: Sequence[str], genders: frozenset[Gender]
) -> None:
    base = collector.base_word
    for index, ending in enumerate(forms):
        if not _normalize_ending(ending):
            continue
        related = apply_ending(base, ending)
        if index < len(NOUN_POSITIONS):
            relationship_type = NOUN_POSITIONS[index]
        else:
            relationship_type = RelationshipType.RELATED
        # An invariable plural ("mus" -> "mus") is still a real form
        collector.add(
            related,
            relationship_type,
            allow_identical=relationship_type == RelationshipType.PLURAL_DA,
        )
        if index == 0:
            tag = _gender_tag(ending, genders)
            if tag is not None:
                collector.add(related, tag)


def _adjective_forms(collector: _FormCollector, forms: Sequence[str]) -> None:
    base = collector.base_word
    endings = [_normalize_ending(f) for f in forms]
    padded = endings + [""] * (4 - len(endings))

    neuter: str | None = None
    comparative: str | None = None

    if padded[0]:
        neuter = apply_ending(base, padded[0])
        collector.add(neuter, RelationshipType.ADJECTIVE_NEUTER_DA)
    if padded[1]:
        collector.add(apply_ending(base, padded[1]), RelationshipType.ADJECTIVE_PLURAL_DA)

    irregular = IRREGULAR_ADJECTIVES.get(base.lower())
    if irregular:
        comparative, superlative = irregular
        collector.add(comparative, RelationshipType.COMPARATIVE_DA)
        collector.add(superlative, RelationshipType.SUPERLATIVE_DA)
    elif "ere" in padded[2]:
        comparative = apply_ending(base, padded[2])
        collector.add(comparative, RelationshipType.COMPARATIVE_DA)
        if "est" in padded[3]:
            collector.add(apply_ending(base, padded[3]), RelationshipType.SUPERLATIVE_DA)
    elif padded[0] == "-" and padded[1] == "-":
        # Invariable adjectives compare analytically
        comparative = f"mere {base}"
        collector.add(comparative, RelationshipType.COMPARATIVE_DA)
        collector.add(f"mest {base}", RelationshipType.SUPERLATIVE_DA)
    elif "est" in padded[3]:
        collector.add(apply_ending(base, padded[3]), RelationshipType.SUPERLATIVE_DA)

    # Slot 2 without the comparative shape is kept as a plain related form
    if not irregular and padded[2] and padded[2] != "-" and "ere" not in padded[2]:
        collector.add(apply_ending(base, padded[2]), RelationshipType.RELATED)

    for extra in endings[4:]:
        if extra:
            collector.add(apply_ending(base, extra), RelationshipType.RELATED)

    if comparative and comparative.endswith("ere"):
        adverbial = comparative
    elif neuter:
        adverbial = neuter
    else:
        adverbial = base
    collector.add(adverbial, RelationshipType.ADVERBIAL_FORM_DA)


def _verb_forms(collector: _FormCollector, forms: Sequence[str]) -> None:
    for index, ending in enumerate(forms):
        if not _normalize_ending(ending):
            continue
        if index < len(VERB_POSITIONS):
            relationship_type = VERB_POSITIONS[index]
        else:
            relationship_type = RelationshipType.RELATED
        collector.add(apply_ending(collector.base_word, ending), relationship_type)


def _pronoun_type(ending: str, related_word: str) -> RelationshipType:
    ending = _normalize_ending(ending)
    word = related_word.lower()
    if word in ACCUSATIVE_PRONOUNS:
        return RelationshipType.PRONOUN_ACCUSATIVE_DA
    if word in GENITIVE_PRONOUNS:
        return RelationshipType.PRONOUN_GENITIVE_DA
    if ending == "-t":
        return RelationshipType.NEUTER_PRONOUN_DA
    if ending == "-le":
        return RelationshipType.PLURAL_PRONOUN_DA
    return RelationshipType.RELATED


def _pronoun_forms(collector: _FormCollector, forms: Sequence[str]) -> None:
    for ending in forms:
        if not _normalize_ending(ending):
            continue
        related = apply_ending(collector.base_word, ending)
        collector.add(related, _pronoun_type(ending, related))


def _definition_numbers(context_key: str) -> list[int]:
    if "betydning" not in context_key.lower():
        return []
    return [int(match) for match in _DIGITS_RE.findall(context_key)]


def _contextual_noun_type(ending: str, index: int) -> RelationshipType | None:
    ending = _normalize_ending(ending)
    if ending.endswith("-en") or ending.endswith("-et"):
        return RelationshipType.DEFINITE_FORM_DA
    if ending in ("-e", "-er") or (ending.endswith(("-e", "-er")) and index == 1):
        return RelationshipType.PLURAL_DA
    if ending in ("-ene", "-erne") or (ending.endswith(("-ene", "-erne")) and index == 2):
        return RelationshipType.PLURAL_DEFINITE_DA
    if ending == "-" and index == 1:
        return RelationshipType.PLURAL_DA
    return None


def _contextual_forms(
    collector: _FormCollector,
    part_of_speech: PartOfSpeech,
    contextual_forms: Mapping[str, Sequence[str]],
    genders: frozenset[Gender],
) -> None:
    base = collector.base_word
    is_pronoun = part_of_speech == PartOfSpeech.PRONOUN

    for context_key, endings in contextual_forms.items():
        if not endings:
            continue
        key_text = context_key.lower()
        numbers = _definition_numbers(context_key)
        usage_note = context_key.strip() if is_pronoun else None

        for index, ending in enumerate(endings):
            if not _normalize_ending(ending):
                continue
            related = apply_ending(base, ending)

            # Keywords in the context key win over suffix shape
            if "genitiv" in key_text or "ejefald" in key_text:
                relationship_type = (
                    RelationshipType.PRONOUN_GENITIVE_DA
                    if is_pronoun
                    else RelationshipType.GENITIVE_FORM_DA
                )
            elif "plural" in key_text or "flertal" in key_text:
                relationship_type = (
                    RelationshipType.PLURAL_PRONOUN_DA if is_pronoun else RelationshipType.PLURAL_DA
                )
            elif is_pronoun:
                relationship_type = _pronoun_type(ending, related)
            elif part_of_speech == PartOfSpeech.NOUN:
                relationship_type = (
                    _contextual_noun_type(ending, index) or RelationshipType.CONTEXTUAL_USAGE_DA
                )
            elif part_of_speech == PartOfSpeech.VERB and index < len(VERB_POSITIONS):
                relationship_type = VERB_POSITIONS[index]
            else:
                relationship_type = RelationshipType.CONTEXTUAL_USAGE_DA

            if is_pronoun:
                allow_identical = bool(usage_note)
            else:
                allow_identical = relationship_type == RelationshipType.PLURAL_DA
            collector.add(related, relationship_type, usage_note, numbers, allow_identical)

            if relationship_type == RelationshipType.DEFINITE_FORM_DA:
                tag = _gender_tag(ending, genders)
                if tag is not None:
                    collector.add(related, tag, usage_note, numbers)


def transform_forms(
    word: str,
    part_of_speech: PartOfSpeech,
    forms: Sequence[str] | None,
    contextual_forms: Mapping[str, Sequence[str]] | None = None,
    genders: Iterable[Gender] = (),
) -> list[FormRelation]:
    """Produce the derived forms of ``word`` tagged with relationship types.

    Args:
        word: The headword
        part_of_speech: Headword part of speech; selects the positional rules
        forms: Ordered inflectional endings
        contextual_forms: Extra endings keyed by a free-text usage context
        genders: Grammatical genders listed for the headword

    Returns:
        Relations in discovery order, deduplicated by
        (word, type, usage note, definition numbers)
    """
    if not word or not word.strip():
        return []
    collector = _FormCollector(word.strip())
    gender_set = frozenset(genders)
    endings = [f for f in forms or [] if isinstance(f, str)]

    if endings:
        if part_of_speech == PartOfSpeech.NOUN:
            _noun_forms(collector, endings, gender_set)
        elif part_of_speech == PartOfSpeech.ADJECTIVE:
            _adjective_forms(collector, endings)
        elif part_of_speech == PartOfSpeech.VERB:
            _verb_forms(collector, endings)
        elif part_of_speech == PartOfSpeech.PRONOUN:
            _pronoun_forms(collector, endings)

    if contextual_forms:
        _contextual_forms(collector, part_of_speech, contextual_forms, gender_set)

    return collector.relations
