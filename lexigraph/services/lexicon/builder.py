"""Relationship Graph Builder.

Collects the sub-words of one entry together with their symbolic
relationships. Nothing here touches the database: endpoints stay symbolic
until the persistence engine resolves them.
"""

import itertools
import logging
import re
from collections.abc import Callable, Iterable, Sequence

from lexigraph.services.lexicon.forms import FormRelation
from lexigraph.services.lexicon.types import (
    MAIN_WORD,
    MAIN_WORD_DETAILS,
    SUB_WORD,
    SUB_WORD_DETAILS,
    AudioFile,
    DefinitionData,
    Gender,
    LiteralWord,
    PartOfSpeech,
    ProcessedWordData,
    Relationship,
    RelationshipType,
    SubWordData,
    WordData,
)

logger = logging.getLogger(__name__)

# "barn(s)seng": a one- or two-letter linking element that may be dropped
_INTERPOLATION_RE = re.compile(r"\(([a-zæøå]{1,2})\)")


def expand_composition(composition: str) -> list[str]:
    """Expand optional linking letters into every spelling they allow.

    "barn(s)seng" -> ["barnseng", "barnsseng"]
    """
    text = composition.strip()
    parts = _INTERPOLATION_RE.split(text)
    if len(parts) == 1:
        return [text] if text else []
    # parts alternates literal text and optional insertions
    literals = parts[0::2]
    optionals = parts[1::2]
    spellings: list[str] = []
    for choice in itertools.product((False, True), repeat=len(optionals)):
        pieces = [literals[0]]
        for include, optional, literal in zip(choice, optionals, literals[1:]):
            if include:
                pieces.append(optional)
            pieces.append(literal)
        spelling = "".join(pieces).strip()
        if spelling and spelling not in spellings:
            spellings.append(spelling)
    return spellings


def _merge_audio(target: list[AudioFile], audio_files: Iterable[AudioFile]) -> None:
    known = {audio.url for audio in target}
    for audio in audio_files:
        if audio.url and audio.url not in known:
            target.append(audio)
            known.add(audio.url)


class SubWordCollector:
    """Accumulates sub-words for one headword.

    Sub-words are merged by (text, part of speech), so a word reached through
    two paths (a form and a label synonym, say) ends up as one record
    carrying both relationships. Relationships and definitions are
    deduplicated per record.
    """

    def __init__(self, main: WordData):
        self.main = main
        self._sub_words: dict[tuple[str, PartOfSpeech], SubWordData] = {}
        self._stems: list[str] = []

    def __len__(self) -> int:
        return len(self._sub_words)

    @property
    def sub_words(self) -> list[SubWordData]:
        return list(self._sub_words.values())

    def is_headword(self, word: str) -> bool:
        return word.strip().lower() == self.main.word.strip().lower()

    def add(
        self,
        word: str | None,
        part_of_speech: PartOfSpeech = PartOfSpeech.UNDEFINED,
        relationships: Sequence[Relationship] = (),
        definitions: Sequence[DefinitionData] = (),
        source_data: str | None = None,
        phonetic: str | None = None,
        gender: Gender | None = None,
        forms: str | None = None,
        etymology: str | None = None,
        audio_files: Iterable[AudioFile] = (),
        variant: str = "",
    ) -> SubWordData | None:
        """Add a sub-word or merge into the existing record for the same sense."""
        if not isinstance(word, str) or not word.strip():
            return None
        text = word.strip()
        key = (text, part_of_speech)

        sub_word = self._sub_words.get(key)
        if sub_word is None:
            sub_word = SubWordData(
                word=text,
                language=self.main.language,
                source=self.main.source,
                part_of_speech=part_of_speech,
                variant=variant or "",
            )
            self._sub_words[key] = sub_word

        audio_files = list(audio_files)
        if not phonetic:
            phonetic = next((audio.phonetic for audio in audio_files if audio.phonetic), None)

        # Fill blanks only; the first non-empty value wins
        sub_word.phonetic = sub_word.phonetic or phonetic
        sub_word.gender = sub_word.gender or gender
        sub_word.forms = sub_word.forms or forms
        sub_word.etymology = sub_word.etymology or etymology
        sub_word.variant = sub_word.variant or variant or ""
        _merge_audio(sub_word.audio_files, audio_files)

        for relationship in relationships:
            if relationship not in sub_word.relationships:
                sub_word.relationships.append(relationship)

        known_definitions = {d.definition for d in sub_word.definitions}
        for definition in definitions:
            if definition.definition and definition.definition not in known_definitions:
                sub_word.definitions.append(definition)
                known_definitions.add(definition.definition)

        if source_data and source_data not in sub_word.source_data:
            sub_word.source_data.append(source_data)
        return sub_word

    def add_forms(
        self,
        relations: Iterable[FormRelation],
        part_of_speech: PartOfSpeech,
        describe: Callable[[FormRelation], DefinitionData | None] | None = None,
        audio_for: Callable[[FormRelation], list[AudioFile]] | None = None,
    ) -> None:
        """Add inflected forms as sense-level relations of the headword."""
        for relation in relations:
            definition = describe(relation) if describe else None
            self.add(
                relation.related_word,
                part_of_speech,
                relationships=[
                    Relationship(MAIN_WORD_DETAILS, SUB_WORD_DETAILS, relation.relationship_type),
                    Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
                ],
                definitions=[definition] if definition else [],
                source_data="form",
                etymology=self.main.word,
                audio_files=audio_for(relation) if audio_for else [],
            )

    def add_stems(self, stems: Iterable[tuple[str, PartOfSpeech]]) -> None:
        for stem, part_of_speech in stems:
            sub_word = self.add(
                stem,
                part_of_speech,
                relationships=[
                    Relationship(MAIN_WORD, SUB_WORD, RelationshipType.STEM),
                    Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
                ],
                source_data="stem",
            )
            if sub_word is not None and sub_word.word not in self._stems:
                self._stems.append(sub_word.word)

    def add_semantic(
        self,
        words: Iterable[str],
        relationship_type: RelationshipType,
        part_of_speech: PartOfSpeech | None = None,
        details_level: bool = True,
    ) -> None:
        """Add synonyms, antonyms or "see also" references.

        References to the headword itself are dropped.
        """
        if part_of_speech is None:
            part_of_speech = self.main.part_of_speech
        if details_level:
            relationship = Relationship(MAIN_WORD_DETAILS, SUB_WORD_DETAILS, relationship_type)
        else:
            relationship = Relationship(MAIN_WORD, SUB_WORD, relationship_type)
        for word in words:
            if not isinstance(word, str) or not word.strip():
                continue
            if self.is_headword(word):
                logger.debug(f"Skipping self-reference '{word}' ({relationship_type})")
                continue
            self.add(
                word,
                part_of_speech,
                relationships=[relationship],
                source_data=relationship_type.value,
            )

    def add_compositions(
        self,
        compositions: Iterable[str],
        part_of_speech: PartOfSpeech = PartOfSpeech.UNDEFINED,
    ) -> None:
        """Add compounds; each expanded spelling is an alternative spelling of its siblings."""
        for composition in compositions:
            if not isinstance(composition, str):
                continue
            spellings = expand_composition(composition)
            for spelling in spellings:
                relationships = [Relationship(MAIN_WORD, SUB_WORD, RelationshipType.COMPOSITION)]
                for sibling in spellings:
                    if sibling != spelling:
                        relationships.append(
                            Relationship(
                                LiteralWord(sibling),
                                SUB_WORD_DETAILS,
                                RelationshipType.ALTERNATIVE_SPELLING,
                            )
                        )
                self.add(
                    spelling,
                    part_of_speech,
                    relationships=relationships,
                    source_data="composition",
                )

    def add_variants(
        self,
        variants: Iterable[str],
        definitions: Sequence[DefinitionData] = (),
        audio_files: Iterable[AudioFile] = (),
        phonetic: str | None = None,
    ) -> None:
        """Add alternative spellings of the headword in the headword's own sense."""
        audio_files = list(audio_files)
        for variant in variants:
            if not isinstance(variant, str) or self.is_headword(variant):
                continue
            self.add(
                variant,
                self.main.part_of_speech,
                relationships=[
                    Relationship(
                        MAIN_WORD_DETAILS,
                        SUB_WORD_DETAILS,
                        RelationshipType.ALTERNATIVE_SPELLING,
                    ),
                    Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
                ],
                definitions=definitions,
                source_data="variant",
                phonetic=phonetic,
                etymology=self.main.word,
                audio_files=audio_files,
            )

    def add_phrase(
        self,
        phrase: str,
        definitions: Sequence[DefinitionData] = (),
        part_of_speech: PartOfSpeech = PartOfSpeech.PHRASE,
        relationship_type: RelationshipType = RelationshipType.PHRASE,
        variants: Iterable[str] = (),
        variant_type: RelationshipType = RelationshipType.ALTERNATIVE_SPELLING,
    ) -> SubWordData | None:
        """Add a fixed expression or phrasal verb and its variant forms.

        Variant forms hang off the phrase itself through a literal endpoint.
        """
        sub_word = self.add(
            phrase,
            part_of_speech,
            relationships=[
                Relationship(MAIN_WORD_DETAILS, SUB_WORD_DETAILS, relationship_type),
                Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
            ],
            definitions=definitions,
            source_data="expression",
        )
        if sub_word is None:
            return None
        for variant in variants:
            if not isinstance(variant, str) or variant.strip() == sub_word.word:
                continue
            self.add(
                variant,
                part_of_speech,
                relationships=[
                    Relationship(LiteralWord(sub_word.word), SUB_WORD_DETAILS, variant_type),
                    Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
                ],
                source_data="expression_variant",
            )
        return sub_word

    def build(self, definitions: Sequence[DefinitionData] = ()) -> ProcessedWordData:
        logger.debug(f"Built {len(self._sub_words)} sub-words for '{self.main.word}'")
        return ProcessedWordData(
            word=self.main,
            definitions=list(definitions),
            sub_words=self.sub_words,
            stems=list(self._stems),
        )
