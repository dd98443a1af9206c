"""Adapter for entries scraped from the Danish dictionary (ordnet.dk)."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from lexigraph.errors import SourceFormatError
from lexigraph.services.audio.reconciler import select_audio_chain
from lexigraph.services.lexicon import labels
from lexigraph.services.lexicon.builder import SubWordCollector
from lexigraph.services.lexicon.forms import FormRelation, transform_forms
from lexigraph.services.lexicon.types import (
    MAIN_WORD,
    SUB_WORD,
    AudioFile,
    DefinitionData,
    ExampleData,
    Gender,
    PartOfSpeech,
    ProcessedWordData,
    Relationship,
    RelationshipType,
    SourceType,
    WordData,
)
from lexigraph.services.sources.base import SourceAdapter
from lexigraph.services.sources.validator import validate_danish_entry

logger = logging.getLogger(__name__)

LANGUAGE = "da"

PART_OF_SPEECH_MAP: dict[str, PartOfSpeech] = {
    "substantiv": PartOfSpeech.NOUN,
    "verbum": PartOfSpeech.VERB,
    "adjektiv": PartOfSpeech.ADJECTIVE,
    "adverbium": PartOfSpeech.ADVERB,
    "pronomen": PartOfSpeech.PRONOUN,
    "præposition": PartOfSpeech.PREPOSITION,
    "konjunktion": PartOfSpeech.CONJUNCTION,
    "interjektion": PartOfSpeech.INTERJECTION,
    "talord": PartOfSpeech.NUMERAL,
    "artikel": PartOfSpeech.ARTICLE,
    "udråbsord": PartOfSpeech.EXCLAMATION,
    "forkortelse": PartOfSpeech.ABBREVIATION,
    "suffiks": PartOfSpeech.UNDEFINED,
    "sidsteled": PartOfSpeech.UNDEFINED,
    "undefined": PartOfSpeech.UNDEFINED,
}

GENDER_MAP: dict[str, tuple[Gender, ...]] = {
    "fælleskøn": (Gender.COMMON,),
    "intetkøn": (Gender.NEUTER,),
    "intetkønellerfælleskøn": (Gender.NEUTER, Gender.COMMON),
    "fælleskønellerintetkøn": (Gender.COMMON, Gender.NEUTER),
}

STEM_PART_OF_SPEECH_MAP: dict[str, PartOfSpeech] = {
    "sb.": PartOfSpeech.NOUN,
    "vb.": PartOfSpeech.VERB,
    "adj.": PartOfSpeech.ADJECTIVE,
    "adv.": PartOfSpeech.ADVERB,
    "præp.": PartOfSpeech.PREPOSITION,
    "konj.": PartOfSpeech.CONJUNCTION,
    "pron.": PartOfSpeech.PRONOUN,
    "interj.": PartOfSpeech.INTERJECTION,
    "num.": PartOfSpeech.NUMERAL,
}

FORM_DEFINITIONS: dict[RelationshipType, str] = {
    RelationshipType.DEFINITE_FORM_DA: "Definite form (bestemt form) of {base}.",
    RelationshipType.PLURAL_DA: "Plural form (flertal) of {base}.",
    RelationshipType.PLURAL_DEFINITE_DA: "Plural definite form (bestemt form flertal) of {base}.",
    RelationshipType.COMMON_GENDER_DA: "Common gender form (fælleskøn) of {base}.",
    RelationshipType.NEUTER_GENDER_DA: "Neuter gender form (intetkøn) of {base}.",
    RelationshipType.GENITIVE_FORM_DA: "Genitive form (ejefald) of {base}.",
    RelationshipType.PRESENT_TENSE_DA: "Present tense (nutid) of {base}.",
    RelationshipType.PAST_TENSE_DA: "Past tense (datid) of {base}.",
    RelationshipType.PAST_PARTICIPLE_DA: "Past participle (førnutid) of {base}.",
    RelationshipType.IMPERATIVE_DA: "Imperative form (bydeform) of {base}.",
    RelationshipType.ADJECTIVE_NEUTER_DA: "Neuter form (intetkønsform) of {base}.",
    RelationshipType.ADJECTIVE_PLURAL_DA: "Plural and definite form (flertal og bestemt form) of {base}.",
    RelationshipType.COMPARATIVE_DA: "Comparative form (komparativ) of {base}.",
    RelationshipType.SUPERLATIVE_DA: "Superlative form (superlativ) of {base}.",
    RelationshipType.ADVERBIAL_FORM_DA: "Adverbial form of {base}.",
    RelationshipType.NEUTER_PRONOUN_DA: "Neuter form of the pronoun {base}.",
    RelationshipType.PLURAL_PRONOUN_DA: "Plural form of the pronoun {base}.",
    RelationshipType.PRONOUN_ACCUSATIVE_DA: "Object form of the pronoun {base}.",
    RelationshipType.PRONOUN_GENITIVE_DA: "Possessive form of the pronoun {base}.",
    RelationshipType.CONTEXTUAL_USAGE_DA: "Contextual usage of {base}.",
}

# Audio tags whose recordings pronounce a given form
FORM_AUDIO_TAGS: dict[RelationshipType, tuple[str, ...]] = {
    RelationshipType.PLURAL_DA: ("pluralis",),
    RelationshipType.PRESENT_TENSE_DA: ("præsens",),
    RelationshipType.PAST_TENSE_DA: ("præteritum", "præteritum og præteritum participium"),
    RelationshipType.PAST_PARTICIPLE_DA: (
        "præteritum participium",
        "præteritum og præteritum participium",
    ),
}


def map_part_of_speech(value: Any) -> PartOfSpeech:
    """Map a Danish part-of-speech token, logging the ones we do not know."""
    if not isinstance(value, str) or not value.strip():
        return PartOfSpeech.UNDEFINED
    token = value.strip().lower()
    if token in PART_OF_SPEECH_MAP:
        return PART_OF_SPEECH_MAP[token]
    # "talord (mængdetal)", "talord (ordenstal)"
    if token.startswith("talord"):
        return PartOfSpeech.NUMERAL
    logger.warning(f"Unknown Danish part of speech: {value}")
    return PartOfSpeech.UNDEFINED


def map_genders(tokens: Sequence[Any]) -> list[Gender]:
    genders: list[Gender] = []
    for token in tokens:
        if not isinstance(token, str):
            continue
        key = token.replace(" ", "").lower()
        for gender in GENDER_MAP.get(key, ()):
            if gender not in genders:
                genders.append(gender)
    return genders


def map_stem_part_of_speech(value: Any) -> PartOfSpeech:
    if not isinstance(value, str):
        return PartOfSpeech.UNDEFINED
    return STEM_PART_OF_SPEECH_MAP.get(value.strip(), PartOfSpeech.UNDEFINED)


def form_definition(base_word: str, relationship_type: RelationshipType) -> str | None:
    template = FORM_DEFINITIONS.get(relationship_type)
    if template is None:
        return None
    return template.format(base=f"{{it}}{base_word}{{/it}}")


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _audio_file(entry: Mapping[str, Any]) -> AudioFile | None:
    url = entry.get("audio_url")
    if not isinstance(url, str) or not url.strip():
        return None
    return AudioFile(
        url=url.strip(),
        word=entry.get("word") or None,
        audio_type=entry.get("audio_type") or None,
        phonetic=entry.get("phonetic_audio") or None,
    )


class DanishAdapter(SourceAdapter):
    """Maps a Danish dictionary entry into ``ProcessedWordData``.

    Accepts both the nested shape (``{"word": {...}, "definition": [...]}``)
    and a flat word object (``{"word": "hus", "partOfSpeech": [...]}``).
    """

    @property
    def name(self) -> str:
        return SourceType.DANISH_DICTIONARY.value

    def process(self, raw: Mapping[str, Any]) -> ProcessedWordData:
        raw = self._require_mapping(raw)
        word_block = raw.get("word")
        if isinstance(word_block, Mapping):
            entry = word_block
        elif isinstance(word_block, str):
            entry = raw
        else:
            raise SourceFormatError("Danish entry has no 'word'")

        headword = entry.get("word")
        if not isinstance(headword, str) or not headword.strip():
            raise SourceFormatError("Danish entry has an empty headword")
        headword = headword.strip()
        validate_danish_entry(raw, context=headword)

        pos_tokens = _as_list(entry.get("partOfSpeech"))
        part_of_speech = map_part_of_speech(pos_tokens[0] if pos_tokens else None)
        genders = map_genders(pos_tokens[1:])
        variant = str(entry.get("variant") or "")
        forms = [f for f in self._forms(entry.get("forms")) if f]
        audio_entries = [a for a in _as_list(entry.get("audio")) if isinstance(a, Mapping)]

        main = WordData(
            word=headword,
            language=LANGUAGE,
            source=SourceType.DANISH_DICTIONARY,
            part_of_speech=part_of_speech,
            variant=variant,
            phonetic=entry.get("phonetic") or None,
            gender=genders[0] if len(genders) == 1 else None,
            forms=", ".join(forms) or None,
            etymology=entry.get("etymology") or None,
            source_entity_id=(
                f"{SourceType.DANISH_DICTIONARY.value}-{headword}-{part_of_speech.value}-{variant}"
            ),
            audio_files=[
                audio for audio in map(_audio_file, select_audio_chain(audio_entries)) if audio
            ],
        )

        collector = SubWordCollector(main)
        definitions = self._definitions(raw.get("definition"), collector)

        contextual = entry.get("contextual_forms")
        relations = transform_forms(
            headword,
            part_of_speech,
            forms,
            contextual if isinstance(contextual, Mapping) else None,
            genders,
        )
        collector.add_forms(
            relations,
            part_of_speech,
            describe=lambda relation: self._describe_form(headword, relation),
            audio_for=lambda relation: self._form_audio(relation, audio_entries),
        )

        collector.add_stems(
            (stem.get("stem"), map_stem_part_of_speech(stem.get("partOfSpeech")))
            if isinstance(stem, Mapping)
            else (stem, PartOfSpeech.UNDEFINED)
            for stem in _as_list(raw.get("stems"))
        )
        collector.add_semantic(self._strings(raw.get("synonyms")), RelationshipType.SYNONYM)
        collector.add_semantic(self._strings(raw.get("antonyms")), RelationshipType.ANTONYM)
        collector.add_semantic(
            self._strings(raw.get("related_words")),
            RelationshipType.RELATED,
            PartOfSpeech.UNDEFINED,
            details_level=False,
        )
        collector.add_compositions(
            comp.get("composition") if isinstance(comp, Mapping) else comp
            for comp in _as_list(raw.get("compositions"))
        )
        collector.add_variants(self._strings(entry.get("word_variants")))

        for expression in _as_list(raw.get("fixed_expressions")):
            if isinstance(expression, Mapping):
                self._fixed_expression(expression, collector)

        for variant_entry in _as_list(raw.get("variants")):
            if isinstance(variant_entry, Mapping):
                self._variant_entry(variant_entry, collector)

        logger.debug(
            f"Processed Danish entry '{headword}' ({part_of_speech}): "
            f"{len(definitions)} definitions, {len(collector)} sub-words"
        )
        return collector.build(definitions)

    @staticmethod
    def _forms(value: Any) -> list[str]:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",")]
        return [f.strip() for f in _as_list(value) if isinstance(f, str)]

    @staticmethod
    def _strings(value: Any) -> list[str]:
        return [v for v in _as_list(value) if isinstance(v, str) and v.strip()]

    @staticmethod
    def _examples(item: Mapping[str, Any]) -> list[ExampleData]:
        sources = _as_list(item.get("sources"))
        examples: list[ExampleData] = []
        seen: set[str] = set()
        for index, text in enumerate(_as_list(item.get("examples"))):
            if not isinstance(text, str) or not text.strip() or text.strip() in seen:
                continue
            source = sources[index] if index < len(sources) else None
            examples.append(
                ExampleData(
                    text.strip(),
                    LANGUAGE,
                    source_of_example=labels.format_example_source(
                        source if isinstance(source, Mapping) else None
                    ),
                )
            )
            seen.add(text.strip())
        for text in labels.extract_label_examples(item.get("labels")):
            if text not in seen:
                examples.append(ExampleData(text, LANGUAGE))
                seen.add(text)
        return examples

    def _definition(self, item: Mapping[str, Any], text_key: str = "definition") -> DefinitionData | None:
        text = item.get(text_key)
        if not isinstance(text, str) or not text.strip():
            return None
        item_labels = item.get("labels") if isinstance(item.get("labels"), Mapping) else None
        return DefinitionData(
            definition=text.strip(),
            source=SourceType.DANISH_DICTIONARY,
            language=LANGUAGE,
            subject_status_labels=labels.extract_subject_labels(item_labels),
            general_labels=labels.extract_general_labels(item_labels),
            grammatical_note=labels.extract_grammatical_note(item_labels),
            usage_note=labels.extract_usage_note(item_labels),
            examples=self._examples(item),
        )

    def _definitions(self, items: Any, collector: SubWordCollector) -> list[DefinitionData]:
        definitions: list[DefinitionData] = []
        seen: set[str] = set()
        for item in _as_list(items):
            if not isinstance(item, Mapping):
                continue
            definition = self._definition(item)
            if definition is not None and definition.definition not in seen:
                definitions.append(definition)
                seen.add(definition.definition)
            self._label_relations(item.get("labels"), collector)
        return definitions

    @staticmethod
    def _label_relations(item_labels: Any, collector: SubWordCollector) -> None:
        if not isinstance(item_labels, Mapping):
            return
        for word, relationship_type in labels.extract_label_relations(item_labels):
            collector.add_semantic([word], relationship_type)
        abbreviations = labels.label_values(item_labels, "Forkortelse")
        if abbreviations:
            collector.add_semantic(
                abbreviations, RelationshipType.ABBREVIATION, PartOfSpeech.ABBREVIATION
            )

    @staticmethod
    def _describe_form(headword: str, relation: FormRelation) -> DefinitionData | None:
        text = form_definition(headword, relation.relationship_type)
        if text is None:
            return None
        return DefinitionData(
            definition=text,
            source=SourceType.DANISH_DICTIONARY,
            language=LANGUAGE,
            usage_note=relation.usage_note,
        )

    @staticmethod
    def _form_audio(relation: FormRelation, audio_entries: list[Mapping[str, Any]]) -> list[AudioFile]:
        tags = FORM_AUDIO_TAGS.get(relation.relationship_type)
        if not tags:
            return []
        matches = [_audio_file(entry) for entry in audio_entries if entry.get("word") in tags]
        return [audio for audio in matches if audio]

    def _fixed_expression(self, expression: Mapping[str, Any], collector: SubWordCollector) -> None:
        text = expression.get("expression")
        if not isinstance(text, str) or not text.strip():
            return
        definition = self._definition(expression)
        collector.add_phrase(
            text,
            [definition] if definition else [],
            variants=self._strings(expression.get("expression_variants")),
        )
        self._label_relations(expression.get("labels"), collector)

    def _variant_entry(self, variant: Mapping[str, Any], collector: SubWordCollector) -> None:
        """A separate dictionary entry listed as a variant of the headword."""
        block = variant.get("word") if isinstance(variant.get("word"), Mapping) else variant
        text = block.get("word")
        if not isinstance(text, str) or not text.strip():
            return
        pos_tokens = _as_list(block.get("partOfSpeech"))
        genders = map_genders(pos_tokens[1:])
        definitions = self._definitions(variant.get("definition"), collector)
        collector.add(
            text,
            map_part_of_speech(pos_tokens[0] if pos_tokens else None),
            relationships=[Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED)],
            definitions=definitions,
            source_data="variant",
            phonetic=block.get("phonetic") or None,
            gender=genders[0] if len(genders) == 1 else None,
            etymology=block.get("etymology") or None,
        )
