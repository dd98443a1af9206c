"""Adapter for Merriam-Webster dictionary API responses."""

import logging
import re
from collections.abc import Iterator, Mapping
from typing import Any

from lexigraph.errors import SourceFormatError
from lexigraph.services.lexicon import labels
from lexigraph.services.lexicon.builder import SubWordCollector
from lexigraph.services.lexicon.types import (
    MAIN_WORD,
    MAIN_WORD_DETAILS,
    SUB_WORD,
    SUB_WORD_DETAILS,
    AudioFile,
    DefinitionData,
    ExampleData,
    LiteralWord,
    PartOfSpeech,
    ProcessedWordData,
    Relationship,
    RelationshipType,
    SourceType,
    WordData,
)
from lexigraph.services.sources.base import SourceAdapter

logger = logging.getLogger(__name__)

LANGUAGE = "en"

PART_OF_SPEECH_MAP: dict[str, PartOfSpeech] = {
    "noun": PartOfSpeech.NOUN,
    "verb": PartOfSpeech.VERB,
    "phrasal verb": PartOfSpeech.PHRASAL_VERB,
    "adjective": PartOfSpeech.ADJECTIVE,
    "adverb": PartOfSpeech.ADVERB,
    "pronoun": PartOfSpeech.PRONOUN,
    "preposition": PartOfSpeech.PREPOSITION,
    "conjunction": PartOfSpeech.CONJUNCTION,
    "interjection": PartOfSpeech.INTERJECTION,
}

SOURCE_MAP: dict[str, SourceType] = {
    "learners": SourceType.MERRIAM_LEARNERS,
    "int_dict": SourceType.MERRIAM_INTERMEDIATE,
}

# (label fragment, relationship type, definition template); first match wins
CROSS_REFERENCE_RULES: tuple[tuple[str, RelationshipType, str], ...] = (
    (
        "past tense and past participle",
        RelationshipType.PAST_TENSE_EN,
        "Past tense and past participle of {it}{base}{/it}",
    ),
    ("past participle", RelationshipType.PAST_PARTICIPLE_EN, "Past participle of {it}{base}{/it}"),
    ("past tense", RelationshipType.PAST_TENSE_EN, "Past tense of {it}{base}{/it}"),
    (
        "present participle",
        RelationshipType.PRESENT_PARTICIPLE_EN,
        "Present participle of {it}{base}{/it}",
    ),
    (
        "third person singular",
        RelationshipType.THIRD_PERSON_EN,
        "Third person singular of {it}{base}{/it}",
    ),
    (
        "less common spelling of",
        RelationshipType.ALTERNATIVE_SPELLING,
        "Less common spelling of {it}{base}{/it}",
    ),
)

_HOMOGRAPH_SUFFIX_RE = re.compile(r":\d+$")


def map_part_of_speech(fl: Any) -> PartOfSpeech:
    if not isinstance(fl, str) or not fl.strip():
        logger.warning("Missing functional label (fl) in Merriam-Webster entry")
        return PartOfSpeech.UNDEFINED
    part_of_speech = PART_OF_SPEECH_MAP.get(fl.strip().lower())
    if part_of_speech is None:
        logger.warning(f"Unknown Merriam-Webster part of speech: {fl}")
        return PartOfSpeech.UNDEFINED
    return part_of_speech


def map_source_type(src: Any) -> SourceType:
    if not isinstance(src, str) or not src:
        return SourceType.USER
    source = SOURCE_MAP.get(src.lower())
    if source is None:
        logger.warning(f"Unknown Merriam-Webster source '{src}', using {SourceType.USER}")
        return SourceType.USER
    return source


def _clean_headword(text: Any) -> str:
    return text.replace("*", "").strip() if isinstance(text, str) else ""


def _joined(values: Any) -> str | None:
    if not isinstance(values, list):
        return None
    parts = [v for v in values if isinstance(v, str) and v]
    return ", ".join(parts) or None


def _audio_files(*pronunciation_lists: Any) -> list[AudioFile]:
    files: list[AudioFile] = []
    for prs in pronunciation_lists:
        if not isinstance(prs, list):
            continue
        phonetic = labels.pronunciation_phonetic(prs)
        for url in labels.pronunciation_audio_urls(prs):
            if all(existing.url != url for existing in files):
                files.append(AudioFile(url=url, phonetic=phonetic))
    return files


def _short_definition_key(text: str) -> str:
    return labels.strip_markup(text)


def _iter_senses(def_entries: Any) -> Iterator[tuple[Mapping[str, Any], Mapping[str, Any] | None]]:
    """Yield (sense, sen) pairs from ``def[].sseq``.

    A ``sen`` item applies to the next sense only; a binding substitute
    (``bs``) wraps its sense.
    """
    for def_entry in def_entries if isinstance(def_entries, list) else []:
        if not isinstance(def_entry, Mapping):
            continue
        for sseq_item in def_entry.get("sseq") or []:
            current_sen: Mapping[str, Any] | None = None
            pairs = list(sseq_item) if isinstance(sseq_item, list) else []
            while pairs:
                pair = pairs.pop(0)
                if not isinstance(pair, list) or len(pair) < 2:
                    continue
                kind, data = pair[0], pair[1]
                if kind == "pseq" and isinstance(data, list):
                    pairs = list(data) + pairs
                    continue
                if kind == "sen" and isinstance(data, Mapping):
                    current_sen = data
                    continue
                if kind == "bs" and isinstance(data, Mapping):
                    kind, data = "sense", data.get("sense")
                if kind in ("sense", "sdsense") and isinstance(data, Mapping):
                    sen = current_sen or data.get("sen")
                    yield data, sen if isinstance(sen, Mapping) else None
                    current_sen = None


def _phrasal_verb_variants(sense: Mapping[str, Any], sen: Mapping[str, Any] | None) -> list[str]:
    candidates: list[Any] = []
    if sen and isinstance(sen.get("phrasev"), list):
        candidates.extend(sen["phrasev"])
    if isinstance(sense.get("phrasev"), list):
        candidates.extend(sense["phrasev"])
    sphrasev = sense.get("sphrasev")
    if isinstance(sphrasev, Mapping) and isinstance(sphrasev.get("phrs"), list):
        candidates.extend(sphrasev["phrs"])
    variants: list[str] = []
    for candidate in candidates:
        if isinstance(candidate, Mapping) and isinstance(candidate.get("pva"), str):
            pva = candidate["pva"].rstrip("*").strip()
            if pva and pva not in variants:
                variants.append(pva)
    return variants


class MerriamAdapter(SourceAdapter):
    """Maps one Merriam-Webster (learner's or intermediate) entry.

    Headwords carry ``*`` syllable breaks; cross references (``cxs``) point
    from an inflected headword back to its base word, so those edges are
    reversed relative to inflections listed in ``ins``.
    """

    @property
    def name(self) -> str:
        return "merriam_webster"

    def process(self, raw: Mapping[str, Any]) -> ProcessedWordData:
        raw = self._require_mapping(raw)
        hwi = raw.get("hwi") if isinstance(raw.get("hwi"), Mapping) else {}
        headword = _clean_headword(hwi.get("hw"))
        if not headword:
            raise SourceFormatError("Merriam-Webster entry has no headword (hwi.hw)")

        meta = raw.get("meta") if isinstance(raw.get("meta"), Mapping) else {}
        meta_id = str(meta.get("id") or headword)
        source = map_source_type(meta.get("src"))
        part_of_speech = map_part_of_speech(raw.get("fl"))
        prs = hwi.get("prs") if isinstance(hwi.get("prs"), list) else []
        altprs = hwi.get("altprs") if isinstance(hwi.get("altprs"), list) else []

        main = WordData(
            word=headword,
            language=LANGUAGE,
            source=source,
            part_of_speech=part_of_speech,
            variant=meta_id.split(":")[1] if ":" in meta_id else "",
            phonetic=labels.pronunciation_phonetic(prs) or labels.pronunciation_phonetic(altprs),
            etymology=labels.process_etymology(raw.get("et")),
            is_highlighted=meta.get("highlight") == "yes",
            source_entity_id=f"{source.value}-{meta_id}-{meta.get('uuid') or ''}",
            audio_files=_audio_files(prs, altprs),
        )

        collector = SubWordCollector(main)
        definitions: list[DefinitionData] = []

        self._variants(raw, collector)
        definitions.extend(self._cross_references(raw, main, collector))
        self._inflections(raw, main, collector)
        for synonyms in meta.get("syns") or []:
            collector.add_semantic(
                [s for s in synonyms if isinstance(s, str)] if isinstance(synonyms, list) else [],
                RelationshipType.SYNONYM,
            )
        for antonyms in meta.get("ants") or []:
            collector.add_semantic(
                [a for a in antonyms if isinstance(a, str)] if isinstance(antonyms, list) else [],
                RelationshipType.ANTONYM,
            )
        self._run_ons(raw, collector)
        self._undefined_run_ons(raw, main, collector)
        collector.add_stems(
            (stem, PartOfSpeech.UNDEFINED)
            for stem in meta.get("stems") or []
            if isinstance(stem, str) and not collector.is_headword(stem)
        )

        definitions.extend(self._main_definitions(raw, meta, source))
        logger.debug(
            f"Processed Merriam-Webster entry '{headword}' ({part_of_speech}): "
            f"{len(definitions)} definitions, {len(collector)} sub-words"
        )
        return collector.build(definitions)

    # Definitions

    def _definition(
        self,
        sense: Mapping[str, Any],
        sen: Mapping[str, Any] | None,
        raw: Mapping[str, Any],
        source: SourceType,
        short_definitions: set[str] | None = None,
    ) -> DefinitionData | None:
        dt = sense.get("dt")
        if not isinstance(dt, list):
            return None
        text = next(
            (
                item[1]
                for item in dt
                if isinstance(item, list)
                and len(item) >= 2
                and item[0] == "text"
                and isinstance(item[1], str)
                and not item[1].startswith("{dx}")
            ),
            None,
        )
        definition_text = labels.clean_example_text(text)
        if not definition_text:
            return None

        sen = sen or {}
        sphrasev = sense.get("sphrasev") if isinstance(sense.get("sphrasev"), Mapping) else {}
        examples, usage_note = labels.extract_examples(dt, LANGUAGE)
        if not usage_note:
            usage_note = self._uns_text(dt)

        return DefinitionData(
            definition=definition_text,
            source=source,
            language=LANGUAGE,
            subject_status_labels=labels.join_labels(
                [_joined(sen.get("sls")), _joined(sphrasev.get("phsls")) or _joined(sense.get("sls"))]
            ),
            general_labels=labels.join_labels(
                [_joined(sen.get("lbs")), _joined(raw.get("lbs")), _joined(sense.get("lbs"))]
            ),
            grammatical_note=labels.join_labels(
                [
                    raw.get("gram") if isinstance(raw.get("gram"), str) else None,
                    sen.get("bnote"),
                    sen.get("sgram"),
                    sense.get("sgram"),
                    sense.get("bnote"),
                ]
            ),
            usage_note=usage_note,
            is_in_short_def=(
                short_definitions is not None
                and _short_definition_key(definition_text) in short_definitions
            ),
            examples=examples,
        )

    @staticmethod
    def _uns_text(dt: list[Any]) -> str | None:
        for item in dt:
            if isinstance(item, list) and len(item) >= 2 and item[0] == "uns":
                for group in item[1] if isinstance(item[1], list) else []:
                    for entry in group if isinstance(group, list) else []:
                        if isinstance(entry, list) and len(entry) >= 2 and entry[0] == "text":
                            return labels.clean_example_text(entry[1]) or None
        return None

    @staticmethod
    def _short_definitions(raw: Mapping[str, Any], meta: Mapping[str, Any]) -> set[str]:
        app_shortdef = meta.get("app-shortdef")
        if isinstance(app_shortdef, Mapping) and isinstance(app_shortdef.get("def"), list):
            return {_short_definition_key(d) for d in app_shortdef["def"] if isinstance(d, str)}
        # Plain shortdefs use ":" where the full text has {bc} separators
        return {
            _short_definition_key(" ".join(part.strip() for part in d.split(":")))
            for d in raw.get("shortdef") or []
            if isinstance(d, str)
        }

    def _main_definitions(
        self, raw: Mapping[str, Any], meta: Mapping[str, Any], source: SourceType
    ) -> list[DefinitionData]:
        short_definitions = self._short_definitions(raw, meta)
        definitions: list[DefinitionData] = []
        seen: set[str] = set()
        for sense, sen in _iter_senses(raw.get("def")):
            definition = self._definition(sense, sen, raw, source, short_definitions)
            if definition is None or definition.definition in seen:
                continue
            seen.add(definition.definition)
            definitions.append(definition)
        return definitions

    # Sub-words

    def _variants(self, raw: Mapping[str, Any], collector: SubWordCollector) -> None:
        main = collector.main
        for item in raw.get("vrs") or []:
            if not isinstance(item, Mapping):
                continue
            variant = _clean_headword(item.get("va"))
            if not variant or variant == main.word:
                continue
            label = item.get("vl") or ""
            collector.add(
                variant,
                main.part_of_speech,
                relationships=[
                    Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
                    Relationship(
                        MAIN_WORD_DETAILS, SUB_WORD_DETAILS, RelationshipType.ALTERNATIVE_SPELLING
                    ),
                ],
                definitions=[
                    DefinitionData(
                        f'Variant form of "{main.word} + {label}"', main.source, LANGUAGE
                    )
                ],
                source_data="variant",
                etymology=main.word,
            )

    def _cross_references(
        self, raw: Mapping[str, Any], main: WordData, collector: SubWordCollector
    ) -> list[DefinitionData]:
        """Handle ``cxs``: the headword is a form of another (base) word."""
        definitions: list[DefinitionData] = []
        for cx in raw.get("cxs") or []:
            if not isinstance(cx, Mapping):
                continue
            targets = cx.get("cxtis") or []
            if not targets or not isinstance(targets[0], Mapping) or not targets[0].get("cxt"):
                continue
            base = _HOMOGRAPH_SUFFIX_RE.sub("", str(targets[0]["cxt"])).strip()
            label = str(cx.get("cxl") or "").lower()
            rule = next((r for r in CROSS_REFERENCE_RULES if r[0] in label), None)
            if rule is None or not base:
                continue
            _, relationship_type, template = rule
            definitions.append(
                DefinitionData(template.replace("{base}", base), main.source, LANGUAGE)
            )
            main.etymology = base
            collector.add(
                base,
                main.part_of_speech,
                relationships=[
                    Relationship(SUB_WORD_DETAILS, MAIN_WORD_DETAILS, relationship_type),
                    Relationship(SUB_WORD, MAIN_WORD, RelationshipType.RELATED),
                ],
                source_data="cross_reference",
            )
        return definitions

    def _inflections(self, raw: Mapping[str, Any], main: WordData, collector: SubWordCollector) -> None:
        fl = raw.get("fl")
        if fl not in ("verb", "noun"):
            return
        for inflection in raw.get("ins") or []:
            if not isinstance(inflection, Mapping):
                continue
            form = _clean_headword(inflection.get("if"))
            if not form or form == main.word:
                continue
            il = inflection.get("il")
            if fl == "verb":
                relationship_type, text = self._verb_inflection(form, il, main.word)
            else:
                relationship_type = RelationshipType.PLURAL_EN
                text = f"Plural form of {{it}}{main.word}{{/it}}"

            relationships = [Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED)]
            if relationship_type is not None:
                relationships.insert(
                    0, Relationship(MAIN_WORD_DETAILS, SUB_WORD_DETAILS, relationship_type)
                )
            prs = inflection.get("prs") if isinstance(inflection.get("prs"), list) else []
            collector.add(
                form,
                main.part_of_speech,
                relationships=relationships,
                definitions=[DefinitionData(text, main.source, LANGUAGE)] if text else [],
                source_data="inflection",
                phonetic=labels.pronunciation_phonetic(prs),
                etymology=main.word,
                audio_files=_audio_files(prs),
            )

    @staticmethod
    def _verb_inflection(
        form: str, il: Any, base: str
    ) -> tuple[RelationshipType | None, str | None]:
        if form.endswith("s"):
            return (
                RelationshipType.THIRD_PERSON_EN,
                f"Third person singular form of the verb {{it}}{base}{{/it}}",
            )
        if form.endswith("ing"):
            return (
                RelationshipType.PRESENT_PARTICIPLE_EN,
                f"Present participle form of the verb {{it}}{base}{{/it}}",
            )
        if form.endswith("ed"):
            return (
                RelationshipType.PAST_TENSE_EN,
                f"Past tense and past participle form of the verb {{it}}{base}{{/it}}",
            )
        if il in ("past", "past tense"):
            return RelationshipType.PAST_TENSE_EN, f"Past tense form of the verb {{it}}{base}{{/it}}"
        if il == "past participle":
            return (
                RelationshipType.PAST_PARTICIPLE_EN,
                f"Past participle form of the verb {{it}}{base}{{/it}}",
            )
        return None, None

    def _run_ons(self, raw: Mapping[str, Any], collector: SubWordCollector) -> None:
        """Handle ``dros``: phrasal verbs and other defined run-on phrases."""
        for dro in raw.get("dros") or []:
            if not isinstance(dro, Mapping) or not isinstance(dro.get("drp"), str):
                continue
            phrase = dro["drp"].rstrip("*").strip()
            if not phrase:
                continue
            is_phrasal_verb = dro.get("gram") == "phrasal verb"
            definitions: list[DefinitionData] = []
            variants: list[str] = []
            for sense, sen in _iter_senses(dro.get("def")):
                definition = self._definition(sense, sen, raw, collector.main.source)
                if definition is None:
                    continue
                definitions.append(definition)
                if is_phrasal_verb:
                    for variant in _phrasal_verb_variants(sense, sen):
                        if variant not in variants:
                            variants.append(variant)
                        # Variants share the sense they were listed under
                        collector.add(
                            variant,
                            PartOfSpeech.PHRASAL_VERB,
                            definitions=[definition],
                        )

            if is_phrasal_verb:
                collector.add_phrase(
                    phrase,
                    definitions,
                    part_of_speech=PartOfSpeech.PHRASAL_VERB,
                    relationship_type=RelationshipType.PHRASAL_VERB,
                    variants=variants,
                    variant_type=RelationshipType.VARIANT_FORM_PHRASAL_VERB_EN,
                )
            else:
                collector.add_phrase(phrase, definitions)

    def _undefined_run_ons(
        self, raw: Mapping[str, Any], main: WordData, collector: SubWordCollector
    ) -> None:
        """Handle ``uros``: derived words listed without definitions."""
        for uro in raw.get("uros") or []:
            if not isinstance(uro, Mapping):
                continue
            run_on = _clean_headword(uro.get("ure"))
            if not run_on or run_on == main.word:
                continue
            part_of_speech = map_part_of_speech(uro.get("fl"))
            gram = uro.get("gram") if isinstance(uro.get("gram"), str) else None
            prs = uro.get("prs") if isinstance(uro.get("prs"), list) else []
            examples = [
                ExampleData(labels.clean_example_text(vis.get("t")), LANGUAGE, gram)
                for item in uro.get("utxt") or []
                if isinstance(item, list) and len(item) >= 2 and item[0] == "vis"
                for vis in item[1]
                if isinstance(vis, Mapping) and labels.clean_example_text(vis.get("t"))
            ]
            collector.add(
                run_on,
                part_of_speech,
                relationships=[
                    Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
                    Relationship(MAIN_WORD, SUB_WORD, RelationshipType.STEM),
                ],
                definitions=[
                    DefinitionData(
                        f"Form of {{it}}{main.word}{{/it}}",
                        main.source,
                        LANGUAGE,
                        grammatical_note=gram,
                        examples=examples,
                    )
                ],
                source_data="run_on",
                phonetic=labels.pronunciation_phonetic(prs),
                etymology=main.word,
                audio_files=_audio_files(prs),
            )

            for inflection in uro.get("ins") or []:
                if not isinstance(inflection, Mapping):
                    continue
                form = _clean_headword(inflection.get("if"))
                if not form or form == main.word:
                    continue
                is_plural = inflection.get("il") == "plural"
                relationship_type = RelationshipType.PLURAL_EN if is_plural else RelationshipType.RELATED
                category = inflection.get("ifc")
                collector.add(
                    form,
                    part_of_speech,
                    relationships=[
                        Relationship(LiteralWord(run_on), SUB_WORD_DETAILS, relationship_type),
                        Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
                    ],
                    definitions=[
                        DefinitionData(
                            f"{'Plural' if is_plural else 'Inflected'} form of {{it}}{run_on}{{/it}}",
                            main.source,
                            LANGUAGE,
                            grammatical_note=f"Inflection category: {category}" if category else None,
                        )
                    ],
                    source_data="run_on_inflection",
                    etymology=main.word if is_plural else run_on,
                )
