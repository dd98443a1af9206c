"""Report values in a Danish entry that the adapter does not recognise.

Unknown values never block ingestion. They are logged so the lookup tables
can be widened over time.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

logger = logging.getLogger(__name__)

KNOWN_PARTS_OF_SPEECH = frozenset(
    {
        "substantiv",
        "verbum",
        "adjektiv",
        "adverbium",
        "pronomen",
        "præposition",
        "konjunktion",
        "interjektion",
        "artikel",
        "talord",
        "talord (mængdetal)",
        "udråbsord",
        "forkortelse",
        "undefined",
    }
)

KNOWN_GENDERS = frozenset({"fælleskøn", "intetkøn"})

KNOWN_STEM_PARTS_OF_SPEECH = frozenset(
    {"vb.", "adj.", "adv.", "sb.", "præp.", "konj.", "pron.", "num.", "interj."}
)

KNOWN_AUDIO_TAGS = frozenset(
    {
        "grundform",
        "præsens",
        "præteritum",
        "præteritum participium",
        "præteritum og præteritum participium",
        "i sammensætning",
        "pluralis",
        "præteritum, betød",
        "syntes",
        "betydning 1",
        "betydning 2",
        "betydning 3",
        "betydning 1 og 6",
        "betydning 2 og 6",
        "betydning 3 og 6",
        "betydning 1, 2 og 6",
        "betydning 1, 2, 3 og 6",
        "",
    }
)

KNOWN_LABELS = frozenset(
    {
        "SPROGBRUG",
        "overført",
        "grammatik",
        "talemåde",
        "Forkortelse",
        "slang",
        "MEDICIN",
        "JURA",
        "TEKNIK",
        "KEMI",
        "MATEMATIK",
        "MUSIK",
        "SPORT",
        "BOTANIK",
        "ZOOLOGI",
        "ØKONOMI",
        "POLITIK",
        "RELIGION",
        "MILITÆR",
        "LITTERATUR",
        "ASTRONOMI",
        "GASTRONOMI",
        "SØFART",
        "Eksempler",
        "Se også",
        "Synonym",
        "Synonymer",
        "Antonym",
        "Antonymer",
        "som adverbium",
        "som adjektiv",
        "som substantiv",
        "som verbum",
        "som præposition",
        "som konjunktion",
        "som interjektion",
        "som talord",
        "som udråbsord",
        "som forkortelse",
    }
)

KNOWN_ROOT_FIELDS = frozenset(
    {
        "metadata",
        "word",
        "definition",
        "fixed_expressions",
        "stems",
        "compositions",
        "synonyms",
        "synonyms_translation_en",
        "antonyms",
        "antonyms_translation_en",
        "variants",
        "related_words",
        "error",
    }
)


@dataclass
class ValidationReport:
    """Unrecognised values found in one entry, by category."""

    labels: set[str] = field(default_factory=set)
    part_of_speech: set[str] = field(default_factory=set)
    stem_part_of_speech: set[str] = field(default_factory=set)
    gender: set[str] = field(default_factory=set)
    audio_tags: set[str] = field(default_factory=set)
    root_fields: set[str] = field(default_factory=set)

    @property
    def is_clean(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def categories(self) -> dict[str, list[str]]:
        """Non-empty categories with their values sorted."""
        return {
            f.name: sorted(getattr(self, f.name))
            for f in fields(self)
            if getattr(self, f.name)
        }


def _check_word_block(word: Any, report: ValidationReport) -> None:
    if not isinstance(word, Mapping):
        return
    pos_tokens = word.get("partOfSpeech")
    if isinstance(pos_tokens, list):
        for index, token in enumerate(pos_tokens):
            if not isinstance(token, str):
                continue
            if index == 0 and token not in KNOWN_PARTS_OF_SPEECH:
                report.part_of_speech.add(token)
            elif index > 0 and token not in KNOWN_GENDERS:
                report.gender.add(token)
    for audio in word.get("audio") or []:
        if isinstance(audio, Mapping) and isinstance(audio.get("word"), str):
            if audio["word"] not in KNOWN_AUDIO_TAGS:
                report.audio_tags.add(audio["word"])


def _check_labels(items: Any, report: ValidationReport) -> None:
    for item in items if isinstance(items, list) else []:
        if isinstance(item, Mapping) and isinstance(item.get("labels"), Mapping):
            report.labels.update(k for k in item["labels"] if k not in KNOWN_LABELS)


def _check_stems(stems: Any, report: ValidationReport) -> None:
    for stem in stems if isinstance(stems, list) else []:
        if isinstance(stem, Mapping) and isinstance(stem.get("partOfSpeech"), str):
            if stem["partOfSpeech"] not in KNOWN_STEM_PARTS_OF_SPEECH:
                report.stem_part_of_speech.add(stem["partOfSpeech"])


def validate_danish_entry(data: Any, context: str = "") -> ValidationReport:
    """Collect unknown values from a raw Danish entry and log one warning per category.

    Args:
        data: Raw entry as scraped
        context: Optional text (usually the headword) included in log messages

    Returns:
        ValidationReport with everything that was not recognised
    """
    report = ValidationReport()
    if not isinstance(data, Mapping):
        return report

    word_block = data.get("word")
    nested = isinstance(word_block, Mapping)
    if nested:
        report.root_fields.update(k for k in data if k not in KNOWN_ROOT_FIELDS)
    _check_word_block(word_block if nested else data, report)
    _check_labels(data.get("definition"), report)
    _check_labels(data.get("fixed_expressions"), report)
    _check_stems(data.get("stems"), report)

    for variant in data.get("variants") or []:
        if not isinstance(variant, Mapping):
            continue
        _check_word_block(variant.get("word"), report)
        _check_labels(variant.get("definition"), report)
        _check_labels(variant.get("fixed_expressions"), report)
        _check_stems(variant.get("stems"), report)

    suffix = f" for {context}" if context else ""
    for category, values in report.categories().items():
        logger.warning(f"Unknown {category} in Danish dictionary{suffix}: {', '.join(values)}")
    return report
