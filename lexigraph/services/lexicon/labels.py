"""Pure extractors that pull flat signals out of raw dictionary entries.

Nothing here performs I/O. Danish helpers read the ``labels`` mapping attached
to definitions and fixed expressions; Merriam-Webster helpers strip the
``{tag}`` markup used throughout that API and walk its ``dt`` arrays.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from lexigraph.services.lexicon.types import ExampleData, RelationshipType

# Danish label keys
SUBJECT_LABELS = (
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
    "slang",
)

GENERAL_LABELS = {
    "talemåde": "talemåde (idiom/proverb)",
    "Forkortelse": "forkortelse (abbreviation)",
}

RELATION_LABELS = {
    "Se også": RelationshipType.RELATED,
    "Synonym": RelationshipType.SYNONYM,
    "Synonymer": RelationshipType.SYNONYM,
    "Antonym": RelationshipType.ANTONYM,
    "Antonymer": RelationshipType.ANTONYM,
}

EXAMPLES_LABEL = "Eksempler"
GRAMMAR_LABEL = "grammatik"
USAGE_LABEL = "SPROGBRUG"
FIGURATIVE_LABEL = "overført"

# Words that only point elsewhere ("se" = "see") and carry no meaning of their own
CROSS_REFERENCE_STUBS = frozenset({"se", "se også", "jf", "jf."})

_MARKUP_RE = re.compile(r"\{[^}]+\}")
_WHITESPACE_RE = re.compile(r"\s+")


def label_values(labels: Mapping[str, Any] | None, key: str) -> list[str]:
    """Return a label's values as a list of non-empty strings.

    Label values arrive as a string, a list of strings, or ``True`` for
    flag-only labels. Strings may hold several comma-separated entries.
    """
    if not labels or key not in labels:
        return []
    value = labels[key]
    if isinstance(value, bool) or value is None:
        return []
    items = value if isinstance(value, list) else [value]
    result: list[str] = []
    for item in items:
        if not isinstance(item, str):
            continue
        for part in item.split(","):
            part = part.strip()
            if part:
                result.append(part)
    return result


def extract_subject_labels(labels: Mapping[str, Any] | None) -> str | None:
    if not labels:
        return None
    found = [key for key in labels if key in SUBJECT_LABELS and labels[key]]
    return ", ".join(found) if found else None


def extract_general_labels(labels: Mapping[str, Any] | None) -> str | None:
    if not labels:
        return None
    found = [text for key, text in GENERAL_LABELS.items() if labels.get(key)]
    return ", ".join(found) if found else None


def extract_grammatical_note(labels: Mapping[str, Any] | None) -> str | None:
    if not labels or not labels.get(GRAMMAR_LABEL):
        return None
    value = labels[GRAMMAR_LABEL]
    return value if isinstance(value, str) else GRAMMAR_LABEL


def extract_usage_note(labels: Mapping[str, Any] | None) -> str | None:
    """Combine register and figurative-usage labels into one note."""
    if not labels:
        return None
    notes: list[str] = []
    if labels.get(USAGE_LABEL):
        value = labels[USAGE_LABEL]
        notes.append(value if isinstance(value, str) else USAGE_LABEL)
    if labels.get(FIGURATIVE_LABEL):
        notes.append("overført (figurative/metaphorical usage)")
    return "; ".join(notes) if notes else None


def extract_label_relations(
    labels: Mapping[str, Any] | None,
) -> list[tuple[str, RelationshipType]]:
    """Return (word, relationship type) pairs referenced from definition labels."""
    relations: list[tuple[str, RelationshipType]] = []
    for key, relationship_type in RELATION_LABELS.items():
        for word in label_values(labels, key):
            relations.append((word, relationship_type))
    return relations


def extract_label_examples(labels: Mapping[str, Any] | None) -> list[str]:
    if not labels or not labels.get(EXAMPLES_LABEL):
        return []
    value = labels[EXAMPLES_LABEL]
    items = value if isinstance(value, list) else [value]
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]


def format_example_source(source: Mapping[str, Any] | None) -> str | None:
    """Render a ``{short, full}`` citation in the stored markup format."""
    if not source:
        return None
    short = source.get("short")
    full = source.get("full")
    if not short and not full:
        return None
    return f"{{bc}}short {{it}}{short or ''}{{/it}} {{bc}}full {{it}}{full or ''}{{/it}}"


def is_cross_reference_stub(text: str | None) -> bool:
    """True for definitions that are only a pointer such as a lone "se"."""
    if not text:
        return True
    normalized = text.strip().strip(".:;,").strip().lower()
    return not normalized or normalized in CROSS_REFERENCE_STUBS


# Merriam-Webster markup


def strip_markup(text: Any) -> str:
    """Remove ``{tag}`` markup and collapse whitespace."""
    if not isinstance(text, str):
        return ""
    return _WHITESPACE_RE.sub(" ", _MARKUP_RE.sub("", text)).strip()


def clean_example_text(text: Any) -> str:
    """Trim an example, dropping pure cross-references. Inline markup is kept."""
    if not isinstance(text, str):
        return ""
    if text.startswith(("{dx}", "{bc}{sx|", "{sx|")):
        return ""
    return text.strip()


def join_labels(values: Iterable[str | None]) -> str | None:
    """Join the non-empty values with `` | ``."""
    parts = [value for value in values if value and value.strip()]
    return " | ".join(parts) if parts else None


def process_etymology(et: Iterable[Any] | None) -> str | None:
    """Flatten ``[[type, text], ...]`` etymology tuples to plain text."""
    if not et:
        return None
    parts = [item[1] for item in et if isinstance(item, (list, tuple)) and len(item) >= 2]
    text = strip_markup(" ".join(str(part) for part in parts))
    return text or None


def merriam_audio_url(audio: str | None) -> str | None:
    if not audio:
        return None
    return f"https://media.merriam-webster.com/audio/prons/en/us/mp3/{audio[0]}/{audio}.mp3"


def pronunciation_audio_urls(prs: Iterable[Mapping[str, Any]] | None) -> list[str]:
    urls: list[str] = []
    for pronunciation in prs or []:
        url = merriam_audio_url((pronunciation.get("sound") or {}).get("audio"))
        if url and url not in urls:
            urls.append(url)
    return urls


def pronunciation_phonetic(prs: list[Mapping[str, Any]] | None) -> str | None:
    if not prs:
        return None
    return prs[0].get("ipa") or prs[0].get("mw") or None


def _nested_usage_examples(
    content: list[Any],
    language: str,
    parent_note: str | None,
    examples: list[ExampleData],
    usages: list[str],
) -> None:
    for group in content:
        if not isinstance(group, list):
            continue
        usage_text = ""
        for item in group:
            if not isinstance(item, list) or len(item) < 2:
                continue
            kind, value = item[0], item[1]
            if kind == "text" and isinstance(value, str):
                usage_text = clean_example_text(value)
            elif kind == "vis" and isinstance(value, list):
                note = usage_text + (f" ({parent_note})" if parent_note else "")
                for vis in value:
                    text = clean_example_text(vis.get("t"))
                    if text:
                        examples.append(ExampleData(text, language, note or None))
            elif isinstance(value, list):
                note = usage_text + (f" ({parent_note})" if parent_note else "")
                _nested_usage_examples(value, language, note or None, examples, usages)
        if usage_text:
            usages.append(usage_text)


def extract_examples(dt: list[Any] | None, language: str) -> tuple[list[ExampleData], str | None]:
    """Collect examples and a numbered usage note from a Merriam-Webster ``dt`` array.

    ``vis`` items become examples annotated with the current ``wsgram``.
    ``uns`` (usage notes) and ``snote`` (supplemental notes) contribute both
    examples and usage text; usage texts are rendered as ``"1: ...; 2: ..."``.
    When the same example appears twice the copy with a grammatical note wins.
    """
    if not dt:
        return [], None

    examples: list[ExampleData] = []
    usages: list[str] = []
    current_wsgram: str | None = None

    for item in dt:
        if not isinstance(item, list) or len(item) < 2:
            continue
        kind, content = item[0], item[1]
        if kind == "wsgram" and isinstance(content, str):
            current_wsgram = content
        elif kind == "vis" and isinstance(content, list):
            for vis in content:
                text = clean_example_text(vis.get("t"))
                if text:
                    examples.append(ExampleData(text, language, current_wsgram))
        elif kind == "uns" and isinstance(content, list):
            _nested_usage_examples(content, language, current_wsgram, examples, usages)
        elif kind == "snote" and isinstance(content, list):
            snote_text: str | None = None
            for sub in content:
                if not isinstance(sub, list) or len(sub) < 2:
                    continue
                if sub[0] == "t" and isinstance(sub[1], str):
                    snote_text = clean_example_text(sub[1])
                    if snote_text:
                        usages.append(snote_text)
                elif sub[0] == "vis" and isinstance(sub[1], list):
                    for vis in sub[1]:
                        text = clean_example_text(vis.get("t"))
                        if text:
                            note = join_labels([current_wsgram, snote_text])
                            examples.append(ExampleData(text, language, note))

    unique: dict[str, ExampleData] = {}
    for example in examples:
        existing = unique.get(example.example)
        if existing is None or (not existing.grammatical_note and example.grammatical_note):
            unique[example.example] = example

    usage_note = "; ".join(f"{i}: {text}" for i, text in enumerate(usages, start=1)) or None
    return list(unique.values()), usage_note
