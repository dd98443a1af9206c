"""Tests for label and markup extractors."""

from lexigraph.services.lexicon import labels
from lexigraph.services.lexicon.types import RelationshipType


class TestDanishLabels:
    """Tests for Danish label extraction."""

    def test_label_values_shapes(self):
        """Should accept strings, comma lists, lists and flag-only values."""
        item = {"Synonym": "bolig, hjem", "Se også": ["tag", ""], "overført": True}
        assert labels.label_values(item, "Synonym") == ["bolig", "hjem"]
        assert labels.label_values(item, "Se også") == ["tag"]
        assert labels.label_values(item, "overført") == []
        assert labels.label_values(item, "missing") == []
        assert labels.label_values(None, "Synonym") == []

    def test_subject_labels(self):
        """Should join subject labels in label order."""
        assert labels.extract_subject_labels({"JURA": True, "MEDICIN": True}) == "JURA, MEDICIN"
        assert labels.extract_subject_labels({"Synonym": "x"}) is None

    def test_general_labels(self):
        """Should translate known general labels."""
        assert (
            labels.extract_general_labels({"talemåde": True})
            == "talemåde (idiom/proverb)"
        )

    def test_grammatical_note(self):
        """Should use the label text, or the label name for flags."""
        assert labels.extract_grammatical_note({"grammatik": "bruges i flertal"}) == (
            "bruges i flertal"
        )
        assert labels.extract_grammatical_note({"grammatik": True}) == "grammatik"
        assert labels.extract_grammatical_note({}) is None

    def test_usage_note(self):
        """Should combine register and figurative usage."""
        note = labels.extract_usage_note({"SPROGBRUG": "uformelt", "overført": True})
        assert note == "uformelt; overført (figurative/metaphorical usage)"

    def test_label_relations(self):
        """Should map relation labels to relationship types."""
        relations = labels.extract_label_relations(
            {"Synonym": "bolig", "Antonymer": ["ude"], "Se også": "tag"}
        )
        assert ("bolig", RelationshipType.SYNONYM) in relations
        assert ("ude", RelationshipType.ANTONYM) in relations
        assert ("tag", RelationshipType.RELATED) in relations

    def test_label_examples(self):
        """Should read examples from the Eksempler label."""
        assert labels.extract_label_examples({"Eksempler": ["et hus", " "]}) == ["et hus"]
        assert labels.extract_label_examples({"Eksempler": "et hus"}) == ["et hus"]

    def test_format_example_source(self):
        """Should render a citation in stored markup."""
        assert (
            labels.format_example_source({"short": "Pol", "full": "Politiken"})
            == "{bc}short {it}Pol{/it} {bc}full {it}Politiken{/it}"
        )
        assert labels.format_example_source({}) is None

    def test_cross_reference_stub(self):
        """Should flag pointer-only definitions."""
        assert labels.is_cross_reference_stub("se")
        assert labels.is_cross_reference_stub(" Jf. ")
        assert labels.is_cross_reference_stub("")
        assert not labels.is_cross_reference_stub("se på noget")


class TestMerriamMarkup:
    """Tests for Merriam-Webster markup helpers."""

    def test_strip_markup(self):
        """Should remove tags and collapse whitespace."""
        assert labels.strip_markup("{bc}to  go {it}fast{/it}") == "to go fast"
        assert labels.strip_markup(None) == ""

    def test_clean_example_drops_cross_references(self):
        """Should drop examples that are only cross-references."""
        assert labels.clean_example_text("{dx}see {dxt|run||}{/dx}") == ""
        assert labels.clean_example_text(" She {it}ran{/it}. ") == "She {it}ran{/it}."

    def test_process_etymology(self):
        """Should flatten etymology tuples."""
        assert labels.process_etymology([["text", "Old {it}word{/it}"]]) == "Old word"
        assert labels.process_etymology(None) is None

    def test_audio_url(self):
        """Should build the media URL from the audio file name."""
        assert labels.merriam_audio_url("run00001") == (
            "https://media.merriam-webster.com/audio/prons/en/us/mp3/r/run00001.mp3"
        )
        assert labels.pronunciation_audio_urls(
            [{"sound": {"audio": "a1"}}, {"sound": {"audio": "a1"}}, {}]
        ) == ["https://media.merriam-webster.com/audio/prons/en/us/mp3/a/a1.mp3"]

    def test_extract_examples(self):
        """Should annotate examples with wsgram and number usage notes."""
        dt = [
            ["text", "{bc}to move"],
            ["wsgram", "T"],
            ["vis", [{"t": "run a race"}]],
            ["snote", [["t", "Often used with up"], ["vis", [{"t": "run up a bill"}]]]],
        ]
        examples, usage = labels.extract_examples(dt, "en")
        assert [(e.example, e.grammatical_note) for e in examples] == [
            ("run a race", "T"),
            ("run up a bill", "T | Often used with up"),
        ]
        assert usage == "1: Often used with up"

    def test_extract_examples_prefers_annotated_duplicate(self):
        """Should keep the copy of a repeated example that has a note."""
        dt = [
            ["vis", [{"t": "go"}]],
            ["wsgram", "I"],
            ["vis", [{"t": "go"}]],
        ]
        examples, _ = labels.extract_examples(dt, "en")
        assert len(examples) == 1
        assert examples[0].grammatical_note == "I"
