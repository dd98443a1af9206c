"""Tests for the Merriam-Webster adapter."""

import pytest

from lexigraph.errors import SourceFormatError
from lexigraph.services.lexicon.types import (
    MAIN_WORD,
    MAIN_WORD_DETAILS,
    SUB_WORD,
    SUB_WORD_DETAILS,
    LiteralWord,
    PartOfSpeech,
    Relationship,
    RelationshipType,
    SourceType,
)
from lexigraph.services.sources.merriam import MerriamAdapter, map_source_type


def _by_word(processed):
    return {(s.word, s.part_of_speech): s for s in processed.sub_words}


class TestMerriamAdapter:
    """Tests for MerriamAdapter.process."""

    def test_name(self):
        """Should report the source name."""
        assert MerriamAdapter().name == "merriam_webster"

    def test_source_type(self):
        """Should map the meta.src value."""
        assert map_source_type("learners") == SourceType.MERRIAM_LEARNERS
        assert map_source_type("int_dict") == SourceType.MERRIAM_INTERMEDIATE
        assert map_source_type("other") == SourceType.USER

    def test_main_word(self, merriam_entry):
        """Should map headword, variant, highlight, audio and etymology."""
        processed = MerriamAdapter().process(merriam_entry)
        word = processed.word

        assert word.word == "run"
        assert word.language == "en"
        assert word.source == SourceType.MERRIAM_LEARNERS
        assert word.part_of_speech == PartOfSpeech.VERB
        assert word.variant == "1"
        assert word.is_highlighted is True
        assert word.phonetic == "ˈrʌn"
        assert word.etymology == "Middle English rinnen"
        assert word.source_entity_id == "merriam_learners-run:1-b7b7"
        assert [a.url for a in word.audio_files] == [
            "https://media.merriam-webster.com/audio/prons/en/us/mp3/r/run00001.mp3"
        ]

    def test_definitions(self, merriam_entry):
        """Should read senses with labels, examples and the short-definition flag."""
        processed = MerriamAdapter().process(merriam_entry)

        assert len(processed.definitions) == 1
        definition = processed.definitions[0]
        assert definition.definition == "{bc} to go faster than a walk"
        assert definition.subject_status_labels == "always used"
        assert definition.is_in_short_def is True
        assert [e.example for e in definition.examples] == ["The children {it}ran{/it} home."]

    def test_verb_inflections(self, merriam_entry):
        """Should classify verb inflections by suffix and label."""
        processed = MerriamAdapter().process(merriam_entry)
        by_word = _by_word(processed)

        def form_type(text):
            return by_word[(text, PartOfSpeech.VERB)].relationships[0].type

        assert form_type("ran") == RelationshipType.PAST_TENSE_EN
        assert form_type("running") == RelationshipType.PRESENT_PARTICIPLE_EN
        assert form_type("runs") == RelationshipType.THIRD_PERSON_EN
        assert ("run", PartOfSpeech.VERB) not in by_word

    def test_noun_inflection_plural(self):
        """Should treat every noun inflection as a plural."""
        processed = MerriamAdapter().process(
            {"hwi": {"hw": "cat"}, "fl": "noun", "ins": [{"if": "cats", "il": "plural"}]}
        )
        cats = _by_word(processed)[("cats", PartOfSpeech.NOUN)]
        assert cats.relationships[0] == Relationship(
            MAIN_WORD_DETAILS, SUB_WORD_DETAILS, RelationshipType.PLURAL_EN
        )
        assert cats.definitions[0].definition == "Plural form of {it}cat{/it}"

    def test_synonyms_and_antonyms(self, merriam_entry):
        """Should add meta synonyms and antonyms in the headword's sense."""
        processed = MerriamAdapter().process(merriam_entry)
        by_word = _by_word(processed)
        assert by_word[("sprint", PartOfSpeech.VERB)].relationships[0].type == (
            RelationshipType.SYNONYM
        )
        assert by_word[("walk", PartOfSpeech.VERB)].relationships[0].type == (
            RelationshipType.ANTONYM
        )

    def test_phrasal_verb(self, merriam_entry):
        """Should add phrasal verbs with their variants."""
        processed = MerriamAdapter().process(merriam_entry)
        by_word = _by_word(processed)

        phrase = by_word[("run out", PartOfSpeech.PHRASAL_VERB)]
        assert phrase.relationships[0] == Relationship(
            MAIN_WORD_DETAILS, SUB_WORD_DETAILS, RelationshipType.PHRASAL_VERB
        )
        assert phrase.definitions[0].definition == "{bc} to use up something"

        variant = by_word[("run out of", PartOfSpeech.PHRASAL_VERB)]
        assert Relationship(
            LiteralWord("run out"),
            SUB_WORD_DETAILS,
            RelationshipType.VARIANT_FORM_PHRASAL_VERB_EN,
        ) in variant.relationships
        assert variant.definitions[0].definition == "{bc} to use up something"

    def test_undefined_run_on(self, merriam_entry):
        """Should add derived words as stems with a generated definition."""
        processed = MerriamAdapter().process(merriam_entry)
        runner = _by_word(processed)[("runner", PartOfSpeech.NOUN)]
        assert runner.relationships == [
            Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
            Relationship(MAIN_WORD, SUB_WORD, RelationshipType.STEM),
        ]
        assert runner.definitions[0].definition == "Form of {it}run{/it}"

    def test_stems_skip_headword(self, merriam_entry):
        """Should add meta stems other than the headword."""
        processed = MerriamAdapter().process(merriam_entry)
        assert processed.stems == ["ran", "running", "runs"]

    def test_cross_reference(self):
        """Should reverse the edge for an inflected headword pointing at its base."""
        processed = MerriamAdapter().process(
            {
                "meta": {"id": "ran", "src": "learners"},
                "hwi": {"hw": "ran", "prs": [{"sound": {"audio": "ran00001"}}]},
                "fl": "verb",
                "cxs": [{"cxl": "past tense of", "cxtis": [{"cxt": "run:1"}]}],
            }
        )
        assert processed.word.etymology == "run"
        assert [d.definition for d in processed.definitions] == ["Past tense of {it}run{/it}"]

        base = _by_word(processed)[("run", PartOfSpeech.VERB)]
        assert base.relationships == [
            Relationship(SUB_WORD_DETAILS, MAIN_WORD_DETAILS, RelationshipType.PAST_TENSE_EN),
            Relationship(SUB_WORD, MAIN_WORD, RelationshipType.RELATED),
        ]
        assert base.audio_files == []

    def test_variants(self):
        """Should add vrs spellings as alternative spellings."""
        processed = MerriamAdapter().process(
            {"hwi": {"hw": "color"}, "fl": "noun", "vrs": [{"va": "col*our", "vl": "British"}]}
        )
        colour = _by_word(processed)[("colour", PartOfSpeech.NOUN)]
        assert Relationship(
            MAIN_WORD_DETAILS, SUB_WORD_DETAILS, RelationshipType.ALTERNATIVE_SPELLING
        ) in colour.relationships
        assert colour.definitions[0].definition == 'Variant form of "color + British"'

    def test_missing_headword(self):
        """Should raise SourceFormatError without hwi.hw."""
        with pytest.raises(SourceFormatError):
            MerriamAdapter().process({"fl": "verb"})
