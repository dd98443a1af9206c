"""Tests for the sub-word collector."""

from lexigraph.services.lexicon.builder import SubWordCollector, expand_composition
from lexigraph.services.lexicon.forms import FormRelation
from lexigraph.services.lexicon.types import (
    MAIN_WORD,
    MAIN_WORD_DETAILS,
    SUB_WORD,
    SUB_WORD_DETAILS,
    AudioFile,
    DefinitionData,
    LiteralWord,
    PartOfSpeech,
    Relationship,
    RelationshipType,
    SourceType,
    WordData,
)


def _collector(word: str = "hus", pos: PartOfSpeech = PartOfSpeech.NOUN) -> SubWordCollector:
    return SubWordCollector(
        WordData(word=word, language="da", source=SourceType.DANISH_DICTIONARY, part_of_speech=pos)
    )


class TestExpandComposition:
    """Tests for expand_composition."""

    def test_single_interpolation(self):
        """Should produce the spelling without and with the linking letter."""
        assert expand_composition("barn(s)seng") == ["barnseng", "barnsseng"]

    def test_two_interpolations(self):
        """Should produce every combination."""
        assert expand_composition("a(b)c(d)e") == ["ace", "acde", "abce", "abcde"]

    def test_plain(self):
        """Should return plain compounds unchanged."""
        assert expand_composition(" husdyr ") == ["husdyr"]
        assert expand_composition("  ") == []

    def test_long_group_not_optional(self):
        """Should only treat one or two lowercase letters as optional."""
        assert expand_composition("hus(dyr)") == ["hus(dyr)"]


class TestSubWordCollector:
    """Tests for SubWordCollector."""

    def test_merge_by_text_and_pos(self):
        """Should merge a word reached twice into one record with both relationships."""
        collector = _collector()
        collector.add_semantic(["bolig"], RelationshipType.SYNONYM)
        collector.add_semantic(["bolig"], RelationshipType.RELATED)

        assert len(collector) == 1
        sub_word = collector.sub_words[0]
        assert [r.type for r in sub_word.relationships] == [
            RelationshipType.SYNONYM,
            RelationshipType.RELATED,
        ]
        assert sub_word.source_data == ["synonym", "related"]

    def test_distinct_pos_kept_apart(self):
        """Should keep the same text under different parts of speech separate."""
        collector = _collector()
        collector.add("løb", PartOfSpeech.NOUN)
        collector.add("løb", PartOfSpeech.VERB)
        assert len(collector) == 2

    def test_fill_blanks_only(self):
        """Should keep the first non-empty value of each field."""
        collector = _collector()
        collector.add("huse", PartOfSpeech.NOUN, phonetic="[ˈhuːsə]")
        collector.add("huse", PartOfSpeech.NOUN, phonetic="other", etymology="hus")
        sub_word = collector.sub_words[0]
        assert sub_word.phonetic == "[ˈhuːsə]"
        assert sub_word.etymology == "hus"

    def test_phonetic_from_audio(self):
        """Should take the phonetic from an audio file when none is given."""
        collector = _collector()
        collector.add(
            "huse",
            PartOfSpeech.NOUN,
            audio_files=[AudioFile(url="a.mp3", phonetic="[ˈhuːsə]")],
        )
        assert collector.sub_words[0].phonetic == "[ˈhuːsə]"

    def test_definitions_deduplicated(self):
        """Should not repeat a definition text on one sub-word."""
        collector = _collector()
        definition = DefinitionData("en bolig", SourceType.DANISH_DICTIONARY, "da")
        collector.add("villa", definitions=[definition])
        collector.add("villa", definitions=[definition])
        assert len(collector.sub_words[0].definitions) == 1

    def test_blank_words_ignored(self):
        """Should ignore empty and non-string words."""
        collector = _collector()
        assert collector.add("  ") is None
        assert collector.add(None) is None
        assert len(collector) == 0

    def test_add_forms(self):
        """Should attach a details edge and a word edge for each form."""
        collector = _collector()
        collector.add_forms(
            [FormRelation("huse", RelationshipType.PLURAL_DA)],
            PartOfSpeech.NOUN,
            describe=lambda r: DefinitionData("Plural", SourceType.DANISH_DICTIONARY, "da"),
        )
        sub_word = collector.sub_words[0]
        assert sub_word.relationships == [
            Relationship(MAIN_WORD_DETAILS, SUB_WORD_DETAILS, RelationshipType.PLURAL_DA),
            Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED),
        ]
        assert sub_word.etymology == "hus"
        assert sub_word.definitions[0].definition == "Plural"

    def test_add_stems(self):
        """Should record stems in order."""
        collector = _collector()
        collector.add_stems([("bo", PartOfSpeech.VERB), ("hjem", PartOfSpeech.NOUN)])
        processed = collector.build()
        assert processed.stems == ["bo", "hjem"]
        assert processed.sub_words[0].relationships[0].type == RelationshipType.STEM

    def test_semantic_skips_headword(self):
        """Should drop references to the headword, ignoring case."""
        collector = _collector()
        collector.add_semantic(["Hus", "bolig"], RelationshipType.SYNONYM)
        assert [s.word for s in collector.sub_words] == ["bolig"]

    def test_semantic_word_level(self):
        """Should build word-level edges when asked to."""
        collector = _collector()
        collector.add_semantic(
            ["tag"], RelationshipType.RELATED, PartOfSpeech.UNDEFINED, details_level=False
        )
        relationship = collector.sub_words[0].relationships[0]
        assert relationship == Relationship(MAIN_WORD, SUB_WORD, RelationshipType.RELATED)
        assert not relationship.is_details_level

    def test_compositions(self):
        """Should link each spelling to the headword and to its siblings."""
        collector = _collector("barn")
        collector.add_compositions(["barn(s)seng"])
        by_word = {s.word: s for s in collector.sub_words}
        assert set(by_word) == {"barnseng", "barnsseng"}
        assert by_word["barnseng"].part_of_speech == PartOfSpeech.UNDEFINED
        assert by_word["barnseng"].relationships == [
            Relationship(MAIN_WORD, SUB_WORD, RelationshipType.COMPOSITION),
            Relationship(
                LiteralWord("barnsseng"), SUB_WORD_DETAILS, RelationshipType.ALTERNATIVE_SPELLING
            ),
        ]

    def test_variants(self):
        """Should add variants in the headword's part of speech."""
        collector = _collector()
        collector.add_variants(["hus", "huus"])
        assert [s.word for s in collector.sub_words] == ["huus"]
        sub_word = collector.sub_words[0]
        assert sub_word.part_of_speech == PartOfSpeech.NOUN
        assert sub_word.relationships[0].type == RelationshipType.ALTERNATIVE_SPELLING

    def test_phrase_with_variants(self):
        """Should hang phrase variants off the phrase through a literal endpoint."""
        collector = _collector()
        collector.add_phrase("holde hus", variants=["holde huset"])
        by_word = {s.word: s for s in collector.sub_words}
        assert by_word["holde hus"].relationships[0] == Relationship(
            MAIN_WORD_DETAILS, SUB_WORD_DETAILS, RelationshipType.PHRASE
        )
        assert by_word["holde huset"].relationships[0] == Relationship(
            LiteralWord("holde hus"), SUB_WORD_DETAILS, RelationshipType.ALTERNATIVE_SPELLING
        )

    def test_build(self):
        """Should carry headword and definitions into ProcessedWordData."""
        collector = _collector()
        definition = DefinitionData("bygning", SourceType.DANISH_DICTIONARY, "da")
        processed = collector.build([definition])
        assert processed.headword == "hus"
        assert processed.definitions == [definition]
        assert processed.sub_words == []
