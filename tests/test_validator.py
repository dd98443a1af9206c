"""Tests for the Danish entry validator."""

from lexigraph.services.sources.validator import ValidationReport, validate_danish_entry


class TestValidateDanishEntry:
    """Tests for validate_danish_entry."""

    def test_clean_entry(self, danish_entry):
        """Should report nothing for an entry using known values."""
        report = validate_danish_entry(danish_entry)
        assert report.is_clean
        assert report.categories() == {}

    def test_unknown_values(self):
        """Should collect unknown values by category."""
        report = validate_danish_entry(
            {
                "word": {
                    "word": "hus",
                    "partOfSpeech": ["navneord", "hankøn"],
                    "audio": [{"word": "flertal", "audio_url": "x.mp3"}],
                },
                "definition": [{"definition": "bygning", "labels": {"ARKITEKTUR": True}}],
                "stems": [{"stem": "bo", "partOfSpeech": "verb"}],
                "extra": 1,
            }
        )
        assert report.categories() == {
            "labels": ["ARKITEKTUR"],
            "part_of_speech": ["navneord"],
            "stem_part_of_speech": ["verb"],
            "gender": ["hankøn"],
            "audio_tags": ["flertal"],
            "root_fields": ["extra"],
        }
        assert not report.is_clean

    def test_variant_entries_checked(self):
        """Should check variant entries too."""
        report = validate_danish_entry(
            {
                "word": {"word": "hus", "partOfSpeech": ["substantiv"]},
                "variants": [{"word": {"word": "huus", "partOfSpeech": ["ukendt"]}}],
            }
        )
        assert report.part_of_speech == {"ukendt"}

    def test_logs_warning_with_context(self, caplog):
        """Should log one warning per category with the context."""
        validate_danish_entry(
            {"word": {"word": "hus", "partOfSpeech": ["navneord"]}}, context="hus"
        )
        assert "Unknown part_of_speech in Danish dictionary for hus: navneord" in caplog.text

    def test_non_mapping(self):
        """Should return an empty report for non-objects."""
        assert validate_danish_entry(["hus"]) == ValidationReport()
