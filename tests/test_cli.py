"""Tests for CLI commands."""

import json
from unittest.mock import patch

import pytest
import typer
from rich.tree import Tree
from sqlalchemy import func, select
from typer.testing import CliRunner

from lexigraph.cli.commands.ingest import _entry_label, _ingest, ingest, load_entries
from lexigraph.cli.commands.show import _load, render_projection
from lexigraph.cli.commands.validate import validate
from lexigraph.cli.main import app
from lexigraph.cli.utils.async_runner import INTERRUPTED_EXIT_CODE, run_async
from lexigraph.cli.utils.progress import FailureColumn, create_progress
from lexigraph.models import Word

runner = CliRunner()


class TestLoadEntries:
    """Tests for reading entry files."""

    def test_single_entry(self, tmp_path, hus_entry):
        """Should wrap a single object in a list."""
        path = tmp_path / "hus.json"
        path.write_text(json.dumps(hus_entry), encoding="utf-8")
        assert load_entries(path) == [hus_entry]

    def test_list_of_entries(self, tmp_path, hus_entry, danish_entry):
        """Should return a list unchanged."""
        path = tmp_path / "entries.json"
        path.write_text(json.dumps([hus_entry, danish_entry]), encoding="utf-8")
        assert len(load_entries(path)) == 2


class TestEntryLabel:
    """Tests for _entry_label."""

    def test_labels(self, hus_entry, merriam_entry):
        """Should find the headword in either source format."""
        assert _entry_label(hus_entry, 0) == "hus"
        assert _entry_label({"word": "bil"}, 0) == "bil"
        assert _entry_label(merriam_entry, 0) == "run"
        assert _entry_label(["not", "an", "entry"], 4) == "entry 5"


class TestIngestCommand:
    """Tests for the ingest command."""

    def test_missing_file(self, tmp_path):
        """Should exit with an error for a missing file."""
        with pytest.raises(typer.Exit) as exc_info:
            ingest(tmp_path / "missing.json", "danish", False)
        assert exc_info.value.exit_code == 1

    def test_unknown_source(self, tmp_path, hus_entry):
        """Should exit with an error for an unknown source."""
        path = tmp_path / "hus.json"
        path.write_text(json.dumps(hus_entry), encoding="utf-8")
        with pytest.raises(typer.Exit) as exc_info:
            ingest(path, "wiktionary", False)
        assert exc_info.value.exit_code == 1

    def test_invalid_json(self, tmp_path):
        """Should exit with an error for unreadable JSON."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(typer.Exit):
            ingest(path, "danish", False)

    @pytest.mark.asyncio
    async def test_ingest_counts_failures(
        self, session_factory, context_factory, hus_entry, danish_entry
    ):
        """Should ingest valid entries and count the ones that fail."""
        with (
            patch("lexigraph.cli.commands.ingest.async_session", session_factory),
            patch(
                "lexigraph.cli.commands.ingest.default_context",
                lambda skip_audio=False: context_factory(),
            ),
        ):
            failures = await _ingest([hus_entry, {"definition": []}, danish_entry], "danish", True)

        assert failures == 1
        async with session_factory() as session:
            words = await session.scalar(
                select(func.count()).select_from(Word).where(Word.word.in_(["hus", "bil"]))
            )
        assert words == 2

    @pytest.mark.asyncio
    async def test_ingest_merriam(self, session_factory, context_factory, merriam_entry):
        """Should use the adapter named by the source option."""
        with (
            patch("lexigraph.cli.commands.ingest.async_session", session_factory),
            patch(
                "lexigraph.cli.commands.ingest.default_context",
                lambda skip_audio=False: context_factory(),
            ),
        ):
            failures = await _ingest([merriam_entry], "merriam", False)

        assert failures == 0
        async with session_factory() as session:
            result = await session.execute(
                select(Word).where(Word.word == "run", Word.language_code == "en")
            )
            assert result.scalar_one().is_highlighted is True


class TestShowCommand:
    """Tests for the show command."""

    @pytest.mark.asyncio
    async def test_load_missing(self, session_factory):
        """Should return None for an unknown word."""
        with patch("lexigraph.cli.commands.show.async_session", session_factory):
            assert await _load("hus", "da") is None

    def test_render_projection(self):
        """Should render senses, definitions, audio and edges as a tree."""
        projection = {
            "word": "hus",
            "language": "da",
            "etymology": "norrønt hús",
            "details": [
                {
                    "part_of_speech": "noun",
                    "variant": "",
                    "gender": "neuter",
                    "phonetic": None,
                    "definitions": [
                        {"definition": "bygning til beboelse", "examples": [{"example": "et hus"}]}
                    ],
                    "audio": [{"url": "data/audio/hus.mp3", "is_primary": True}],
                    "relationships": [
                        {"type": "plural_da", "word": "huse", "part_of_speech": "noun"}
                    ],
                }
            ],
            "relationships": [{"type": "related", "word": "huse"}],
        }
        tree = render_projection(projection)

        assert isinstance(tree, Tree)
        # etymology, one sense, related words
        assert len(tree.children) == 3
        sense = tree.children[1]
        assert len(sense.children) == 3


class TestValidateCommand:
    """Tests for the validate command."""

    def test_missing_file(self, tmp_path):
        """Should exit with an error for a missing file."""
        with pytest.raises(typer.Exit) as exc_info:
            validate(tmp_path / "missing.json")
        assert exc_info.value.exit_code == 1

    def test_reports_unknown_values(self, tmp_path, hus_entry):
        """Should print a table of unknown values."""
        hus_entry["word"]["partOfSpeech"] = ["substantiv", "tvekøn"]
        path = tmp_path / "hus.json"
        path.write_text(json.dumps([hus_entry]), encoding="utf-8")

        with patch("lexigraph.cli.commands.validate.console") as mock_console:
            validate(path)

        table = mock_console.print.call_args.args[0]
        assert table.title == "Unknown values"
        assert table.row_count == 1

    def test_clean_file(self, tmp_path, hus_entry):
        """Should report success when everything is known."""
        path = tmp_path / "hus.json"
        path.write_text(json.dumps(hus_entry), encoding="utf-8")

        with patch("lexigraph.cli.commands.validate.console") as mock_console:
            validate(path)

        assert "use known values" in mock_console.print.call_args.args[0]


class TestApp:
    """Tests for the typer application."""

    def test_help(self):
        """Should list the commands without running startup."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "ingest" in result.output
        assert "validate" in result.output


class TestCliUtils:
    """Tests for the CLI progress bar and async runner."""

    def test_failure_column(self):
        """Should show the failure count once an entry has failed."""
        progress = create_progress()
        progress.add_task("hus", total=3, failed=0)
        progress.add_task("bil", total=3, failed=2)
        column = FailureColumn()

        assert column.render(progress.tasks[0]).plain == ""
        assert column.render(progress.tasks[1]).plain == "2 failed"

    def test_run_async_result(self):
        """Should return the coroutine's result."""

        async def answer():
            return 42

        assert run_async(answer()) == 42

    def test_run_async_interrupted(self):
        """Should exit with status 130 when interrupted."""

        async def interrupted():
            raise KeyboardInterrupt

        with pytest.raises(typer.Exit) as exc_info:
            run_async(interrupted())
        assert exc_info.value.exit_code == INTERRUPTED_EXIT_CODE
