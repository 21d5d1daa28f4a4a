"""Tests for the command-line interface."""

import json
from typing import NoReturn, get_type_hints

import pytest
import typer
from typer.testing import CliRunner

from chordshift.cli import _fail, app

runner = CliRunner()


class TestTransposeCommand:
    """Tests for `chordshift transpose`."""

    def test_semitones(self):
        result = runner.invoke(app, ["transpose", "[C]Amazing [F]grace", "-s", "2"])
        assert result.exit_code == 0
        assert "[D]Amazing [G]grace" in result.output

    def test_negative_semitones_with_flats(self):
        result = runner.invoke(app, ["transpose", "[C]x", "-s", "-2", "--flats", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["content"] == "[Bb]x"
        assert data["suggested_capo"] == 0

    def test_to_key(self):
        result = runner.invoke(app, ["transpose", "[C]x [G]y", "--from", "C", "--to", "Eb", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["content"] == "[Eb]x [Bb]y"
        assert data["semitones"] == 3

    def test_to_key_infers_current_key(self):
        result = runner.invoke(app, ["transpose", "[G]a [C]b [D]c", "--to", "D", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["content"] == "[D]a [G]b [A]c"

    def test_capo_shapes(self):
        result = runner.invoke(app, ["transpose", "[A]x [E]y", "--capo", "2", "--json"])
        assert json.loads(result.output)["content"] == "[G]x [D]y"

    def test_file_round_trip(self, tmp_path):
        source = tmp_path / "song.cho"
        source.write_text("{title: Song}\n[G]Hello [D]world\n", encoding="utf-8")
        target = tmp_path / "out.cho"

        result = runner.invoke(app, ["transpose", "-f", str(source), "-s", "5", "-o", str(target)])
        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == "{title: Song}\n[C]Hello [G]world\n"

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["transpose", "-f", str(tmp_path / "nope.cho")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_key(self):
        result = runner.invoke(app, ["transpose", "[C]x", "--from", "C", "--to", "nope"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestPreviewCommand:
    """Tests for `chordshift preview`."""

    def test_json_pairs(self):
        result = runner.invoke(app, ["preview", "[C]Amazing [F]grace", "-s", "2", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["pairs"] == [["C", "D"], ["F", "G"]]

    def test_table_with_remainder(self):
        result = runner.invoke(app, ["preview", "[C]a [D]b [E]c", "-s", "1", "--limit", "2"])
        assert result.exit_code == 0
        assert "+1 more" in result.output


class TestIntervalCommand:
    """Tests for `chordshift interval`."""

    def test_json(self):
        result = runner.invoke(app, ["interval", "C", "G", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["semitones"] == 7
        assert data["down"] == -5
        assert data["capo"] == 7

    def test_invalid(self):
        result = runner.invoke(app, ["interval", "C", "X"])
        assert result.exit_code == 1


class TestCapoCommand:
    """Tests for `chordshift capo`."""

    def test_semitones(self):
        result = runner.invoke(app, ["capo", "-s", "14", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["capo"] == 2

    def test_semitones_with_key(self):
        result = runner.invoke(app, ["capo", "-s", "2", "-k", "G", "--json"])
        data = json.loads(result.output)
        assert data["capo"] == 2
        assert data["sounding_key"] == "A"
        assert "from G to A" in data["explanation"]
        assert "you play G shapes" in data["explanation"]

    def test_suggestions(self):
        result = runner.invoke(app, ["capo", "[Bb]a [Eb]b [F]c", "--json"])
        assert result.exit_code == 0
        suggestions = json.loads(result.output)["suggestions"]
        assert suggestions[0]["fret"] == 3
        assert suggestions[0]["sample_chords"] == ["G", "C", "D"]

    def test_no_suggestions(self):
        result = runner.invoke(app, ["capo", "[G]a [C]b [D]c"])
        assert result.exit_code == 0
        assert "No capo" in result.output


class TestAnalyzeCommand:
    """Tests for `chordshift analyze`."""

    def test_json(self):
        result = runner.invoke(app, ["analyze", "C", "G", "Am", "F", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["key"] == "C major"
        assert data["numerals"] == ["I", "V", "vi", "IV"]
        assert data["common_name"] == "Pop Progression"
        assert data["confidence"] == 1.0
        assert data["variations"]

    def test_quoted_list(self):
        result = runner.invoke(app, ["analyze", "Am F C G", "--no-variations", "--json"])
        data = json.loads(result.output)
        assert data["key"] == "A minor"
        assert data["variations"] == []

    def test_table(self):
        result = runner.invoke(app, ["analyze", "C", "G", "Am", "F"])
        assert result.exit_code == 0
        assert "C major" in result.output
        assert "Pop Progression" in result.output

    def test_no_chords(self):
        result = runner.invoke(app, ["analyze"])
        assert result.exit_code == 1


class TestCheckCommand:
    """Tests for `chordshift check`."""

    def test_out_of_key(self):
        result = runner.invoke(app, ["check", "C", "D", "G", "--key", "C", "--json"])
        assert result.exit_code == 0
        errors = json.loads(result.output)["errors"]
        assert errors[0]["chord"] == "D"
        assert errors[0]["type"] == "Out of Key"
        assert errors[0]["suggestions"][0]["chord"] == "Dm"

    def test_clean(self):
        result = runner.invoke(app, ["check", "C", "G", "Am", "F"])
        assert result.exit_code == 0
        assert "No issues found" in result.output


class TestReharmonizeCommand:
    """Tests for `chordshift reharmonize`."""

    def test_simpler(self):
        result = runner.invoke(app, ["reharmonize", "C", "G", "Am", "F", "--style", "simpler", "--json"])
        assert result.exit_code == 0
        variations = json.loads(result.output)["variations"]
        assert [v["chords"] for v in variations] == [["C5", "G5", "A5", "F5"]]

    def test_table(self):
        result = runner.invoke(app, ["reharmonize", "C", "G", "Am", "F"])
        assert result.exit_code == 0
        assert "Variations" in result.output


class TestFail:
    """Tests for the shared error exit."""

    def test_exits_with_status_one(self):
        with pytest.raises(typer.Exit) as excinfo:
            _fail("bad input")
        assert excinfo.value.exit_code == 1

    def test_declared_as_never_returning(self):
        assert get_type_hints(_fail)["return"] is NoReturn
