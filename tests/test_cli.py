"""Tests for the command-line interface."""

import json

import pytest
import yaml

from scenariogen.cli import cli, load_recording
from scenariogen.recording.models import RecordingFormatError


@pytest.fixture
def recording_file(tmp_path, login_recording):
    path = tmp_path / "recording.json"
    path.write_text(json.dumps(login_recording), encoding="utf-8")
    return path


class TestLoadRecording:
    """Tests for load_recording."""

    def test_json_array(self, recording_file):
        actions = load_recording(recording_file)

        assert len(actions) == 6
        assert actions[1].action.url == "https://example.com/login?next=%2Fhome"

    def test_json_lines(self, tmp_path, login_recording):
        path = tmp_path / "recording.jsonl"
        path.write_text("\n".join(json.dumps(a) for a in login_recording) + "\n", encoding="utf-8")

        assert len(load_recording(path)) == 6

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("  \n", encoding="utf-8")

        assert load_recording(path) == []

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(RecordingFormatError):
            load_recording(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordingFormatError):
            load_recording(tmp_path / "nope.json")


class TestCli:
    """Tests for the convert command."""

    def test_convert_to_file(self, recording_file, tmp_path):
        output = tmp_path / "scenario.yaml"

        code = cli(["convert", str(recording_file), "-o", str(output)])

        assert code == 0
        document = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert document["baseURL"] == "https://example.com"
        assert len(document["steps"]) == 5

    def test_convert_to_stdout(self, recording_file, capsys):
        code = cli(["convert", str(recording_file), "--name", "Login"])

        assert code == 0
        out = capsys.readouterr().out
        assert out.startswith("# Generated by scenariogen")
        assert yaml.safe_load(out)["name"] == "Login"

    def test_debug_flag(self, recording_file, capsys):
        cli(["convert", str(recording_file), "--debug"])

        document = yaml.safe_load(capsys.readouterr().out)
        assert "action_in_context" in document["steps"][0]["debug"]

    def test_base_url_flag(self, recording_file, capsys):
        cli(["convert", str(recording_file), "--base-url", "https://other.example"])

        document = yaml.safe_load(capsys.readouterr().out)
        assert document["baseURL"] == "https://other.example"
        assert document["steps"][0]["url"] == "https://example.com/login?next=%2Fhome"

    def test_unreadable_input_exits_1(self, tmp_path, capsys):
        code = cli(["convert", str(tmp_path / "missing.json")])

        assert code == 1
        assert "error:" in capsys.readouterr().err

    def test_missing_command(self):
        with pytest.raises(SystemExit):
            cli([])
