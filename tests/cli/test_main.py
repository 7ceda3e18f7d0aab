"""Tests for CLI main module."""

import json as _json
import os as _os
import pathlib as _pathlib

import click.testing as _click_testing
import pytest as _pytest

import permafrost
import permafrost.cli as cli


class TestCLIBasics:
    """Test basic CLI functionality."""

    def setup_method(self) -> None:
        """Set up a runner with a clean environment."""
        clean_env = {k: v for k, v in _os.environ.items() if not k.startswith("PERMAFROST_")}
        self.runner = _click_testing.CliRunner(env=clean_env)

    def test_help_lists_merge(self) -> None:
        """Help output lists the merge command."""
        result = self.runner.invoke(cli.cli, ["--help"])

        assert result.exit_code == 0
        assert "merge" in result.output

    def test_version_shows_current_version(self) -> None:
        """Version flag shows the package version."""
        result = self.runner.invoke(cli.cli, ["--version"])

        assert result.exit_code == 0
        assert permafrost.__version__ in result.output

    def test_invalid_settings_exit_with_error(self) -> None:
        """Bad PERMAFROST_* values are reported, not raised."""
        result = self.runner.invoke(
            cli.cli, ["merge", "missing.yaml"], env={"PERMAFROST_LOG_LEVEL": "chatty"}
        )

        assert result.exit_code == 1
        assert "invalid PERMAFROST_" in result.output


class TestMergeCommand:
    """Tests for `permafrost merge`."""

    @_pytest.fixture
    def files(self, tmp_path: _pathlib.Path) -> dict[str, _pathlib.Path]:
        """Write a base document and two overrides."""
        base = tmp_path / "base.yaml"
        base.write_text("server:\n  host: localhost\n  port: 80\nplugins: [a, b]\n")
        override = tmp_path / "override.yaml"
        override.write_text("server:\n  port: 8080\nplugins: [c]\n")
        same = tmp_path / "same.yaml"
        same.write_text("server:\n  host: localhost\n")
        return {"base": base, "override": override, "same": same}

    def setup_method(self) -> None:
        """Set up a runner with a clean environment."""
        clean_env = {k: v for k, v in _os.environ.items() if not k.startswith("PERMAFROST_")}
        self.runner = _click_testing.CliRunner(env=clean_env)

    def _invoke(self, *args: str, env: dict[str, str] | None = None) -> _click_testing.Result:
        return self.runner.invoke(cli.cli, ["merge", *args], env=env)

    def test_deep_merge_yaml_output(self, files: dict[str, _pathlib.Path]) -> None:
        """Nested keys merge and lists replace."""
        result = self._invoke(str(files["base"]), str(files["override"]))

        assert result.exit_code == 0, result.output
        assert result.stdout == (
            "server:\n  host: localhost\n  port: 8080\nplugins:\n- c\n"
        )

    def test_json_output(self, files: dict[str, _pathlib.Path]) -> None:
        """--format json prints JSON."""
        result = self._invoke(str(files["base"]), str(files["override"]), "--format", "json")

        assert result.exit_code == 0
        assert _json.loads(result.stdout) == {
            "server": {"host": "localhost", "port": 8080},
            "plugins": ["c"],
        }

    def test_shallow_mode(self, files: dict[str, _pathlib.Path]) -> None:
        """--mode shallow replaces nested mappings."""
        result = self._invoke(
            str(files["base"]), str(files["override"]), "--mode", "shallow", "--format", "json"
        )

        assert result.exit_code == 0
        assert _json.loads(result.stdout)["server"] == {"port": 8080}

    def test_mode_from_environment(self, files: dict[str, _pathlib.Path]) -> None:
        """PERMAFROST_MERGE_MODE sets the default mode."""
        result = self._invoke(
            str(files["base"]),
            str(files["override"]),
            env={"PERMAFROST_MERGE_MODE": "shallow", "PERMAFROST_OUTPUT_FORMAT": "json"},
        )

        assert result.exit_code == 0
        assert _json.loads(result.stdout)["server"] == {"port": 8080}

    def test_no_changes_reported(self, files: dict[str, _pathlib.Path]) -> None:
        """A redundant override is reported on stderr."""
        result = self._invoke(str(files["base"]), str(files["same"]))

        assert result.exit_code == 0
        assert "no changes" in result.stderr
        assert "no changes" not in result.stdout

    def test_replace_tag(self, files: dict[str, _pathlib.Path], tmp_path: _pathlib.Path) -> None:
        """!replace in a source replaces a nested mapping."""
        tagged = tmp_path / "tagged.yaml"
        tagged.write_text("server: !replace\n  socket: /tmp/s\n")

        result = self._invoke(str(files["base"]), str(tagged), "--format", "json")

        assert result.exit_code == 0
        assert _json.loads(result.stdout)["server"] == {"socket": "/tmp/s"}

    def test_non_mapping_document(self, files: dict[str, _pathlib.Path], tmp_path: _pathlib.Path) -> None:
        """A list at the document root is an error."""
        bad = tmp_path / "bad.yaml"
        bad.write_text("- 1\n- 2\n")

        result = self._invoke(str(files["base"]), str(bad))

        assert result.exit_code == 1
        assert "Error:" in result.stderr
        assert "must be a mapping" in result.stderr

    def test_malformed_yaml(self, files: dict[str, _pathlib.Path], tmp_path: _pathlib.Path) -> None:
        """Unparseable YAML is an error, not a traceback."""
        bad = tmp_path / "bad.yaml"
        bad.write_text("a: [1, 2\n")

        result = self._invoke(str(files["base"]), str(bad))

        assert result.exit_code == 1
        assert "Error:" in result.stderr

    def test_missing_file(self) -> None:
        """Click validates that inputs exist."""
        result = self._invoke("does-not-exist.yaml")

        assert result.exit_code == 2

    def test_plain_yaml_when_not_a_terminal(self, files: dict[str, _pathlib.Path]) -> None:
        """Captured output is never highlighted by default."""
        result = self._invoke(str(files["base"]))

        assert result.exit_code == 0
        assert "\x1b[" not in result.stdout

    def test_color_flag_forces_highlighting(self, files: dict[str, _pathlib.Path]) -> None:
        """--color highlights YAML even when piped."""
        result = self._invoke(str(files["base"]), "--color")

        assert result.exit_code == 0
        assert "\x1b[" in result.stdout
        assert "localhost" in result.stdout

    def test_no_color_flag_beats_setting(self, files: dict[str, _pathlib.Path]) -> None:
        """--no-color wins over PERMAFROST_COLOR=1."""
        result = self._invoke(str(files["base"]), "--no-color", env={"PERMAFROST_COLOR": "1"})

        assert result.exit_code == 0
        assert "\x1b[" not in result.stdout

    def test_color_setting_forces_highlighting(self, files: dict[str, _pathlib.Path]) -> None:
        """PERMAFROST_COLOR=1 highlights without a flag."""
        result = self._invoke(str(files["base"]), env={"PERMAFROST_COLOR": "1"})

        assert result.exit_code == 0
        assert "\x1b[" in result.stdout

    def test_json_output_with_timestamps(self, tmp_path: _pathlib.Path) -> None:
        """YAML dates and datetimes are written as ISO strings in JSON."""
        doc = tmp_path / "dated.yaml"
        doc.write_text("when: 2020-01-01\nat: 2020-01-01 12:30:00\n")

        result = self._invoke(str(doc), "--format", "json")

        assert result.exit_code == 0, result.output
        assert _json.loads(result.stdout) == {"when": "2020-01-01", "at": "2020-01-01T12:30:00"}

    def test_json_output_unsupported_value(self, tmp_path: _pathlib.Path) -> None:
        """Values JSON cannot hold are reported as an error, not a traceback."""
        doc = tmp_path / "binary.yaml"
        doc.write_text("blob: !!binary aGVsbG8=\n")

        result = self._invoke(str(doc), "--format", "json")

        assert result.exit_code == 1
        assert "Error:" in result.stderr

    def test_replace_tag_inside_list(self, tmp_path: _pathlib.Path) -> None:
        """!replace inside a list is unwrapped and dumps as plain YAML."""
        doc = tmp_path / "listed.yaml"
        doc.write_text("x: [!replace {a: 1}]\n")

        result = self._invoke(str(doc))

        assert result.exit_code == 0, result.output
        assert result.stdout == "x:\n- a: 1\n"
