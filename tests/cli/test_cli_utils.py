"""
Tests for crossrs_toolchain.cli.utils module.
"""

import json

import pytest
import yaml

from crossrs_toolchain.cli.utils import format_data, write_output


class TestFormatData:
    """Tests for format_data."""

    def test_yaml_keeps_key_order(self):
        """Test that YAML output is not sorted."""
        text = format_data({"kind": "stub", "reason": "x"}, "yaml")

        assert text.index("kind") < text.index("reason")
        assert yaml.safe_load(text) == {"kind": "stub", "reason": "x"}

    def test_json(self):
        """Test JSON output."""
        text = format_data({"a": [1, 2]}, "json")

        assert text.endswith("\n")
        assert json.loads(text) == {"a": [1, 2]}

    def test_unknown_format(self):
        """Test rejection of unknown formats."""
        with pytest.raises(ValueError, match="toml"):
            format_data({}, "toml")


class TestWriteOutput:
    """Tests for write_output."""

    def test_stdout(self, capsys):
        """Test printing without a destination."""
        write_output("content\n")
        assert capsys.readouterr().out == "content\n"

    def test_file(self, tmp_path, capsys):
        """Test writing to a file."""
        output = tmp_path / "out.bzl"

        write_output("content\n", output)

        assert output.read_text(encoding="utf-8") == "content\n"
        assert capsys.readouterr().out == ""
