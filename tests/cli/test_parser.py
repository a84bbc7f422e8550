"""
Tests for the crossrs-toolchain command-line interface.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from crossrs_toolchain.bazel.build_file import DEFAULT_RULES_LABEL
from crossrs_toolchain.cli.parser import CLI, main
from crossrs_toolchain.core.exceptions import (
    BuildFileLockTimeout,
    MissingRequiredToolError,
)
from crossrs_toolchain.toolchain.descriptor import StubDescriptor

DESCRIBE_RESOLVE = "crossrs_toolchain.cli.commands.describe.resolve_toolchain"
GENERATE_RESOLVE = "crossrs_toolchain.cli.commands.generate.resolve_toolchain"


class TestArgumentParsing:
    """Tests for CLI argument parsing."""

    def test_describe_defaults(self):
        """Test describe with default options."""
        args = CLI().parse_args(["describe"])

        assert args.command == "describe"
        assert args.format == "yaml"
        assert not args.verbose

    def test_generate_options(self):
        """Test generate with every option."""
        args = CLI().parse_args(
            [
                "generate",
                "--output-dir",
                "/tmp/repo",
                "--rules-label",
                "//:rules.bzl",
                "--lock-timeout",
                "5",
            ]
        )

        assert args.output_dir == Path("/tmp/repo")
        assert args.rules_label == "//:rules.bzl"
        assert args.lock_timeout == 5.0

    def test_generate_defaults(self):
        """Test generate defaults."""
        args = CLI().parse_args(["generate"])

        assert args.rules_label == DEFAULT_RULES_LABEL
        assert args.lock_timeout == 30

    def test_platforms_triples(self):
        """Test positional triples."""
        args = CLI().parse_args(["-q", "platforms", "a-b", "c-d"])

        assert args.triples == ["a-b", "c-d"]
        assert args.quiet

    def test_invalid_format(self):
        """Test that unknown formats are rejected by argparse."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["describe", "--format", "toml"])

        assert exc_info.value.code == 2

    def test_version(self, capsys):
        """Test --version output."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("crossrs-toolchain ")


class TestRun:
    """Tests for CLI.run dispatch and exit codes."""

    def test_no_command(self, capsys):
        """Test that a missing command prints help."""
        assert CLI().run([]) == 1
        assert "usage:" in capsys.readouterr().out

    def test_tool_error_exit_code(self):
        """Test that engine errors exit with 1."""
        error = MissingRequiredToolError("aarch64-linux-gnu-gcc", "aarch64-unknown-linux-gnu")
        with patch(DESCRIBE_RESOLVE, side_effect=error):
            assert CLI().run(["describe"]) == 1

    def test_keyboard_interrupt(self):
        """Test the SIGINT exit code."""
        with patch(DESCRIBE_RESOLVE, side_effect=KeyboardInterrupt):
            assert CLI().run(["describe"]) == 130

    def test_main_exits(self):
        """Test that main passes the exit code to sys.exit."""
        with patch("sys.argv", ["crossrs-toolchain"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1


class TestDescribeCommand:
    """Tests for the describe command."""

    def test_yaml(self, capsys, aarch64_descriptor):
        """Test YAML output of a resolved toolchain."""
        with patch(DESCRIBE_RESOLVE, return_value=aarch64_descriptor):
            assert CLI().run(["describe"]) == 0

        data = yaml.safe_load(capsys.readouterr().out)
        assert data["kind"] == "toolchain"
        assert data["target_triple"] == "aarch64-unknown-linux-gnu"

    def test_json(self, capsys, aarch64_descriptor):
        """Test JSON output."""
        with patch(DESCRIBE_RESOLVE, return_value=aarch64_descriptor):
            assert CLI().run(["describe", "--format", "json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["platform"] == {"cpu": "aarch64", "os": "linux"}

    def test_stub_from_environment(self, capsys, monkeypatch):
        """Test describe outside a cross-rs environment."""
        monkeypatch.delenv("TARGET", raising=False)
        monkeypatch.delenv("CROSS_TOOLCHAIN_PREFIX", raising=False)

        assert CLI().run(["describe", "--format", "json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["kind"] == "stub"
        assert data["target_compatible_with"] == ["@platforms//os:none"]

    def test_invalid_triple_from_environment(self, monkeypatch):
        """Test that a malformed TARGET fails the command."""
        monkeypatch.setenv("TARGET", "aarch64")
        monkeypatch.setenv("CROSS_TOOLCHAIN_PREFIX", "aarch64-linux-gnu-")

        assert CLI().run(["describe"]) == 1


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_writes_build_file(self, tmp_path, capsys, aarch64_descriptor):
        """Test generating the toolchain BUILD file."""
        with patch(GENERATE_RESOLVE, return_value=aarch64_descriptor):
            code = CLI().run(["generate", "--output-dir", str(tmp_path)])

        assert code == 0
        build_file = tmp_path / "BUILD.bazel"
        assert capsys.readouterr().out.strip() == str(build_file)
        assert "cross_rs_toolchain_config(" in build_file.read_text(encoding="utf-8")

    def test_writes_stub(self, tmp_path):
        """Test generating the stub BUILD file."""
        with patch(GENERATE_RESOLVE, return_value=StubDescriptor(reason="TARGET not set")):
            assert CLI().run(["generate", "--output-dir", str(tmp_path)]) == 0

        assert "@platforms//os:none" in (tmp_path / "BUILD.bazel").read_text(
            encoding="utf-8"
        )

    def test_lock_timeout(self, tmp_path):
        """Test that a held lock fails the command."""
        with patch(GENERATE_RESOLVE, return_value=StubDescriptor()), patch(
            "crossrs_toolchain.bazel.build_file.output_lock",
            side_effect=BuildFileLockTimeout("locked"),
        ):
            assert CLI().run(["generate", "--output-dir", str(tmp_path)]) == 1


class TestPlatformsCommand:
    """Tests for the platforms command."""

    def test_stdout(self, capsys):
        """Test platforms printed to stdout."""
        assert CLI().run(["platforms", "aarch64-unknown-linux-gnu"]) == 0

        out = capsys.readouterr().out
        assert 'name = "aarch64-unknown-linux-gnu"' in out
        assert '"@platforms//cpu:aarch64"' in out

    def test_targets_file_and_output(self, tmp_path):
        """Test merging a targets file and writing to a file."""
        targets = tmp_path / "targets.yaml"
        targets.write_text("targets:\n  - wasm32-unknown-emscripten\n", encoding="utf-8")
        output = tmp_path / "platforms.bzl"

        code = CLI().run(
            [
                "platforms",
                "x86_64-pc-windows-gnu",
                "--targets-file",
                str(targets),
                "--output",
                str(output),
            ]
        )

        assert code == 0
        content = output.read_text(encoding="utf-8")
        assert content.index("x86_64-pc-windows-gnu") < content.index(
            "wasm32-unknown-emscripten"
        )

    def test_no_triples(self):
        """Test that an empty target list fails."""
        assert CLI().run(["platforms"]) == 1

    def test_missing_targets_file(self, tmp_path):
        """Test that a missing targets file is a config error."""
        assert (
            CLI().run(["platforms", "--targets-file", str(tmp_path / "none.yaml")]) == 1
        )
