"""
CLI Tests
=========

Tests for the acetap2tzx and acetzxls command-line tools.
"""

import pytest
import struct

from click.testing import CliRunner

from acetap.cli import acetap2tzx, acetzxls
from acetap.cli.errors import ExitCode


def make_tap(*blocks: bytes) -> bytes:
    """Build a TAP image from block payloads."""
    result = bytearray()
    for block in blocks:
        result.extend(struct.pack("<H", len(block)))
        result.extend(block)
    return bytes(result)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def tap_file(tmp_path):
    path = tmp_path / "game.tap"
    path.write_bytes(make_tap(bytes(25), bytes(range(100))))
    return path


# =============================================================================
# acetap2tzx Tests
# =============================================================================

class TestConverterCLI:
    """Tests for the acetap2tzx CLI tool."""

    def test_cli_help(self, runner: CliRunner):
        result = runner.invoke(acetap2tzx.main, ["--help"])

        assert result.exit_code == 0
        assert "Convert a Jupiter ACE TAP file" in result.output

    def test_cli_version(self, runner: CliRunner):
        result = runner.invoke(acetap2tzx.main, ["--version"])

        assert result.exit_code == 0
        assert "acetap2tzx" in result.output

    def test_cli_convert(self, runner: CliRunner, tap_file):
        result = runner.invoke(acetap2tzx.main, [str(tap_file)])

        assert result.exit_code == 0
        out = tap_file.with_name("game.tap.tzx")
        assert out.exists()
        assert out.read_bytes().startswith(b"ZXTape!\x1a")
        assert "2 blocks" in result.output

    def test_cli_output_option(self, runner: CliRunner, tap_file, tmp_path):
        out = tmp_path / "custom.tzx"
        result = runner.invoke(acetap2tzx.main, [str(tap_file), "-o", str(out)])

        assert result.exit_code == 0
        assert out.exists()
        assert not tap_file.with_name("game.tap.tzx").exists()

    def test_cli_verbose(self, runner: CliRunner, tap_file):
        result = runner.invoke(acetap2tzx.main, [str(tap_file), "-v"])

        assert result.exit_code == 0
        assert "Header blocks: 1" in result.output
        assert "Data blocks:   1" in result.output

    def test_cli_missing_argument(self, runner: CliRunner):
        result = runner.invoke(acetap2tzx.main, [])

        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_cli_missing_input(self, runner: CliRunner, tmp_path):
        result = runner.invoke(acetap2tzx.main, [str(tmp_path / "nothere.tap")])

        assert result.exit_code == ExitCode.CONVERSION_ERROR
        assert "cannot open" in result.output

    def test_cli_output_not_creatable(self, runner: CliRunner, tap_file, tmp_path):
        out = tmp_path / "missing" / "game.tzx"
        result = runner.invoke(acetap2tzx.main, [str(tap_file), "-o", str(out)])

        assert result.exit_code == ExitCode.CONVERSION_ERROR
        assert "cannot create" in result.output

    def test_cli_truncated_lenient(self, runner: CliRunner, tmp_path):
        tap = tmp_path / "short.tap"
        tap.write_bytes(bytes([0x05, 0x00, 0x01, 0x02]))

        result = runner.invoke(acetap2tzx.main, [str(tap)])

        assert result.exit_code == 0
        assert (tmp_path / "short.tap.tzx").read_bytes() == b"ZXTape!\x1a\x01\x0d"

    def test_cli_truncated_strict(self, runner: CliRunner, tmp_path):
        tap = tmp_path / "short.tap"
        tap.write_bytes(bytes([0x05, 0x00, 0x01, 0x02]))

        result = runner.invoke(acetap2tzx.main, [str(tap), "--strict"])

        assert result.exit_code == ExitCode.CONVERSION_ERROR
        assert "truncated block" in result.output


# =============================================================================
# acetzxls Tests
# =============================================================================

class TestListingCLI:
    """Tests for the acetzxls CLI tool."""

    @pytest.fixture
    def tzx_file(self, runner: CliRunner, tap_file):
        runner.invoke(acetap2tzx.main, [str(tap_file)])
        return tap_file.with_name("game.tap.tzx")

    def test_cli_list(self, runner: CliRunner, tzx_file):
        result = runner.invoke(acetzxls.main, [str(tzx_file)])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert "header" in lines[2]
        assert "0x00" in lines[2]
        assert "8192" in lines[2]
        assert "data" in lines[3]
        assert "0xFF" in lines[3]
        assert "1024" in lines[3]

    def test_cli_list_verbose(self, runner: CliRunner, tzx_file):
        result = runner.invoke(acetzxls.main, [str(tzx_file), "-v"])

        assert result.exit_code == 0
        assert "TZX version 1.13" in result.output
        assert "end mark 972/4509" in result.output
        assert "Total: 2 blocks (1 header, 1 data)" in result.output

    def test_cli_list_invalid(self, runner: CliRunner, tmp_path):
        bad = tmp_path / "bad.tzx"
        bad.write_bytes(b"not a tzx file")

        result = runner.invoke(acetzxls.main, [str(bad)])

        assert result.exit_code == ExitCode.CONVERSION_ERROR
