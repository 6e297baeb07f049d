"""Tests for CLI tool."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from packetio import JsonEncoding, frame_message
from packetio.cli.main import main
from packetio.framing import LEGACY_CONFIG


@pytest.fixture
def capture_file(tmp_path: Path) -> Path:
    """File holding three JSON frames."""
    encoding = JsonEncoding()
    path = tmp_path / "capture.bin"
    path.write_bytes(
        b"".join(frame_message(encoding.encode({"seq": i})) for i in range(3))
    )
    return path


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = subprocess.run(
        [sys.executable, "-m", "packetio.cli.main", "--help"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "packetio: Length-Prefixed Framing" in result.stdout
    assert "--dump" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = subprocess.run(
        [sys.executable, "-m", "packetio.cli.main", "--version"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "packetio 0.2.0" in result.stdout


def test_cli_dump(capture_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test --dump lists every frame."""
    assert main(["--dump", str(capture_file), "--json"]) == 0

    out = capsys.readouterr().out
    assert '{"seq":0}' in out
    assert '{"seq":2}' in out
    assert "3 frames" in out


def test_cli_dump_hex(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test hex preview with the legacy prefix."""
    path = tmp_path / "legacy.bin"
    path.write_bytes(frame_message(b"\x01\x02", config=LEGACY_CONFIG))

    assert main(["--dump", str(path), "--legacy"]) == 0

    out = capsys.readouterr().out
    assert "01 02" in out
    assert "1 frame," in out


def test_cli_dump_truncated(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test a truncated capture exits with an error."""
    path = tmp_path / "truncated.bin"
    path.write_bytes(frame_message(b"complete") + (10).to_bytes(8, "little") + b"abc")

    assert main(["--dump", str(path)]) == 1
    assert "Truncated frame" in capsys.readouterr().err


def test_cli_dump_missing_file(capsys: pytest.CaptureFixture[str]) -> None:
    """Test --dump with missing file."""
    assert main(["--dump", "nonexistent.bin"]) == 1
    assert "not found" in capsys.readouterr().err.lower()


def test_cli_invalid_max_frame_size(
    capture_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test invalid framing options are reported."""
    assert main(["--dump", str(capture_file), "--max-frame-size", "0"]) == 2
    assert "max_frame_size" in capsys.readouterr().err


def test_cli_no_args() -> None:
    """Test CLI with no arguments (should show help)."""
    result = subprocess.run(
        [sys.executable, "-m", "packetio.cli.main"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "packetio: Length-Prefixed Framing" in result.stdout
