"""
Tests for the hashcash-miner command line.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from hashcash_miner import scorer
from hashcash_miner import __version__
from hashcash_miner.cli import app
from hashcash_miner.config import Settings, get_settings

runner = CliRunner()

ZERO_HEX = "00" * 64


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from the caller's HASHCASH_* environment."""
    for name in ("LOG_LEVEL", "LOG_FORMAT", "COMPUTATION_TIME_SECONDS", "LIMIT"):
        monkeypatch.delenv(f"HASHCASH_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCreateCommand:
    """Tests for `hashcash1 create`."""

    def test_prints_hex_key(self) -> None:
        result = runner.invoke(app, ["hashcash1", "create", ZERO_HEX, "256", "0"])

        assert result.exit_code == 0
        key_hex = result.stdout.strip()
        assert len(key_hex) == 128
        assert key_hex == key_hex.lower()
        bytes.fromhex(key_hex)

    def test_accepts_negative_limit(self) -> None:
        result = runner.invoke(app, ["hashcash1", "create", ZERO_HEX, "-1", "0"])

        assert result.exit_code == 0
        assert len(result.stdout.strip()) == 128

    def test_end_to_end_with_verify(self) -> None:
        """A key mined for one second verifies to the same score every time."""
        created = runner.invoke(app, ["hashcash1", "create", ZERO_HEX, "-1", "1"])
        assert created.exit_code == 0
        key_hex = created.stdout.strip()

        first = runner.invoke(app, ["hashcash1", "verify", key_hex, ZERO_HEX])
        second = runner.invoke(app, ["hashcash1", "verify", key_hex, ZERO_HEX])

        assert first.exit_code == 0
        assert 0 <= int(first.stdout.strip()) <= 512
        assert first.stdout == second.stdout

    def test_short_challenge_exits_1(self) -> None:
        result = runner.invoke(app, ["hashcash1", "create", "00" * 32, "-1", "0"])
        assert result.exit_code == 1
        assert result.stdout == ""

    def test_bad_hex_exits_1(self) -> None:
        result = runner.invoke(app, ["hashcash1", "create", "zz" * 64, "-1", "0"])
        assert result.exit_code == 1
        assert result.stdout == ""


class TestComputationFailure:
    """A failing digest exits 1 without printing a result."""

    @pytest.fixture(autouse=True)
    def broken_sha512(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(data: bytes):
            raise ValueError("unsupported hash type")

        monkeypatch.setattr(scorer.hashlib, "sha512", broken)

    def test_create_exits_1(self) -> None:
        result = runner.invoke(app, ["hashcash1", "create", ZERO_HEX, "-1", "0"])

        assert result.exit_code == 1
        assert result.stdout == ""

    def test_verify_exits_1(self) -> None:
        result = runner.invoke(app, ["hashcash1", "verify", ZERO_HEX, ZERO_HEX])

        assert result.exit_code == 1
        assert result.stdout == ""


class TestVerifyCommand:
    """Tests for `hashcash1 verify`."""

    def test_known_score(self) -> None:
        # SHA-512(0x00*64 || 0x01*64) starts with 0x8a
        result = runner.invoke(app, ["hashcash1", "verify", ZERO_HEX, "01" * 64])

        assert result.exit_code == 0
        assert result.stdout.strip() == "0"

    def test_uppercase_hex(self) -> None:
        result = runner.invoke(app, ["hashcash1", "verify", "AB" * 64, "CD" * 64])
        lower = runner.invoke(app, ["hashcash1", "verify", "ab" * 64, "cd" * 64])

        assert result.exit_code == 0
        assert result.stdout == lower.stdout

    def test_short_key_exits_1(self) -> None:
        result = runner.invoke(app, ["hashcash1", "verify", "00" * 63, ZERO_HEX])

        assert result.exit_code == 1
        assert "key must be 64 bytes" in result.output

    def test_long_challenge_exits_1(self) -> None:
        result = runner.invoke(app, ["hashcash1", "verify", ZERO_HEX, "00" * 65])
        assert result.exit_code == 1

    def test_odd_length_key_is_padded(self) -> None:
        """127 hex digits pad to 64 bytes."""
        result = runner.invoke(app, ["hashcash1", "verify", "1" + "0" * 126, ZERO_HEX])
        assert result.exit_code == 0


class TestMineAndCheck:
    """Tests for `mine` and `check`."""

    def test_mine_then_check(self, tmp_path: Path) -> None:
        payload = tmp_path / "payload.bin"
        payload.write_bytes(b"stamp me")

        mined = runner.invoke(app, ["mine", str(payload), "--time", "1"])
        assert mined.exit_code == 0

        cash_json = mined.stdout.strip()
        cash = json.loads(cash_json)
        assert cash["algorithm"] == "Version1"
        assert len(cash["key"]) == 128

        checked = runner.invoke(app, ["check", str(payload), cash_json])
        assert checked.exit_code == 0
        assert 0 <= int(checked.stdout.strip()) <= 512

    def test_mine_disabled(self, tmp_path: Path) -> None:
        payload = tmp_path / "payload.bin"
        payload.write_bytes(b"stamp me")

        result = runner.invoke(app, ["mine", str(payload), "--time", "0"])
        assert result.exit_code == 1

    def test_mine_uses_settings_limit(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """HASHCASH_LIMIT=0 disables mining unless --limit overrides it."""
        payload = tmp_path / "payload.bin"
        payload.write_bytes(b"stamp me")
        monkeypatch.setenv("HASHCASH_LIMIT", "0")
        get_settings.cache_clear()

        result = runner.invoke(app, ["mine", str(payload), "--time", "1"])
        assert result.exit_code == 1

    def test_check_invalid_cash(self, tmp_path: Path) -> None:
        payload = tmp_path / "payload.bin"
        payload.write_bytes(b"stamp me")

        result = runner.invoke(app, ["check", str(payload), '{"key": "00"}'])
        assert result.exit_code == 1


class TestMiscCommands:
    """Tests for `sample` and `version`."""

    def test_sample_zero_time(self) -> None:
        result = runner.invoke(app, ["sample", "--time", "0"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "0 bits in 0s"

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestBadSettings:
    """Malformed HASHCASH_* variables."""

    def test_verify_reports_bad_setting(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An invalid setting exits 1 with a message instead of a traceback."""
        monkeypatch.setenv("HASHCASH_COMPUTATION_TIME_SECONDS", "-1")
        get_settings.cache_clear()

        result = runner.invoke(app, ["hashcash1", "verify", ZERO_HEX, ZERO_HEX])

        assert result.exit_code == 1
        assert result.stdout == ""
        assert "computation_time_seconds" in result.output
        assert not isinstance(result.exception, ValidationError)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.log_level == "WARNING"
        assert settings.log_format == "console"
        assert settings.computation_time_seconds == 10
        assert settings.limit == -1

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HASHCASH_COMPUTATION_TIME_SECONDS", "3")
        monkeypatch.setenv("HASHCASH_LOG_FORMAT", "json")

        settings = Settings()
        assert settings.computation_time_seconds == 3
        assert settings.log_format == "json"
