"""Unit tests for EnvFileSettings and .env loading."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from typedenv import (
    EnvFileSettings,
    InMemoryEnvStore,
    InvalidValueError,
    TypedEnvAccessor,
    load_env_file,
)


@pytest.fixture(autouse=True)
def _clear_loader_env(monkeypatch):
    """Keep the developer's TYPEDENV_* settings out of these tests."""
    for name in ["TYPEDENV_ENV_FILE", "TYPEDENV_ENCODING", "TYPEDENV_OVERRIDE"]:
        monkeypatch.delenv(name, raising=False)


def write_env(tmp_path: Path, content: str) -> Path:
    path = tmp_path / ".env"
    path.write_text(content, encoding="utf-8")
    return path


class RejectingStore(InMemoryEnvStore):
    """Store that refuses one key the way the process environment refuses NUL."""

    def __init__(self, rejected: str) -> None:
        super().__init__()
        self.rejected = rejected

    def set(self, key: str, value: str) -> None:
        if key == self.rejected:
            raise InvalidValueError(key, "environment values cannot contain NUL")
        super().set(key, value)


class TestEnvFileSettings:
    """Tests for EnvFileSettings defaults and overrides."""

    def test_defaults(self) -> None:
        settings = EnvFileSettings()
        assert settings.env_file == Path(".env")
        assert settings.encoding == "utf-8"
        assert settings.override is False

    def test_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("TYPEDENV_ENV_FILE", "config/dev.env")
        monkeypatch.setenv("TYPEDENV_OVERRIDE", "true")
        settings = EnvFileSettings()
        assert settings.env_file == Path("config/dev.env")
        assert settings.override is True


class TestLoadEnvFile:
    """Tests for load_env_file."""

    def test_missing_file_is_logged_not_raised(self, tmp_path, caplog) -> None:
        store = InMemoryEnvStore()
        settings = EnvFileSettings(env_file=tmp_path / "absent.env")

        with caplog.at_level(logging.WARNING, logger="typedenv.config"):
            assert load_env_file(settings, store=store) is False

        assert "no environment variable file(s) was found" in caplog.text
        assert len(store) == 0

    def test_loads_pairs(self, tmp_path) -> None:
        path = write_env(
            tmp_path,
            '# comment\nPORT=8080\nDEBUG="True"\nexport RATIO=1.25\nNAME=\'svc\'\n',
        )
        store = InMemoryEnvStore()

        assert load_env_file(EnvFileSettings(env_file=path), store=store) is True

        accessor = TypedEnvAccessor(store)
        assert accessor.get_int("PORT", 0) == 8080
        assert accessor.get_bool("DEBUG", False) is True
        assert accessor.get_float32("RATIO", 0.0) == 1.25
        assert accessor.get_string("NAME", "") == "svc"

    def test_existing_values_win_by_default(self, tmp_path) -> None:
        path = write_env(tmp_path, "PORT=8080\nHOST=localhost\n")
        store = InMemoryEnvStore({"PORT": "9000"})

        load_env_file(EnvFileSettings(env_file=path), store=store)

        assert store.get("PORT") == "9000"
        assert store.get("HOST") == "localhost"

    def test_override(self, tmp_path) -> None:
        path = write_env(tmp_path, "PORT=8080\n")
        store = InMemoryEnvStore({"PORT": "9000"})

        load_env_file(EnvFileSettings(env_file=path, override=True), store=store)

        assert store.get("PORT") == "8080"

    def test_keys_without_value_are_skipped(self, tmp_path) -> None:
        path = write_env(tmp_path, "BARE\nEMPTY=\n")
        store = InMemoryEnvStore()

        load_env_file(EnvFileSettings(env_file=path), store=store)

        assert "BARE" not in store
        assert store.get("EMPTY") == ""

    def test_rejected_pair_is_skipped_and_rest_still_load(self, tmp_path, caplog) -> None:
        path = write_env(tmp_path, "FIRST=1\nBAD=x\nLAST=3\n")
        store = RejectingStore("BAD")

        with caplog.at_level(logging.WARNING, logger="typedenv.config"):
            assert load_env_file(EnvFileSettings(env_file=path), store=store) is True

        assert store.get("FIRST") == "1"
        assert store.get("LAST") == "3"
        assert "BAD" not in store
        assert "Skipping 'BAD'" in caplog.text

    def test_settings_read_from_environment(self, tmp_path, monkeypatch) -> None:
        path = write_env(tmp_path, "FROM_FILE=yes\n")
        monkeypatch.setenv("TYPEDENV_ENV_FILE", str(path))
        store = InMemoryEnvStore()

        assert load_env_file(store=store) is True
        assert store.get("FROM_FILE") == "yes"

    def test_defaults_to_process_environment(self, tmp_path, monkeypatch) -> None:
        path = write_env(tmp_path, "TYPEDENV_TEST_LOADED=1\n")
        monkeypatch.delenv("TYPEDENV_TEST_LOADED", raising=False)

        try:
            load_env_file(EnvFileSettings(env_file=path))
            assert os.environ.get("TYPEDENV_TEST_LOADED") == "1"
        finally:
            os.environ.pop("TYPEDENV_TEST_LOADED", None)
