"""Tests for configuration loading."""

import pytest
from pathlib import Path

from memo_server.config import load_config

_ENV_KEYS = ["MEMO_SERVER_DIR", "MEMO_SERVER_LOG_LEVEL"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestConfig:
    def test_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))

        config = load_config()
        assert config.memos_dir.name == "memos"
        assert config.extension == ".txt"
        assert config.max_filename_length == 50
        assert config.log_level == "INFO"

    def test_env_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MEMO_SERVER_DIR", str(tmp_path / "elsewhere"))
        monkeypatch.setenv("MEMO_SERVER_LOG_LEVEL", "DEBUG")

        config = load_config()
        assert config.memos_dir == tmp_path / "elsewhere"
        assert config.log_level == "DEBUG"

    def test_toml_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        toml_path = tmp_path / "memo-server.toml"
        toml_path.write_text(f"""
log_level = "WARNING"

[memo]
dir = "{(tmp_path / 'notes').as_posix()}"
max_filename_length = 20
""")
        config = load_config(toml_path)
        assert config.memos_dir == tmp_path / "notes"
        assert config.max_filename_length == 20
        assert config.log_level == "WARNING"

    def test_toml_in_cwd_discovered(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "memo-server.toml").write_text('log_level = "ERROR"\n')

        assert load_config().log_level == "ERROR"

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MEMO_SERVER_DIR", str(tmp_path / "from-env"))

        toml_path = tmp_path / "memo-server.toml"
        toml_path.write_text('[memo]\ndir = "/from/toml"\n')
        config = load_config(toml_path)
        assert config.memos_dir == tmp_path / "from-env"  # env wins
