"""Configuration loading from environment variables and memo-server.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_MEMOS_DIR = Path.home() / ".memo-server" / "memos"
_CONFIG_FILENAME = "memo-server.toml"


@dataclass
class ServerConfig:
    """Top-level memo server configuration."""

    memos_dir: Path = _DEFAULT_MEMOS_DIR
    extension: str = ".txt"
    max_filename_length: int = 50
    log_level: str = "INFO"
    server_name: str = "mcp-memo-server"
    server_version: str = "1.0.0"


def load_config(config_path: Path | None = None) -> ServerConfig:
    """Load configuration from environment variables and optional memo-server.toml.

    Priority: environment variables > memo-server.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        for candidate in [
            Path.cwd() / _CONFIG_FILENAME,
            Path.home() / ".memo-server" / _CONFIG_FILENAME,
        ]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    memo_data = file_data.get("memo", {})

    return ServerConfig(
        memos_dir=Path(
            os.getenv("MEMO_SERVER_DIR", memo_data.get("dir", str(_DEFAULT_MEMOS_DIR)))
        ).expanduser(),
        max_filename_length=int(memo_data.get("max_filename_length", 50)),
        log_level=os.getenv("MEMO_SERVER_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
