"""Entry point: python -m memo_server

Runs the memo MCP server over stdio. Logs go to stderr.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from memo_server.config import load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def main() -> None:
    config = load_config()
    _setup_logging(config.log_level)

    from memo_server.server import MemoServer

    server = MemoServer(config)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        pass
    except Exception:
        logging.getLogger(__name__).exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
