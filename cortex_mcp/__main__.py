"""Command-line entry point: ``cortex-mcp`` / ``python -m cortex_mcp``."""

import asyncio
import logging
import sys

from cortex_mcp.config import ConfigError, CortexConfig
from cortex_mcp.server import serve

logger = logging.getLogger("cortex_mcp")


def configure_logging(level: str) -> None:
    """Log to stderr; stdout carries the stdio protocol."""
    logging.basicConfig(
        stream=sys.stderr,
        format="[%(asctime)s] [cortex-mcp] %(levelname)s: %(message)s",
        level=getattr(logging, level, logging.ERROR),
    )


def main() -> None:
    try:
        config = CortexConfig.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr, flush=True)
        sys.exit(1)

    configure_logging(config.log_level)

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Fatal error running server")
        sys.exit(1)


if __name__ == "__main__":
    main()
