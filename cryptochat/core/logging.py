from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send cryptochat logs to stdout at the given level."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logging.basicConfig(level=numeric_level, handlers=[handler], force=True)
    # httpx logs every request at INFO; keep it quieter than our own output
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))
