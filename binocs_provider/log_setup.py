from __future__ import annotations

import logging

from binocs_provider.config import settings

_LOGGING_CONFIGURED = False


def configure_logging(level: str | None = None) -> None:
    """Configure process-wide logging once; later calls only adjust the level."""
    global _LOGGING_CONFIGURED

    level_name = (level or settings.BINOCS_LOG_LEVEL).upper()
    resolved = getattr(logging, level_name, logging.INFO)

    if _LOGGING_CONFIGURED:
        logging.getLogger().setLevel(resolved)
        return

    logging.basicConfig(
        level=resolved,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    _LOGGING_CONFIGURED = True
