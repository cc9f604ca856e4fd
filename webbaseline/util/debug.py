"""Debug logging switches."""

from __future__ import annotations

import logging
import os

from ..constants import DEBUG_ENV_VAR

LOGGER = logging.getLogger("webbaseline")
_HANDLER: logging.Handler | None = None


def debug_enabled() -> bool:
    """Check debug mode env flag."""
    return os.environ.get(DEBUG_ENV_VAR, "").strip() == "1"


def configure_logging(*, debug: bool = False) -> bool:
    """Send package debug logs to stderr when debug mode is on."""
    global _HANDLER
    if not (debug or debug_enabled()):
        return False
    if _HANDLER is None:
        _HANDLER = logging.StreamHandler()
        _HANDLER.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        LOGGER.addHandler(_HANDLER)
    LOGGER.setLevel(logging.DEBUG)
    return True
