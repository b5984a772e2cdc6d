"""Logging setup for the wishlist planner.

One console handler on the root logger.  ``WISHLIST_LOG_LEVEL`` (a level name
such as ``DEBUG``) overrides the default INFO level.  When the host process has
already configured logging (pytest, a WSGI server) the existing handlers are
left alone.
"""

import logging
import os
import sys

_HANDLER_NAME = "wishlist_planner.console"


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get("WISHLIST_LOG_LEVEL", logging.INFO)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def setup_logging(level: int | str | None = None, stream=None) -> None:
    """Attach the console handler, or retarget it if already attached.

    *stream* defaults to stdout; the CLI passes stderr when its stdout
    carries JSON.
    """
    root = logging.getLogger()
    ours = next((h for h in root.handlers if h.get_name() == _HANDLER_NAME), None)
    if ours is not None:
        if stream is not None:
            ours.setStream(stream)
        if level is not None:
            root.setLevel(_resolve_level(level))
            ours.setLevel(_resolve_level(level))
        return
    if root.handlers:
        return

    resolved = _resolve_level(level)
    root.setLevel(resolved)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))
    root.addHandler(handler)

    for noisy in ("urllib3", "werkzeug"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Named logger; configures the root handler on first use."""
    setup_logging()
    return logging.getLogger(name)
