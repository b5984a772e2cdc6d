"""File cache for pricing service payloads.

JSON files under ``CACHE_DIR`` (see :mod:`wishlist_planner.paths`), each with
its own max age.  Projection files carry the round range in their name, so a
new round never reads the previous round's projections.
"""

from __future__ import annotations

import json
import os
import threading
import time
from pathlib import Path
from typing import Any, Callable

from wishlist_planner import paths
from wishlist_planner.logging_config import get_logger

logger = get_logger(__name__)


def cache_path(name: str) -> Path:
    """Full path for a named cache file inside ``CACHE_DIR``."""
    return paths.CACHE_DIR / name


def cache_age(path: Path) -> float | None:
    """Seconds since *path* was written, or None when it does not exist."""
    try:
        return time.time() - path.stat().st_mtime
    except FileNotFoundError:
        return None


def is_cache_fresh(path: Path, max_age: int) -> bool:
    age = cache_age(path)
    return age is not None and age < max_age


def read_json_cache(path: Path) -> Any:
    """Parsed contents of *path*, or ``None`` when missing or corrupt."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None


def write_json_cache(path: Path, data: Any) -> None:
    """Write *data* through a temp file and rename it into place.

    Readers never see a partially written file, including other threads of
    the projection fan-out.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f"{path.name}.{os.getpid()}-{threading.get_ident()}.tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    os.replace(tmp, path)


def cached_json(
    name: str,
    fetch: Callable[[], Any],
    max_age: int,
    force: bool = False,
    recover_from: tuple[type[BaseException], ...] = (OSError,),
) -> Any:
    """Cached payload for *name*, refreshed with *fetch* once older than *max_age*.

    When *fetch* raises one of *recover_from* and a stale copy exists, the
    stale copy is returned; otherwise the error propagates.
    """
    path = cache_path(name)
    if not force and is_cache_fresh(path, max_age):
        data = read_json_cache(path)
        if data is not None:
            return data

    try:
        data = fetch()
    except recover_from as exc:
        stale = read_json_cache(path)
        if stale is None:
            raise
        logger.warning(
            "Fetch failed (%s), using stale cache %s (%.0fs old)",
            exc, path.name, cache_age(path) or 0.0,
        )
        return stale

    write_json_cache(path, data)
    return data
