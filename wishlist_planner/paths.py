"""Centralized path resolution."""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

CACHE_DIR = Path(os.environ.get("WISHLIST_CACHE_DIR", BASE_DIR / "cache"))
