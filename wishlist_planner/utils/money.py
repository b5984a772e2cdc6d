"""Money formatting for breakdowns and warning text."""

from __future__ import annotations

import math
from typing import Any

import numpy as np


def format_price(value: float) -> str:
    """Render a salary amount the way the client shows it.

    ``620000`` -> ``$620k``, ``1250000`` -> ``$1.25M``, ``-30000`` -> ``-$30k``.
    """
    sign = "-" if value < 0 else ""
    amount = abs(value)
    if amount >= 1_000_000:
        text = f"{amount / 1_000_000:.2f}".rstrip("0").rstrip(".")
        return f"{sign}${text}M"
    if amount >= 1_000:
        text = f"{amount / 1_000:.1f}".rstrip("0").rstrip(".")
        return f"{sign}${text}k"
    return f"{sign}${amount:.0f}"


def safe_float(value: Any, default: float | None = 0.0) -> float | None:
    """Convert value to float, returning default for NaN/None/inf."""
    if value is None:
        return default
    try:
        f = float(value)
    except (TypeError, ValueError):
        return default
    return default if (math.isnan(f) or math.isinf(f)) else f


def scrub_nan(obj):
    """Recursively replace NaN/Inf with None in dicts/lists."""
    if isinstance(obj, (float, np.floating)):
        f = float(obj)
        return None if (math.isnan(f) or math.isinf(f)) else f
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, dict):
        return {k: scrub_nan(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [scrub_nan(v) for v in obj]
    return obj
