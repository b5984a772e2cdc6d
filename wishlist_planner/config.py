"""Central configuration: every magic number in one place."""

from __future__ import annotations

import os
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ScheduleConfig:
    default_horizon: int = 6      # Rounds planned, starting at the current round
    max_horizon: int = 24
    max_wishlist_size: int = 30
    ledger_tolerance: float = 1e-6  # Float slack when checking round spend


# ---------------------------------------------------------------------------
# Confidence scoring
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ConfidenceConfig:
    full_margin_ratio: float = 0.15   # Margin at/above which the base score is 100
    bye_window: int = 2               # Bye within this many rounds is penalised
    bye_penalty: float = 10.0
    volatility_window: int = 3        # Rounds looked back for price swings
    volatility_threshold: float = 0.10
    volatility_penalty: float = 10.0
    max_penalty: float = 20.0
    low_confidence: int = 50          # Below this a scheduled trade gets a warning
    high_label: int = 75
    medium_label: int = 50


# ---------------------------------------------------------------------------
# Cash generation
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CashConfig:
    max_trades_per_round: int = 3   # Mirrors the competition's trade limit
    heavy_sell_threshold: int = 2   # Steps selling more than this get a warning


# ---------------------------------------------------------------------------
# Cache TTLs (seconds)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CacheConfig:
    player_catalog: int = 6 * 3600   # 6 hours
    projections: int = 30 * 60       # 30 minutes


# ---------------------------------------------------------------------------
# Data source
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class DataConfig:
    pricing_api_base: str = os.environ.get(
        "WISHLIST_PRICING_API", "http://127.0.0.1:8000/api",
    )
    request_timeout: int = 30
    max_workers: int = 8


# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 9874


# ---------------------------------------------------------------------------
# Singleton instances (importable as `from wishlist_planner.config import schedule_cfg, ...`)
# ---------------------------------------------------------------------------
schedule_cfg = ScheduleConfig()
confidence_cfg = ConfidenceConfig()
cash_cfg = CashConfig()
cache_cfg = CacheConfig()
data_cfg = DataConfig()
server_cfg = ServerConfig()
