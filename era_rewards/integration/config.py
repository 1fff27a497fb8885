"""
Runtime configuration for the payout integration layer.

Read from the environment; invalid or out-of-range values fall back to (or are
clamped into) safe defaults rather than failing at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


ENV_SNAPSHOT = "ERA_REWARDS_SNAPSHOT"
ENV_DISPLAY_DECIMALS = "ERA_REWARDS_DISPLAY_DECIMALS"
ENV_STRICT = "ERA_REWARDS_STRICT"
ENV_MAX_WORKERS = "ERA_REWARDS_MAX_WORKERS"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    return default


@dataclass(frozen=True)
class RewardsConfig:
    snapshot_path: Optional[Path] = None
    display_decimals: int = 18
    strict: bool = False
    max_workers: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.display_decimals, int) or isinstance(self.display_decimals, bool):
            raise TypeError("display_decimals must be an int")
        if self.display_decimals < 0:
            raise ValueError(f"display_decimals must be non-negative: {self.display_decimals}")
        if not isinstance(self.max_workers, int) or isinstance(self.max_workers, bool):
            raise TypeError("max_workers must be an int")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1: {self.max_workers}")

    @property
    def display_unit(self) -> int:
        return 10 ** self.display_decimals


def load_config() -> RewardsConfig:
    snapshot = _env_str(ENV_SNAPSHOT, "")
    return RewardsConfig(
        snapshot_path=Path(snapshot) if snapshot else None,
        display_decimals=_env_int(ENV_DISPLAY_DECIMALS, 18, lo=0, hi=36),
        strict=_env_bool(ENV_STRICT, False),
        max_workers=_env_int(ENV_MAX_WORKERS, 1, lo=1, hi=64),
    )
