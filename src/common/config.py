# src/common/config.py

import os
from dataclasses import dataclass, replace
from typing import Optional

from .constants import BACKENDS

# Environment switches:
#   POKER_WORKERS=<n>            number of workers (0 = serial)
#   POKER_BACKEND=process|thread
#   POKER_SEED=<int>             base seed, unset for OS entropy
#   POKER_POLL_INTERVAL=<sec>    coordinator idle sleep
#   POKER_TIMEOUT=<sec>          abort the run after this long


def default_workers() -> int:
    return max(1, (os.cpu_count() or 2) - 1)


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class SimulationConfig:
    workers: int = 1
    backend: str = "process"
    seed: Optional[int] = None
    poll_interval: float = 0.001
    timeout: Optional[float] = None

    @property
    def serial(self) -> bool:
        return self.workers == 0

    def validate(self) -> "SimulationConfig":
        if self.workers < 0:
            raise ValueError(f"workers must be >= 0, got {self.workers}")
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {sorted(BACKENDS)}, got {self.backend!r}")
        if self.poll_interval < 0:
            raise ValueError("poll_interval must be >= 0")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        return self

    def with_overrides(self, **changes) -> "SimulationConfig":
        """Apply non-None overrides (e.g. parsed CLI flags)."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes).validate()


def load_config() -> SimulationConfig:
    workers = _env_int("POKER_WORKERS")
    poll = _env_float("POKER_POLL_INTERVAL")
    cfg = SimulationConfig(
        workers=default_workers() if workers is None else workers,
        backend=os.getenv("POKER_BACKEND", "process").strip().lower(),
        seed=_env_int("POKER_SEED"),
        poll_interval=0.001 if poll is None else poll,
        timeout=_env_float("POKER_TIMEOUT"),
    )
    return cfg.validate()
