"""Environment-driven settings.

Read at call time, never at import time, so tests and the CLI runner can
point the process at a different data directory through the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from depletion.domain.service.rate_estimator import DEFAULT_RATE_STRATEGY, RateStrategy

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    rate_strategy: RateStrategy
    environment: str

    @property
    def store_file(self) -> Path:
        return self.data_dir / "inventory.json"

    @classmethod
    def from_env(cls) -> Settings:
        data_dir = os.getenv("DEPLETION_DATA_DIR")
        return cls(
            data_dir=Path(data_dir) if data_dir else _DEFAULT_DATA_DIR,
            rate_strategy=parse_rate_strategy(
                os.getenv("DEPLETION_RATE_STRATEGY", DEFAULT_RATE_STRATEGY.value)
            ),
            environment=get_environment(),
        )


def get_environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def parse_rate_strategy(raw: str) -> RateStrategy:
    try:
        return RateStrategy(raw.strip().lower())
    except ValueError:
        choices = ", ".join(s.value for s in RateStrategy)
        raise ValueError(
            f"Unknown DEPLETION_RATE_STRATEGY {raw!r}; expected one of: {choices}"
        ) from None
