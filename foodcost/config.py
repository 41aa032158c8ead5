"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_SNAPSHOT = Path("data") / "snapshot.json"


@dataclass(frozen=True)
class Settings:
    snapshot_path: Path = DEFAULT_SNAPSHOT
    locale: str = "it_IT"
    currency: str = "EUR"
    price_step: float = 0.50
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            snapshot_path=Path(os.getenv("FOODCOST_SNAPSHOT", str(DEFAULT_SNAPSHOT))),
            locale=os.getenv("FOODCOST_LOCALE", "it_IT"),
            currency=os.getenv("FOODCOST_CURRENCY", "EUR").upper(),
            price_step=float(os.getenv("FOODCOST_PRICE_STEP", "0.50")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
