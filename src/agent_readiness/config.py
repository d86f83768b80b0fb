from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _env_path(key: str) -> Path | None:
    value = os.environ.get(key)
    if not value:
        return None
    return Path(value)


@dataclass
class Settings:
    """Runtime settings derived from environment variables.

    Only the reporting side is configurable. Library names, symbols and
    version pins are fixed in ``agent_readiness.probing``.
    """

    event_log: Path | None = None
    summary_path: Path | None = None

    def __post_init__(self) -> None:
        if self.event_log is not None:
            self.event_log = Path(self.event_log)
        if self.summary_path is not None:
            self.summary_path = Path(self.summary_path)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        event_log=_env_path("AGENT_READINESS_EVENT_LOG"),
        summary_path=_env_path("AGENT_READINESS_SUMMARY"),
    )
