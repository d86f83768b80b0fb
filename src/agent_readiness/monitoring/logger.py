from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from agent_readiness.utils.io import append_jsonl


class StructuredLogger:
    """Append-only JSONL event log. Without a path every call is a no-op."""

    def __init__(self, jsonl_path: Path | None = None) -> None:
        self.jsonl_path = jsonl_path

    @property
    def enabled(self) -> bool:
        return self.jsonl_path is not None

    def log_event(self, payload: dict[str, Any]) -> None:
        if self.jsonl_path is None:
            return
        enriched = {"timestamp": datetime.now(timezone.utc).isoformat(), **payload}
        append_jsonl(enriched, self.jsonl_path)
