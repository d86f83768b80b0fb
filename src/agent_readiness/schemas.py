from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int = Field(ge=1)
    name: str
    ok: bool
    group: str | None = None


class RunSummary(BaseModel):
    total_checks: int
    failed_checks: int
    exit_code: int
    groups: dict[str, str] = Field(default_factory=dict)
    checks: list[CheckResult] = Field(default_factory=list)
