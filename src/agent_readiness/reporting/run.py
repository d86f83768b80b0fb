from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import typer

from agent_readiness.monitoring.logger import StructuredLogger
from agent_readiness.schemas import CheckResult, RunSummary

Writer = Callable[[str], None]


class TapReporter:
    """Streams TAP-like lines as soon as they are produced."""

    def __init__(self, writer: Writer | None = None) -> None:
        self._writer = writer or typer.echo

    def result(self, check: CheckResult) -> None:
        prefix = "ok" if check.ok else "not ok"
        self._writer(f"{prefix} {check.number} {check.name}")

    def debug(self, message: str) -> None:
        self._writer(f"# DEBUG {message}")


@dataclass
class Run:
    """Counters and recorded checks for one pass of the suite.

    Every ``record`` call is one check: it bumps the total, bumps the
    failure count when the result is false and emits the result line
    before returning.
    """

    reporter: TapReporter = field(default_factory=TapReporter)
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    checks: list[CheckResult] = field(default_factory=list)
    total_checks: int = 0
    failed_checks: int = 0

    def record(self, name: str, result: bool, group: str | None = None) -> bool:
        self.total_checks += 1
        ok = bool(result)
        if not ok:
            self.failed_checks += 1
        check = CheckResult(number=self.total_checks, name=name, ok=ok, group=group)
        self.checks.append(check)
        self.reporter.result(check)
        self.logger.log_event({"event": "check", **check.model_dump()})
        return ok

    def debug(self, message: str) -> None:
        self.reporter.debug(message)

    @property
    def exit_code(self) -> int:
        return self.failed_checks

    def summary(self, groups: dict[str, str] | None = None) -> RunSummary:
        return RunSummary(
            total_checks=self.total_checks,
            failed_checks=self.failed_checks,
            exit_code=self.exit_code,
            groups=dict(groups or {}),
            checks=list(self.checks),
        )
