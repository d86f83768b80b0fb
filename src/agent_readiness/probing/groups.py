from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from agent_readiness.reporting.run import Run

STATE_NOT_STARTED = "not_started"
STATE_LOADED = "loaded"
STATE_SYMBOL_FOUND = "symbol_found"
STATE_VERSION_OK = "version_ok"
STATE_FAILED = "failed"

ProbeContext = dict[str, object]


@dataclass
class ProbeStep:
    name: str
    fn: Callable[[ProbeContext], bool]
    reaches: str

    def run(self, context: ProbeContext) -> bool:
        return bool(self.fn(context))


class ProbeGroup:
    """Ordered checks for one dependency: load, resolve, then version.

    After the first failing step the group is ``failed``; later steps are
    still recorded, as failures, but their ``fn`` is never called.
    """

    def __init__(self, name: str, steps: list[ProbeStep]) -> None:
        self.name = name
        self.steps = steps
        self._validate_steps()

    def _validate_steps(self) -> None:
        seen: set[str] = set()
        for step in self.steps:
            if step.name in seen:
                raise ValueError(f"Group {self.name} has duplicate step {step.name}")
            seen.add(step.name)

    def execute(self, run: Run, context: ProbeContext | None = None) -> str:
        context = {} if context is None else context
        state = STATE_NOT_STARTED
        for step in self.steps:
            result = state != STATE_FAILED and step.run(context)
            run.record(step.name, result, group=self.name)
            if state != STATE_FAILED:
                state = step.reaches if result else STATE_FAILED
        run.logger.log_event({"event": "group_finished", "group": self.name, "state": state})
        return state

    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]
