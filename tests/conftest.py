from __future__ import annotations

import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from agent_readiness.config import get_settings
from agent_readiness.probing.resolver import Signature
from agent_readiness.reporting.run import Run, TapReporter

Symbols = dict[str, Callable[[], Any]]


class FakeLibraryProbe:
    """Canned libraries keyed by soname, each a mapping of symbol to accessor."""

    def __init__(self, libraries: dict[str, Symbols] | None = None) -> None:
        self.libraries = libraries or {}
        self.opened: list[str] = []
        self.resolved: list[tuple[str, str, Signature]] = []

    def open(self, soname: str) -> str | None:
        self.opened.append(soname)
        return soname if soname in self.libraries else None

    def resolve(
        self,
        handle: object,
        symbol: str,
        signature: Signature,
    ) -> Callable[[], Any] | None:
        assert isinstance(handle, str), "resolve called without an open handle"
        self.resolved.append((handle, symbol, signature))
        return self.libraries[handle].get(symbol)


def read_events(path: Path) -> list[dict[str, Any]]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [json.loads(line) for line in lines if line.strip()]


def healthy_libraries() -> dict[str, Symbols]:
    return {
        "liblua.so": {"lua_version": lambda: 503.0},
        "libwebsockets.so": {"lws_get_library_version": lambda: "4.0.16 v4.0.16"},
        "libssl.so.1.0.0": {"OpenSSL_version_num": lambda: 0x100020BF},
    }


@pytest.fixture()
def lines() -> list[str]:
    return []


@pytest.fixture()
def run(lines: list[str]) -> Run:
    return Run(reporter=TapReporter(lines.append))


@pytest.fixture()
def healthy_probe() -> FakeLibraryProbe:
    return FakeLibraryProbe(healthy_libraries())


@pytest.fixture()
def empty_probe() -> FakeLibraryProbe:
    return FakeLibraryProbe()


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.delenv("AGENT_READINESS_EVENT_LOG", raising=False)
    monkeypatch.delenv("AGENT_READINESS_SUMMARY", raising=False)
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]
