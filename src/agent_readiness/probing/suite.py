from __future__ import annotations

import ctypes
from collections.abc import Callable
from typing import cast

from agent_readiness.probing.groups import (
    STATE_LOADED,
    STATE_SYMBOL_FOUND,
    STATE_VERSION_OK,
    ProbeContext,
    ProbeGroup,
    ProbeStep,
)
from agent_readiness.probing.policy import (
    OPENSSL_VERSION_NUM,
    SSLEAY,
    AccessorReading,
    OpenSSLVerdict,
    accepts_prefix,
    accepts_range,
    evaluate_openssl,
)
from agent_readiness.probing.resolver import Accessor, LibraryProbe, Signature
from agent_readiness.reporting.run import Run

ProbeTask = Callable[[ProbeContext], bool]

# Negative SSLeay() readings print as their unsigned long bit pattern.
ULONG_MASK = (1 << (8 * ctypes.sizeof(ctypes.c_ulong))) - 1

LIBLUA = "liblua.so"
LIBWEBSOCKETS = "libwebsockets.so"
LIBSSL = "libssl.so.1.0.0"

LUA_VERSION = "lua_version"
LWS_GET_LIBRARY_VERSION = "lws_get_library_version"

# Probe order matters: when both exist the later accessor is reported.
OPENSSL_ACCESSORS: list[tuple[str, Signature]] = [
    (OPENSSL_VERSION_NUM, Signature.UNSIGNED_LONG),
    (SSLEAY, Signature.SIGNED_LONG),
]


def _probe(context: ProbeContext) -> LibraryProbe:
    return cast(LibraryProbe, context["probe"])


def _run(context: ProbeContext) -> Run:
    return cast(Run, context["run"])


def _open_task(soname: str) -> ProbeTask:
    def task(context: ProbeContext) -> bool:
        handle = _probe(context).open(soname)
        context["handle"] = handle
        return handle is not None

    return task


def _resolve_task(symbol: str, signature: Signature) -> ProbeTask:
    def task(context: ProbeContext) -> bool:
        accessor = _probe(context).resolve(context["handle"], symbol, signature)
        context["accessor"] = accessor
        return accessor is not None

    return task


def _lua_version_task(context: ProbeContext) -> bool:
    accessor = cast(Accessor, context["accessor"])
    version = accessor()
    if version is None:
        _run(context).debug(f"{LUA_VERSION} = NULL")
        return False
    _run(context).debug(f"{LUA_VERSION} = {version:f}")
    return accepts_range(version)


def _lws_version_task(context: ProbeContext) -> bool:
    accessor = cast(Accessor, context["accessor"])
    version = accessor()
    if version is None:
        _run(context).debug(f"{LWS_GET_LIBRARY_VERSION} = NULL")
        return False
    _run(context).debug(f"{LWS_GET_LIBRARY_VERSION} = '{version}'")
    return accepts_prefix(version)


def _openssl_accessor_task(context: ProbeContext) -> bool:
    probe = _probe(context)
    run = _run(context)
    readings: list[AccessorReading] = []
    for symbol, signature in OPENSSL_ACCESSORS:
        accessor = probe.resolve(context["handle"], symbol, signature)
        if accessor is None:
            continue
        value = int(accessor())
        run.debug(f"{symbol}() = 0x{value & ULONG_MASK:x}")
        readings.append(AccessorReading(accessor=symbol, value=value))
    verdict = evaluate_openssl(readings)
    context["verdict"] = verdict
    return verdict.has_accessor


def _openssl_version_task(context: ProbeContext) -> bool:
    verdict = cast(OpenSSLVerdict, context["verdict"])
    return verdict.version_ok


def build_probe_groups() -> list[ProbeGroup]:
    lua = ProbeGroup(
        name="lua",
        steps=[
            ProbeStep(LIBLUA, _open_task(LIBLUA), STATE_LOADED),
            ProbeStep(
                LUA_VERSION,
                _resolve_task(LUA_VERSION, Signature.NUMBER_POINTER),
                STATE_SYMBOL_FOUND,
            ),
            ProbeStep("Lua interpreter version 5.3", _lua_version_task, STATE_VERSION_OK),
        ],
    )
    libwebsockets = ProbeGroup(
        name="libwebsockets",
        steps=[
            ProbeStep(LIBWEBSOCKETS, _open_task(LIBWEBSOCKETS), STATE_LOADED),
            ProbeStep(
                LWS_GET_LIBRARY_VERSION,
                _resolve_task(LWS_GET_LIBRARY_VERSION, Signature.C_STRING),
                STATE_SYMBOL_FOUND,
            ),
            ProbeStep("libwebsockets version 4.0.16", _lws_version_task, STATE_VERSION_OK),
        ],
    )
    libssl = ProbeGroup(
        name="libssl",
        steps=[
            ProbeStep(LIBSSL, _open_task(LIBSSL), STATE_LOADED),
            ProbeStep(
                f"{OPENSSL_VERSION_NUM} || {SSLEAY}",
                _openssl_accessor_task,
                STATE_SYMBOL_FOUND,
            ),
            ProbeStep("OpenSSL version >= 1.0.2b", _openssl_version_task, STATE_VERSION_OK),
        ],
    )
    return [lua, libwebsockets, libssl]


def check_names() -> list[str]:
    return [name for group in build_probe_groups() for name in group.step_names()]


def run_suite(probe: LibraryProbe, run: Run) -> dict[str, str]:
    """Run every group to completion and return each group's terminal state."""
    outcomes: dict[str, str] = {}
    for group in build_probe_groups():
        context: ProbeContext = {"probe": probe, "run": run}
        outcomes[group.name] = group.execute(run, context)
    return outcomes
