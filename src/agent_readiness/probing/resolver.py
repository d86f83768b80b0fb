from __future__ import annotations

import ctypes
import os
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol

Accessor = Callable[[], Any]

LOAD_MODE = getattr(os, "RTLD_LAZY", ctypes.DEFAULT_MODE)


class Signature(str, Enum):
    """Shapes of the version accessors the suite knows how to call."""

    NUMBER_POINTER = "number_pointer"  # const double *fn(void *)
    C_STRING = "c_string"  # const char *fn(void)
    UNSIGNED_LONG = "unsigned_long"  # unsigned long fn(void)
    SIGNED_LONG = "signed_long"  # long fn(void)


class LibraryProbe(Protocol):
    def open(self, soname: str) -> object | None:
        ...

    def resolve(self, handle: object, symbol: str, signature: Signature) -> Accessor | None:
        ...


def _read_number_pointer(fn: Any) -> Accessor:
    fn.restype = ctypes.POINTER(ctypes.c_double)
    fn.argtypes = [ctypes.c_void_p]

    def read() -> float | None:
        pointer = fn(None)
        if not pointer:
            return None
        return float(pointer.contents.value)

    return read


def _read_c_string(fn: Any) -> Accessor:
    fn.restype = ctypes.c_char_p
    fn.argtypes = []

    def read() -> str | None:
        raw = fn()
        if raw is None:
            return None
        return raw.decode("utf-8", errors="replace")

    return read


def _read_integer(fn: Any, ctype: type[Any]) -> Accessor:
    fn.restype = ctype
    fn.argtypes = []

    def read() -> int:
        return int(fn())

    return read


class CtypesLibraryProbe:
    """Native loader backed by ``ctypes``.

    Handles are never released; the probe process exits right after the
    suite, so their lifetime is the process lifetime.
    """

    def __init__(self, mode: int = LOAD_MODE) -> None:
        self.mode = mode

    def open(self, soname: str) -> ctypes.CDLL | None:
        try:
            return ctypes.CDLL(soname, mode=self.mode)
        except OSError:
            return None

    def resolve(self, handle: object, symbol: str, signature: Signature) -> Accessor | None:
        try:
            fn = getattr(handle, symbol)
        except AttributeError:
            return None
        if signature is Signature.NUMBER_POINTER:
            return _read_number_pointer(fn)
        if signature is Signature.C_STRING:
            return _read_c_string(fn)
        if signature is Signature.UNSIGNED_LONG:
            return _read_integer(fn, ctypes.c_ulong)
        if signature is Signature.SIGNED_LONG:
            return _read_integer(fn, ctypes.c_long)
        raise ValueError(f"Unsupported accessor signature {signature}")
