"""Version acceptance rules, one per probed dependency.

Each rule answers accept or reject. There is no warning tier.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

LUA_ENOUGH = 503.0
LUA_TOO_MUCH = 504.0

LWS_EXACT_VERSION = "4.0.16 "

# OpenSSL version nybbles are MNNFFPPS: major minor fix patch status.
# 0x100020bf is 1.0.2b release.
OPENSSL_MIN_VERSION_NUM = 0x100020BF
SSLEAY_MIN = 0x100020BF

OPENSSL_VERSION_NUM = "OpenSSL_version_num"
SSLEAY = "SSLeay"

OPENSSL_THRESHOLDS: dict[str, int] = {
    OPENSSL_VERSION_NUM: OPENSSL_MIN_VERSION_NUM,
    SSLEAY: SSLEAY_MIN,
}


def accepts_range(
    version: float | None,
    lower: float = LUA_ENOUGH,
    upper: float = LUA_TOO_MUCH,
) -> bool:
    """Half-open interval: ``lower <= version < upper``."""
    if version is None:
        return False
    return lower <= version < upper


def accepts_prefix(version: str | None, prefix: str = LWS_EXACT_VERSION) -> bool:
    """Strict pin on the leading characters of a version string."""
    if version is None or len(version) < len(prefix):
        return False
    return version[: len(prefix)] == prefix


@dataclass(frozen=True)
class AccessorReading:
    accessor: str
    value: int


@dataclass(frozen=True)
class OpenSSLVerdict:
    accessor: str | None
    version_ok: bool
    version_source: str | None = None

    @property
    def has_accessor(self) -> bool:
        return self.accessor is not None


def evaluate_openssl(
    readings: Iterable[AccessorReading],
    thresholds: dict[str, int] | None = None,
) -> OpenSSLVerdict:
    """Threshold check with fallback between the two OpenSSL accessors.

    Readings are taken in probe order. The last present accessor is
    reported as the one in use, and the version passes if any reading
    meets its own threshold.
    """
    limits = thresholds or OPENSSL_THRESHOLDS
    accessor: str | None = None
    version_source: str | None = None
    for reading in readings:
        accessor = reading.accessor
        if reading.value >= limits[reading.accessor]:
            version_source = reading.accessor
    return OpenSSLVerdict(
        accessor=accessor,
        version_ok=version_source is not None,
        version_source=version_source,
    )
