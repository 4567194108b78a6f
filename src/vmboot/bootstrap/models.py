# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vmboot/bootstrap/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

from .errors import BootstrapFailed

DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_DELAY_MS = 15000


@dataclass(frozen=True)
class KeyPair:
    """
    SSH identity handed over by the key store.

    username records who the key was issued for. The login actually used is
    InstanceRecord.ssh_user; the two normally match.
    """
    private_key: str              # PEM / OpenSSH private key text
    username: str

    def __repr__(self) -> str:
        return f"KeyPair(username={self.username!r}, private_key=<redacted>)"


@dataclass
class InstanceRecord:
    """
    Represents a provisioned VM as reported by the compute API.
    """
    name: str
    ssh_user: str
    zone: Optional[str] = None
    internal_address: Optional[str] = None
    external_address: Optional[str] = None
    ssh_port: int = 22
    key_pair: Optional[KeyPair] = None


@dataclass(frozen=True)
class TargetDescriptor:
    host: str
    port: int
    username: str

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


def constant_delay(delay_ms: int) -> Callable[[int], float]:
    """
    Fixed backoff: every attempt waits the same number of seconds.
    """
    seconds = delay_ms / 1000.0

    def _delay(attempt: int) -> float:
        return seconds

    return _delay


@dataclass(frozen=True)
class RetryPolicy:
    """
    max_attempts: number of connect+auth attempts (0 means never try)
    delay_ms:     pause between attempts
    strategy:     optional override mapping attempt number -> seconds
    """
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_ms: int = DEFAULT_DELAY_MS
    strategy: Optional[Callable[[int], float]] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.max_attempts < 0:
            raise ValueError(f"max_attempts must be >= 0, got {self.max_attempts}")
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {self.delay_ms}")

    def delay_for(self, attempt: int) -> float:
        strategy = self.strategy or constant_delay(self.delay_ms)
        return strategy(attempt)


class AttemptResult(Enum):
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    TRANSIENT_ERROR = "transient_error"


class FailureReason(Enum):
    NO_CREDENTIALS = "no_credentials"
    EXHAUSTED = "exhausted"
    UNEXPECTED = "unexpected"


@dataclass
class Success:
    session: Any                  # open, authenticated paramiko.Transport
    attempts: int

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.session


@dataclass(frozen=True)
class Failure:
    reason: FailureReason
    detail: str
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise BootstrapFailed(f"{self.reason.value}: {self.detail}")


BootstrapOutcome = Union[Success, Failure]
