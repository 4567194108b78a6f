# src/vmboot/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, ClassVar, Dict, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str                 # ISO timestamp
    run_id: str             # correlates all events of one bootstrap call
    instance: str           # instance name
    zone: Optional[str]

    level: ClassVar[str] = "info"

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_ctx(instance: str, zone: Optional[str] = None, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": _utcnow().isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "instance": instance,
        "zone": zone,
    }


# ---------------------------------------------------------------------
# Bootstrap lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BootstrapStarted(BaseEvent):
    target: str
    max_attempts: int

@dataclass(frozen=True)
class CredentialsMissing(BaseEvent):
    level: ClassVar[str] = "error"

@dataclass(frozen=True)
class AuthAttempt(BaseEvent):
    username: str
    attempt: int
    max_attempts: int

@dataclass(frozen=True)
class AttemptErrored(BaseEvent):
    attempt: int
    error: str

    level: ClassVar[str] = "error"

@dataclass(frozen=True)
class AttemptFailed(BaseEvent):
    attempt: int
    result: str             # "rejected" | "transient_error"
    retry_in_s: Optional[float] = None

    level: ClassVar[str] = "warning"

@dataclass(frozen=True)
class BootstrapSucceeded(BaseEvent):
    attempts: int

@dataclass(frozen=True)
class BootstrapGaveUp(BaseEvent):
    attempts: int

    level: ClassVar[str] = "warning"

@dataclass(frozen=True)
class BootstrapAborted(BaseEvent):
    attempts: int
    error: str

    level: ClassVar[str] = "error"
