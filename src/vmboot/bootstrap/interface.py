# vmboot/src/vmboot/bootstrap/interface.py

from __future__ import annotations
from typing import Any, Protocol
from .models import KeyPair, TargetDescriptor

class Connector(Protocol):
    """
    Opens one transport-level session per call.
    Must raise TransientError for anything worth retrying.
    """

    def open(self, target: TargetDescriptor) -> Any:
        ...

class Authenticator(Protocol):
    """
    Proves identity on an open session.
    Returns False on an ordinary rejection and raises TransientError on I/O trouble.
    """

    def authenticate(self, session: Any, key_pair: KeyPair, username: str) -> bool:
        ...
