# src/vmboot/config/models.py

import logging
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field

from vmboot.bootstrap.models import (
    DEFAULT_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    InstanceRecord,
    KeyPair,
    RetryPolicy,
)

log = logging.getLogger("vmboot")


class RetrySpec(BaseModel):
    max_attempts: int = Field(DEFAULT_MAX_ATTEMPTS, ge=0)
    delay_ms: int = Field(DEFAULT_DELAY_MS, ge=0)


class ConnectSpec(BaseModel):
    timeout_s: float = Field(15.0, gt=0)
    banner_timeout_s: float = Field(15.0, gt=0)
    use_internal_address: bool = False


class InstanceSpec(BaseModel):
    """A provisioned instance and where to find its SSH key."""

    name: str
    ssh_user: str
    zone: Optional[str] = None
    internal_address: Optional[str] = None
    external_address: Optional[str] = None
    ssh_port: int = Field(22, ge=1, le=65535)
    private_key_path: Optional[Path] = None

    def _read_key_pair(self) -> Optional[KeyPair]:
        if self.private_key_path is None:
            return None
        key_path = self.private_key_path.expanduser()
        if not key_path.is_file():
            log.warning("SSH private key %s for %s does not exist", key_path, self.name)
            return None

        return KeyPair(
            private_key=key_path.read_text(encoding="utf-8"),
            username=self.ssh_user,
        )

    def to_record(self) -> InstanceRecord:
        return InstanceRecord(
            name=self.name,
            ssh_user=self.ssh_user,
            zone=self.zone,
            internal_address=self.internal_address,
            external_address=self.external_address,
            ssh_port=self.ssh_port,
            key_pair=self._read_key_pair(),
        )


class VmbootConfig(BaseModel):
    retry: RetrySpec = RetrySpec()
    connect: ConnectSpec = ConnectSpec()
    instances: List[InstanceSpec] = Field(default_factory=list)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.retry.max_attempts, delay_ms=self.retry.delay_ms)

    def instance(self, name: str) -> InstanceSpec:
        for spec in self.instances:
            if spec.name == name:
                return spec
        known = ", ".join(sorted(i.name for i in self.instances)) or "<none>"
        raise KeyError(f"Unknown instance '{name}' (known: {known})")
