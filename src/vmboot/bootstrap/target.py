# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vmboot/bootstrap/target.py

from __future__ import annotations

from .errors import TargetResolutionError
from .models import InstanceRecord, TargetDescriptor


def resolve_target(instance: InstanceRecord, use_internal_address: bool = False) -> TargetDescriptor:
    """
    Pick the address to dial for an instance.

    A missing address for the requested class is a configuration problem,
    so it raises instead of letting the caller retry.
    """
    if use_internal_address:
        host, kind = instance.internal_address, "internal"
    else:
        host, kind = instance.external_address, "external"

    if not host or not host.strip():
        raise TargetResolutionError(
            f"Instance '{instance.name}' has no {kind} address"
        )
    if not instance.ssh_user or not instance.ssh_user.strip():
        raise TargetResolutionError(
            f"Instance '{instance.name}' has no SSH user"
        )
    if not 0 < instance.ssh_port < 65536:
        raise TargetResolutionError(
            f"Instance '{instance.name}' has invalid SSH port {instance.ssh_port}"
        )

    return TargetDescriptor(host=host.strip(), port=instance.ssh_port, username=instance.ssh_user)
