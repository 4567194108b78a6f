# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vmboot/bootstrap/launcher.py

from __future__ import annotations

import logging
from typing import Optional

from vmboot.observers.events import BootstrapAborted, new_ctx

from .controller import BootstrapController
from .errors import MissingNodeError
from .models import BootstrapOutcome, Failure, FailureReason, InstanceRecord

log = logging.getLogger("vmboot")


class LinuxLauncher:
    """
    Entry point used by node-lifecycle code to get a first SSH session on a
    Linux guest.
    """

    path_separator = "/"

    def __init__(self, controller: BootstrapController, use_internal_address: bool = False):
        self.controller = controller
        self.use_internal_address = use_internal_address

    def setup_connection(self, node: Optional[InstanceRecord]) -> BootstrapOutcome:
        if node is None:
            err = MissingNodeError("A launcher call with no node was provided")
            self.controller.bus.emit(
                BootstrapAborted(**new_ctx(instance="<none>"), attempts=0, error=str(err))
            )
            return Failure(FailureReason.UNEXPECTED, str(err), attempts=0)

        if node.key_pair is None:
            log.error("Failed to retrieve SSH keypair for instance: %s", node.name)

        log.info("[%s] bootstrap", node.name)
        outcome = self.controller.bootstrap(
            node, node.key_pair, use_internal_address=self.use_internal_address
        )
        if not outcome.ok:
            log.warning("[%s] bootstrap result failed (%s)", node.name, outcome.reason.value)
        return outcome
