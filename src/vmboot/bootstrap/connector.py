# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vmboot/bootstrap/connector.py

from __future__ import annotations

import logging
import socket

import paramiko

from .errors import TransientConnectError
from .models import TargetDescriptor

log = logging.getLogger("vmboot")


class ParamikoConnector:
    """
    Opens a bare SSH transport (TCP + key exchange, no auth yet).

    Freshly booted VMs refuse connections or hang on the banner for a while,
    so every failure here is reported as TransientConnectError.
    """

    def __init__(self, connect_timeout: float = 15.0, banner_timeout: float = 15.0):
        self.connect_timeout = connect_timeout
        self.banner_timeout = banner_timeout

    def open(self, target: TargetDescriptor) -> paramiko.Transport:
        try:
            sock = socket.create_connection(
                (target.host, target.port), timeout=self.connect_timeout
            )
        except OSError as e:
            raise TransientConnectError(
                f"Cannot reach {target.address} ({type(e).__name__}: {e})"
            ) from e

        try:
            transport = paramiko.Transport(sock)
        except (paramiko.SSHException, OSError, EOFError) as e:
            sock.close()
            raise TransientConnectError(
                f"Cannot start SSH transport to {target.address} ({type(e).__name__}: {e})"
            ) from e

        transport.banner_timeout = self.banner_timeout
        try:
            transport.start_client(timeout=self.connect_timeout)
        except (paramiko.SSHException, OSError, EOFError) as e:
            transport.close()
            raise TransientConnectError(
                f"SSH handshake with {target.address} failed ({type(e).__name__}: {e})"
            ) from e

        log.debug("[ssh] transport open to %s", target.address)
        return transport
