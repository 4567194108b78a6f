# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vmboot/bootstrap/errors.py
class BootstrapError(RuntimeError):
    """Base class for SSH bootstrap failures."""

class TransientError(BootstrapError):
    """Failure that is expected to clear up on a later attempt."""

class TransientConnectError(TransientError):
    """Raised when the transport to the host cannot be opened."""

class TransientAuthError(TransientError):
    """Raised when the authentication exchange breaks mid-handshake."""

class TargetResolutionError(BootstrapError):
    """Raised when an instance record has no usable address or login."""

class KeyMaterialError(BootstrapError):
    """Raised when the private key cannot be parsed."""

class MissingNodeError(BootstrapError):
    """Raised when a bootstrap is requested without a backing node."""

class BootstrapFailed(BootstrapError):
    """Raised by BootstrapOutcome.unwrap() on a failed outcome."""
