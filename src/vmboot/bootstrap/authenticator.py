# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vmboot/bootstrap/authenticator.py

from __future__ import annotations

import io
from typing import Optional

import paramiko

from .errors import KeyMaterialError, TransientAuthError
from .models import KeyPair

# ED25519 first (most modern), then RSA, then ECDSA
_KEY_CLASSES = (
    paramiko.Ed25519Key,
    paramiko.RSAKey,
    paramiko.ECDSAKey,
)


def load_private_key(material: str, passphrase: Optional[str] = None) -> paramiko.PKey:
    """
    Parse private key text, trying each supported key type in turn.
    """
    for key_cls in _KEY_CLASSES:
        try:
            return key_cls.from_private_key(io.StringIO(material), password=passphrase)
        except (paramiko.SSHException, ValueError):
            continue
    raise KeyMaterialError("Unsupported or malformed private key")


class PublicKeyAuthenticator:
    def authenticate(self, session: paramiko.Transport, key_pair: KeyPair, username: str) -> bool:
        pkey = load_private_key(key_pair.private_key)
        try:
            session.auth_publickey(username, pkey)
        except paramiko.AuthenticationException:
            return False
        except (paramiko.SSHException, OSError, EOFError) as e:
            raise TransientAuthError(
                f"Authentication exchange as '{username}' broke ({type(e).__name__}: {e})"
            ) from e
        return session.is_authenticated()
