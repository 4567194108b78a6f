# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vmboot/bootstrap/controller.py

from __future__ import annotations

import functools
import logging
import time
import uuid
from typing import Any, Callable, Optional, Tuple

from vmboot.observers.dispatcher import EventBus
from vmboot.observers.events import (
    AttemptErrored,
    AttemptFailed,
    AuthAttempt,
    BaseEvent,
    BootstrapAborted,
    BootstrapGaveUp,
    BootstrapStarted,
    BootstrapSucceeded,
    CredentialsMissing,
    new_ctx,
)

from .errors import TransientError
from .interface import Authenticator, Connector
from .models import (
    AttemptResult,
    BootstrapOutcome,
    Failure,
    FailureReason,
    InstanceRecord,
    KeyPair,
    RetryPolicy,
    Success,
    TargetDescriptor,
)
from .target import resolve_target

log = logging.getLogger("vmboot")


class BootstrapController:
    """
    Drives connect -> authenticate attempts against a freshly provisioned VM
    until one succeeds or the retry policy runs out.

    Ownership of the session:
      - a session that authenticates is handed to the caller inside Success
      - every other session is closed before the next attempt or before
        bootstrap() returns

    Transient errors (TransientError) are retried. Anything else aborts the
    run immediately with Failure(UNEXPECTED), including an interruption of
    the pause between attempts.
    """

    def __init__(
        self,
        connector: Connector,
        authenticator: Authenticator,
        policy: Optional[RetryPolicy] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        bus: Optional[EventBus] = None,
        run_id: Optional[str] = None,
    ):
        self.connector = connector
        self.authenticator = authenticator
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.bus = bus or EventBus()
        self.run_id = run_id

    # ------------------ helpers ------------------

    def _emit(self, event: BaseEvent) -> None:
        self.bus.emit(event)

    def _close(self, session: Any) -> None:
        try:
            session.close()
        except Exception as e:
            # the socket may already be gone
            log.debug("[ssh] ignoring error while closing session: %s", e)

    def _attempt(
        self, target: TargetDescriptor, key_pair: KeyPair, attempt: int, ctx: Callable[[], dict]
    ) -> Tuple[AttemptResult, Any]:
        """
        One connect + authenticate round.

        Returns (AUTHENTICATED, session) on success. For every other result
        the session has already been closed and None is returned with it.
        """
        try:
            session = self.connector.open(target)
        except TransientError as e:
            self._emit(AttemptErrored(**ctx(), attempt=attempt, error=str(e)))
            return AttemptResult.TRANSIENT_ERROR, None

        try:
            authenticated = self.authenticator.authenticate(session, key_pair, target.username)
        except TransientError as e:
            self._emit(AttemptErrored(**ctx(), attempt=attempt, error=str(e)))
            self._close(session)
            return AttemptResult.TRANSIENT_ERROR, None
        except BaseException:
            self._close(session)
            raise

        if authenticated:
            return AttemptResult.AUTHENTICATED, session

        self._close(session)
        return AttemptResult.REJECTED, None

    # ------------------ public API ------------------

    def bootstrap(
        self,
        instance: InstanceRecord,
        key_pair: Optional[KeyPair],
        use_internal_address: bool = False,
    ) -> BootstrapOutcome:
        run_id = self.run_id or str(uuid.uuid4())
        # fresh ts per event, one run_id per call
        ctx = functools.partial(new_ctx, instance=instance.name, zone=instance.zone, run_id=run_id)

        if key_pair is None:
            self._emit(CredentialsMissing(**ctx()))
            return Failure(
                FailureReason.NO_CREDENTIALS,
                f"No SSH keypair available for instance {instance.name}",
                attempts=0,
            )

        policy = self.policy
        attempt = 0
        try:
            target = resolve_target(instance, use_internal_address)
            self._emit(BootstrapStarted(**ctx(), target=target.address, max_attempts=policy.max_attempts))

            remaining = policy.max_attempts
            while remaining > 0:
                remaining -= 1
                attempt += 1
                self._emit(AuthAttempt(
                    **ctx(), username=target.username, attempt=attempt, max_attempts=policy.max_attempts,
                ))

                result, session = self._attempt(target, key_pair, attempt, ctx)
                if result is AttemptResult.AUTHENTICATED:
                    self._emit(BootstrapSucceeded(**ctx(), attempts=attempt))
                    return Success(session=session, attempts=attempt)

                if remaining == 0:
                    self._emit(AttemptFailed(**ctx(), attempt=attempt, result=result.value))
                    break

                delay = policy.delay_for(attempt)
                self._emit(AttemptFailed(**ctx(), attempt=attempt, result=result.value, retry_in_s=delay))
                self.sleep(delay)

        except Exception as e:
            self._emit(BootstrapAborted(**ctx(), attempts=attempt, error=f"{type(e).__name__}: {e}"))
            return Failure(
                FailureReason.UNEXPECTED,
                f"Failed to authenticate with exception: {type(e).__name__}: {e}",
                attempts=attempt,
            )

        self._emit(BootstrapGaveUp(**ctx(), attempts=attempt))
        return Failure(
            FailureReason.EXHAUSTED,
            f"Authentication failed after {attempt} attempt(s)",
            attempts=attempt,
        )
