"""
Mutation dispatcher.

Runs create/update/delete/status actions against the backend and reports each
outcome through the notifier. Destructive actions must be armed for the same
target first. The dispatcher never touches rows: on success it hands the
outcome to ``on_success`` and the page controller re-fetches.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from modules.api_client.envelopes import MutationEnvelope
from modules.api_client.errors import BackendClientError, InvalidInputError, UnauthenticatedError

from .models import MutationIntent, MutationKind, MutationOutcome

logger = logging.getLogger(__name__)

CONFIRMATION_REQUIRED_MESSAGE = "Please confirm this action first."

Handler = Callable[[Any, MutationIntent], Awaitable[MutationEnvelope]]


@dataclass(frozen=True)
class MutationAction:
    """
    One action a page offers.

    ``handler`` receives the page's resource API and the intent and returns the
    backend envelope. Payload validation happens inside the resource API, before
    any request is built.
    """

    name: str
    kind: MutationKind
    handler: Handler
    success_message: str
    requires_confirmation: bool = False
    requires_target: bool = True


class MutationDispatcher:
    """Sends one intent at a time and turns its result into a notification."""

    def __init__(self, api: Any, notifier, on_success: Optional[Callable[[MutationOutcome], None]] = None):
        self._api = api
        self._notifier = notifier
        self._pending_target: Optional[str] = None
        self.on_success = on_success

    @property
    def pending_target(self) -> Optional[str]:
        return self._pending_target

    def arm(self, target_id: str) -> None:
        """Ask for confirmation of a destructive action on ``target_id``."""
        if not target_id or not str(target_id).strip():
            raise InvalidInputError("A target is required to confirm an action.")
        self._pending_target = str(target_id).strip()
        logger.debug(f"Armed confirmation for {self._pending_target}")

    def cancel(self) -> None:
        """Disarm without contacting the backend."""
        if self._pending_target is not None:
            logger.debug(f"Cancelled confirmation for {self._pending_target}")
        self._pending_target = None

    def _fail(self, intent: MutationIntent, message: str) -> MutationOutcome:
        self._notifier.notify_error(message)
        return MutationOutcome(success=False, message=message, intent=intent)

    async def dispatch(self, intent: MutationIntent, action: MutationAction) -> MutationOutcome:
        """
        Run ``action`` for ``intent``.

        Returns:
            The outcome; failures are reported, never raised

        Raises:
            UnauthenticatedError: When the token is missing or rejected
        """
        if action.requires_target and not intent.target_id:
            return self._fail(intent, "Unable to continue: missing identifier.")

        if action.requires_confirmation and (
            self._pending_target is None or self._pending_target != intent.target_id
        ):
            logger.info(f"Rejected unconfirmed {intent.action} on {intent.target_id}")
            return self._fail(intent, CONFIRMATION_REQUIRED_MESSAGE)

        try:
            envelope = await action.handler(self._api, intent)
        except UnauthenticatedError:
            raise
        except InvalidInputError as e:
            logger.info(f"Invalid input for {intent.action}: {e.message}")
            return self._fail(intent, e.message)
        except BackendClientError as e:
            logger.warning(f"{intent.action} on {intent.target_id} failed: {e.message}")
            return self._fail(intent, e.message)

        message = envelope.message or action.success_message
        self._notifier.notify_success(message)
        self._pending_target = None
        outcome = MutationOutcome(success=True, message=message, intent=intent, data=envelope.data)
        logger.info(f"{intent.action} on {intent.target_id} succeeded")
        if self.on_success is not None:
            self.on_success(outcome)
        return outcome
