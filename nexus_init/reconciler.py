"""Idempotent reconciliation of remote resources.

For every resource the reconciler probes existence, creates the resource
when it is absent, re-reads it to confirm, and merges configured members into
collection-valued resources. A resource that is still absent after one
reported creation is a permanent failure.
"""

from __future__ import annotations

import dataclasses
import enum
import http
import typing as typ

from .client import decode_body
from .errors import NexusAPIError, ReconciliationDepthError
from .logging import log_debug, log_info
from .resources import union_members

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .context import ProvisioningContext
    from .resources import RemoteResource

StateT = typ.TypeVar("StateT")

MAX_CREATE_ATTEMPTS = 1
REALMS_PATH = "security/realms/active"
UPDATE_ACCEPTED = frozenset(
    {http.HTTPStatus.OK, http.HTTPStatus.CREATED, http.HTTPStatus.NO_CONTENT}
)


class ReconcileAction(enum.StrEnum):
    """What the reconciler had to do to a resource."""

    FOUND = "found"
    CREATED = "created"
    UPDATED = "updated"


@dataclasses.dataclass(frozen=True, slots=True)
class ReconcileResult(typ.Generic[StateT]):
    """Outcome of reconciling one resource.

    Attributes
    ----------
    key : str
        Identity of the resource.
    action : ReconcileAction
        The last corrective step taken.
    create_calls : int
        Number of creation requests issued.
    state : StateT | None
        The resource as last read or written; ``None`` when the resource was
        created without being re-read.

    """

    key: str
    action: ReconcileAction
    create_calls: int = 0
    state: StateT | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class RealmResult:
    """Outcome of activating realms."""

    active: tuple[str, ...]
    updated: bool


class Reconciler:
    """Drive resources from their observed state to the configured one."""

    def __init__(
        self, context: ProvisioningContext, *, max_attempts: int = MAX_CREATE_ATTEMPTS
    ) -> None:
        """Bind the reconciler to a provisioning context."""
        self._context = context
        self._max_attempts = max_attempts

    def ensure(self, resource: RemoteResource[StateT]) -> ReconcileResult[StateT]:
        """Make sure ``resource`` exists and holds every configured member.

        Raises
        ------
        NexusAPIError
            If a probe, creation or update answers an unexpected status.
        ReconciliationDepthError
            If the resource is still absent after ``max_attempts`` creations.
        NexusResponseShapeError
            If a fetched body does not decode.

        """
        client = self._context.client
        logger = self._context.logger
        attempts = 0

        while True:
            response = client.get(resource.fetch_path)
            status = response.status_code
            log_debug(logger, "Probe of %s answered HTTP %d", resource.key, status)
            if status == http.HTTPStatus.OK:
                existing = resource.decode(response)
                break
            if status != http.HTTPStatus.NOT_FOUND:
                raise NexusAPIError.unexpected_status(f"fetch {resource.key}", status)
            if attempts >= self._max_attempts:
                raise ReconciliationDepthError(resource.key, attempts=attempts)

            log_info(logger, "Creating %s", resource.key)
            created = client.post(resource.create_path, resource.build_default())
            if created.status_code != resource.created_status:
                raise NexusAPIError.unexpected_status(
                    f"create {resource.key}", created.status_code
                )
            attempts += 1
            if not resource.verify_after_create:
                log_info(logger, "Created %s", resource.key)
                return ReconcileResult(
                    resource.key, ReconcileAction.CREATED, create_calls=attempts
                )

        action = ReconcileAction.CREATED if attempts else ReconcileAction.FOUND
        if action is ReconcileAction.FOUND:
            log_info(logger, "%s already defined", resource.key)
        else:
            log_info(logger, "Created %s", resource.key)

        merged = resource.merge(existing)
        if merged is None:
            return ReconcileResult(
                resource.key, action, create_calls=attempts, state=existing
            )

        updated = client.put(resource.update_path, merged)
        if updated.status_code not in UPDATE_ACCEPTED:
            raise NexusAPIError.unexpected_status(
                f"update {resource.key}", updated.status_code
            )
        log_info(logger, "Updated %s", resource.key)
        return ReconcileResult(
            resource.key, ReconcileAction.UPDATED, create_calls=attempts, state=merged
        )

    def activate_realms(self, requested: cabc.Sequence[str]) -> RealmResult:
        """Activate ``requested`` realms without deactivating any other.

        Nexus treats the PUT body as the complete active list, so when any
        requested realm is missing a single PUT sends the current realms
        followed by the missing ones. Nothing is sent when all are active.
        """
        client = self._context.client
        response = client.get(REALMS_PATH)
        if response.status_code != http.HTTPStatus.OK:
            raise NexusAPIError.unexpected_status(
                "fetch active realms", response.status_code
            )
        active = decode_body(response, list[str], operation="fetch active realms")

        merged = union_members(active, requested)
        if merged is None:
            log_info(self._context.logger, "Realms %s already active", list(requested))
            return RealmResult(active=tuple(active), updated=False)

        updated = client.put(REALMS_PATH, merged)
        if updated.status_code != http.HTTPStatus.NO_CONTENT:
            raise NexusAPIError.unexpected_status(
                "activate realms", updated.status_code
            )
        log_info(self._context.logger, "Realms %s added", merged)
        return RealmResult(active=tuple(merged), updated=True)


__all__ = [
    "MAX_CREATE_ATTEMPTS",
    "REALMS_PATH",
    "UPDATE_ACCEPTED",
    "RealmResult",
    "ReconcileAction",
    "ReconcileResult",
    "Reconciler",
]
