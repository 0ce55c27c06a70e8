"""One-time rotation of the factory default admin password."""

from __future__ import annotations

import enum
import http
import typing as typ

from .config import FACTORY_PASSWORD
from .errors import NexusAPIError
from .logging import log_info

if typ.TYPE_CHECKING:
    from .context import ProvisioningContext

CHANGE_PASSWORD_PATH = "security/users/admin/change-password"


class RotationOutcome(enum.StrEnum):
    """Result of :func:`rotate_default_password`."""

    SKIPPED = "skipped"
    ROTATED = "rotated"
    ALREADY_ROTATED = "already_rotated"


def rotate_default_password(
    context: ProvisioningContext, new_password: str
) -> RotationOutcome:
    """Replace the factory admin password with ``new_password``.

    The request authenticates with the factory default, so a 401 means an
    earlier run already rotated the password and counts as success.

    Raises
    ------
    NexusAPIError
        If Nexus answers anything but 204 or 401.

    """
    if not new_password or new_password == FACTORY_PASSWORD:
        log_info(context.logger, "No new admin password configured")
        return RotationOutcome.SKIPPED

    response = context.client.request(
        "PUT",
        CHANGE_PASSWORD_PATH,
        text=new_password,
        auth=context.client.factory_auth,
    )
    match response.status_code:
        case http.HTTPStatus.UNAUTHORIZED:
            log_info(context.logger, "Password already changed")
            return RotationOutcome.ALREADY_ROTATED
        case http.HTTPStatus.NO_CONTENT:
            log_info(context.logger, "Password changed")
            return RotationOutcome.ROTATED
        case status:
            raise NexusAPIError.unexpected_status("change admin password", status)


__all__ = ["CHANGE_PASSWORD_PATH", "RotationOutcome", "rotate_default_password"]
