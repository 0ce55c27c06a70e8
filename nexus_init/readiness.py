"""Startup gate that blocks until Nexus answers its status endpoint."""

from __future__ import annotations

import http
import time
import typing as typ

from .errors import NexusTransportError
from .logging import log_error, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .context import ProvisioningContext

STATUS_PATH = "status"
DEFAULT_PROBE_INTERVAL_S = 2.0


def wait_until_ready(
    context: ProvisioningContext,
    *,
    interval: float = DEFAULT_PROBE_INTERVAL_S,
    sleep: cabc.Callable[[float], None] = time.sleep,
) -> int:
    """Poll ``GET status`` until it answers 200.

    There is no attempt limit and no backoff: transport failures and
    unhealthy answers both wait ``interval`` seconds before the next probe.

    Parameters
    ----------
    context : ProvisioningContext
        Run context providing the client and logger.
    interval : float, optional
        Fixed delay between probes in seconds.
    sleep : Callable[[float], None], optional
        Sleep function, replaceable in tests.

    Returns
    -------
    int
        Number of failed probes before the server became ready.

    """
    failures = 0
    while True:
        try:
            response = context.client.get(STATUS_PATH)
        except NexusTransportError as exc:
            log_error(context.logger, "Waiting for nexus. %s", exc)
        else:
            if response.status_code == http.HTTPStatus.OK:
                log_info(context.logger, "Nexus is ready at %s", context.client.base_url)
                return failures
            log_info(
                context.logger,
                "Waiting for nexus. Statuscode %d",
                response.status_code,
            )
        failures += 1
        sleep(interval)


__all__ = ["DEFAULT_PROBE_INTERVAL_S", "STATUS_PATH", "wait_until_ready"]
