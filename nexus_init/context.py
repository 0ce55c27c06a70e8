"""Per-run state handed to every provisioning component."""

from __future__ import annotations

import dataclasses
import typing as typ

from .client import NexusClient, NexusClientConfig
from .logging import get_logger

if typ.TYPE_CHECKING:
    import httpx

    from .config import NexusConfig
    from .logging import SupportsLog

LOGGER_NAME = "nexus_init"


@dataclasses.dataclass(frozen=True, slots=True)
class ProvisioningContext:
    """Transport handle and log sink shared by one provisioning run.

    Attributes
    ----------
    client : NexusClient
        Connection to the Nexus server being provisioned.
    logger : SupportsLog
        Destination for every log line of the run.

    """

    client: NexusClient
    logger: SupportsLog

    @classmethod
    def from_config(
        cls,
        config: NexusConfig,
        *,
        http_client: httpx.Client | None = None,
        logger: SupportsLog | None = None,
    ) -> ProvisioningContext:
        """Build a context whose client targets the configured server."""
        client = NexusClient(
            NexusClientConfig.from_config(config), http_client=http_client
        )
        return cls(client=client, logger=logger or get_logger(LOGGER_NAME))

    def close(self) -> None:
        """Release the transport."""
        self.client.close()


__all__ = ["LOGGER_NAME", "ProvisioningContext"]
