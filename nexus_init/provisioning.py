"""End-to-end provisioning run.

The run is strictly sequential: wait for the server, rotate the admin
password, then reconcile blob stores, realms and repositories in a fixed
order. The first failure aborts the run.
"""

from __future__ import annotations

import dataclasses
import time
import typing as typ

from .credentials import RotationOutcome, rotate_default_password
from .logging import log_info
from .readiness import DEFAULT_PROBE_INTERVAL_S, wait_until_ready
from .reconciler import RealmResult, ReconcileResult, Reconciler
from .resources import (
    BlobStoreResource,
    DockerGroupResource,
    DockerHostedResource,
    DockerProxyResource,
    RawHostedResource,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import NexusConfig
    from .context import ProvisioningContext


@dataclasses.dataclass(slots=True)
class ProvisioningReport:
    """Everything a run did, in execution order."""

    rotation: RotationOutcome | None = None
    realms: RealmResult | None = None
    resources: list[ReconcileResult[typ.Any]] = dataclasses.field(
        default_factory=list
    )

    @property
    def create_calls(self) -> int:
        """Return the number of creation requests issued."""
        return sum(result.create_calls for result in self.resources)


def reconcile_blob_stores(
    reconciler: Reconciler, config: NexusConfig
) -> list[ReconcileResult[typ.Any]]:
    """Reconcile every configured blob store in order."""
    return [
        reconciler.ensure(BlobStoreResource.from_config(store))
        for store in config.blob_stores
    ]


def reconcile_repositories(
    reconciler: Reconciler, config: NexusConfig
) -> list[ReconcileResult[typ.Any]]:
    """Reconcile the docker repositories and the optional raw repository.

    Proxies are reconciled before the group so that every member exists when
    the group is created or extended.
    """
    results: list[ReconcileResult[typ.Any]] = [
        reconciler.ensure(
            DockerHostedResource.from_config(config.docker, config.docker_push)
        )
    ]
    results.extend(
        reconciler.ensure(DockerProxyResource.from_config(proxy, config.docker))
        for proxy in config.docker_group
    )
    results.append(
        reconciler.ensure(
            DockerGroupResource.from_config(
                config.docker, config.docker_pull, config.docker_group
            )
        )
    )
    if config.raw_repo is not None:
        results.append(reconciler.ensure(RawHostedResource.from_config(config.raw_repo)))
    return results


def provision(
    context: ProvisioningContext,
    config: NexusConfig,
    *,
    probe_interval: float = DEFAULT_PROBE_INTERVAL_S,
    sleep: cabc.Callable[[float], None] = time.sleep,
) -> ProvisioningReport:
    """Drive the Nexus server to the configured end state.

    Parameters
    ----------
    context : ProvisioningContext
        Client and logger for the run.
    config : NexusConfig
        Desired end state.
    probe_interval : float, optional
        Delay between readiness probes in seconds.
    sleep : Callable[[float], None], optional
        Sleep function used by the readiness probe.

    Returns
    -------
    ProvisioningReport
        What the run found, created and updated.

    Raises
    ------
    NexusInitError
        On the first permanent failure; nothing after it is attempted.

    """
    log_info(context.logger, "nexus.address: %s", config.address)
    log_info(context.logger, "nexus.port: %d", config.port)

    report = ProvisioningReport()
    wait_until_ready(context, interval=probe_interval, sleep=sleep)
    report.rotation = rotate_default_password(context, config.password)

    reconciler = Reconciler(context)
    report.resources.extend(reconcile_blob_stores(reconciler, config))
    report.realms = reconciler.activate_realms(config.realms)
    report.resources.extend(reconcile_repositories(reconciler, config))

    log_info(
        context.logger,
        "Provisioning finished: %d resources checked, %d created",
        len(report.resources),
        report.create_calls,
    )
    return report


__all__ = [
    "ProvisioningReport",
    "provision",
    "reconcile_blob_stores",
    "reconcile_repositories",
]
