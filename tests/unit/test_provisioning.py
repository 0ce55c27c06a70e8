"""Unit tests for the end-to-end provisioning run."""

from __future__ import annotations

import typing as typ

import pytest

from nexus_init.credentials import RotationOutcome
from nexus_init.errors import NexusAPIError, NexusTransportError
from nexus_init.provisioning import provision
from nexus_init.reconciler import ReconcileAction
from tests.helpers.fake_nexus import OPERATIONAL_PASSWORD

if typ.TYPE_CHECKING:
    from nexus_init.config import NexusConfig
    from nexus_init.context import ProvisioningContext
    from tests.helpers.fake_nexus import FakeNexus


def _no_sleep(_seconds: float) -> None:
    return None


def test_fresh_server_is_fully_provisioned(
    context: ProvisioningContext, fake_nexus: FakeNexus, nexus_config: NexusConfig
) -> None:
    """Every configured resource is created in dependency order."""
    report = provision(context, nexus_config, sleep=_no_sleep)

    assert report.rotation is RotationOutcome.ROTATED
    assert fake_nexus.password == OPERATIONAL_PASSWORD
    assert report.create_calls == 6
    assert [call.path for call in fake_nexus.calls_to("POST")] == [
        "blobstores/file",
        "repositories/docker/hosted",
        "repositories/docker/proxy",
        "repositories/docker/proxy",
        "repositories/docker/group",
        "repositories/raw/hosted",
    ]
    group = fake_nexus.repositories[("docker", "group", "dockerGroup")]
    assert group["group"]["memberNames"] == ["dockerLocal", "dockerHub", "ghcr"]
    assert fake_nexus.realms == ["NexusAuthenticatingRealm", "DockerToken"]
    assert report.realms is not None
    assert report.realms.updated is True


def test_second_run_changes_nothing(
    context: ProvisioningContext, fake_nexus: FakeNexus, nexus_config: NexusConfig
) -> None:
    """A rerun against a provisioned server only reads."""
    provision(context, nexus_config, sleep=_no_sleep)
    fake_nexus.calls.clear()

    report = provision(context, nexus_config, sleep=_no_sleep)

    assert report.rotation is RotationOutcome.ALREADY_ROTATED
    assert report.create_calls == 0
    assert fake_nexus.calls_to("POST") == []
    # The only write is the rejected password change.
    assert [call.path for call in fake_nexus.calls_to("PUT")] == [
        "security/users/admin/change-password"
    ]
    assert {result.action for result in report.resources} == {ReconcileAction.FOUND}


def test_manual_group_members_survive_a_rerun(
    context: ProvisioningContext, fake_nexus: FakeNexus, nexus_config: NexusConfig
) -> None:
    """Members added by hand are kept; configured ones are restored."""
    provision(context, nexus_config, sleep=_no_sleep)
    group = fake_nexus.repositories[("docker", "group", "dockerGroup")]
    group["group"]["memberNames"] = ["dockerLocal", "manual"]

    provision(context, nexus_config, sleep=_no_sleep)

    group = fake_nexus.repositories[("docker", "group", "dockerGroup")]
    assert group["group"]["memberNames"] == [
        "dockerLocal",
        "manual",
        "dockerHub",
        "ghcr",
    ]


def test_first_failure_aborts_the_run(
    context: ProvisioningContext, fake_nexus: FakeNexus, nexus_config: NexusConfig
) -> None:
    """Nothing after a failed step is attempted."""
    fake_nexus.forced[("POST", "blobstores/file")] = 500

    with pytest.raises(NexusAPIError, match="create blob store docker"):
        provision(context, nexus_config, sleep=_no_sleep)

    assert not any(call.path.startswith("security/realms") for call in fake_nexus.calls)
    assert not any(call.path.startswith("repositories") for call in fake_nexus.calls)


def test_readiness_precedes_every_write(
    context: ProvisioningContext, fake_nexus: FakeNexus, nexus_config: NexusConfig
) -> None:
    """The status probe is retried before any other request is made."""
    fake_nexus.status_answers = [503, 503]
    sleeps: list[float] = []

    provision(context, nexus_config, probe_interval=0.5, sleep=sleeps.append)

    assert sleeps == [0.5, 0.5]
    assert [call.path for call in fake_nexus.calls[:3]] == ["status"] * 3


def test_transport_failure_after_readiness_is_fatal(
    context: ProvisioningContext, fake_nexus: FakeNexus, nexus_config: NexusConfig
) -> None:
    """Connection errors are only retried by the readiness gate."""
    fake_nexus.forced[("POST", "blobstores/file")] = ConnectionResetError("reset")
    sleeps: list[float] = []

    with pytest.raises(NexusTransportError) as excinfo:
        provision(context, nexus_config, sleep=sleeps.append)

    assert excinfo.value.operation == "POST blobstores/file"
    assert sleeps == []
    assert len(fake_nexus.calls_to("POST")) == 1
    assert not any(call.path.startswith("security/realms") for call in fake_nexus.calls)
    assert not any(call.path.startswith("repositories") for call in fake_nexus.calls)
