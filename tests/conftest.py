"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest

from nexus_init.client import NexusClient, NexusClientConfig
from nexus_init.config import (
    BlobStoreConfig,
    NexusConfig,
    ProxyRepositoryConfig,
    RawRepositoryConfig,
)
from nexus_init.context import ProvisioningContext
from tests.helpers.fake_nexus import BASE_URL, OPERATIONAL_PASSWORD, FakeNexus
from tests.helpers.log_capture import FakeLogger


@pytest.fixture
def fake_nexus() -> FakeNexus:
    """Provide an empty fake Nexus server."""
    return FakeNexus()


@pytest.fixture
def fake_logger() -> FakeLogger:
    """Provide a logger that records every call."""
    return FakeLogger()


@pytest.fixture
def context(
    fake_nexus: FakeNexus, fake_logger: FakeLogger
) -> typ.Iterator[ProvisioningContext]:
    """Provide a provisioning context wired to the fake server."""
    client = NexusClient(
        NexusClientConfig(base_url=BASE_URL, password=OPERATIONAL_PASSWORD),
        http_client=fake_nexus.http_client(),
    )
    ctx = ProvisioningContext(client=client, logger=fake_logger)
    yield ctx
    ctx.close()


@pytest.fixture
def nexus_config() -> NexusConfig:
    """Provide a configuration covering every resource kind."""
    return NexusConfig(
        address="nexus.test",
        port=8081,
        password=OPERATIONAL_PASSWORD,
        blob_stores=[BlobStoreConfig(name="docker", capacity=10)],
        docker_group=[
            ProxyRepositoryConfig(name="dockerHub", url="https://registry-1.docker.io"),
            ProxyRepositoryConfig(
                name="ghcr", url="https://ghcr.io", username="bot", password="token"
            ),
        ],
        raw_repo=RawRepositoryConfig(name="raw", blob_store="docker"),
    )
