"""Unit tests for default resource payloads."""

from __future__ import annotations

import json
import typing as typ

import msgspec
import pytest

from nexus_init.builders import (
    blob_store_request,
    docker_group_repository,
    docker_hosted_repository,
    docker_proxy_repository,
    raw_hosted_repository,
)
from nexus_init.config import (
    DockerConfig,
    DockerPortConfig,
    ProxyRepositoryConfig,
    RawRepositoryConfig,
)


def _wire(value: object) -> dict[str, typ.Any]:
    return json.loads(msgspec.json.encode(value))


class TestBlobStoreRequest:
    """Tests for blob_store_request."""

    def test_capacity_becomes_soft_quota(self) -> None:
        """Configured MB are multiplied by 1000 into a spaceUsedQuota."""
        assert _wire(blob_store_request("docker", 10)) == {
            "name": "docker",
            "path": "docker/blobs",
            "softQuota": {"type": "spaceUsedQuota", "limit": 10000},
        }

    def test_zero_capacity_omits_quota(self) -> None:
        """A zero capacity creates a store without a quota."""
        assert _wire(blob_store_request("maven", 0)) == {
            "name": "maven",
            "path": "maven/blobs",
        }


def test_hosted_repository_serves_push_port() -> None:
    """The hosted repository listens on the push port and allows writes."""
    body = _wire(docker_hosted_repository(DockerConfig(), DockerPortConfig(port=8082)))

    assert body == {
        "name": "dockerLocal",
        "online": True,
        "storage": {
            "blobStoreName": "docker",
            "strictContentTypeValidation": False,
            "writePolicy": "allow",
        },
        "docker": {"v1Enabled": False, "forceBasicAuth": False, "httpPort": 8082},
    }


def test_group_repository_keeps_member_order() -> None:
    """Members are listed exactly as given."""
    body = _wire(
        docker_group_repository(
            DockerConfig(group_name="pull"),
            DockerPortConfig(port=8083),
            ["dockerLocal", "dockerHub", "ghcr"],
        )
    )

    assert body["name"] == "pull"
    assert body["group"] == {"memberNames": ["dockerLocal", "dockerHub", "ghcr"]}
    assert body["docker"]["httpPort"] == 8083


class TestDockerProxyRepository:
    """Tests for docker_proxy_repository."""

    def test_docker_hub_uses_hub_index(self) -> None:
        """The proxy named dockerHub resolves through the Docker Hub index."""
        proxy = ProxyRepositoryConfig(
            name="dockerHub", url="https://registry-1.docker.io"
        )

        body = _wire(docker_proxy_repository(proxy, blob_store="docker"))

        assert body["dockerProxy"] == {
            "indexType": "HUB",
            "indexUrl": "https://index.docker.io",
            "cacheForeignLayers": True,
        }
        assert body["proxy"] == {
            "remoteUrl": "https://registry-1.docker.io",
            "contentMaxAge": 1440,
            "metadataMaxAge": 1440,
        }
        assert body["negativeCache"] == {"enabled": True, "timeToLive": 1440}
        assert body["httpClient"] == {"blocked": False, "autoBlock": True}
        assert body["storage"]["blobStoreName"] == "docker"

    @pytest.mark.parametrize("name", ["ghcr", "dockerhub", "quay"])
    def test_other_proxies_use_registry_index(self, name: str) -> None:
        """Any other name, including a differently cased one, is a registry."""
        proxy = ProxyRepositoryConfig(name=name, url="https://mirror.test")

        body = _wire(docker_proxy_repository(proxy, blob_store="docker"))

        assert body["dockerProxy"] == {
            "indexType": "REGISTRY",
            "cacheForeignLayers": True,
        }

    def test_authentication_only_with_username(self) -> None:
        """Credentials are sent only when a username is configured."""
        with_user = ProxyRepositoryConfig(
            name="ghcr", url="https://ghcr.io", username="bot", password="token"
        )
        password_only = ProxyRepositoryConfig(
            name="quay", url="https://quay.io", password="token"
        )

        authenticated = _wire(docker_proxy_repository(with_user, blob_store="docker"))
        anonymous = _wire(docker_proxy_repository(password_only, blob_store="docker"))

        assert authenticated["httpClient"]["authentication"] == {
            "type": "username",
            "username": "bot",
            "password": "token",
        }
        assert "authentication" not in anonymous["httpClient"]


def test_raw_repository_reflects_declaration() -> None:
    """Raw settings flow into the storage and raw blocks."""
    raw = RawRepositoryConfig(
        name="files",
        blob_store="docker",
        write_policy="allow_once",
        content_disposition="INLINE",
    )

    assert _wire(raw_hosted_repository(raw)) == {
        "name": "files",
        "online": True,
        "storage": {
            "blobStoreName": "docker",
            "strictContentTypeValidation": True,
            "writePolicy": "allow_once",
        },
        "raw": {"contentDisposition": "INLINE"},
    }
