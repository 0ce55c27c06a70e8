"""Default payloads for freshly created resources.

Every function here is pure: it turns configuration into the literal body a
resource should have when it is first created.
"""

from __future__ import annotations

import typing as typ

from .models import (
    BlobStoreRequest,
    DockerAttributes,
    DockerGroupRepository,
    DockerHostedRepository,
    DockerProxyAttributes,
    DockerProxyRepository,
    GroupAttributes,
    HttpClientAttributes,
    HttpClientAuthentication,
    NegativeCache,
    ProxyAttributes,
    RawAttributes,
    RawHostedRepository,
    SoftQuota,
    Storage,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import (
        DockerConfig,
        DockerPortConfig,
        ProxyRepositoryConfig,
        RawRepositoryConfig,
    )

SPACE_USED_QUOTA = "spaceUsedQuota"
# Quota limits are sent as configured MB multiplied by this factor.
QUOTA_UNIT_FACTOR = 1000

DOCKER_HUB_NAME = "dockerHub"
DOCKER_HUB_INDEX_URL = "https://index.docker.io"
# Minutes; Nexus' own default of 24 hours.
PROXY_CACHE_MINUTES = 1440


def blob_store_path(name: str) -> str:
    """Return the storage path of a file blob store."""
    return f"{name}/blobs"


def blob_store_request(name: str, capacity_mb: int) -> BlobStoreRequest:
    """Build a file blob store body; a zero capacity means no quota."""
    quota = (
        SoftQuota(type=SPACE_USED_QUOTA, limit=capacity_mb * QUOTA_UNIT_FACTOR)
        if capacity_mb > 0
        else None
    )
    return BlobStoreRequest(name=name, path=blob_store_path(name), soft_quota=quota)


def docker_hosted_repository(
    docker: DockerConfig, push: DockerPortConfig
) -> DockerHostedRepository:
    """Build the push repository: writable, served on the push port."""
    return DockerHostedRepository(
        name=docker.hosted_name,
        online=True,
        storage=Storage(
            blob_store_name=docker.blob_store,
            strict_content_type_validation=False,
            write_policy="allow",
        ),
        docker=DockerAttributes(
            v1_enabled=False,
            force_basic_auth=False,
            http_port=push.port,
        ),
    )


def docker_group_repository(
    docker: DockerConfig,
    pull: DockerPortConfig,
    members: cabc.Sequence[str],
) -> DockerGroupRepository:
    """Build the pull repository aggregating ``members`` in order."""
    return DockerGroupRepository(
        name=docker.group_name,
        online=True,
        storage=Storage(
            blob_store_name=docker.blob_store,
            strict_content_type_validation=True,
        ),
        group=GroupAttributes(member_names=list(members)),
        docker=DockerAttributes(
            v1_enabled=False,
            force_basic_auth=False,
            http_port=pull.port,
        ),
    )


def _proxy_authentication(
    proxy: ProxyRepositoryConfig,
) -> HttpClientAuthentication | None:
    if not proxy.username:
        return None
    return HttpClientAuthentication(
        type="username",
        username=proxy.username,
        password=proxy.password,
    )


def docker_proxy_repository(
    proxy: ProxyRepositoryConfig, *, blob_store: str
) -> DockerProxyRepository:
    """Build a proxy repository mirroring ``proxy.url``.

    The repository named ``dockerHub`` resolves images through the Docker
    Hub index; every other proxy talks to a plain registry.
    """
    if proxy.name == DOCKER_HUB_NAME:
        index = DockerProxyAttributes(
            index_type="HUB",
            index_url=DOCKER_HUB_INDEX_URL,
            cache_foreign_layers=True,
        )
    else:
        index = DockerProxyAttributes(index_type="REGISTRY", cache_foreign_layers=True)

    return DockerProxyRepository(
        name=proxy.name,
        online=True,
        storage=Storage(
            blob_store_name=blob_store,
            strict_content_type_validation=False,
        ),
        proxy=ProxyAttributes(
            remote_url=proxy.url,
            content_max_age=PROXY_CACHE_MINUTES,
            metadata_max_age=PROXY_CACHE_MINUTES,
        ),
        negative_cache=NegativeCache(enabled=True, time_to_live=PROXY_CACHE_MINUTES),
        http_client=HttpClientAttributes(
            blocked=False,
            auto_block=True,
            authentication=_proxy_authentication(proxy),
        ),
        docker=DockerAttributes(v1_enabled=False, force_basic_auth=False),
        docker_proxy=index,
    )


def raw_hosted_repository(raw: RawRepositoryConfig) -> RawHostedRepository:
    """Build a raw hosted repository from its declaration."""
    return RawHostedRepository(
        name=raw.name,
        online=raw.online,
        storage=Storage(
            blob_store_name=raw.blob_store,
            strict_content_type_validation=raw.strict_content_type_validation,
            write_policy=raw.write_policy,
        ),
        raw=RawAttributes(content_disposition=raw.content_disposition),
    )


__all__ = [
    "DOCKER_HUB_INDEX_URL",
    "DOCKER_HUB_NAME",
    "PROXY_CACHE_MINUTES",
    "QUOTA_UNIT_FACTOR",
    "SPACE_USED_QUOTA",
    "blob_store_path",
    "blob_store_request",
    "docker_group_repository",
    "docker_hosted_repository",
    "docker_proxy_repository",
    "raw_hosted_repository",
]
