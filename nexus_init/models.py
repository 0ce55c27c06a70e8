"""Wire structures for the Nexus REST API.

Field names are snake_case in Python and camelCase on the wire. Optional
attributes default to ``None`` and are left out of encoded payloads; fields
without a default are always sent. Unknown fields in responses are ignored,
so a fetched repository can be sent back after a merge.
"""

from __future__ import annotations

import typing as typ

import msgspec


class _Wire(msgspec.Struct, kw_only=True, rename="camel", omit_defaults=True):
    """Common options for every wire structure."""


class SoftQuota(_Wire):
    """Blob store soft quota."""

    type: str
    limit: int


class BlobStoreRequest(_Wire):
    """Body of ``POST blobstores/file``."""

    name: str
    path: str
    soft_quota: SoftQuota | None = None


class BlobStoreQuotaStatus(_Wire):
    """Body of ``GET blobstores/{name}/quota-status``."""

    blob_store_name: str | None = None
    is_violation: bool | None = None
    message: str | None = None


class Storage(_Wire):
    """Storage block shared by every repository format."""

    blob_store_name: str
    strict_content_type_validation: bool
    write_policy: str | None = None


class Cleanup(_Wire):
    """Cleanup policies attached to a repository."""

    policy_names: list[str] = msgspec.field(default_factory=list)


class Component(_Wire):
    """Component options of hosted repositories."""

    proprietary_components: bool = False


class DockerAttributes(_Wire):
    """Docker connector settings."""

    v1_enabled: bool
    force_basic_auth: bool
    http_port: int | None = None
    https_port: int | None = None
    subdomain: str | None = None


class GroupAttributes(_Wire):
    """Group membership; members are resolved in list order."""

    member_names: list[str]
    writable_member: str | None = None


class ProxyAttributes(_Wire):
    """Upstream location and cache ages of a proxy repository."""

    remote_url: str
    content_max_age: int
    metadata_max_age: int


class NegativeCache(_Wire):
    """Negative (not-found) cache of a proxy repository."""

    enabled: bool
    time_to_live: int


class HttpClientAuthentication(_Wire):
    """Credentials sent to the upstream registry."""

    type: str
    username: str | None = None
    password: str | None = None
    ntlm_host: str | None = None
    ntlm_domain: str | None = None


class HttpClientAttributes(_Wire):
    """Outbound HTTP client of a proxy repository."""

    blocked: bool
    auto_block: bool
    authentication: HttpClientAuthentication | None = None


class DockerProxyAttributes(_Wire):
    """Index used to resolve upstream images."""

    index_type: typ.Literal["HUB", "REGISTRY", "CUSTOM"]
    cache_foreign_layers: bool
    index_url: str | None = None


class RawAttributes(_Wire):
    """Raw format options."""

    content_disposition: str


class DockerHostedRepository(_Wire):
    """Docker hosted (push) repository."""

    name: str
    online: bool
    storage: Storage
    docker: DockerAttributes
    cleanup: Cleanup | None = None
    component: Component | None = None


class DockerGroupRepository(_Wire):
    """Docker group (pull) repository."""

    name: str
    online: bool
    storage: Storage
    group: GroupAttributes
    docker: DockerAttributes


class DockerProxyRepository(_Wire):
    """Docker proxy repository mirroring an upstream registry."""

    name: str
    online: bool
    storage: Storage
    proxy: ProxyAttributes
    negative_cache: NegativeCache
    http_client: HttpClientAttributes
    docker: DockerAttributes
    docker_proxy: DockerProxyAttributes
    cleanup: Cleanup | None = None
    routing_rule_name: str | None = None


class RawHostedRepository(_Wire):
    """Raw hosted repository."""

    name: str
    online: bool
    storage: Storage
    raw: RawAttributes
    cleanup: Cleanup | None = None
    component: Component | None = None


__all__ = [
    "BlobStoreQuotaStatus",
    "BlobStoreRequest",
    "Cleanup",
    "Component",
    "DockerAttributes",
    "DockerGroupRepository",
    "DockerHostedRepository",
    "DockerProxyAttributes",
    "DockerProxyRepository",
    "GroupAttributes",
    "HttpClientAttributes",
    "HttpClientAuthentication",
    "NegativeCache",
    "ProxyAttributes",
    "RawAttributes",
    "RawHostedRepository",
    "SoftQuota",
    "Storage",
]
