"""Remote resource kinds driven by the reconciler.

Each kind knows where its resource lives, how to decode what the server
returns, which payload creates it, and (for collection-valued resources) how
to merge the configured members into what is already there.
"""

from __future__ import annotations

import dataclasses
import http
import typing as typ

import msgspec.structs

from .builders import (
    blob_store_request,
    docker_group_repository,
    docker_hosted_repository,
    docker_proxy_repository,
    raw_hosted_repository,
)
from .client import decode_body
from .models import (
    BlobStoreQuotaStatus,
    BlobStoreRequest,
    DockerGroupRepository,
    DockerHostedRepository,
    DockerProxyRepository,
    RawHostedRepository,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    import httpx

    from .config import (
        BlobStoreConfig,
        DockerConfig,
        DockerPortConfig,
        ProxyRepositoryConfig,
        RawRepositoryConfig,
    )

StateT = typ.TypeVar("StateT")


class RemoteResource(typ.Protocol[StateT]):
    """A named resource on the Nexus server.

    Attributes
    ----------
    key : str
        Human-readable identity used in logs and errors.
    fetch_path, create_path : str
        Paths of the existence probe and of the creation call.
    created_status : int
        Status the creation call answers on success.
    verify_after_create : bool
        Re-read the resource after creating it instead of trusting the
        creation answer.

    """

    key: str
    fetch_path: str
    create_path: str
    created_status: int
    verify_after_create: bool

    def decode(self, response: httpx.Response) -> StateT:
        """Decode the body of a successful existence probe."""
        ...

    def build_default(self) -> object:
        """Return the payload that creates the resource."""
        ...

    def merge(self, existing: StateT) -> StateT | None:
        """Return the updated state, or ``None`` when nothing is missing."""
        ...

    @property
    def update_path(self) -> str:
        """Return the path that replaces the resource."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class BlobStoreResource:
    """File blob store with an optional soft quota.

    Creation answers 204 with no body, so the store is not re-read.
    """

    name: str
    capacity_mb: int = 0
    created_status: int = http.HTTPStatus.NO_CONTENT
    verify_after_create: bool = False

    @classmethod
    def from_config(cls, store: BlobStoreConfig) -> BlobStoreResource:
        """Build the resource for a configured blob store."""
        return cls(name=store.name, capacity_mb=store.capacity)

    @property
    def key(self) -> str:
        """Return the resource identity."""
        return f"blob store {self.name}"

    @property
    def fetch_path(self) -> str:
        """Return the quota status path used as existence probe."""
        return f"blobstores/{self.name}/quota-status"

    @property
    def create_path(self) -> str:
        """Return the file blob store creation path."""
        return "blobstores/file"

    @property
    def update_path(self) -> str:
        """Return the file blob store update path."""
        return f"blobstores/file/{self.name}"

    def decode(self, response: httpx.Response) -> BlobStoreQuotaStatus:
        """Decode the quota status; an empty body still proves existence."""
        if not response.content:
            return BlobStoreQuotaStatus(blob_store_name=self.name)
        return decode_body(response, BlobStoreQuotaStatus, operation=self.key)

    def build_default(self) -> BlobStoreRequest:
        """Return the creation body."""
        return blob_store_request(self.name, self.capacity_mb)

    def merge(self, existing: BlobStoreQuotaStatus) -> None:
        """Blob stores are never updated once they exist."""
        del existing


@dataclasses.dataclass(frozen=True, slots=True)
class _RepositoryResource:
    """Shared paths of ``repositories/{format}/{type}`` resources."""

    name: str
    repo_format: typ.ClassVar[str]
    repo_type: typ.ClassVar[str]
    created_status: int = dataclasses.field(
        default=http.HTTPStatus.CREATED, kw_only=True
    )
    verify_after_create: bool = dataclasses.field(default=True, kw_only=True)

    @property
    def key(self) -> str:
        """Return the resource identity."""
        return f"{self.repo_format} {self.repo_type} repository {self.name}"

    @property
    def create_path(self) -> str:
        """Return the creation path."""
        return f"repositories/{self.repo_format}/{self.repo_type}"

    @property
    def fetch_path(self) -> str:
        """Return the path of this repository."""
        return f"{self.create_path}/{self.name}"

    @property
    def update_path(self) -> str:
        """Return the replacement path of this repository."""
        return self.fetch_path


@dataclasses.dataclass(frozen=True, slots=True)
class DockerHostedResource(_RepositoryResource):
    """Docker push repository."""

    docker: DockerConfig
    push: DockerPortConfig
    repo_format: typ.ClassVar[str] = "docker"
    repo_type: typ.ClassVar[str] = "hosted"

    @classmethod
    def from_config(
        cls, docker: DockerConfig, push: DockerPortConfig
    ) -> DockerHostedResource:
        """Build the resource for the configured push repository."""
        return cls(name=docker.hosted_name, docker=docker, push=push)

    def decode(self, response: httpx.Response) -> DockerHostedRepository:
        """Decode the fetched repository."""
        return decode_body(response, DockerHostedRepository, operation=self.key)

    def build_default(self) -> DockerHostedRepository:
        """Return the creation body."""
        return docker_hosted_repository(self.docker, self.push)

    def merge(self, existing: DockerHostedRepository) -> None:
        """Hosted repositories are left as found."""
        del existing


@dataclasses.dataclass(frozen=True, slots=True)
class DockerProxyResource(_RepositoryResource):
    """Docker proxy repository for one upstream registry."""

    proxy: ProxyRepositoryConfig
    blob_store: str
    repo_format: typ.ClassVar[str] = "docker"
    repo_type: typ.ClassVar[str] = "proxy"

    @classmethod
    def from_config(
        cls, proxy: ProxyRepositoryConfig, docker: DockerConfig
    ) -> DockerProxyResource:
        """Build the resource for a configured proxy."""
        return cls(name=proxy.name, proxy=proxy, blob_store=docker.blob_store)

    def decode(self, response: httpx.Response) -> DockerProxyRepository:
        """Decode the fetched repository."""
        return decode_body(response, DockerProxyRepository, operation=self.key)

    def build_default(self) -> DockerProxyRepository:
        """Return the creation body."""
        return docker_proxy_repository(self.proxy, blob_store=self.blob_store)

    def merge(self, existing: DockerProxyRepository) -> None:
        """Proxy repositories are left as found."""
        del existing


def union_members(
    current: cabc.Sequence[str], desired: cabc.Iterable[str]
) -> list[str] | None:
    """Return ``current`` followed by the desired names it lacks.

    ``None`` means every desired name is already present.
    """
    present = set(current)
    missing = [name for name in dict.fromkeys(desired) if name not in present]
    if not missing:
        return None
    return [*current, *missing]


@dataclasses.dataclass(frozen=True, slots=True)
class DockerGroupResource(_RepositoryResource):
    """Docker pull repository whose members must cover ``members``.

    Nexus replaces the whole member list on update, so the merge keeps every
    member already present (manual additions included) ahead of the
    configured ones.
    """

    docker: DockerConfig
    pull: DockerPortConfig
    members: tuple[str, ...]
    repo_format: typ.ClassVar[str] = "docker"
    repo_type: typ.ClassVar[str] = "group"

    @classmethod
    def from_config(
        cls,
        docker: DockerConfig,
        pull: DockerPortConfig,
        proxies: cabc.Iterable[ProxyRepositoryConfig],
    ) -> DockerGroupResource:
        """Build the pull repository over the hosted repository and every proxy."""
        members = (docker.hosted_name, *(proxy.name for proxy in proxies))
        return cls(name=docker.group_name, docker=docker, pull=pull, members=members)

    def decode(self, response: httpx.Response) -> DockerGroupRepository:
        """Decode the fetched repository."""
        return decode_body(response, DockerGroupRepository, operation=self.key)

    def build_default(self) -> DockerGroupRepository:
        """Return the creation body listing every configured member."""
        return docker_group_repository(self.docker, self.pull, self.members)

    def merge(self, existing: DockerGroupRepository) -> DockerGroupRepository | None:
        """Return ``existing`` with the missing members appended."""
        merged = union_members(existing.group.member_names, self.members)
        if merged is None:
            return None
        group = msgspec.structs.replace(existing.group, member_names=merged)
        return msgspec.structs.replace(existing, group=group)


@dataclasses.dataclass(frozen=True, slots=True)
class RawHostedResource(_RepositoryResource):
    """Raw hosted repository."""

    raw: RawRepositoryConfig
    repo_format: typ.ClassVar[str] = "raw"
    repo_type: typ.ClassVar[str] = "hosted"

    @classmethod
    def from_config(cls, raw: RawRepositoryConfig) -> RawHostedResource:
        """Build the resource for the configured raw repository."""
        return cls(name=raw.name, raw=raw)

    def decode(self, response: httpx.Response) -> RawHostedRepository:
        """Decode the fetched repository."""
        return decode_body(response, RawHostedRepository, operation=self.key)

    def build_default(self) -> RawHostedRepository:
        """Return the creation body."""
        return raw_hosted_repository(self.raw)

    def merge(self, existing: RawHostedRepository) -> None:
        """Raw repositories are left as found."""
        del existing


__all__ = [
    "BlobStoreResource",
    "DockerGroupResource",
    "DockerHostedResource",
    "DockerProxyResource",
    "RawHostedResource",
    "RemoteResource",
    "union_members",
]
