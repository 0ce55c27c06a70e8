"""Configuration documents describing the desired Nexus end state.

A base document (``config.json``, ``config.yaml`` or ``config.yml``) is
overlaid with an optional override document, then converted into typed
structures:

- ``NEXUS_INIT_CONFIG_PATH``: extra directory searched after the current one
- ``NEXUS_INIT_CONFIG_FILE``: override document, as a path or a bare name
  resolved against the search directories

Both documents are parsed with a YAML 1.2 loader, so JSON files work as-is.
"""

from __future__ import annotations

import collections.abc as cabc
import os
import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import NexusConfigError

YAML_VERSION = (1, 2)
CONFIG_PATH_ENV = "NEXUS_INIT_CONFIG_PATH"
CONFIG_FILE_ENV = "NEXUS_INIT_CONFIG_FILE"
BASE_CONFIG_NAME = "config"
CONFIG_SUFFIXES = (".json", ".yaml", ".yml")

FACTORY_PASSWORD = "admin123"  # noqa: S105 - the documented Nexus default
ADMIN_USER = "admin"

_MIN_PORT = 1
_MAX_PORT = 65535


class BlobStoreConfig(msgspec.Struct, kw_only=True, rename="camel"):
    """File blob store declaration.

    Attributes
    ----------
    name : str
        Blob store name; also determines the on-disk path.
    capacity : int
        Soft quota in MB. Zero disables the quota.

    """

    name: str
    capacity: int = 0


class DockerPortConfig(msgspec.Struct, kw_only=True, rename="camel"):
    """HTTP connector port exposed by a docker repository."""

    port: int


class DockerConfig(msgspec.Struct, kw_only=True, rename="camel"):
    """Names shared by the docker hosted, group and proxy repositories."""

    blob_store: str = "docker"
    hosted_name: str = "dockerLocal"
    group_name: str = "dockerGroup"


class ProxyRepositoryConfig(msgspec.Struct, kw_only=True, rename="camel"):
    """Docker proxy repository joined to the docker group.

    Attributes
    ----------
    name : str
        Repository name. ``dockerHub`` selects the Docker Hub index.
    url : str
        Upstream registry URL.
    username, password : str
        Optional upstream credentials; authentication is only sent when a
        username is set.

    """

    name: str
    url: str
    username: str = ""
    password: str = ""


class RawRepositoryConfig(msgspec.Struct, kw_only=True, rename="camel"):
    """Raw hosted repository declaration."""

    name: str
    blob_store: str = "default"
    write_policy: typ.Literal["allow", "allow_once", "deny"] = "allow"
    content_disposition: typ.Literal["ATTACHMENT", "INLINE"] = "ATTACHMENT"
    strict_content_type_validation: bool = True
    online: bool = True


class NexusConfig(msgspec.Struct, kw_only=True, rename="camel"):
    """Complete provisioning configuration.

    Attributes
    ----------
    address : str
        Host name or IP address of the Nexus server.
    port : int
        HTTP(S) port of the Nexus server.
    scheme : Literal["http", "https"]
        URL scheme for the administrative API.
    password : str
        Operational admin password. Empty keeps the factory default.
    tls_verify : bool
        Verify the server certificate for ``https``.
    timeout : float
        Per-request transport timeout in seconds.
    realms : list[str]
        Realms that must be active after the run.
    blob_stores : list[BlobStoreConfig]
        Blob stores to create, in order.
    docker : DockerConfig
        Names of the docker repositories and their blob store.
    docker_push, docker_pull : DockerPortConfig
        Connector ports of the hosted and group repositories.
    docker_group : list[ProxyRepositoryConfig]
        Proxy repositories, each a member of the docker group.
    raw_repo : RawRepositoryConfig | None
        Optional raw hosted repository.

    """

    address: str
    port: int = 8081
    scheme: typ.Literal["http", "https"] = "http"
    password: str = ""
    tls_verify: bool = True
    timeout: float = 30.0
    realms: list[str] = msgspec.field(default_factory=lambda: ["DockerToken"])
    blob_stores: list[BlobStoreConfig] = msgspec.field(default_factory=list)
    docker: DockerConfig = msgspec.field(default_factory=DockerConfig)
    docker_push: DockerPortConfig = msgspec.field(
        default_factory=lambda: DockerPortConfig(port=8082)
    )
    docker_pull: DockerPortConfig = msgspec.field(
        default_factory=lambda: DockerPortConfig(port=8083)
    )
    docker_group: list[ProxyRepositoryConfig] = msgspec.field(default_factory=list)
    raw_repo: RawRepositoryConfig | None = None

    @property
    def base_url(self) -> str:
        """Return the REST API root, always ending with a slash."""
        return f"{self.scheme}://{self.address}:{self.port}/service/rest/v1/"

    @property
    def admin_password(self) -> str:
        """Return the password used for every call but the rotation."""
        return self.password or FACTORY_PASSWORD


def search_directories(environ: cabc.Mapping[str, str] | None = None) -> list[Path]:
    """Return the directories searched for configuration documents."""
    env = os.environ if environ is None else environ
    directories = [Path.cwd()]
    extra = env.get(CONFIG_PATH_ENV, "").strip()
    if extra:
        directories.append(Path(extra))
    return directories


def _resolve_named(name: str, directories: list[Path]) -> Path | None:
    candidate = Path(name)
    if candidate.is_absolute() or candidate.parent != Path():
        return candidate if candidate.is_file() else None

    for directory in directories:
        if candidate.suffix in CONFIG_SUFFIXES and (directory / candidate).is_file():
            return directory / candidate
        for suffix in CONFIG_SUFFIXES:
            path = directory / f"{name}{suffix}"
            if path.is_file():
                return path
    return None


def find_base_config(directories: list[Path]) -> Path:
    """Locate the base ``config`` document in the search directories."""
    found = _resolve_named(BASE_CONFIG_NAME, directories)
    if found is None:
        searched = ", ".join(str(directory) for directory in directories)
        raise NexusConfigError([f"no {BASE_CONFIG_NAME} document found in: {searched}"])
    return found


def merge_documents(
    base: cabc.Mapping[str, typ.Any], override: cabc.Mapping[str, typ.Any]
) -> dict[str, typ.Any]:
    """Overlay ``override`` onto ``base``.

    Mappings merge recursively; scalars and lists from ``override`` replace
    the base value. Neither input is mutated.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, cabc.Mapping) and isinstance(value, cabc.Mapping):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = value
    return merged


def read_document(path: Path) -> dict[str, typ.Any]:
    """Parse a YAML or JSON document into a plain mapping."""
    try:
        loaded = _yaml().load(path.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise NexusConfigError([f"failed to parse {path}: {exc}"]) from exc

    if loaded is None:
        raise NexusConfigError([f"{path} is empty"])
    if not isinstance(loaded, dict):
        raise NexusConfigError([f"{path} must contain a mapping at the top level"])
    return loaded


def load_config(
    path: Path | str | None = None,
    *,
    override: Path | str | None = None,
    environ: cabc.Mapping[str, str] | None = None,
) -> NexusConfig:
    """Load, overlay and validate the provisioning configuration.

    Parameters
    ----------
    path : Path | str | None, optional
        Explicit base document. Defaults to the first ``config`` document in
        the search directories.
    override : Path | str | None, optional
        Explicit override document. Defaults to ``NEXUS_INIT_CONFIG_FILE``.
    environ : Mapping[str, str] | None, optional
        Environment to read; ``None`` uses ``os.environ``.

    Returns
    -------
    NexusConfig
        The validated configuration.

    Raises
    ------
    NexusConfigError
        If a document is missing, unparsable or fails validation.

    """
    env = os.environ if environ is None else environ
    directories = search_directories(env)

    base_path = Path(path) if path is not None else find_base_config(directories)
    document = read_document(base_path)

    override_name = (
        str(override) if override is not None else env.get(CONFIG_FILE_ENV, "").strip()
    )
    if override_name:
        override_path = _resolve_named(override_name, directories)
        if override_path is None:
            raise NexusConfigError([f"override document {override_name} not found"])
        document = merge_documents(document, read_document(override_path))

    try:
        config = msgspec.convert(document, type=NexusConfig)
    except msgspec.ValidationError as exc:
        raise NexusConfigError([f"schema validation failed: {exc}"]) from exc

    return validate_config(config)


def _check_port(value: int, label: str, issues: list[str]) -> None:
    if not _MIN_PORT <= value <= _MAX_PORT:
        issues.append(f"{label} {value} outside valid range {_MIN_PORT}-{_MAX_PORT}")


def _check_unique(names: list[str], label: str, issues: list[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if not name.strip():
            issues.append(f"{label} name must be non-empty")
        elif name in seen:
            issues.append(f"duplicate {label} name: {name}")
        seen.add(name)


def validate_config(config: NexusConfig) -> NexusConfig:
    """Return ``config`` when every semantic check passes."""
    issues: list[str] = []

    if not config.address.strip():
        issues.append("address must be non-empty")
    _check_port(config.port, "port", issues)
    _check_port(config.docker_push.port, "dockerPush.port", issues)
    _check_port(config.docker_pull.port, "dockerPull.port", issues)
    if config.timeout <= 0:
        issues.append("timeout must be positive")

    _check_unique([store.name for store in config.blob_stores], "blob store", issues)
    issues.extend(
        f"blob store {store.name} capacity must not be negative"
        for store in config.blob_stores
        if store.capacity < 0
    )

    docker = config.docker
    for label, value in (
        ("docker.blobStore", docker.blob_store),
        ("docker.hostedName", docker.hosted_name),
        ("docker.groupName", docker.group_name),
    ):
        if not value.strip():
            issues.append(f"{label} must be non-empty")
    if docker.hosted_name.strip() and docker.hosted_name == docker.group_name:
        issues.append(
            f"docker.hostedName and docker.groupName must differ: {docker.hosted_name}"
        )

    _check_unique([proxy.name for proxy in config.docker_group], "proxy", issues)
    reserved = {docker.hosted_name, docker.group_name}
    for proxy in config.docker_group:
        if proxy.name in reserved:
            issues.append(f"proxy name {proxy.name} clashes with a docker repository")
        if not proxy.url.startswith(("http://", "https://")):
            issues.append(f"proxy {proxy.name} url must be http(s): {proxy.url}")

    if any(not realm.strip() for realm in config.realms):
        issues.append("realm identifiers must be non-empty")
    if config.raw_repo is not None and not config.raw_repo.name.strip():
        issues.append("rawRepo.name must be non-empty")

    if issues:
        raise NexusConfigError(issues)
    return config


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml


__all__ = [
    "ADMIN_USER",
    "CONFIG_FILE_ENV",
    "CONFIG_PATH_ENV",
    "FACTORY_PASSWORD",
    "BlobStoreConfig",
    "DockerConfig",
    "DockerPortConfig",
    "NexusConfig",
    "ProxyRepositoryConfig",
    "RawRepositoryConfig",
    "find_base_config",
    "load_config",
    "merge_documents",
    "read_document",
    "search_directories",
    "validate_config",
]
