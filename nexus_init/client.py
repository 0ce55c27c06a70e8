"""HTTP transport for the Nexus REST API."""

from __future__ import annotations

import dataclasses
import typing as typ

import httpx
import msgspec

from .config import ADMIN_USER, FACTORY_PASSWORD
from .errors import NexusResponseShapeError, NexusTransportError

if typ.TYPE_CHECKING:
    from .config import NexusConfig

T = typ.TypeVar("T")

_USER_AGENT = "nexus-init/0.1"


@dataclasses.dataclass(frozen=True, slots=True)
class NexusClientConfig:
    """Connection settings for :class:`NexusClient`."""

    base_url: str
    password: str
    username: str = ADMIN_USER
    timeout_s: float = 30.0
    verify_tls: bool = True

    @classmethod
    def from_config(cls, config: NexusConfig) -> NexusClientConfig:
        """Build connection settings from the provisioning configuration."""
        return cls(
            base_url=config.base_url,
            password=config.admin_password,
            timeout_s=config.timeout,
            verify_tls=config.tls_verify,
        )


class NexusClient:
    """Synchronous client bound to one Nexus server.

    Paths are relative to the REST root (``/service/rest/v1/``). Every call
    authenticates as the admin user with the operational password unless an
    explicit ``auth`` is given. Transport failures surface as
    :class:`NexusTransportError`; status handling is left to the caller.
    """

    def __init__(
        self,
        config: NexusClientConfig,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialise the client, creating an ``httpx.Client`` when none is given."""
        self._config = config
        self._auth = httpx.BasicAuth(config.username, config.password)
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=config.timeout_s,
            verify=config.verify_tls,
            headers={"User-Agent": _USER_AGENT, "Accept": "application/json"},
        )

    @property
    def base_url(self) -> str:
        """Return the REST root every path is joined to."""
        return self._config.base_url

    @property
    def factory_auth(self) -> httpx.BasicAuth:
        """Return credentials for the factory default admin password."""
        return httpx.BasicAuth(self._config.username, FACTORY_PASSWORD)

    def close(self) -> None:
        """Close the connection pool when this client created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> NexusClient:
        """Return the client for use as a context manager."""
        return self

    def __exit__(self, *exc_info: object) -> None:
        """Close owned resources on exit."""
        self.close()

    def url(self, path: str) -> str:
        """Return the absolute URL of ``path``."""
        return self._config.base_url + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str,
        *,
        body: object | None = None,
        text: str | None = None,
        auth: httpx.Auth | None = None,
    ) -> httpx.Response:
        """Send one request and return the response whatever its status.

        Parameters
        ----------
        method : str
            HTTP method.
        path : str
            Path below the REST root.
        body : object | None, optional
            Value encoded as the JSON body with msgspec.
        text : str | None, optional
            Plain-text body; mutually exclusive with ``body``.
        auth : httpx.Auth | None, optional
            Credentials overriding the operational admin login.

        Raises
        ------
        NexusTransportError
            If no HTTP response was received.

        """
        headers: dict[str, str] = {}
        content: bytes | None = None
        if body is not None:
            content = msgspec.json.encode(body)
            headers["Content-Type"] = "application/json"
        elif text is not None:
            content = text.encode("utf-8")
            headers["Content-Type"] = "text/plain"

        operation = f"{method} {path}"
        try:
            return self._client.request(
                method,
                self.url(path),
                content=content,
                headers=headers,
                auth=auth or self._auth,
            )
        except httpx.TimeoutException as exc:
            raise NexusTransportError.request_failed(operation, "timed out") from exc
        except httpx.RequestError as exc:
            raise NexusTransportError.request_failed(operation, str(exc)) from exc

    def get(self, path: str, *, auth: httpx.Auth | None = None) -> httpx.Response:
        """Send a ``GET`` request."""
        return self.request("GET", path, auth=auth)

    def post(self, path: str, body: object) -> httpx.Response:
        """Send a ``POST`` request with a JSON body."""
        return self.request("POST", path, body=body)

    def put(self, path: str, body: object) -> httpx.Response:
        """Send a ``PUT`` request with a JSON body."""
        return self.request("PUT", path, body=body)


def decode_body(response: httpx.Response, type_: type[T], *, operation: str) -> T:
    """Decode a JSON response body into ``type_``.

    Raises
    ------
    NexusResponseShapeError
        If the body is empty, not JSON, or does not match ``type_``.

    """
    if not response.content:
        raise NexusResponseShapeError.undecodable(operation, "empty body")
    try:
        return msgspec.json.decode(response.content, type=type_)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise NexusResponseShapeError.undecodable(operation, str(exc)) from exc


__all__ = ["NexusClient", "NexusClientConfig", "decode_body"]
