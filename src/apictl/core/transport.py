"""HTTP transport backed by httpx."""

from logging import getLogger
from typing import TYPE_CHECKING, NamedTuple, Protocol, Self

import httpx

from apictl.errors import TransportError
from apictl.settings import RunnerSettings

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

logger = getLogger(__name__)


class TransportResponse(NamedTuple):
    """Raw response data returned by a transport."""

    status_code: int
    headers: dict[str, str]
    content: bytes
    encoding: str | None = None


class Transport(Protocol):
    """Blocking request sender used by the executor."""

    def send(self, method: str, url: str, headers: 'Mapping[str, str]',
             query: 'Mapping[str, str]', body: bytes) -> TransportResponse:
        """Send one request and wait for the complete response."""
        ...

    def close(self) -> None:
        """Release resources held by the transport."""
        ...


class HttpTransport:
    """Transport sending requests with a shared `httpx.Client`.

    The client is created lazily and reused for every request of the
    transport, so connections are pooled across the steps of a run.
    """

    def __init__(self, settings: RunnerSettings | None = None) -> None:
        """Initialize the transport.

        Args:
            settings: Runtime settings; read from the environment if omitted.
        """
        self.settings = settings or RunnerSettings()
        self._client: httpx.Client | None = None

    def __enter__(self) -> Self:
        """Enter the transport context."""
        return self

    def __exit__(self, exc_type: type[BaseException] | None,
                 exc_value: BaseException | None,
                 traceback: 'TracebackType | None') -> None:
        """Close the underlying client."""
        self.close()

    @property
    def client(self) -> httpx.Client:
        """Return the underlying client, creating it if needed."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.settings.timeout),
                follow_redirects=self.settings.follow_redirects,
                verify=self.settings.verify_ssl,
                headers={'User-Agent': self.settings.user_agent},
            )

        return self._client

    def close(self) -> None:
        """Close the underlying client."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
        self._client = None

    def send(self, method: str, url: str, headers: 'Mapping[str, str]',
             query: 'Mapping[str, str]', body: bytes) -> TransportResponse:
        """Send a request and read the complete response.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            headers: Request headers.
            query: Query parameters appended to the URL.
            body: Encoded request body, empty for no body.

        Returns:
            Status, headers and raw body of the response.

        Raises:
            TransportError: On connection failures, timeouts, malformed
                URLs and header values that are not ASCII.
        """
        try:
            response = self.client.request(
                method,
                url,
                headers=dict(headers),
                params=dict(query) or None,
                content=body or None,
            )

        except httpx.HTTPError as base:
            logger.debug('Request %s %s failed', method, url, exc_info=True)
            raise TransportError(f'{method} {url}: {base}') from base

        except (httpx.InvalidURL, UnicodeEncodeError) as base:
            raise TransportError(f'{method} {url}: {base}') from base

        return TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            content=response.content,
            encoding=response.encoding,
        )
