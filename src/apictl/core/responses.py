"""Captured responses and the run-scoped response store."""

from json import JSONDecodeError, loads
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import Field

from apictl.builtins.lookups import FieldLookup
from apictl.errors import DuplicateResponse, FieldNotFound, UnknownResponse
from apictl.models import SchemaModel

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

if TYPE_CHECKING:
    from apictl.values import JsonValue

logger = getLogger(__name__)


class ResponseRecord(SchemaModel):
    """Captured status, headers and body of one executed request.

    The body is kept as decoded text and, when it parses as JSON, as the
    parsed value. Records are immutable once captured.
    """

    request: str = Field(title='Request identifier')
    status_code: int = Field(title='HTTP status code')
    headers: dict[str, str] = Field(default_factory=dict, title='Response headers')
    text: str = Field(default='', title='Decoded body')
    content: Any = Field(default=None, title='Parsed JSON body')
    is_json: bool = Field(default=False, title='Whether the body parsed as JSON')

    @classmethod
    def capture(cls, request: str, status_code: int,
                headers: 'Mapping[str, str]', content: bytes, *,
                encoding: str | None = None) -> 'ResponseRecord':
        """Build a record from raw transport data.

        The body is decoded with the given encoding (UTF-8 by default,
        replacing undecodable bytes) and parsed as JSON. An unknown charset falls back to UTF-8.
        A body that is not JSON is kept as text and is not an error.

        Args:
            request: Identifier of the executed request.
            status_code: HTTP status code.
            headers: Response headers.
            content: Raw body bytes.
            encoding: Optional charset announced by the server.

        Returns:
            A new response record.
        """
        try:
            text = content.decode(encoding or 'utf-8', errors='replace')
        except LookupError:
            logger.warning('Unknown charset %r in response of %r, decoding as UTF-8', encoding, request)
            text = content.decode('utf-8', errors='replace')

        parsed: JsonValue = None
        is_json = False
        if text.strip():
            try:
                parsed = loads(text)
                is_json = True
            except JSONDecodeError:
                logger.debug('Response of %r is not JSON', request)

        return cls(
            request=request,
            status_code=status_code,
            headers=dict(headers),
            text=text,
            content=parsed,
            is_json=is_json,
        )

    def header(self, name: str) -> str | None:
        """Look a header up by case-insensitive name.

        Args:
            name: Header name.

        Returns:
            The header value, or None if the header is absent.
        """
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value

        return None

    def field(self, path: str) -> 'JsonValue':
        """Resolve a field path against the parsed JSON body.

        An empty path selects the whole body, which for a non-JSON body
        is its text.

        Args:
            path: Dot-separated field path rooted at the body.

        Returns:
            The selected JSON value.

        Raises:
            FieldNotFound: If the body is not JSON or the path can not
                be traversed.
        """
        if not self.is_json:
            if not path.strip():
                return self.text
            logger.warning('Field %r requested on non-JSON response of %r', path, self.request)
            raise FieldNotFound(path, f'response body of {self.request!r} is not JSON')

        return FieldLookup(path).resolve(self.content)


class ResponseStore:
    """Append-only, run-scoped mapping of request identifier to response.

    Records are kept in execution order. A response is addressable only
    after its request executed in the current run.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._records: dict[str, ResponseRecord] = {}

    def __contains__(self, request: object) -> bool:
        """Check whether a response is recorded for a request."""
        return request in self._records

    def __iter__(self) -> 'Iterator[ResponseRecord]':
        """Iterate over records in execution order."""
        return iter(self._records.values())

    def __len__(self) -> int:
        """Number of recorded responses."""
        return len(self._records)

    def put(self, record: ResponseRecord) -> None:
        """Record the response of an executed request.

        Args:
            record: Captured response.

        Raises:
            DuplicateResponse: If the request already has a response.
        """
        if record.request in self._records:
            raise DuplicateResponse(record.request)

        self._records[record.request] = record

    def get(self, request: str) -> ResponseRecord:
        """Return the response of an executed request.

        Raises:
            UnknownResponse: If the request has not been executed.
        """
        try:
            return self._records[request]
        except KeyError:
            raise UnknownResponse(request) from None

    def field(self, request: str, path: str) -> 'JsonValue':
        """Resolve a field path against a recorded response body.

        Raises:
            UnknownResponse: If the request has not been executed.
            FieldNotFound: If the path can not be traversed.
        """
        return self.get(request).field(path)
