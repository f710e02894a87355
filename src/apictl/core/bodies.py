"""Body builder: turns body definitions into transport payloads."""

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

import httpx
from pydantic import Field

from apictl.errors import FileNotFound, FileReadError
from apictl.models import SchemaModel
from apictl.schema.bodies import FilePart, FileSource, FormBody, MultipartBody, NoBody, RawBody, TextSource

from .templates import TemplateResolver

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from apictl.core.responses import ResponseStore
    from apictl.schema.bodies import Body, Part

logger = getLogger(__name__)

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'

#: Placeholder target for requests that are only used to encode a body.
_ENCODER_URL = 'http://apictl.invalid/'


class Payload(SchemaModel):
    """Transport-ready request body."""

    content_type: str | None = Field(
        default=None,
        title='Content type hint',
        description='None when the request headers decide the content type.',
    )
    content: bytes = Field(default=b'', title='Body bytes')


def read_file(path: str) -> bytes:
    """Read a body file verbatim.

    Args:
        path: Resolved file path.

    Returns:
        File contents.

    Raises:
        FileNotFound: If the file does not exist.
        FileReadError: If the file can not be read.
    """
    try:
        return Path(path).expanduser().read_bytes()

    except FileNotFoundError as base:
        raise FileNotFound(path) from base

    except OSError as base:
        raise FileReadError(path, base.strerror) from base


def _encode(**kwargs: 'object') -> httpx.Request:
    """Encode a body with httpx without sending it."""
    request = httpx.Request('POST', _ENCODER_URL, **kwargs)  # type: ignore[arg-type]
    request.read()

    return request


def encode_form(fields: 'Mapping[str, str]') -> Payload:
    """URL-encode form fields in insertion order."""
    request = _encode(data=dict(fields))

    return Payload(content_type=FORM_CONTENT_TYPE, content=request.content)


def encode_multipart(fields: 'Mapping[str, Part]') -> Payload:
    """Encode multipart fields in insertion order.

    Text fields become plain form-data parts; file fields carry the file
    name and its verbatim contents.
    """
    parts: list[tuple[str, tuple[str | None, bytes]]] = []
    for name, part in fields.items():
        if isinstance(part, FilePart):
            parts.append((name, (Path(part.path).name, read_file(part.path))))
        else:
            parts.append((name, (None, part.data.encode())))

    request = _encode(files=parts)

    return Payload(content_type=request.headers['content-type'], content=request.content)


def encode_body(body: 'Body') -> Payload:
    """Encode a body whose templates are already resolved.

    Args:
        body: Resolved body definition.

    Returns:
        The transport payload.

    Raises:
        FileNotFound: If a referenced file does not exist.
        FileReadError: If a referenced file can not be read.
    """
    match body:
        case NoBody():
            return Payload()

        case RawBody(source=TextSource(data=data)):
            return Payload(content=data.encode())

        case RawBody(source=FileSource(path=path)):
            logger.debug('Reading raw body from %s', path)
            return Payload(content=read_file(path))

        case FormBody(data=data):
            return encode_form(data)

        case MultipartBody(data=data):
            return encode_multipart(data)

    raise TypeError(f'Unsupported body {body!r}')  # pragma: no cover


def build_body(body: 'Body', variables: 'Mapping[str, str]', responses: 'ResponseStore') -> Payload:
    """Resolve and encode a body definition.

    Args:
        body: Body definition as loaded from configuration.
        variables: Active context of the run.
        responses: Response store of the run.

    Returns:
        The transport payload.

    Raises:
        UnresolvedVariable: If a placeholder can not be satisfied.
        FileNotFound: If a referenced file does not exist.
        FileReadError: If a referenced file can not be read.
    """
    return encode_body(TemplateResolver(variables, responses).resolve_body(body))
