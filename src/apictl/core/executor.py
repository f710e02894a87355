"""Request executor: resolves a definition, sends it, captures the response."""

from logging import getLogger
from typing import TYPE_CHECKING

from .bodies import encode_body
from .responses import ResponseRecord
from .templates import TemplateResolver

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from apictl.schema.requests import RequestDefinition

    from .responses import ResponseStore
    from .transport import Transport

logger = getLogger(__name__)

CONTENT_TYPE = 'Content-Type'


class RequestExecutor:
    """Executor of single request definitions.

    The executor only reads the response store; recording the captured
    response is the caller's decision.
    """

    def __init__(self, transport: 'Transport') -> None:
        """Initialize the executor.

        Args:
            transport: Transport used to send requests.
        """
        self.transport = transport

    def execute(self, definition: 'RequestDefinition',
                variables: 'Mapping[str, str]',
                responses: 'ResponseStore') -> ResponseRecord:
        """Resolve and send a request definition.

        Non-2xx status codes are regular responses, not errors.

        Args:
            definition: Request definition as loaded from configuration.
            variables: Active context of the run.
            responses: Response store of the run.

        Returns:
            The captured response.

        Raises:
            UnresolvedVariable: If a placeholder can not be satisfied.
            FileReadError: If a body file can not be read.
            TransportError: If the request can not be sent.
        """
        resolved = TemplateResolver(variables, responses).resolve_request(definition)
        payload = encode_body(resolved.body)

        headers = dict(resolved.headers)
        if payload.content_type and resolved.header(CONTENT_TYPE) is None:
            headers[CONTENT_TYPE] = payload.content_type

        logger.info('%s %s', resolved.method, resolved.url)

        response = self.transport.send(
            resolved.method,
            resolved.url,
            headers,
            resolved.query_parameters,
            payload.content,
        )

        logger.info('%s %s -> %d', resolved.method, resolved.url, response.status_code)

        return ResponseRecord.capture(
            definition.name,
            response.status_code,
            response.headers,
            response.content,
            encoding=response.encoding,
        )
