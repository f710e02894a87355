"""Core runtime: template resolution, request execution and run orchestration.

The primary public entry points are `load`, which turns YAML files into
a validated `Document`, and `Runner`, which executes requests and tests
of a document over a transport.
"""

from .bodies import Payload, build_body
from .executor import RequestExecutor
from .loader import load, parse
from .responses import ResponseRecord, ResponseStore
from .runner import Runner
from .templates import TemplateResolver, resolve
from .transport import HttpTransport, Transport, TransportResponse

__all__ = (
    'HttpTransport',
    'Payload',
    'RequestExecutor',
    'ResponseRecord',
    'ResponseStore',
    'Runner',
    'TemplateResolver',
    'Transport',
    'TransportResponse',
    'build_body',
    'load',
    'parse',
    'resolve',
)
