"""Declarative configuration schema.

Defines immutable pydantic models describing contexts, request
definitions with their bodies, tests with their steps, and assertions.
The models specify the structural contract of configuration documents
and are consumed by the execution engine in `apictl.core`.
"""

from .bodies import Body, FormBody, MultipartBody, NoBody, RawBody
from .checks import Assertion, BaseCheck, evaluate
from .documents import Document
from .requests import RequestDefinition
from .tests import Step, TestDefinition

__all__ = (
    'Assertion',
    'BaseCheck',
    'Body',
    'Document',
    'FormBody',
    'MultipartBody',
    'NoBody',
    'RawBody',
    'RequestDefinition',
    'Step',
    'TestDefinition',
    'evaluate',
)
