"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from apictl.core.loader import parse
from apictl.core.responses import ResponseRecord, ResponseStore
from apictl.core.transport import HttpTransport
from apictl.settings import RunnerSettings

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

if TYPE_CHECKING:
    from apictl.schema import Document


BASE_URL = 'http://localhost:3000'

DOCUMENT_CONTENT = f'''
contexts:
  local:
    base_url: {BASE_URL}
    pagination_limit: 10
  remote:
    base_url: https://jsonplaceholder.typicode.com

requests:
  get-posts:
    description: List posts
    tags: [posts]
    url: ${{base_url}}/posts?_limit=${{pagination_limit}}

  get-user-from-first-post:
    tags: [users]
    url: ${{base_url}}/users/${{response.get-posts.0.userId}}

  create-post:
    method: post
    url: ${{base_url}}/posts
    headers:
      Content-Type: application/json
    body:
      type: raw
      from:
        type: text
        data: '{{"userId": ${{response.get-posts.0.userId}}, "title": "test post"}}'

  create-todo:
    method: POST
    url: ${{base_url}}/todos
    body:
      type: form
      data:
        userId: 1
        title: use apictl in my own repo
        completed: false

tests:
  posts:
    description: Read the first post and its author
    steps:
      - name: list
        request: get-posts
        asserts:
          - type: status_code
            value: 200
          - type: equals
            key: 0.userId
            value: 1
      - name: author
        request: get-user-from-first-post
        asserts:
          - type: equals
            key: id
            value: 1
          - type: header_contains
            key: content-type
            value: json
'''


@pytest.fixture
def document() -> 'Document':
    """Provide the sample configuration document shared by tests."""
    return parse(DOCUMENT_CONTENT, filename='apictl_sample.yaml')


@pytest.fixture
def variables(document: 'Document') -> 'Mapping[str, str]':
    """Provide the `local` context of the sample document."""
    return document.select_contexts(['local'])


@pytest.fixture
def store() -> ResponseStore:
    """Provide an empty response store."""
    return ResponseStore()


@pytest.fixture
def make_record() -> 'Callable[..., ResponseRecord]':
    """Provide a factory of captured responses.

    The factory accepts the request identifier, the body as text and
    optional status code and headers.
    """
    def make(request: str, body: str = '', *,
             status_code: int = 200,
             headers: 'Mapping[str, str] | None' = None) -> ResponseRecord:
        """Capture a response from plain values."""
        return ResponseRecord.capture(
            request,
            status_code,
            headers or {},
            body.encode(),
        )

    return make


@pytest.fixture
def transport() -> 'Iterator[HttpTransport]':
    """Provide an HTTP transport closed after the test."""
    with HttpTransport(RunnerSettings(timeout=5)) as transport:
        yield transport
