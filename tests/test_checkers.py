"""Tests for assertions evaluated against captured responses."""

from typing import TYPE_CHECKING

import pydantic
import pytest
from pydantic import TypeAdapter

from apictl.errors import FieldNotFound
from apictl.schema import Assertion, evaluate

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

if TYPE_CHECKING:
    from apictl.core.responses import ResponseRecord

ASSERTION = TypeAdapter(Assertion)

BODY = '{"userId": 1, "title": "test post", "completed": false, "tags": ["a", "b"]}'


@pytest.fixture
def response(make_record: 'Callable[..., ResponseRecord]') -> 'ResponseRecord':
    """Provide a created post response."""
    return make_record(
        'create-post',
        BODY,
        status_code=201,
        headers={'Content-Type': 'application/json; charset=utf-8', 'X-Request-Id': 'abc'},
    )


@pytest.mark.parametrize('data', (
    pytest.param({'type': 'status_code', 'value': 201}, id='status code'),
    pytest.param({'type': 'header_contains', 'key': 'content-type', 'value': 'json'}, id='header contains'),
    pytest.param({'type': 'header_equals', 'key': 'x-request-id', 'value': 'abc'}, id='header equals'),
    pytest.param({'type': 'equals', 'key': 'userId', 'value': '1'}, id='equals as text'),
    pytest.param({'type': 'equals', 'key': 'userId', 'value': 1}, id='equals yaml integer'),
    pytest.param({'type': 'equals', 'key': 'completed', 'value': False}, id='equals yaml boolean'),
    pytest.param({'type': 'equals', 'key': 'tags', 'value': '["a","b"]'}, id='equals compact json'),
    pytest.param({'type': 'not_equals', 'key': 'userId', 'value': '10'}, id='not equals'),
    pytest.param({'type': 'contains', 'key': 'title', 'value': 'post'}, id='contains'),
    pytest.param({'type': 'has_prefix', 'key': 'title', 'value': 'test'}, id='has prefix'),
    pytest.param({'type': 'has_suffix', 'key': 'title', 'value': 'post'}, id='has suffix'),
    pytest.param({'type': 'regex', 'key': 'title', 'value': r'^test\s+\w+$'}, id='regex'),
))
def test_passing(data: dict[str, 'Any'], response: 'ResponseRecord') -> None:
    """Pass assertions that hold."""
    assertion = ASSERTION.validate_python(data)
    result = evaluate(assertion, response)

    assert result.passed is True
    assert result.reason is None
    assert result.error is None


@pytest.mark.parametrize('data, reason', (
    pytest.param({'type': 'status_code', 'value': 200}, 'got status code 201, want 200', id='status code'),
    pytest.param({'type': 'header_contains', 'key': 'Content-Type', 'value': 'xml'},
                 "header 'Content-Type' got 'application/json; charset=utf-8', does not contain 'xml'",
                 id='header contains'),
    pytest.param({'type': 'header_contains', 'key': 'X-Missing', 'value': 'x'},
                 "header 'X-Missing' not found", id='absent header'),
    pytest.param({'type': 'header_equals', 'key': 'X-Request-Id', 'value': 'abd'},
                 "header 'X-Request-Id' got 'abc', want 'abd'", id='header equals'),
    pytest.param({'type': 'equals', 'key': 'userId', 'value': '10'},
                 "body 'userId' got '1', want '10'", id='equals'),
    pytest.param({'type': 'not_equals', 'key': 'userId', 'value': '1'},
                 "body 'userId' got '1', did not want '1'", id='not equals'),
    pytest.param({'type': 'contains', 'key': 'title', 'value': 'draft'},
                 "body 'title' got 'test post', does not contain 'draft'", id='contains'),
    pytest.param({'type': 'has_prefix', 'key': 'title', 'value': 'post'},
                 "body 'title' got 'test post', does not have prefix 'post'", id='has prefix'),
    pytest.param({'type': 'has_suffix', 'key': 'title', 'value': 'test'},
                 "body 'title' got 'test post', does not have suffix 'test'", id='has suffix'),
    pytest.param({'type': 'regex', 'key': 'title', 'value': '^post'},
                 "body 'title' got 'test post', does not match regex '^post'", id='regex'),
))
def test_failing(data: dict[str, 'Any'], reason: str, response: 'ResponseRecord') -> None:
    """Fail assertions that do not hold with a readable reason."""
    assertion = ASSERTION.validate_python(data)
    result = evaluate(assertion, response)

    assert result.passed is False
    assert result.reason == reason
    assert result.error is None

    with pytest.raises(AssertionError):
        assertion(response)


def test_traversal_error_is_distinct(response: 'ResponseRecord') -> None:
    """Report a missing field path as an error, not a comparison failure."""
    assertion = ASSERTION.validate_python({'type': 'equals', 'key': 'missing.path', 'value': 'x'})

    with pytest.raises(FieldNotFound):
        assertion(response)

    result = evaluate(assertion, response)

    assert result.passed is False
    assert result.error == 'FieldNotFound'
    assert result.reason is not None
    assert 'missing.path' in result.reason


def test_non_json_body(make_record: 'Callable[..., ResponseRecord]') -> None:
    """Report body assertions on non-JSON responses as errors."""
    assertion = ASSERTION.validate_python({'type': 'contains', 'key': 'title', 'value': 'x'})
    result = evaluate(assertion, make_record('get-page', '<html></html>'))

    assert result.passed is False
    assert result.error == 'FieldNotFound'


@pytest.mark.parametrize('data, title', (
    pytest.param({'type': 'status_code', 'value': 201}, 'status_code == 201', id='status code'),
    pytest.param({'type': 'equals', 'key': 'userId', 'value': '1'}, 'equals(userId, 1)', id='key value'),
))
def test_title(data: dict[str, 'Any'], title: str) -> None:
    """Render short assertion titles for reports."""
    assert ASSERTION.validate_python(data).title == title


@pytest.mark.parametrize('data', (
    pytest.param({'type': 'unknown', 'value': 1}, id='unknown type'),
    pytest.param({'type': 'status_code', 'value': 42}, id='status code out of range'),
    pytest.param({'type': 'equals', 'key': 'userId'}, id='missing value'),
    pytest.param({'type': 'equals', 'key': 'userId', 'value': '1', 'extra': 1}, id='extra field'),
    pytest.param({'type': 'regex', 'key': 'title', 'value': '(unclosed'}, id='invalid regex'),
))
def test_invalid(data: dict[str, 'Any']) -> None:
    """Reject malformed assertions at validation time."""
    with pytest.raises(pydantic.ValidationError):
        ASSERTION.validate_python(data)
