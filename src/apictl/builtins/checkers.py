"""Built-in assertion checkers.

Each checker receives a captured response and the assertion parameters.
It returns normally when the assertion holds and raises `AssertionError`
with a human-readable reason otherwise. Field path traversal errors are
propagated as `FieldNotFound` so that callers can tell "value differs"
apart from "value does not exist".
"""

from re import search
from typing import TYPE_CHECKING

from apictl.values import stringify

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from apictl.core.responses import ResponseRecord
    from apictl.values import RuntimeValue


def _body_text(response: 'ResponseRecord', key: str) -> str:
    """Resolve a body field and render it as text."""
    return stringify(response.field(key))


def _header(response: 'ResponseRecord', key: str) -> str:
    """Return a header value or fail if the header is absent."""
    header = response.header(key)
    if header is None:
        raise AssertionError(f'header {key!r} not found')

    return header


def status_code(response: 'ResponseRecord', params: 'Mapping[str, RuntimeValue]') -> None:
    """Status code equals the expected value."""
    expected = params['value']
    if response.status_code != expected:
        raise AssertionError(f'got status code {response.status_code}, want {expected}')


def header_contains(response: 'ResponseRecord', params: 'Mapping[str, RuntimeValue]') -> None:
    """Header value contains the expected substring."""
    key, expected = params['key'], params['value']

    header = _header(response, key)
    if expected not in header:
        raise AssertionError(f'header {key!r} got {header!r}, does not contain {expected!r}')


def header_equals(response: 'ResponseRecord', params: 'Mapping[str, RuntimeValue]') -> None:
    """Header value equals the expected value."""
    key, expected = params['key'], params['value']

    header = _header(response, key)
    if header != expected:
        raise AssertionError(f'header {key!r} got {header!r}, want {expected!r}')


def equals(response: 'ResponseRecord', params: 'Mapping[str, RuntimeValue]') -> None:
    """Body field equals the expected value when compared as text."""
    key, expected = params['key'], params['value']

    actual = _body_text(response, key)
    if actual != expected:
        raise AssertionError(f'body {key!r} got {actual!r}, want {expected!r}')


def not_equals(response: 'ResponseRecord', params: 'Mapping[str, RuntimeValue]') -> None:
    """Body field differs from the given value when compared as text."""
    key, expected = params['key'], params['value']

    actual = _body_text(response, key)
    if actual == expected:
        raise AssertionError(f'body {key!r} got {actual!r}, did not want {expected!r}')


def contains(response: 'ResponseRecord', params: 'Mapping[str, RuntimeValue]') -> None:
    """Body field contains the expected substring."""
    key, expected = params['key'], params['value']

    actual = _body_text(response, key)
    if expected not in actual:
        raise AssertionError(f'body {key!r} got {actual!r}, does not contain {expected!r}')


def has_prefix(response: 'ResponseRecord', params: 'Mapping[str, RuntimeValue]') -> None:
    """Body field starts with the expected prefix."""
    key, expected = params['key'], params['value']

    actual = _body_text(response, key)
    if not actual.startswith(expected):
        raise AssertionError(f'body {key!r} got {actual!r}, does not have prefix {expected!r}')


def has_suffix(response: 'ResponseRecord', params: 'Mapping[str, RuntimeValue]') -> None:
    """Body field ends with the expected suffix."""
    key, expected = params['key'], params['value']

    actual = _body_text(response, key)
    if not actual.endswith(expected):
        raise AssertionError(f'body {key!r} got {actual!r}, does not have suffix {expected!r}')


def regex(response: 'ResponseRecord', params: 'Mapping[str, RuntimeValue]') -> None:
    """Body field matches the expected regular expression."""
    key, pattern = params['key'], params['value']

    actual = _body_text(response, key)
    if search(pattern, actual) is None:
        raise AssertionError(f'body {key!r} got {actual!r}, does not match regex {pattern!r}')
