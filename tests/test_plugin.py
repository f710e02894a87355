"""Tests for the pytest integration."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from apictl.core.transport import HttpTransport, TransportResponse
from apictl.plugin import pytest_collect_file
from apictl.plugin.case import TestPlan

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from apictl.schema import Document


PLUGIN_CONTENT = '''
requests:
  ping:
    url: http://localhost:3000/ping

tests:
  nothing:
    description: A test without steps
  broken:
    steps:
      - name: ping
        request: ping
      - name: missing
        request: no-such-request
'''


@pytest.fixture
def fake_transport(mocker: 'MockerFixture') -> 'MockType':
    """Provide a transport double."""
    return mocker.Mock(spec=HttpTransport)


def test_plan_passes(document: 'Document', variables: 'Mapping[str, str]',
                     fake_transport: 'MockType') -> None:
    """Return the result of a passing test and close the transport."""
    fake_transport.send.side_effect = [
        TransportResponse(200, {}, b'[{"userId": 1}]'),
        TransportResponse(200, {'Content-Type': 'application/json'}, b'{"id": 1}'),
    ]

    result = TestPlan(document, 'posts', variables, transport=lambda: fake_transport).check()

    assert result.passed
    fake_transport.close.assert_called_once()


def test_plan_fails_with_failures(document: 'Document', variables: 'Mapping[str, str]',
                                  fake_transport: 'MockType') -> None:
    """Raise an assertion error listing the failures of the test."""
    fake_transport.send.side_effect = [
        TransportResponse(500, {}, b'{"error": "boom"}'),
    ]

    plan = TestPlan(document, 'posts', variables, transport=lambda: fake_transport)

    with pytest.raises(AssertionError) as error:
        plan.check()

    message = str(error.value)

    assert message.startswith("Test 'posts' failed:")
    assert 'list: status_code == 200: got status code 500, want 200' in message
    assert 'list: equals(0.userId, 1)' in message
    fake_transport.close.assert_called_once()


@pytest.mark.parametrize('name', (
    pytest.param('test_api.yaml', id='pytest module name'),
    pytest.param('apictl.yaml', id='no suffix after prefix'),
    pytest.param('apictl_api.json', id='not yaml'),
))
def test_collect_ignores_other_files(name: str, mocker: 'MockerFixture') -> None:
    """Collect only files named after the apictl pattern."""
    assert pytest_collect_file(mocker.Mock(), Path(name)) is None


def test_collect_and_run(pytester: pytest.Pytester) -> None:
    """Collect each test of a document as a pytest item."""
    pytester.makefile('.yaml', apictl_sample=PLUGIN_CONTENT)

    result = pytester.runpytest('-v')

    result.assert_outcomes(passed=1, failed=1)
    result.stdout.fnmatch_lines([
        '*apictl_sample.yaml::nothing PASSED*',
        '*apictl_sample.yaml::broken FAILED*',
        '*Request not found: no-such-request*',
    ])


def test_collect_invalid_document(pytester: pytest.Pytester) -> None:
    """Fail collection of a malformed document."""
    pytester.makefile('.yml', apictl_broken='requests: [')

    result = pytester.runpytest()

    result.assert_outcomes(errors=1)
    result.stdout.fnmatch_lines(['*Invalid YAML*'])
