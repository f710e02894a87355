"""Pytest item executing a single apictl test."""

from contextlib import closing
from typing import TYPE_CHECKING

import pytest

from apictl.core import HttpTransport, Runner
from apictl.output import render_failures
from apictl.settings import RunnerSettings

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from typing import Any

if TYPE_CHECKING:
    from apictl.core import Transport
    from apictl.results import RunResult
    from apictl.schema import Document


class TestPlan:
    """Execution plan of one test of a document.

    The plan owns no transport: it opens one per execution through the
    factory, so each test starts with fresh connections and a fresh
    response store.
    """

    __test__ = False

    def __init__(self, document: 'Document', name: str,
                 variables: 'Mapping[str, str]', *,
                 transport: 'Callable[[], Transport] | None' = None) -> None:
        """Initialize a test plan.

        Args:
            document: Loaded configuration document.
            name: Test name.
            variables: Active context.
            transport: Factory of the transport; an `HttpTransport` with
                environment settings is used if omitted.
        """
        self.document = document
        self.name = name
        self.variables = variables
        self.transport = transport or HttpTransport

    def execute(self) -> 'RunResult':
        """Run the test and return its result."""
        with closing(self.transport()) as transport:
            return Runner(self.document, transport).run_test(self.name, self.variables)

    def check(self) -> 'RunResult':
        """Run the test and fail if it did not pass.

        Raises:
            AssertionError: With the list of failures if the test failed.
        """
        result = self.execute()
        if not result.passed:
            raise AssertionError(
                f'Test {self.name!r} failed:\n{render_failures(result)}',
            )

        return result


class ApictlCase(pytest.Item):
    """Pytest item running one apictl test over HTTP."""

    __test__ = False

    def __init__(self, *, document: 'Document', **kwargs: 'Any') -> None:
        """Initialize the item.

        Args:
            document: Loaded configuration document.
            **kwargs: Keyword pytest.Item arguments.
        """
        super().__init__(**kwargs)

        self.document = document

    def runtest(self) -> None:
        """Execute the test with the contexts selected on the command line."""
        variables = self.document.select_contexts(
            self.config.getoption('apictl_contexts') or [],
        )

        settings: dict[str, float] = {}
        if (timeout := self.config.getoption('apictl_timeout')) is not None:
            settings['timeout'] = timeout

        plan = TestPlan(
            self.document,
            self.name,
            variables,
            transport=lambda: HttpTransport(RunnerSettings(**settings)),
        )
        plan.check()

    def reportinfo(self) -> tuple['Any', int | None, str]:
        """Report the file and test name of the item."""
        return self.path, None, f'apictl test: {self.name}'
