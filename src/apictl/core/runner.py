"""Run orchestrator for ad-hoc request lists and tests."""

from logging import getLogger
from typing import TYPE_CHECKING

from apictl.errors import ConfigError, ExecutionError
from apictl.results import RunResult, RunState, StepResult
from apictl.schema.tests import Step

from .executor import RequestExecutor
from .responses import ResponseStore

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

if TYPE_CHECKING:
    from apictl.schema.documents import Document

    from .transport import Transport

logger = getLogger(__name__)


class Runner:
    """Sequential executor of runs.

    A run is an ordered list of steps executed against one context with
    one response store. Steps never run concurrently: a step starts only
    after the response of the previous step has been recorded.

    Errors never escape a run. Configuration problems found before the
    first request and execution errors raised by a step are recorded in
    the returned result.
    """

    def __init__(self, document: 'Document', transport: 'Transport') -> None:
        """Initialize the runner.

        Args:
            document: Loaded configuration document.
            transport: Transport used to send requests.
        """
        self.document = document
        self.executor = RequestExecutor(transport)

    def run_requests(self, names: 'Iterable[str]', variables: 'Mapping[str, str]', *,
                     responses: ResponseStore | None = None) -> RunResult:
        """Execute an ad-hoc list of requests in the given order.

        Args:
            names: Request identifiers.
            variables: Active context.
            responses: Optional store to record responses in; a new
                store is used if omitted.

        Returns:
            The run result; its steps are named after the requests.
        """
        names = tuple(names)
        steps = [Step.model_construct(name=name, request=name, asserts=[]) for name in names]

        return self.run(', '.join(names), steps, variables, responses=responses)

    def run_test(self, name: str, variables: 'Mapping[str, str]', *,
                 responses: ResponseStore | None = None) -> RunResult:
        """Execute a test with a fresh response store.

        Args:
            name: Test name.
            variables: Active context.
            responses: Optional store to record responses in; a new
                store is used if omitted.

        Returns:
            The test result.
        """
        try:
            test = self.document.get_test(name)
        except ConfigError as error:
            return RunResult(name=name, state=RunState.FAILED, error=error.message)

        return self.run(name, test.steps, variables, test=name, responses=responses)

    def validate(self, steps: 'Iterable[Step]') -> None:
        """Validate an execution plan before any request is sent.

        Raises:
            ConfigError: If a step names an unknown request, or the same
                request is used by more than one step.
        """
        seen: set[str] = set()
        for step in steps:
            if step.request not in self.document.requests:
                raise ConfigError(f'Request not found: {step.request}').with_context(step=step.name)
            if step.request in seen:
                raise ConfigError(
                    f'Request {step.request!r} is executed more than once in a run',
                ).with_context(step=step.name)
            seen.add(step.request)

    def run(self, name: str, steps: 'Iterable[Step]', variables: 'Mapping[str, str]', *,
            test: str | None = None,
            responses: ResponseStore | None = None) -> RunResult:
        """Execute steps in order.

        A step whose request fails is `failed` and aborts the run. A step
        with failed assertions is `failed` after every one of its
        assertions has been evaluated. Steps after a failed step are
        `skipped`.

        Args:
            name: Name of the run used in reports.
            steps: Ordered steps.
            variables: Active context.
            test: Test name for error locations.
            responses: Optional store to record responses in.

        Returns:
            The run result.
        """
        steps = tuple(steps)
        result = RunResult(
            name=name,
            steps=[StepResult(name=step.name, request=step.request) for step in steps],
        )

        try:
            self.validate(steps)

        except ConfigError as error:
            logger.error('Run %r is invalid: %s', name, error.message)
            self._skip(result.steps)
            result.state = RunState.FAILED
            result.error = error.message
            return result

        if responses is None:
            responses = ResponseStore()

        result.state = RunState.RUNNING
        logger.debug('Run %r started with %d step(s)', name, len(steps))

        for index, (step, step_result) in enumerate(zip(steps, result.steps, strict=True)):
            self.run_step(step, step_result, variables, responses, test=test)

            if step_result.state == RunState.FAILED:
                result.state = RunState.FAILED
                result.error = step_result.error
                self._skip(result.steps[index + 1:])
                break

        if result.state == RunState.RUNNING:
            result.state = RunState.PASSED

        logger.debug('Run %r finished: %s', name, result.state)

        return result

    def run_step(self, step: Step, result: StepResult,
                 variables: 'Mapping[str, str]', responses: ResponseStore, *,
                 test: str | None = None) -> None:
        """Execute one step and record its outcome in place."""
        result.state = RunState.RUNNING

        try:
            record = self.executor.execute(
                self.document.requests[step.request],
                variables,
                responses,
            )
            responses.put(record)

        except ExecutionError as error:
            error.with_context(test=test, step=step.name, request=step.request)
            logger.error('%s', error)
            result.state = RunState.FAILED
            result.error = error.message
            return

        result.status_code = record.status_code
        result.assertions = [
            assertion.evaluate(record)
            for assertion in step.asserts
        ]

        if all(assertion.passed for assertion in result.assertions):
            result.state = RunState.PASSED
        else:
            result.state = RunState.FAILED

    @staticmethod
    def _skip(steps: 'Iterable[StepResult]') -> None:
        """Mark steps that will never run."""
        for step in steps:
            step.state = RunState.SKIPPED
