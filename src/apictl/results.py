"""Result values reported by the runner.

Results are plain data: the runner never renders them. Reporters such as
the command-line interface or the pytest plugin consume them to produce
output.
"""

from enum import StrEnum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class RunState(StrEnum):
    """Execution state of a run or of a single step."""

    PENDING = 'pending'
    RUNNING = 'running'
    PASSED = 'passed'
    FAILED = 'failed'
    SKIPPED = 'skipped'


class Failure(NamedTuple):
    """A single reportable failure of a run."""

    step: str
    subject: str
    reason: str


class ResultModel(BaseModel):
    """Base model for mutable result values."""

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
    )


class AssertionResult(ResultModel):
    """Outcome of evaluating one assertion against a response.

    A failed comparison has `passed` set to false and a `reason`. When the
    assertion could not be evaluated at all (for example, its field path
    does not exist in the body) `error` additionally names the error type.
    """

    name: str
    passed: bool
    reason: str | None = None
    error: str | None = None


class StepResult(ResultModel):
    """Outcome of a single step: one request and its assertions."""

    name: str
    request: str
    state: RunState = RunState.PENDING
    status_code: int | None = None
    assertions: list[AssertionResult] = Field(default_factory=list)
    error: str | None = None

    @property
    def passed(self) -> bool:
        """Whether the step executed and every assertion passed."""
        return self.state == RunState.PASSED


class RunResult(ResultModel):
    """Outcome of a run: a test or an ad-hoc list of requests."""

    name: str
    state: RunState = RunState.PENDING
    steps: list[StepResult] = Field(default_factory=list)
    error: str | None = None

    @property
    def passed(self) -> bool:
        """Whether the run reached the `passed` state."""
        return self.state == RunState.PASSED

    @property
    def failures(self) -> list[Failure]:
        """Collect every failure of the run in execution order."""
        failures = []
        if self.error and not any(step.error for step in self.steps):
            failures.append(Failure(self.name, 'run', self.error))

        for step in self.steps:
            if step.error:
                failures.append(Failure(step.name, 'request', step.error))
            for assertion in step.assertions:
                if not assertion.passed:
                    failures.append(Failure(step.name, assertion.name, assertion.reason or 'failed'))

        return failures
