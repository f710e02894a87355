"""Declarative assertions evaluated against captured responses.

Assertions form a closed tagged union discriminated on `type`. Every
assertion model binds a checker function as a class-level runner; the
model only declares parameters and delegates the comparison.
"""

from collections.abc import Callable, Mapping
from re import compile as regexp
from re import error as RegexError  # noqa: N812
from typing import TYPE_CHECKING, Annotated, ClassVar, Literal, TypeAlias

from pydantic import Field, field_validator

from apictl.builtins import checkers
from apictl.errors import FieldNotFound
from apictl.models import SchemaModel
from apictl.results import AssertionResult
from apictl.values import RuntimeValue, Text

if TYPE_CHECKING:
    from apictl.core.responses import ResponseRecord

#: The runner receives a captured response and the assertion parameters.
#: It returns normally on success and raises `AssertionError` on failure.
CheckRunner: TypeAlias = Callable[['ResponseRecord', Mapping[str, RuntimeValue]], None]


class BaseCheck(SchemaModel):
    """Base class for declarative response assertions."""

    #: Callable implementing the check logic.
    runner: ClassVar[CheckRunner]

    type: str

    def __call__(self, response: 'ResponseRecord') -> None:
        """Run the check against a response.

        Args:
            response: Captured response to check.

        Raises:
            AssertionError: If the assertion does not hold.
            FieldNotFound: If a body field path can not be traversed.
        """
        type(self).runner(response, self.model_dump(exclude={'type'}))

    def evaluate(self, response: 'ResponseRecord') -> AssertionResult:
        """Evaluate the check into a result value.

        Failures are never raised: a failed comparison and a traversal
        error both become a failed result, the latter also naming the
        error type.

        Args:
            response: Captured response to check.

        Returns:
            The assertion result.
        """
        try:
            self(response)

        except AssertionError as error:
            return AssertionResult(name=self.title, passed=False, reason=str(error) or 'assertion failed')

        except FieldNotFound as error:
            return AssertionResult(
                name=self.title,
                passed=False,
                reason=error.message,
                error=type(error).__name__,
            )

        return AssertionResult(name=self.title, passed=True)

    @property
    def title(self) -> str:
        """Short human-readable representation of the assertion."""
        params = ', '.join(
            str(value)
            for value in self.model_dump(exclude={'type'}).values()
        )

        return f'{self.type}({params})'


class KeyValueCheck(BaseCheck):
    """Base class for assertions on a key and an expected text value."""

    key: Text = Field(
        title='Key',
        description='Header name or body field path, depending on the assertion.',
    )
    value: Text = Field(
        title='Expected value',
    )


class StatusCodeCheck(BaseCheck):
    """Response status equals the expected code."""

    runner: ClassVar[CheckRunner] = staticmethod(checkers.status_code)

    type: Literal['status_code']
    value: int = Field(title='Expected status code', ge=100, le=599)

    @property
    def title(self) -> str:
        """Short human-readable representation of the assertion."""
        return f'status_code == {self.value}'


class HeaderContainsCheck(KeyValueCheck):
    """Header value contains a substring."""

    runner: ClassVar[CheckRunner] = staticmethod(checkers.header_contains)

    type: Literal['header_contains']


class HeaderEqualsCheck(KeyValueCheck):
    """Header value equals the expected value."""

    runner: ClassVar[CheckRunner] = staticmethod(checkers.header_equals)

    type: Literal['header_equals']


class EqualsCheck(KeyValueCheck):
    """Body field equals the expected value."""

    runner: ClassVar[CheckRunner] = staticmethod(checkers.equals)

    type: Literal['equals']


class NotEqualsCheck(KeyValueCheck):
    """Body field differs from the given value."""

    runner: ClassVar[CheckRunner] = staticmethod(checkers.not_equals)

    type: Literal['not_equals']


class ContainsCheck(KeyValueCheck):
    """Body field contains a substring."""

    runner: ClassVar[CheckRunner] = staticmethod(checkers.contains)

    type: Literal['contains']


class HasPrefixCheck(KeyValueCheck):
    """Body field starts with a prefix."""

    runner: ClassVar[CheckRunner] = staticmethod(checkers.has_prefix)

    type: Literal['has_prefix']


class HasSuffixCheck(KeyValueCheck):
    """Body field ends with a suffix."""

    runner: ClassVar[CheckRunner] = staticmethod(checkers.has_suffix)

    type: Literal['has_suffix']


class RegexCheck(KeyValueCheck):
    """Body field matches a regular expression."""

    runner: ClassVar[CheckRunner] = staticmethod(checkers.regex)

    type: Literal['regex']

    @field_validator('value')
    @classmethod
    def check_pattern(cls, value: str) -> str:
        """Reject patterns that do not compile.

        Raises:
            ValueError: If the pattern is not a valid regular expression.
        """
        try:
            regexp(value)
        except RegexError as error:
            raise ValueError(f'Invalid regular expression: {error}') from error

        return value


Assertion = Annotated[
    StatusCodeCheck
    | HeaderContainsCheck
    | HeaderEqualsCheck
    | EqualsCheck
    | NotEqualsCheck
    | ContainsCheck
    | HasPrefixCheck
    | HasSuffixCheck
    | RegexCheck,
    Field(discriminator='type'),
]


def evaluate(assertion: BaseCheck, response: 'ResponseRecord') -> AssertionResult:
    """Evaluate one assertion against a captured response."""
    return assertion.evaluate(response)
