"""Test definitions: ordered steps of a request and its assertions."""

from pydantic import Field

from apictl.models import DescribedMixin, SchemaModel
from apictl.names import Name, RequestName  # noqa: TC001

from .checks import Assertion  # noqa: TC001


class Step(SchemaModel):
    """One request executed as part of a test, with its assertions.

    Later steps address this step's response through the request
    identifier, not through the step name.
    """

    name: Name = Field(
        title='Step name',
        description='Name used in reports.',
    )

    request: RequestName = Field(
        title='Request identifier',
        description='Request definition executed by the step.',
    )

    asserts: list[Assertion] = Field(
        default_factory=list,
        title='Assertions',
        description=(
            'Assertions evaluated against the response of the step. '
            'All assertions are evaluated even if some of them fail.'
        ),
    )


class TestDefinition(DescribedMixin, SchemaModel):
    """Named, ordered sequence of steps."""

    __test__ = False

    name: Name = Field(
        title='Test name',
        description='Key of the test in the configuration document.',
    )

    steps: list[Step] = Field(
        default_factory=list,
        title='Steps',
        description='Steps executed strictly in declaration order.',
    )
