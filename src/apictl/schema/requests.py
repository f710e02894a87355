"""Request definitions.

A request definition is a static, reusable description of one HTTP call.
Every string-valued field is a template resolved against the active
context and the responses of previously executed requests.
"""

from pydantic import AliasChoices, Field, field_validator

from apictl.models import DescribedMixin, SchemaModel
from apictl.names import RequestName  # noqa: TC001
from apictl.values import Text  # noqa: TC001

from .bodies import Body, NoBody


class RequestDefinition(DescribedMixin, SchemaModel):
    """Declarative description of a single HTTP request."""

    name: RequestName = Field(
        title='Request identifier',
        description='Key of the request in the configuration document.',
    )

    tags: list[str] = Field(
        default_factory=list,
        title='Tags',
        description='Free-form labels used to filter request listings.',
    )

    url: Text = Field(
        title='URL template',
        description='Target URL. Query parameters are appended to it.',
    )

    method: str = Field(
        default='GET',
        title='HTTP method',
        description='HTTP method name, case-insensitive.',
        examples=['GET', 'POST', 'DELETE'],
    )

    headers: dict[str, Text] = Field(
        default_factory=dict,
        title='Header templates',
    )

    query_parameters: dict[str, Text] = Field(
        default_factory=dict,
        validation_alias=AliasChoices('query_parameters', 'query'),
        title='Query parameter templates',
        description='Appended to the URL as a query string in declaration order.',
    )

    body: Body = Field(
        default_factory=NoBody,
        validation_alias=AliasChoices('body', 'payload'),
        title='Body definition',
    )

    @field_validator('method')
    @classmethod
    def normalize_method(cls, value: str) -> str:
        """Upper-case the method name."""
        return value.strip().upper()

    def header(self, name: str) -> str | None:
        """Return a header template by case-insensitive name."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value

        return None
