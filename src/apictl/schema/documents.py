"""Configuration document: contexts, requests and tests."""

from typing import Any, Self

from pydantic import Field, model_validator

from apictl.context import ContextDict
from apictl.errors import ConfigError
from apictl.models import SchemaModel
from apictl.values import Text  # noqa: TC001

from .requests import RequestDefinition  # noqa: TC001
from .tests import TestDefinition  # noqa: TC001


class Document(SchemaModel):
    """A complete configuration document.

    Requests and tests are keyed by their identifiers. The key is copied
    into the `name` field of each definition on validation, so a
    definition always knows its own identifier.
    """

    contexts: dict[str, dict[str, Text]] = Field(
        default_factory=dict,
        title='Contexts',
        description='Named flat variable sets selectable for a run.',
    )

    requests: dict[str, RequestDefinition] = Field(
        default_factory=dict,
        title='Requests',
    )

    tests: dict[str, TestDefinition] = Field(
        default_factory=dict,
        title='Tests',
    )

    @model_validator(mode='before')
    @classmethod
    def inject_names(cls, data: Any) -> Any:  # noqa: ANN401
        """Copy mapping keys into definition names.

        A document whose top-level sections are empty (`requests:` with no
        value) is treated as if the section was omitted.
        """
        if not isinstance(data, dict):
            return data

        data = {
            key: value
            for key, value in data.items()
            if value is not None
        }

        for section in ('requests', 'tests'):
            entries = data.get(section)
            if not isinstance(entries, dict):
                continue
            data[section] = {
                name: {**entry, 'name': name} if isinstance(entry, dict) else entry
                for name, entry in entries.items()
            }

        return data

    def merge(self, other: 'Document') -> Self:
        """Merge another document into a copy of this one.

        Entries of `other` override entries of this document with the
        same name; contexts are replaced as a whole, not merged by key.

        Args:
            other: Document loaded later.

        Returns:
            A new merged document.
        """
        return self.model_copy(update={
            'contexts': {**self.contexts, **other.contexts},
            'requests': {**self.requests, **other.requests},
            'tests': {**self.tests, **other.tests},
        })

    def select_contexts(self, names: 'list[str] | tuple[str, ...]') -> ContextDict:
        """Merge the named contexts in order.

        Args:
            names: Context names; later names override earlier ones.

        Returns:
            The merged context.

        Raises:
            ConfigError: If a context name is not defined.
        """
        missing = [name for name in names if name not in self.contexts]
        if missing:
            raise ConfigError(f'Context not found: {", ".join(missing)}')

        return ContextDict.merge(self.contexts[name] for name in names)

    def get_request(self, name: str) -> RequestDefinition:
        """Return a request definition by identifier.

        Raises:
            ConfigError: If the request is not defined.
        """
        try:
            return self.requests[name]
        except KeyError:
            raise ConfigError(f'Request not found: {name}') from None

    def get_test(self, name: str) -> TestDefinition:
        """Return a test definition by name.

        Raises:
            ConfigError: If the test is not defined.
        """
        try:
            return self.tests[name]
        except KeyError:
            raise ConfigError(f'Test not found: {name}') from None
