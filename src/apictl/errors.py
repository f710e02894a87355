"""Core exception hierarchy.

This module defines the error types raised while loading configuration
documents and while executing requests and tests. Every error carries an
optional structured context which is rendered into a human-readable
message with source location and a YAML snippet of the failing element.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump
from yaml.error import MarkedYAMLError

from apictl.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails, ValidationError

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_SEPARATOR = f' ---{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_FILENAME = '<unicode string>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source file where the error occurred.
    filename: str | None

    #: Line number in the source file.
    line_num: int | None
    #: Column number in the source file.
    column_num: int | None

    #: Name of the test being executed.
    test: str | None
    #: Name of the step being executed.
    step: str | None
    #: Identifier of the request being executed.
    request: str | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Context variables available at the moment of failure.
    context: dict[str, Any] | None
    #: Configuration element associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting errors.

    Produces human-readable error messages with optional source location
    and YAML-based contextual snippets.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source and execution location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line, column,
            test, step and request names when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            line_num += 1
            message += f', line {line_num}'
            if (column_num := context.get('column_num')) is not None:
                column_num += 1
                message += f', column {column_num}'
        message += linesep

        location = []
        if test := context.get('test'):
            location.append(f'test {test!r}')
        if step := context.get('step'):
            location.append(f'step {step!r}')
        if request := context.get('request'):
            location.append(f'request {request!r}')

        if location:
            message += f'{indent}on {", ".join(location)}{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Args:
            context: Error context containing element or exception data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        if (error := context.get('error')) and isinstance(error, MarkedYAMLError):
            snippet = error.problem_mark.get_snippet(indent=0) if error.problem_mark else None
            return cls._make_indent(snippet or '', indent)

        if element := context.get('element'):
            return cls._make_snippet(element, context, indent)

        return ''

    @classmethod
    def _make_snippet(cls, element: Any,  # noqa: ANN401
                      context: ErrorContext, indent: str) -> str:
        """Build a YAML-based snippet for an element."""
        snippet = f'{indent}{SNIPPET_ELLIPSIS}'

        if values := context.get('context'):
            snippet += cls._make_yaml({'context': {**values}}, indent)
            snippet += linesep
            snippet += f'{indent}{SNIPPET_SEPARATOR}'

        snippet += cls._make_yaml(element, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Non-scalar and non-container objects are replaced with
        a placeholder.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                key: cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a sanitized value to a YAML-formatted string."""
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string, dropping blank lines."""
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class ApictlError(Exception, ErrorFormatter):
    """Base exception for all apictl errors."""

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional runtime values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)

    def with_context(self, **values: Any) -> 'Self':  # noqa: ANN401
        """Attach additional location data to the error.

        Existing values are kept; new values fill the gaps.

        Returns:
            The same error instance.
        """
        merged = ErrorContext(**values)  # type: ignore[typeddict-item]
        merged.update({
            key: value
            for key, value in (self.context or {}).items()
            if value is not None
        })
        self.context = merged

        return self


class ConfigError(ApictlError):
    """Error raised when a configuration document is invalid.

    Covers YAML syntax errors, schema validation errors, unknown context,
    request or test names and execution plans that can not be run.
    """

    @classmethod
    def from_yaml_error(cls, error: MarkedYAMLError, *,
                        filename: str | None = None) -> 'Self':
        """Create a configuration error from a YAML parsing failure.

        Args:
            error: Exception raised by the YAML parser.
            filename: Name of the source file, if the mark has none.

        Returns:
            ConfigError representing the YAML parsing failure.
        """
        error_context = ErrorContext(filename=filename, error=error)
        if mark := error.problem_mark:
            error_context.update(
                filename=filename or mark.name,
                line_num=mark.line,
                column_num=mark.column,
            )

        message = 'Invalid YAML'
        if error.problem:
            message += f'{linesep}{" " * FORMAT_INDENT}{error.problem}'

        return cls(message, context=error_context)

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            data: Any = None,  # noqa: ANN401
                            filename: str | None = None) -> 'Self':
        """Create a configuration error from a pydantic validation failure.

        The first validation issue that can be located inside the source
        data is used to build the message and a focused snippet.

        Args:
            error: ValidationError raised by pydantic.
            data: Validated document data.
            filename: Name of the source file where the error occurred.

        Returns:
            ConfigError representing the validation failure.
        """
        error_context = ErrorContext(
            filename=filename,
            error=error,
            element=data,
        )

        if not data or not isinstance(data, dict):
            return cls('Type validation error', context=error_context)

        for item in error.errors(include_url=False, include_input=False):
            if located := cls._locate_pydantic_context(data, item):
                message, value = located
                return cls(message, context=ErrorContext({**error_context, 'element': value}))

        return cls('Validation error', context=error_context)

    @classmethod
    def _locate_pydantic_context(cls, value: Any,  # noqa: ANN401
                                 error: 'ErrorDetails') -> tuple[str, Any] | None:
        """Locate the most specific failing element in validated data.

        Walks the pydantic error location and extracts the minimal
        substructure responsible for the failure.

        Args:
            value: Root data structure being validated.
            error: Pydantic error details including location path.

        Returns:
            A tuple of (error message, extracted element) if a relevant
            context can be located, otherwise None.
        """
        container = last_item = value
        last_key: int | str | None = None

        for key in error['loc']:
            if isinstance(last_item, (list, tuple)):
                if isinstance(key, int) and 0 <= key < len(last_item):
                    container = last_item
                    last_item = last_item[key]
                    last_key = key
            elif isinstance(last_item, dict):
                if key in last_item:
                    container = last_item
                    last_item = last_item[key]
                    last_key = key
            else:
                break

        message = None
        if isinstance(last_key, (int, str)):
            for item in (error.get('msg') or '').splitlines():
                if item_message := item.strip():
                    message = item_message
                    break

        if message:
            if isinstance(container, (list, tuple)):
                return message, [last_item]
            if isinstance(container, dict):
                return message, {last_key: last_item}

        return None


class ExecutionError(ApictlError):
    """Error raised while executing a request.

    Execution errors are fatal for the current run: the orchestrator
    stops issuing requests and reports the error.
    """


class TemplateResolutionError(ExecutionError):
    """Error raised when a template string can not be resolved."""


class UnresolvedVariable(TemplateResolutionError):
    """A placeholder names an unknown variable or an unexecuted response."""

    def __init__(self, name: str, reason: str | None = None, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an unresolved variable error.

        Args:
            name: Placeholder name as written in the template.
            reason: Optional explanation appended to the message.
            context: Error context containing optional runtime values.
        """
        self.name = name

        message = f'Unresolved variable {name!r}'
        if reason:
            message += f': {reason}'

        super().__init__(message, context=context)


class ResponseError(ExecutionError):
    """Base error for response addressing failures."""


class UnknownResponse(ResponseError):
    """The addressed request has not been executed in the current run."""

    def __init__(self, request: str) -> None:
        """Initialize the error for a missing response."""
        self.request = request

        super().__init__(f'No response for request {request!r} in the current run')


class DuplicateResponse(ResponseError):
    """The request has already been executed in the current run."""

    def __init__(self, request: str) -> None:
        """Initialize the error for a repeated response."""
        self.request = request

        super().__init__(f'Response for request {request!r} is already recorded')


class FieldNotFound(ResponseError):
    """A field path can not be traversed on a response body."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize the error for an invalid field path.

        Args:
            path: The field path that was requested.
            reason: Description of where traversal stopped.
        """
        self.path = path
        self.reason = reason

        super().__init__(f'Field {path!r} not found: {reason}')


class FileReadError(ExecutionError):
    """A file referenced by a request body can not be read."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        """Initialize the error for an unreadable file."""
        self.path = path

        message = f'Can not read file {path!r}'
        if reason:
            message += f': {reason}'

        super().__init__(message)


class FileNotFound(FileReadError):
    """A file referenced by a request body does not exist."""

    def __init__(self, path: str) -> None:
        """Initialize the error for a missing file."""
        super().__init__(path, 'no such file')


class TransportError(ExecutionError):
    """Network-level failure while sending a request."""
