"""Plain-text and YAML rendering of listings and run results."""

from enum import StrEnum
from os import linesep
from typing import TYPE_CHECKING

from yaml import safe_dump

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

if TYPE_CHECKING:
    from apictl.core.responses import ResponseRecord
    from apictl.results import RunResult
    from apictl.schema.documents import Document
    from apictl.schema.tests import TestDefinition

INDENT = '  '


class OutputFormat(StrEnum):
    """Output format of listings."""

    TSV = 'tsv'
    YAML = 'yaml'


def render_rows(rows: 'Iterable[Sequence[str]]', data: object, output: OutputFormat) -> str:
    """Render a listing.

    Args:
        rows: Tab-separated rows, one per element.
        data: Serializable structure used for YAML output.
        output: Requested format.

    Returns:
        The rendered listing.
    """
    if output == OutputFormat.YAML:
        return safe_dump(data, sort_keys=False, allow_unicode=True).rstrip()

    return linesep.join('\t'.join(row) for row in rows)


def render_contexts(document: 'Document', output: OutputFormat) -> str:
    """Render the contexts of a document."""
    return render_rows(
        ([name] for name in document.contexts),
        document.contexts,
        output,
    )


def render_requests(document: 'Document', output: OutputFormat, *,
                    tag: str | None = None) -> str:
    """Render the requests of a document, optionally filtered by tag."""
    requests = [
        request
        for request in document.requests.values()
        if tag is None or tag in request.tags
    ]

    return render_rows(
        ([request.name, request.method, request.url, request.description] for request in requests),
        {
            request.name: request.model_dump(mode='json', by_alias=True, exclude={'name'})
            for request in requests
        },
        output,
    )


def render_tests(document: 'Document', output: OutputFormat) -> str:
    """Render the tests of a document."""
    tests = document.tests.values()

    return render_rows(
        ([test.name, str(len(test.steps)), test.description] for test in tests),
        {
            test.name: test.model_dump(mode='json', by_alias=True, exclude={'name'})
            for test in tests
        },
        output,
    )


def describe_test(test: 'TestDefinition') -> str:
    """Render a human-readable outline of a test."""
    lines = [
        f'test: {test.name}',
        f'{INDENT}description: {test.description}',
        f'{INDENT}steps:',
    ]
    for step in test.steps:
        lines.append(f'{INDENT * 2}{step.name} ({step.request})')
        if step.asserts:
            lines.append(f'{INDENT * 3}asserts:')
            lines.extend(f'{INDENT * 4}{assertion.title}' for assertion in step.asserts)

    return linesep.join(lines)


def render_response(record: 'ResponseRecord', *, verbose: bool = False) -> str:
    """Render a response body, preceded by status and headers if verbose."""
    if not verbose:
        return record.text

    lines = [f'status: {record.status_code}']
    lines.extend(f'{key}: {value}' for key, value in record.headers.items())
    lines.append('')
    lines.append(record.text)

    return linesep.join(lines)


def render_result(result: 'RunResult') -> str:
    """Render a run result as an indented tree.

    Every line starts with the state of the element. Failed assertions
    and step errors carry their reason.
    """
    lines = [f'{result.state.upper():<8}{result.name}']
    if result.error and not any(step.error for step in result.steps):
        lines.append(f'{INDENT}error: {result.error}')

    for step in result.steps:
        line = f'{INDENT}{step.state.upper():<8}{step.name}'
        if step.status_code is not None:
            line += f' ({step.status_code})'
        lines.append(line)

        if step.error:
            lines.append(f'{INDENT * 2}error: {step.error}')

        for assertion in step.assertions:
            line = f'{INDENT * 2}{"PASSED" if assertion.passed else "FAILED":<8}{assertion.name}'
            if not assertion.passed and assertion.reason:
                line += f': {assertion.reason}'
            lines.append(line)

    return linesep.join(lines)


def render_failures(result: 'RunResult') -> str:
    """Render the failure list of a run."""
    return linesep.join(
        f'{failure.step}: {failure.subject}: {failure.reason}'
        for failure in result.failures
    )
