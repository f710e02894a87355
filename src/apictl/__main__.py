"""Command-line interface for running API requests and tests.

The configuration is loaded from a YAML file or a directory of YAML
files. Requests and tests are executed strictly in sequence; a failed
request or test sets a non-zero exit status.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from click import Choice, ClickException, Context, echo, group, option, pass_context, pass_obj, version_option
from click import Path as PathParam
from click import argument

from apictl import __version__
from apictl.core import HttpTransport, ResponseStore, Runner, load
from apictl.errors import ApictlError
from apictl.output import (
    OutputFormat,
    describe_test,
    render_contexts,
    render_failures,
    render_requests,
    render_response,
    render_result,
    render_tests,
)
from apictl.settings import RunnerSettings

if TYPE_CHECKING:
    from apictl.context import ContextDict
    from apictl.schema import Document

DEFAULT_CONFIG = '.apictl.yaml'

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

ConfigPath = PathParam(
    exists=False,
    file_okay=True,
    dir_okay=True,
    path_type=Path,
)

output_option = option(
    '-o', '--output',
    type=Choice([item.value for item in OutputFormat]),
    default=OutputFormat.TSV.value,
    show_default=True,
    help='Output format.',
)

context_option = option(
    '-c', '--context', 'contexts',
    multiple=True,
    help='Context to use; repeat to merge several, later ones win.',
)


class State:
    """Shared state of a CLI invocation.

    The configuration is loaded on first use, so `--help` of subcommands
    works without a configuration file.
    """

    def __init__(self, config: Path, settings: RunnerSettings) -> None:
        """Initialize the state.

        Args:
            config: Configuration file or directory.
            settings: Transport settings.
        """
        self.config = config
        self.settings = settings
        self._document: 'Document | None' = None

    @property
    def document(self) -> 'Document':
        """Return the loaded configuration.

        Raises:
            ClickException: If the configuration is invalid.
        """
        if self._document is None:
            try:
                self._document = load(self.config)
            except ApictlError as error:
                raise ClickException(f'{error}') from error

        return self._document

    def select_contexts(self, names: tuple[str, ...]) -> 'ContextDict':
        """Merge the named contexts.

        Raises:
            ClickException: If a context is not defined.
        """
        try:
            return self.document.select_contexts(names)
        except ApictlError as error:
            raise ClickException(error.message) from error


@group(help='Run HTTP API requests and tests described in YAML.')
@option(
    '--config',
    type=ConfigPath,
    default=DEFAULT_CONFIG,
    show_default=True,
    envvar='APICTL_CONFIG',
    help='Configuration file or directory of YAML files.',
)
@option(
    '--timeout',
    type=float,
    default=None,
    help='Request timeout in seconds.',
)
@option(
    '--insecure',
    is_flag=True,
    default=False,
    help='Do not verify TLS certificates.',
)
@option(
    '--log-level',
    type=Choice(LOG_LEVELS, case_sensitive=False),
    default='WARNING',
    show_default=True,
    help='Logging level.',
)
@version_option(__version__, prog_name='apictl')
@pass_context
def cli(ctx: Context, config: Path, timeout: float | None,
        insecure: bool, log_level: str) -> None:
    """Root CLI group for apictl."""
    logging.basicConfig(
        level=log_level.upper(),
        format='%(levelname)s %(name)s: %(message)s',
    )

    overrides: dict[str, object] = {}
    if timeout is not None:
        overrides['timeout'] = timeout
    if insecure:
        overrides['verify_ssl'] = False

    ctx.obj = State(config, RunnerSettings(**overrides))  # type: ignore[arg-type]


@cli.group(name='contexts', help='Manage contexts.')
def contexts_group() -> None:
    """Context commands."""
    return None


@contexts_group.command(name='list', help='List all the contexts.')
@output_option
@pass_obj
def list_contexts(state: State, output: str) -> None:
    """Print the context names."""
    echo(render_contexts(state.document, OutputFormat(output)))


@cli.group(name='requests', help='Manage requests.')
def requests_group() -> None:
    """Request commands."""
    return None


@requests_group.command(name='list', help='List all the requests.')
@output_option
@option('--tag', default=None, help='Only list requests with this tag.')
@pass_obj
def list_requests(state: State, output: str, tag: str | None) -> None:
    """Print the requests."""
    echo(render_requests(state.document, OutputFormat(output), tag=tag))


@requests_group.command(name='run', help='Run the given requests in order.')
@context_option
@option('-v', '--verbose', is_flag=True, default=False, help='Print status and headers before the body.')
@option('-q', '--quiet', is_flag=True, default=False, help='Only print errors.')
@argument('names', nargs=-1, required=True)
@pass_obj
def run_requests(state: State, contexts: tuple[str, ...], verbose: bool,
                 quiet: bool, names: tuple[str, ...]) -> None:
    """Run requests and print their responses."""
    variables = state.select_contexts(contexts)
    responses = ResponseStore()

    with HttpTransport(state.settings) as transport:
        result = Runner(state.document, transport).run_requests(
            names,
            variables,
            responses=responses,
        )

    if not quiet:
        for record in responses:
            echo(render_response(record, verbose=verbose))

    if not result.passed:
        raise ClickException(render_failures(result))


@cli.group(name='tests', help='Manage tests.')
def tests_group() -> None:
    """Test commands."""
    return None


@tests_group.command(name='list', help='List all the tests.')
@output_option
@pass_obj
def list_tests(state: State, output: str) -> None:
    """Print the tests."""
    echo(render_tests(state.document, OutputFormat(output)))


@tests_group.command(name='describe', help='Describe the given tests.')
@argument('names', nargs=-1, required=True)
@pass_obj
def describe_tests(state: State, names: tuple[str, ...]) -> None:
    """Print an outline of each test."""
    for name in names:
        try:
            test = state.document.get_test(name)
        except ApictlError as error:
            raise ClickException(error.message) from error

        echo(describe_test(test))


@tests_group.command(name='run', help='Run the given tests, or all tests if none is given.')
@context_option
@argument('names', nargs=-1)
@pass_obj
def run_tests(state: State, contexts: tuple[str, ...], names: tuple[str, ...]) -> None:
    """Run tests and print a result tree for each."""
    variables = state.select_contexts(contexts)
    names = names or tuple(state.document.tests)

    failed = []
    with HttpTransport(state.settings) as transport:
        runner = Runner(state.document, transport)
        for name in names:
            result = runner.run_test(name, variables)
            echo(render_result(result))
            if not result.passed:
                failed.append(name)

    if failed:
        raise ClickException(f'Failed tests: {", ".join(failed)}')


if __name__ == '__main__':
    cli()
