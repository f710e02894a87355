"""Pytest plugin collecting apictl configuration files as tests.

YAML files named `apictl_*.yml` or `apictl_*.yaml` are loaded as
configuration documents. Every test defined in such a document becomes
a pytest item executed against a real HTTP transport.
"""

from re import match
from typing import TYPE_CHECKING

from .collector import ApictlFile

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from _pytest.config.argparsing import Parser
    from _pytest.nodes import Node


def pytest_addoption(parser: 'Parser') -> None:
    """Register pytest command-line options for apictl.

    Args:
        parser: Pytest argument parser.
    """
    group = parser.getgroup('apictl')
    group.addoption(
        '--apictl-context',
        action='append',
        dest='apictl_contexts',
        default=[],
        metavar='NAME',
        help=(
            'Context used to run apictl tests. '
            'Repeat to merge several contexts; later ones win.'
        ),
    )
    group.addoption(
        '--apictl-timeout',
        action='store',
        dest='apictl_timeout',
        type=float,
        default=None,
        metavar='SECONDS',
        help='Request timeout of apictl tests.',
    )


def pytest_collect_file(parent: 'Node', file_path: 'Path') -> ApictlFile | None:
    """Collect apictl configuration files.

    Args:
        parent: Parent pytest collection node.
        file_path: Path to the file being considered.

    Returns:
        An `ApictlFile` collector if the file name matches, otherwise None.
    """
    if match(r'^apictl_.+\.ya?ml$', file_path.name):
        return ApictlFile.from_parent(
            parent,
            path=file_path,
        )

    return None
