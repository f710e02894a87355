"""Configuration loading from YAML files and directories.

A configuration is either a single YAML file or a directory. Every
`*.yaml` and `*.yml` file below a directory is loaded in sorted path
order and the documents are merged, later files overriding earlier ones
for the same context, request or test name.
"""

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError
from yaml import safe_load
from yaml.error import MarkedYAMLError, YAMLError

from apictl.errors import ConfigError
from apictl.schema.documents import Document

if TYPE_CHECKING:
    from collections.abc import Iterable
    from io import TextIOBase

logger = getLogger(__name__)

YAML_SUFFIXES = frozenset({'.yaml', '.yml'})


def parse(content: 'TextIOBase | str', *, filename: str | None = None) -> Document:
    """Parse a YAML stream into a validated document.

    An empty stream is an empty document.

    Args:
        content: YAML content as a string or file-like object.
        filename: Source name used in error messages.

    Returns:
        The validated document.

    Raises:
        ConfigError: If YAML parsing or validation fails.
    """
    try:
        data = safe_load(content)

    except MarkedYAMLError as base:
        raise ConfigError.from_yaml_error(base, filename=filename) from base

    except YAMLError as base:
        raise ConfigError('Invalid YAML', context={'filename': filename}) from base

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(
            'Configuration document must be a mapping',
            context={'filename': filename, 'element': data},
        )

    try:
        return Document.model_validate(data)

    except ValidationError as base:
        raise ConfigError.from_pydantic_error(base, data=data, filename=filename) from base


def load_file(path: Path) -> Document:
    """Load a single configuration file.

    Raises:
        ConfigError: If the file can not be read or is invalid.
    """
    logger.debug('Loading configuration from %s', path)

    try:
        with path.open('rt', encoding='utf-8') as content:
            return parse(content, filename=f'{path}')

    except OSError as base:
        raise ConfigError(f'Can not read configuration {str(path)!r}: {base.strerror}') from base


def discover(path: Path) -> list[Path]:
    """List configuration files of a path in load order.

    Args:
        path: A YAML file or a directory.

    Returns:
        The file itself, or YAML files below the directory sorted by path.

    Raises:
        ConfigError: If the path does not exist.
    """
    if path.is_dir():
        return sorted(
            item
            for item in path.rglob('*')
            if item.is_file() and item.suffix in YAML_SUFFIXES
        )

    if path.is_file():
        return [path]

    raise ConfigError(f'Configuration not found: {path}')


def merge(documents: 'Iterable[Document]') -> Document:
    """Merge documents in order into a single document."""
    merged = Document()
    for document in documents:
        merged = merged.merge(document)

    return merged


def load(path: Path | str) -> Document:
    """Load and merge the configuration at a path.

    Args:
        path: A YAML file or a directory of YAML files.

    Returns:
        The merged document.

    Raises:
        ConfigError: If the path does not exist or a file is invalid.
    """
    return merge(load_file(item) for item in discover(Path(path)))
