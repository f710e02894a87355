"""Pytest file collector for apictl configuration documents."""

from typing import TYPE_CHECKING

import pytest

from apictl.core.loader import load_file

from .case import ApictlCase

if TYPE_CHECKING:
    from collections.abc import Iterable


class ApictlFile(pytest.File):
    """Collector turning each test of a document into a pytest item.

    A document that fails to load fails the collection of the file with
    the formatted configuration error.
    """

    __test__ = False

    def collect(self) -> 'Iterable[ApictlCase]':
        """Collect one item per test definition.

        Raises:
            ConfigError: If the document is malformed.
        """
        document = load_file(self.path)

        for name in document.tests:
            yield ApictlCase.from_parent(
                self,
                name=name,
                document=document,
            )
