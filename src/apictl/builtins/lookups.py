"""Field path lookups over parsed JSON bodies.

A field path is a dot-separated list of segments. Numeric segments index
arrays and every other segment indexes object keys. Traversal is strict:
any segment that can not be applied raises `FieldNotFound` with a reason
describing where traversal stopped.
"""

from typing import TYPE_CHECKING

from apictl.errors import FieldNotFound

if TYPE_CHECKING:
    from apictl.values import JsonValue


class FieldLookup:
    """Resolver for dotted field paths.

    Unlike template placeholders, field paths never fall back to a
    default: a missing key, an out of range index or a scalar container
    is an error.
    """

    def __init__(self, path: str) -> None:
        """Initialize the resolver with a dotted path.

        Args:
            path: Dot-separated path. An empty path selects the root value.
        """
        self.path = path.strip()
        self.segments = self.path.split('.') if self.path else []

    def __call__(self, value: 'JsonValue') -> 'JsonValue':
        """Resolve the field path against a value."""
        return self.resolve(value)

    def resolve(self, value: 'JsonValue') -> 'JsonValue':
        """Resolve the field path against a value.

        Args:
            value: Root JSON value.

        Returns:
            The value selected by the path.

        Raises:
            FieldNotFound: If any segment can not be applied.
        """
        current = value

        for depth, key in enumerate(self.segments):
            location = '.'.join(self.segments[:depth]) or '<root>'

            if not key:
                raise FieldNotFound(self.path, f'empty segment after {location!r}')

            if isinstance(current, list):
                if not (key.isascii() and key.isdigit()):
                    raise FieldNotFound(self.path, f'{location!r} is an array, {key!r} is not an index')
                index = int(key)
                if index >= len(current):
                    raise FieldNotFound(
                        self.path,
                        f'index {index} is out of bounds for {location!r} of length {len(current)}',
                    )
                current = current[index]

            elif isinstance(current, dict):
                if key not in current:
                    raise FieldNotFound(self.path, f'key {key!r} is missing in {location!r}')
                current = current[key]

            else:
                raise FieldNotFound(self.path, f'{location!r} is not an object or an array')

        return current
