"""Core value types for parsed response bodies and context variables.

This module defines the value model used by the runtime. Context values
are always strings, while parsed response bodies are arbitrary JSON
values. It also provides helpers to render JSON values as text, which is
how they take part in template substitution and assertions.
"""

from json import dumps
from typing import Annotated, Any, TypeAlias

from pydantic import BeforeValidator

#: A JSON value as produced by the standard JSON decoder. Objects keep
#: the key order of the source document.
JsonValue: TypeAlias = None | bool | int | float | str | list['JsonValue'] | dict[str, 'JsonValue']

#: Any Python object received from the YAML loader or from a library
#: before it is validated into a typed value.
RuntimeValue: TypeAlias = Any

MAPPINGS = (dict,)
SCALARS = (str, bytes, int, float, bool)
SEQUENCES = (list, tuple)


def stringify(value: JsonValue) -> str:
    """Render a JSON value as text.

    Strings are returned verbatim. Every other value is rendered in its
    compact JSON form, so `1` becomes `'1'`, `True` becomes `'true'` and
    `None` becomes `'null'`.

    Args:
        value: A parsed JSON value.

    Returns:
        The textual representation of the value.
    """
    if isinstance(value, str):
        return value

    return dumps(value, ensure_ascii=False, separators=(',', ':'))


def normalize_scalar(value: object) -> str:
    """Coerce a configuration scalar into a context string.

    YAML loads unquoted numbers and booleans as native values; contexts
    keep them as text. Booleans use the lowercase YAML spelling.

    Args:
        value: A scalar loaded from configuration.

    Returns:
        The string form of the value.

    Raises:
        TypeError: If the value is a container or an unsupported type.
    """
    if isinstance(value, str):
        return value

    if value is None:
        return ''

    if isinstance(value, (bool, int, float)):
        return stringify(value)

    raise TypeError(f'{value!r} has unsupported type')


def _coerce_scalar(value: object) -> object:
    """Pass strings through and convert other YAML scalars to text."""
    if isinstance(value, (bool, int, float)) or value is None:
        return normalize_scalar(value)

    return value


#: A string field that also accepts unquoted YAML numbers and booleans.
Text = Annotated[str, BeforeValidator(_coerce_scalar)]
