"""Identifier types and validation rules.

Request, test, step and context names share one pattern: they may
contain letters, digits, underscores, dashes and dots, which is also
the character set accepted inside a `${...}` placeholder. Request names
are addressed as `${response.<name>.<path>}`, so they must not contain
dots themselves.
"""

from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Characters allowed inside a placeholder.
_PLACEHOLDER_NAME = r'[-.\w]+'

#: Request identifiers: a single placeholder segment.
_REQUEST_NAME = r'[-\w]+'

#: Compiled pattern for `${name}` placeholders. Whitespace inside the
#: braces is ignored.
PLACEHOLDER_PATTERN = regexp(rf'\$\{{\s*({_PLACEHOLDER_NAME})\s*\}}')

#: Leading segment routing a placeholder to the response store.
RESPONSE_PREFIX = 'response'


RequestName = Annotated[
    str, Field(
        pattern=rf'^{_REQUEST_NAME}$',
        title='Request identifier',
        description=(
            'Unique identifier of a request definition. Used to reference '
            'the request from test steps and its response from templates '
            'as `${response.<identifier>.<field path>}`.'
        ),
        examples=[
            'get-posts',
            'new_todo',
        ],
    ),
]

Name = Annotated[
    str, Field(
        pattern=rf'^{_PLACEHOLDER_NAME}$',
        title='Identifier',
        description=(
            'Name of a context, test, step or variable. '
            'Limited to letters, digits, underscores, dashes and dots.'
        ),
        examples=[
            'local',
            'base_url',
            'create-new-post',
        ],
    ),
]
