"""Request body definitions.

A body is a closed tagged union discriminated on `type`:

- `none`: no body;
- `raw`: literal text or the verbatim contents of a file;
- `form`: URL-encoded key/value pairs;
- `multipart`: text and file parts.

Every string in a body definition is a template. The contents of
referenced files are never templated, only their paths.
"""

from typing import Annotated, Literal

from pydantic import Field

from apictl.models import SchemaModel
from apictl.values import Text  # noqa: TC001


class TextSource(SchemaModel):
    """Raw body taken from an inline text template."""

    type: Literal['text']
    data: Text = Field(
        title='Text template',
        description='Body text. Placeholders are resolved before sending.',
    )


class FileSource(SchemaModel):
    """Raw body taken from a file."""

    type: Literal['file']
    path: Text = Field(
        title='Path template',
        description='Path of the file to send. Only the path is templated.',
    )


RawSource = Annotated[TextSource | FileSource, Field(discriminator='type')]


class TextPart(SchemaModel):
    """Multipart text field."""

    type: Literal['text']
    data: Text = Field(title='Text template')


class FilePart(SchemaModel):
    """Multipart file field streamed from disk."""

    type: Literal['file']
    path: Text = Field(title='Path template')


Part = Annotated[TextPart | FilePart, Field(discriminator='type')]


class NoBody(SchemaModel):
    """Request without a body."""

    type: Literal['none'] = 'none'


class RawBody(SchemaModel):
    """Body sent verbatim."""

    type: Literal['raw']
    source: RawSource = Field(
        validation_alias='from',
        serialization_alias='from',
        title='Body source',
        description='Inline text or a file to send as is.',
    )


class FormBody(SchemaModel):
    """URL-encoded form body."""

    type: Literal['form']
    data: dict[str, Text] = Field(
        default_factory=dict,
        title='Form fields',
        description='Field templates, encoded in declaration order.',
    )


class MultipartBody(SchemaModel):
    """Multipart form body."""

    type: Literal['multipart']
    data: dict[str, Part] = Field(
        default_factory=dict,
        title='Multipart fields',
        description='Text or file parts, sent in declaration order.',
    )


Body = Annotated[NoBody | RawBody | FormBody | MultipartBody, Field(discriminator='type')]
