"""Base pydantic models for configuration elements and settings.

Configuration elements (contexts, requests, tests, assertions) are
immutable and strictly validated so that a loaded document is
deterministic and safe to execute. Runtime settings are read from the
environment and tolerate unrelated variables.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all configuration elements.

    Design principles enforced by this model:
        - Immutability: elements can not be modified after loading, so
          a request definition resolved twice yields the same result.
        - Strict schema validation: unknown fields are rejected to avoid
          silent errors caused by typos.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
        populate_by_name=True,
    )


class DescribedMixin(SchemaModel):
    """Mixin providing element self-documentation.

    The description is informational only and never takes part in
    execution.
    """

    description: str = Field(
        default='',
        title='Description',
        description='Human-readable description of the element.',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Settings are resolved from environment variables. Unknown variables
    are ignored so the surrounding environment never breaks resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
