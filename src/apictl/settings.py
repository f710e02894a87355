"""Runtime settings of the HTTP transport."""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from apictl import __version__
from apictl.models import SettingsModel

DEFAULT_TIMEOUT = 30.0


class RunnerSettings(SettingsModel):
    """Transport settings resolved from `APICTL_*` environment variables.

    Command-line flags take precedence over the environment; they are
    passed as keyword arguments on construction.
    """

    model_config = SettingsConfigDict(
        env_prefix='APICTL_',
        frozen=True,
        extra='ignore',
    )

    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        title='Request timeout',
        description='Timeout in seconds applied to every request.',
    )

    follow_redirects: bool = Field(
        default=True,
        title='Follow redirects',
    )

    verify_ssl: bool = Field(
        default=True,
        title='Verify TLS certificates',
    )

    user_agent: str = Field(
        default=f'apictl/{__version__}',
        title='User-Agent header',
        description='Sent unless a request definition sets its own.',
    )
