"""Model with reporter configuration."""

import os
from enum import Enum
from typing import Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    FilePath,
    PositiveInt,
    SecretStr,
    model_validator,
)
from typing_extensions import Self

import constants
from utils import checks


class ConfigurationBase(BaseModel):
    """Base class for all configuration models that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class FailurePolicy(str, Enum):
    """How delivery failures are reported back to the caller.

    - log: failures are logged and swallowed, the send functions return None
    - aggregate: failures are logged and every attempted request is also
      recorded in a DeliveryReport returned to the caller
    """

    LOG = "log"
    AGGREGATE = "aggregate"


class DynatraceConfiguration(ConfigurationBase):
    """Dynatrace environment configuration.

    Metrics are pushed to the metrics ingest API v2 and events to the events
    API v1 of the environment. Both calls are authenticated with an API token
    that needs the `metrics.ingest` and `DataExport` scopes.

    Useful resources:

      - [Metrics ingestion protocol](https://www.dynatrace.com/support/help/extend-dynatrace/extend-metrics/reference/metric-ingestion-protocol)
      - [Events API v1](https://www.dynatrace.com/support/help/dynatrace-api/environment-api/events-v1)
    """

    url: AnyHttpUrl = Field(
        ...,
        title="Environment URL",
        description="Base URL of the Dynatrace environment, for example "
        "https://abc12345.live.dynatrace.com",
    )

    token: Optional[SecretStr] = Field(
        None,
        title="API token",
        description="Dynatrace API token. When neither token nor token_path is set "
        f"the token is taken from the {constants.API_TOKEN_ENV_VARIABLE} "
        "environment variable.",
    )

    token_path: Optional[FilePath] = Field(
        None,
        title="API token path",
        description="Path to a file that contains the Dynatrace API token.",
    )

    timeout: Optional[PositiveInt] = Field(
        None,
        title="Request timeout",
        description="Total timeout of one request in seconds. The HTTP client "
        "default is used when not set.",
    )

    verify_ssl: bool = Field(
        True,
        title="Verify SSL",
        description="Verify the TLS certificate of the Dynatrace environment.",
    )

    @model_validator(mode="after")
    def check_dynatrace_configuration(self) -> Self:
        """Check that exactly one token source is configured.

        Falls back to the token environment variable when no token source
        is present in the configuration.

        Returns:
            Self: The validated DynatraceConfiguration instance.
        """
        if self.token is not None and self.token_path is not None:
            raise ValueError(
                "Only one of token and token_path can be set in Dynatrace configuration"
            )
        if self.token is None and self.token_path is None:
            env_token = os.environ.get(constants.API_TOKEN_ENV_VARIABLE, "").strip()
            if not env_token:
                raise ValueError(
                    "Dynatrace API token is not configured: set token, token_path "
                    f"or the {constants.API_TOKEN_ENV_VARIABLE} environment variable"
                )
            self.token = SecretStr(env_token)
        return self

    @property
    def base_url(self) -> str:
        """Return environment URL without trailing slash."""
        return str(self.url).rstrip("/")

    @property
    def api_token(self) -> str:
        """Return the API token.

        The token file is read on each access so rotated tokens are picked up
        without restarting the reporter.

        Raises:
            InvalidConfigurationError: If the token file can not be read.
        """
        if self.token is not None:
            return self.token.get_secret_value()
        if self.token_path is None:
            raise checks.InvalidConfigurationError(
                "Dynatrace API token is not configured"
            )
        return checks.read_secret_file(self.token_path, "Dynatrace API token file")


class DeliveryConfiguration(ConfigurationBase):
    """Delivery configuration."""

    failure_policy: FailurePolicy = Field(
        FailurePolicy.LOG,
        title="Failure policy",
        description="'log' only logs delivery failures, 'aggregate' also returns "
        "a delivery report that can be used to fail the pipeline.",
    )

    send_metrics: bool = Field(
        True,
        title="Send metrics",
        description="Push metric records to the metrics ingest API.",
    )

    send_events: bool = Field(
        True,
        title="Send events",
        description="Push event records to the events API.",
    )


class Configuration(ConfigurationBase):
    """Global reporter configuration."""

    name: str = Field(
        "dynatrace-ci-reporter",
        title="Reporter name",
        description="Name of the reporter instance, used in log output.",
    )

    dynatrace: DynatraceConfiguration = Field(
        ...,
        title="Dynatrace configuration",
        description="Dynatrace environment the records are reported to.",
    )

    delivery: DeliveryConfiguration = Field(
        default_factory=DeliveryConfiguration,
        title="Delivery configuration",
        description="How records are delivered and how failures are reported.",
    )

    def dump(self, filename: str = "configuration.json") -> None:
        """Dump actual configuration into JSON file."""
        with open(filename, "w", encoding="utf-8") as fout:
            fout.write(self.model_dump_json(indent=4))
