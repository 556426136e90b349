"""Constants used in business logic."""

from typing import Final

# Dynatrace ingestion API paths, appended to the environment URL
METRICS_INGEST_PATH: Final[str] = "/api/v2/metrics/ingest"
EVENTS_INGEST_PATH: Final[str] = "/api/v1/events"

# Authorization header scheme used by the Dynatrace API
API_TOKEN_SCHEME: Final[str] = "Api-Token"

METRICS_CONTENT_TYPE: Final[str] = "text/plain"
EVENTS_CONTENT_TYPE: Final[str] = "application/json"

# Event types sent with the standard event payload
STANDARD_EVENT_TYPES: Final[frozenset[str]] = frozenset(
    {
        "CUSTOM_INFO",
        "AVAILABILITY_EVENT",
        "ERROR_EVENT",
        "PERFORMANCE_EVENT",
        "RESOURCE_CONTENTION",
    }
)
DEPLOYMENT_EVENT_TYPE: Final[str] = "CUSTOM_DEPLOYMENT"

# Tag context used in tag attach rules
TAG_CONTEXT_CONTEXTLESS: Final[str] = "CONTEXTLESS"

# Default configuration file name
DEFAULT_CONFIGURATION_FILE: Final[str] = "dynatrace-reporter.yaml"

# Environment variable that can hold the API token
API_TOKEN_ENV_VARIABLE: Final[str] = "DT_API_TOKEN"
