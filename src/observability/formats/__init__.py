"""Wire formats of the Dynatrace ingestion APIs.

The line_protocol module renders metric records for the metrics ingest API,
the events module builds JSON payloads for the events API.
"""

from observability.formats.events import build_event_payload, extract_tag_rules
from observability.formats.line_protocol import (
    encode_metric,
    encode_metrics,
    safe_dimension_key,
    safe_dimension_value,
    safe_metric_key,
)

__all__ = [
    "build_event_payload",
    "extract_tag_rules",
    "encode_metric",
    "encode_metrics",
    "safe_dimension_key",
    "safe_dimension_value",
    "safe_metric_key",
]
