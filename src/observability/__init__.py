"""Observability module for reporting CI results to Dynatrace.

The dynatrace module provides send_metrics() and send_events(), which encode
records with the builders from the formats subpackage and deliver them to the
Dynatrace ingestion APIs.
"""

from observability.client import get_client
from observability.dynatrace import (
    DeliveryOutcome,
    DeliveryReport,
    send_events,
    send_metrics,
)

__all__ = [
    "DeliveryOutcome",
    "DeliveryReport",
    "get_client",
    "send_events",
    "send_metrics",
]
