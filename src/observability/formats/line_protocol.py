"""Encoder for the Dynatrace metrics ingestion line protocol.

Each data point is rendered on its own line:

    metric.key[,dimension.key="value"]* value

Dimension values are written without escaping so that the output stays
byte-compatible with what the receiving parser already accepts.
"""

import re
from collections.abc import Iterable

from models.records import Metric

_UNSAFE_KEY_CHARACTERS = re.compile(r"[^.0-9a-z_-]")


def _safe_key(key: str) -> str:
    return _UNSAFE_KEY_CHARACTERS.sub("_", key.lower())


def safe_metric_key(key: str) -> str:
    """Normalize a metric key to lower case `[.0-9a-z_-]` characters."""
    return _safe_key(key)


def safe_dimension_key(key: str) -> str:
    """Normalize a dimension key to lower case `[.0-9a-z_-]` characters."""
    return _safe_key(key)


def safe_dimension_value(value: str) -> str:
    """Return dimension value as written to the line."""
    return value


def encode_metric(metric: Metric) -> str:
    """Render one metric as a newline-terminated line.

    Dimensions with empty or missing values are left out.
    """
    line = safe_metric_key(metric.name)
    for key, value in (metric.dimensions or {}).items():
        if value:
            line += f',{safe_dimension_key(key)}="{safe_dimension_value(value)}"'
    return f"{line} {metric.value}\n"


def encode_metrics(metrics: Iterable[Metric]) -> str:
    """Render metrics into one line protocol document.

    Parameters:
        metrics: Metrics in the order they should be written.

    Returns:
        str: One line per metric; empty string when there are no metrics.
    """
    return "".join(encode_metric(metric) for metric in metrics)
