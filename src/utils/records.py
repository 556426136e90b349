"""Loading of metric and event records from YAML documents."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from models.records import Event, Metric, parse_event
from utils.checks import InvalidConfigurationError, file_check

logger = logging.getLogger(__name__)


def _record_list(document: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    records = document.get(key) or []
    if not isinstance(records, list):
        raise InvalidConfigurationError(f"'{key}' must be a list of records")
    for record in records:
        if not isinstance(record, Mapping):
            raise InvalidConfigurationError(f"'{key}' entry {record!r} is not a mapping")
    return records


def parse_records(document: Any) -> tuple[list[Metric], list[Event]]:
    """Parse metrics and events from a loaded YAML document.

    The document is a mapping with optional `metrics` and `events` lists.

    Raises:
        InvalidConfigurationError: If the document structure is wrong.
        pydantic.ValidationError: If a record does not fit its model.
    """
    if document is None:
        return [], []
    if not isinstance(document, Mapping):
        raise InvalidConfigurationError("records document must be a mapping")

    metrics = [Metric.model_validate(r) for r in _record_list(document, "metrics")]
    events = [parse_event(r) for r in _record_list(document, "events")]
    return metrics, events


def load_records(filename: str) -> tuple[list[Metric], list[Event]]:
    """Load metrics and events from YAML file.

    Parameters:
        filename (str): Path to the YAML records file.

    Returns:
        tuple[list[Metric], list[Event]]: Parsed metrics and events.
    """
    file_check(Path(filename), "records file")
    with open(filename, encoding="utf-8") as fin:
        metrics, events = parse_records(yaml.safe_load(fin))
    logger.info(
        "Loaded %d metrics and %d events from %s", len(metrics), len(events), filename
    )
    return metrics, events
