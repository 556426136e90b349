"""Async Dynatrace client for sending metrics and events."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

import aiohttp

import constants
from models.config import FailurePolicy
from models.records import Event, Metric
from observability.client import get_client
from observability.formats.events import build_event_payload, extract_tag_rules
from observability.formats.line_protocol import encode_metrics

logger = logging.getLogger(__name__)


@dataclass
class DeliveryOutcome:
    """Result of one request sent to Dynatrace."""

    url: str
    success: bool
    status: Optional[int] = None
    error: Optional[str] = None


@dataclass
class DeliveryReport:
    """Outcomes of all requests issued by one send_metrics or send_events call."""

    outcomes: list[DeliveryOutcome] = field(default_factory=list)
    skipped: int = 0

    @property
    def failed(self) -> list[DeliveryOutcome]:
        """Return outcomes of failed requests."""
        return [outcome for outcome in self.outcomes if not outcome.success]

    @property
    def ok(self) -> bool:
        """Return True when every attempted request succeeded."""
        return not self.failed

    def merge(self, other: "DeliveryReport") -> "DeliveryReport":
        """Return a report containing outcomes of both reports."""
        return DeliveryReport(
            outcomes=self.outcomes + other.outcomes,
            skipped=self.skipped + other.skipped,
        )


def _endpoint(url: str, path: str) -> str:
    return url.rstrip("/") + path


async def _post(session: aiohttp.ClientSession, url: str, body: str) -> DeliveryOutcome:
    """Send one request and classify its result.

    Any status below 400 is a success. Error statuses, client errors and
    timeouts are logged and returned as failed outcomes, never raised.
    """
    try:
        async with session.post(url, data=body) as response:
            if response.status >= 400:
                text = await response.text()
                logger.error(
                    "HTTP request failed with status %d %s: %s",
                    response.status,
                    response.reason,
                    text[:200],
                )
                return DeliveryOutcome(
                    url=url,
                    success=False,
                    status=response.status,
                    error=f"HTTP request failed: {response.reason}",
                )
            logger.debug("HTTP request succeeded with status %d", response.status)
            return DeliveryOutcome(url=url, success=True, status=response.status)
    except aiohttp.ClientError as e:
        logger.error("HTTP request failed: %s", e)
        return DeliveryOutcome(url=url, success=False, error=str(e))
    except TimeoutError:
        logger.error("HTTP request to %s timed out", url)
        return DeliveryOutcome(url=url, success=False, error="HTTP request timed out")


async def send_metrics(  # pylint: disable=too-many-arguments
    url: str,
    token: str,
    metrics: Sequence[Metric],
    *,
    policy: FailurePolicy = FailurePolicy.LOG,
    timeout: Optional[int] = None,
    verify_ssl: bool = True,
) -> Optional[DeliveryReport]:
    """Send metrics to the Dynatrace metrics ingest API.

    All metrics are sent in a single request. A failed delivery is logged
    and does not raise an exception.

    Args:
        url: Base URL of the Dynatrace environment.
        token: Dynatrace API token.
        metrics: Metrics to send.
        policy: Failure policy; with FailurePolicy.AGGREGATE a delivery
            report is returned.
        timeout: Total request timeout in seconds.
        verify_ssl: Verify TLS certificate of the environment.

    Returns:
        Optional[DeliveryReport]: Delivery report for the aggregate policy,
        None otherwise.
    """
    logger.info("Sending %d metrics", len(metrics))
    lines = encode_metrics(metrics)
    logger.info("%s", lines)

    report = DeliveryReport()
    async with get_client(
        token, constants.METRICS_CONTENT_TYPE, timeout, verify_ssl
    ) as session:
        report.outcomes.append(
            await _post(session, _endpoint(url, constants.METRICS_INGEST_PATH), lines)
        )
    return report if policy is FailurePolicy.AGGREGATE else None


async def send_events(  # pylint: disable=too-many-arguments
    url: str,
    token: str,
    events: Sequence[Event],
    *,
    policy: FailurePolicy = FailurePolicy.LOG,
    timeout: Optional[int] = None,
    verify_ssl: bool = True,
) -> Optional[DeliveryReport]:
    """Send events to the Dynatrace events API.

    Each event is sent in its own request, in input order, one after
    another. Events of unsupported types are skipped. A failed delivery is
    logged and the remaining events are still sent.

    Args:
        url: Base URL of the Dynatrace environment.
        token: Dynatrace API token.
        events: Events to send.
        policy: Failure policy; with FailurePolicy.AGGREGATE a delivery
            report is returned.
        timeout: Total request timeout in seconds.
        verify_ssl: Verify TLS certificate of the environment.

    Returns:
        Optional[DeliveryReport]: Delivery report for the aggregate policy,
        None otherwise.
    """
    logger.info("Sending %d events", len(events))

    report = DeliveryReport()
    endpoint = _endpoint(url, constants.EVENTS_INGEST_PATH)
    async with get_client(
        token, constants.EVENTS_CONTENT_TYPE, timeout, verify_ssl
    ) as session:
        for event in events:
            payload = build_event_payload(event, extract_tag_rules(event.tags))
            if payload is None:
                report.skipped += 1
                continue
            # compact JSON with non-ASCII text kept as is
            body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
            logger.info("%s", body)
            report.outcomes.append(await _post(session, endpoint, body))
    return report if policy is FailurePolicy.AGGREGATE else None
