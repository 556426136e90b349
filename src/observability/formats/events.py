"""Event payload builders for the Dynatrace events API v1.

Standard events (information, availability, error, performance and resource
contention) and custom deployment events have different payload shapes.
Events of other types have no payload and are not sent.
"""

import logging
from collections.abc import Iterable
from typing import Any, Optional

from models.records import (
    DeploymentEvent,
    Event,
    StandardEvent,
    Tag,
    TagAttachRule,
)

logger = logging.getLogger(__name__)


def extract_tag_rules(tags: Optional[Iterable[str]]) -> list[TagAttachRule]:
    """Build tag attach rules from `type:key` and `type:key:value` strings.

    Parameters:
        tags: Tag strings of one event, may be None.

    Returns:
        list[TagAttachRule]: One rule per well-formed tag, in input order.
    """
    rules: list[TagAttachRule] = []
    for tag in tags or []:
        parts = tag.split(":")
        if len(parts) == 2:
            rules.append(TagAttachRule(me_types=[parts[0]], tags=[Tag(key=parts[1])]))
        elif len(parts) == 3:
            rules.append(
                TagAttachRule(
                    me_types=[parts[0]], tags=[Tag(key=parts[1], value=parts[2])]
                )
            )
        else:
            logger.warning("Ignoring malformed tag '%s'", tag)
    return rules


def _attach_rules(event: Event, tag_rules: list[TagAttachRule]) -> dict[str, Any]:
    return {
        "entityIds": event.entities,
        "tagRule": [
            rule.model_dump(by_alias=True, exclude_none=True) for rule in tag_rules
        ],
    }


def _without_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def _custom_properties(event: Event) -> Optional[dict[str, str]]:
    if event.dimensions is None:
        return None
    return _without_none(event.dimensions)


def build_standard_event(
    event: StandardEvent, tag_rules: list[TagAttachRule]
) -> dict[str, Any]:
    """Build payload of an information, availability, error, performance or
    resource contention event."""
    return _without_none(
        {
            "eventType": event.type,
            "attachRules": _without_none(_attach_rules(event, tag_rules)),
            "source": event.source,
            "description": event.description,
            "title": event.title,
            "customProperties": _custom_properties(event),
        }
    )


def build_deployment_event(
    event: DeploymentEvent, tag_rules: list[TagAttachRule]
) -> dict[str, Any]:
    """Build payload of a custom deployment event."""
    return _without_none(
        {
            "eventType": event.type,
            "attachRules": _without_none(_attach_rules(event, tag_rules)),
            "source": event.source,
            "deploymentName": event.deployment_name,
            "deploymentVersion": event.deployment_version,
            "deploymentProject": event.deployment_project,
            "remediationAction": event.remediation_action,
            "ciBackLink": event.ci_back_link,
            "customProperties": _custom_properties(event),
        }
    )


def build_event_payload(
    event: Event, tag_rules: Optional[list[TagAttachRule]] = None
) -> Optional[dict[str, Any]]:
    """Build the events API payload for one event.

    Parameters:
        event: The event record.
        tag_rules: Tag attach rules of the event; derived from the event tags
            when not given.

    Returns:
        Optional[dict[str, Any]]: JSON-serializable payload, or None when the
        event type is not supported.
    """
    if tag_rules is None:
        tag_rules = extract_tag_rules(event.tags)

    if isinstance(event, StandardEvent):
        logger.info("Preparing a standard event")
        return build_standard_event(event, tag_rules)
    if isinstance(event, DeploymentEvent):
        logger.info("Preparing a custom deployment event")
        return build_deployment_event(event, tag_rules)

    logger.warning("Unsupported event type %s, event is not sent", event.type)
    return None
