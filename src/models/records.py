"""Models for metric and event records reported to Dynatrace."""

from collections.abc import Mapping
from typing import Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel

import constants


def _to_text(value: Any) -> Any:
    """Convert numbers coming from YAML documents into their text form."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class RecordBase(BaseModel):
    """Base class for input records.

    Records use camelCase keys, snake_case field names are accepted as well.
    Unknown keys are ignored because event records are a superset of the
    fields of all event types.
    """

    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, alias_generator=to_camel
    )


class Metric(RecordBase):
    """One metric data point.

    Attributes:
        name: Metric key; read from the `metric` or `name` record key.
        value: Numeric literal forwarded verbatim.
        dimensions: Ordered dimension key/value pairs.
    """

    name: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("metric", "name"),
        description="Metric key",
        examples=["github.build.duration"],
    )
    value: str = Field(
        ...,
        description="Metric value as numeric literal text",
        examples=["1", "12.5"],
    )
    dimensions: Optional[dict[str, Optional[str]]] = Field(
        None,
        description="Dimensions attached to the data point",
        examples=[{"project": "backend", "branch": "main"}],
    )

    @field_validator("value", mode="before")
    @classmethod
    def value_to_text(cls, value: Any) -> Any:
        """Accept numeric values and keep their text form."""
        return _to_text(value)

    @field_validator("dimensions", mode="before")
    @classmethod
    def dimension_values_to_text(cls, value: Any) -> Any:
        """Accept numeric dimension values and keep their text form."""
        if isinstance(value, Mapping):
            return {key: _to_text(val) for key, val in value.items()}
        return value


class Tag(RecordBase):
    """Tag matched by a tag attach rule."""

    context: str = constants.TAG_CONTEXT_CONTEXTLESS
    key: str
    value: Optional[str] = None


class TagAttachRule(RecordBase):
    """Rule attaching an event to all entities of given types carrying a tag."""

    me_types: list[str]
    tags: list[Tag]


class EventBase(RecordBase):
    """Fields shared by all event types."""

    type: str = Field(..., description="Dynatrace event type")
    source: Optional[str] = Field(
        None,
        description="Name of the system that reports the event",
        examples=["GitHub"],
    )
    entities: Optional[list[str]] = Field(
        None,
        description="Entity IDs the event is attached to",
        examples=[["SERVICE-A1B2C3D4E5F6A7B8"]],
    )
    tags: Optional[list[str]] = Field(
        None,
        description="Tags in type:key or type:key:value form",
        examples=[["SERVICE:backend", "HOST:env:prod"]],
    )
    dimensions: Optional[dict[str, Optional[str]]] = Field(
        None,
        description="Custom properties of the event, empty values are not sent",
    )

    @field_validator("dimensions", mode="before")
    @classmethod
    def dimension_values_to_text(cls, value: Any) -> Any:
        """Accept numeric custom property values and keep their text form."""
        if isinstance(value, Mapping):
            return {key: _to_text(val) for key, val in value.items()}
        return value


class StandardEvent(EventBase):
    """Information, availability, error, performance or resource event."""

    type: Literal[
        "CUSTOM_INFO",
        "AVAILABILITY_EVENT",
        "ERROR_EVENT",
        "PERFORMANCE_EVENT",
        "RESOURCE_CONTENTION",
    ]
    title: Optional[str] = None
    description: Optional[str] = None


class DeploymentEvent(EventBase):
    """Custom deployment event."""

    type: Literal["CUSTOM_DEPLOYMENT"]
    deployment_name: Optional[str] = None
    deployment_version: Optional[str] = None
    deployment_project: Optional[str] = None
    remediation_action: Optional[str] = None
    ci_back_link: Optional[str] = None

    @field_validator("deployment_name", "deployment_version", mode="before")
    @classmethod
    def deployment_to_text(cls, value: Any) -> Any:
        """Accept numeric names and versions such as 2 or 1.5."""
        return _to_text(value)


class UnsupportedEvent(EventBase):
    """Event of a type the reporter does not send."""

    @field_validator("type")
    @classmethod
    def check_type_is_unsupported(cls, value: str) -> str:
        """Reject event types that have their own model."""
        if (
            value in constants.STANDARD_EVENT_TYPES
            or value == constants.DEPLOYMENT_EVENT_TYPE
        ):
            raise ValueError(f"Event type {value} is supported")
        return value


Event = Union[StandardEvent, DeploymentEvent, UnsupportedEvent]


def parse_event(record: Mapping[str, Any]) -> Event:
    """Parse one event record into the model matching its type.

    Parameters:
        record: Flat event record with a `type` key.

    Returns:
        Event: StandardEvent, DeploymentEvent or UnsupportedEvent.

    Raises:
        pydantic.ValidationError: If the record does not fit the model.
    """
    event_type = record.get("type")
    if event_type in constants.STANDARD_EVENT_TYPES:
        return StandardEvent.model_validate(record)
    if event_type == constants.DEPLOYMENT_EVENT_TYPE:
        return DeploymentEvent.model_validate(record)
    return UnsupportedEvent.model_validate(record)
