"""Canonical event schemas: the single source of truth for tracked interaction data.

Wire format is camelCase JSON (``sessionId``, ``eventType`` ...); Python code
uses the snake_case attribute names.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EventType(str, Enum):
    FIELD_FOCUS = "fieldFocus"
    FIELD_BLUR = "fieldBlur"
    FIELD_CHANGED = "fieldChanged"
    FORM_SUBMIT = "formSubmit"
    FORM_ABANDON = "formAbandon"
    PAGE_EXIT = "pageExit"
    MOUSE_MOVE = "mouseMove"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_number(value: Any) -> int | float | None:
    """Numeric metadata as sent by capture scripts, or None when unusable.

    Scripts occasionally send "undefined", booleans or objects; those degrade
    to an absent value instead of rejecting the event.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


class CursorPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float | None = None
    y: float | None = None

    @field_validator("x", "y", mode="before")
    @classmethod
    def _drop_non_numeric(cls, value: Any) -> Any:
        return as_number(value)

    @property
    def is_finite(self) -> bool:
        return (
            self.x is not None
            and self.y is not None
            and math.isfinite(self.x)
            and math.isfinite(self.y)
        )


class EventMetadata(BaseModel):
    """Event-type dependent payload. Unknown keys are kept verbatim."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    hesitation_duration: float | None = Field(default=None, description="Milliseconds, fieldBlur only")
    cursor_position: CursorPosition | None = None
    change_count: int | None = None
    interaction_sequence: int | None = None
    field_type: str | None = None
    is_empty: bool | None = None

    @field_validator("hesitation_duration", mode="before")
    @classmethod
    def _drop_non_numeric(cls, value: Any) -> Any:
        return as_number(value)

    @field_validator("change_count", "interaction_sequence", mode="before")
    @classmethod
    def _drop_non_integral(cls, value: Any) -> Any:
        number = as_number(value)
        if isinstance(number, float):
            return int(number) if number.is_integer() else None
        return number


class Event(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    session_id: str
    form_id: str | None = None
    field_id: str | None = None
    event_type: EventType | str = Field(union_mode="left_to_right")
    timestamp: datetime = Field(default_factory=utcnow, description="ISO-8601, UTC")
    metadata: EventMetadata = Field(default_factory=EventMetadata)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _fill_missing_timestamp(cls, value: Any) -> Any:
        if value is None or value == "":
            return utcnow()
        return value

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def is_recognized(self) -> bool:
        return isinstance(self.event_type, EventType)

    def is_type(self, event_type: EventType) -> bool:
        return self.is_recognized and self.event_type is event_type

    def to_json_dict(self) -> dict[str, Any]:
        """Persisted/wire shape: camelCase keys, absent fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TrackerEvent(Event):
    """Event as accepted at the HTTP/WebSocket boundary: event kinds are validated."""

    event_type: EventType
