# src/umami_track/payload.py
"""Payload definitions and builders for the collector's send endpoint.

The collector accepts a single JSON envelope per request:

    {"type": "pageview" | "event", "payload": {...}}

Optional fields that are absent are omitted from the JSON entirely, never
serialized as null. An empty `data` mapping counts as absent.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from umami_track.config import TrackerConfig

# Reserved data key the convenience `value` argument is merged under
VALUE_DATA_KEY = "value"

# Python attribute name -> wire field name, where they differ
_WIRE_NAMES: dict[str, str] = {"user_id": "id"}


class EventKind(StrEnum):
    """Wire-level `type` of a send envelope."""

    PAGEVIEW = "pageview"
    EVENT = "event"


@dataclass(frozen=True, slots=True, kw_only=True)
class BasePayload:
    """Fields shared by every payload variant.

    Attributes:
        website: Site identifier
        hostname: Host label (application identifier on non-browser clients)
        language: Preferred language tag, if known
        screen: "<width>x<height>" in physical pixels, if a display exists
        url: Caller-supplied virtual URL, passed through verbatim
        referrer: Optional referrer
        title: Optional screen title
        user_id: Stable user identifier, serialized as `id`
    """

    kind: ClassVar[EventKind]

    website: str
    hostname: str
    language: str | None = None
    screen: str | None = None
    url: str
    referrer: str | None = None
    title: str | None = None
    user_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serializable form with absent optional fields dropped."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Mapping):
                if not value:
                    continue
                value = dict(value)
            result[_WIRE_NAMES.get(f.name, f.name)] = value
        return result


@dataclass(frozen=True, slots=True, kw_only=True)
class PageViewPayload(BasePayload):
    """Payload of a `pageview` envelope."""

    kind: ClassVar[EventKind] = EventKind.PAGEVIEW


@dataclass(frozen=True, slots=True, kw_only=True)
class EventPayload(BasePayload):
    """Payload of an `event` envelope.

    Attributes:
        event_type: Event name
        event_value: Convenience value, also merged into data["value"]
        data: Free-form string properties, None when empty
        tag: Optional tag description
    """

    kind: ClassVar[EventKind] = EventKind.EVENT

    event_type: str
    event_value: str | None = None
    data: Mapping[str, str] | None = None
    tag: str | None = None


@dataclass(frozen=True, slots=True)
class SendEnvelope:
    """Top-level JSON body transmitted to the collector."""

    kind: EventKind
    payload: BasePayload

    def __post_init__(self) -> None:
        if self.payload.kind is not self.kind:
            raise ValueError(
                f"Envelope kind {self.kind.value!r} does not match payload kind {self.payload.kind.value!r}"
            )

    @classmethod
    def wrap(cls, payload: BasePayload) -> SendEnvelope:
        """Envelope tagged with the payload's own kind."""
        return cls(kind=payload.kind, payload=payload)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value, "payload": self.payload.to_dict()}

    def to_json(self) -> bytes:
        """UTF-8 encoded JSON request body."""
        return json.dumps(self.to_dict(), ensure_ascii=False).encode("utf-8")


def merge_event_data(data: Mapping[str, str] | None, value: str | None) -> dict[str, str] | None:
    """Merge the convenience value into the data mapping.

    The value overwrites any caller-supplied "value" entry. Returns None when
    the merged mapping is empty so the field is omitted on the wire.
    """
    merged = dict(data) if data else {}
    if value is not None:
        merged[VALUE_DATA_KEY] = value
    return merged or None


def build_pageview_payload(
    config: TrackerConfig,
    *,
    url: str,
    title: str | None = None,
    referrer: str | None = None,
    screen: str | None = None,
) -> PageViewPayload:
    """Assemble a pageview payload from call arguments and configuration."""
    return PageViewPayload(
        website=config.website_id,
        hostname=config.host_name,
        language=config.language,
        screen=screen,
        url=url,
        referrer=referrer,
        title=title,
        user_id=config.user_id,
    )


def build_event_payload(
    config: TrackerConfig,
    *,
    name: str,
    url: str,
    value: str | None = None,
    title: str | None = None,
    referrer: str | None = None,
    tag: str | None = None,
    data: Mapping[str, str] | None = None,
    screen: str | None = None,
) -> EventPayload:
    """Assemble an event payload from call arguments and configuration.

    No field is validated; this is structural assembly only.
    """
    return EventPayload(
        website=config.website_id,
        hostname=config.host_name,
        language=config.language,
        screen=screen,
        url=url,
        referrer=referrer,
        title=title,
        user_id=config.user_id,
        event_type=name,
        event_value=value,
        data=merge_event_data(data, value),
        tag=tag,
    )
