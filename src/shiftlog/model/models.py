"""Pydantic models describing the persisted shift-log state.

The models double as the normalization boundary: every ``mode="before"`` validator
below coerces malformed or missing values coming from a persisted blob into the
well-formed shape the tracker relies on, so tracker logic never re-checks types.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from shiftlog.core.clock import duration_ms, to_iso
from shiftlog.core.errors import ShiftLogValueError

__all__ = [
    "PATROL_COUNT",
    "Counter",
    "COUNTER_ALIASES",
    "COUNTER_FIELDS",
    "COUNTER_LABELS",
    "PatrolStatus",
    "ShiftStatus",
    "Patrol",
    "Note",
    "Shift",
    "TrackerState",
    "coerce_count",
    "normalize_state",
    "resolve_counter",
    "shift_status",
]

logger = logging.getLogger(__name__)

PATROL_COUNT = 5

_INSTANT = TypeAdapter(datetime)
_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatrolStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"


class ShiftStatus(str, Enum):
    NONE = "none"
    ACTIVE = "active"
    ENDED = "ended"


class Counter(str, Enum):
    """Event tallies kept per shift; values are the persisted field names."""

    ENGAGEMENTS = "engagements"
    STREET_DRINKERS = "streetDrinkers"
    ASB_INCIDENTS = "asbIncidents"


COUNTER_FIELDS: dict[Counter, str] = {
    Counter.ENGAGEMENTS: "engagements",
    Counter.STREET_DRINKERS: "street_drinkers",
    Counter.ASB_INCIDENTS: "asb_incidents",
}

COUNTER_LABELS: dict[Counter, str] = {
    Counter.ENGAGEMENTS: "Public engagements",
    Counter.STREET_DRINKERS: "Street drinker contacts",
    Counter.ASB_INCIDENTS: "ASB incidents",
}

COUNTER_ALIASES: dict[str, Counter] = {
    "engagements": Counter.ENGAGEMENTS,
    "engagement": Counter.ENGAGEMENTS,
    "eng": Counter.ENGAGEMENTS,
    "streetdrinkers": Counter.STREET_DRINKERS,
    "street_drinkers": Counter.STREET_DRINKERS,
    "street-drinkers": Counter.STREET_DRINKERS,
    "drinkers": Counter.STREET_DRINKERS,
    "sd": Counter.STREET_DRINKERS,
    "asbincidents": Counter.ASB_INCIDENTS,
    "asb_incidents": Counter.ASB_INCIDENTS,
    "asb-incidents": Counter.ASB_INCIDENTS,
    "asb": Counter.ASB_INCIDENTS,
}


def resolve_counter(name: Counter | str) -> Counter:
    """Map a counter enum, persisted name, field name or CLI alias onto :class:`Counter`."""
    if isinstance(name, Counter):
        return name
    key = str(name).strip().lower()
    counter = COUNTER_ALIASES.get(key)
    if counter is None:
        allowed = ", ".join(c.value for c in Counter)
        raise ShiftLogValueError(f"Unknown counter '{name}'. Allowed counters: {allowed}.")
    return counter


def coerce_count(value: Any) -> int:
    """Return ``value`` as a non-negative int, or ``0`` when it is not a usable count.

    Floats are accepted only when integral (``3.0``); ``2.5`` is not a count.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            logger.info("Ignoring non-integral count %r", value)
            return 0
    return max(0, int(value))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"{value.isoformat()} cannot be expressed in UTC") from exc


def _lenient_instant(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    try:
        return _as_utc(_INSTANT.validate_python(value))
    except (ValidationError, ValueError, OverflowError):
        logger.info("Dropping unparsable timestamp %r", value)
        return None


class Patrol(BaseModel):
    """One patrol interval within a shift.

    Attributes
    ----------
    index:
        One-indexed position of the patrol in its shift (1..5).
    start_time:
        Instant the patrol began, or ``None`` while pending.
    end_time:
        Instant the patrol ended; never set without ``start_time``.
    """

    model_config = _CAMEL

    index: int
    start_time: datetime | None = None
    end_time: datetime | None = None

    @field_validator("index")
    @classmethod
    def _index_in_range(cls, value: int) -> int:
        if not 1 <= value <= PATROL_COUNT:
            raise ValueError(f"Patrol.index must be between 1 and {PATROL_COUNT}")
        return value

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _coerce_instant(cls, value: Any) -> datetime | None:
        return _lenient_instant(value)

    @model_validator(mode="after")
    def _end_requires_start(self) -> "Patrol":
        if self.start_time is None and self.end_time is not None:
            self.end_time = None
        return self

    @field_serializer("start_time", "end_time")
    def _serialize_instant(self, value: datetime | None) -> str | None:
        return to_iso(value)

    @property
    def status(self) -> PatrolStatus:
        if self.start_time is None:
            return PatrolStatus.PENDING
        if self.end_time is None:
            return PatrolStatus.ACTIVE
        return PatrolStatus.COMPLETED

    @property
    def touched(self) -> bool:
        return self.start_time is not None or self.end_time is not None

    @property
    def duration_ms(self) -> int:
        return duration_ms(self.start_time, self.end_time)


class Note(BaseModel):
    """Timestamped free-text log entry."""

    model_config = _CAMEL

    id: str
    timestamp: datetime
    text: str

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_serializer("timestamp")
    def _serialize_instant(self, value: datetime) -> str | None:
        return to_iso(value)


def _pending_patrols() -> list[Patrol]:
    return [Patrol(index=i) for i in range(1, PATROL_COUNT + 1)]


class Shift(BaseModel):
    """One work session with its counters, notes and five patrols."""

    model_config = _CAMEL

    id: str = ""
    date: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    engagements: int = 0
    street_drinkers: int = 0
    asb_incidents: int = 0
    notes: list[Note] = []
    notes_locked: bool = True
    patrols: list[Patrol] = Field(default_factory=_pending_patrols)

    @classmethod
    def begin(cls, at: datetime) -> "Shift":
        """Create a fresh active shift started at ``at``."""
        at = _as_utc(at)
        return cls(
            id=to_iso(at),
            date=at.date().isoformat(),
            start_time=at,
            patrols=_pending_patrols(),
        )

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _coerce_instant(cls, value: Any) -> datetime | None:
        return _lenient_instant(value)

    @field_validator("engagements", "street_drinkers", "asb_incidents", mode="before")
    @classmethod
    def _coerce_counter(cls, value: Any) -> int:
        return coerce_count(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _coerce_notes(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        notes: list[Any] = []
        for raw in value:
            if isinstance(raw, Note):
                notes.append(raw)
                continue
            try:
                notes.append(Note.model_validate(raw))
            except ValidationError:
                logger.info("Dropping malformed note %r", raw)
        return notes

    @field_validator("notes_locked", mode="before")
    @classmethod
    def _coerce_locked(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else True

    @field_validator("patrols", mode="before")
    @classmethod
    def _coerce_patrols(cls, value: Any) -> list[Patrol]:
        by_index: dict[int, Patrol] = {}
        for position, raw in enumerate(value if isinstance(value, list) else []):
            if isinstance(raw, Patrol):
                patrol = raw
            elif isinstance(raw, dict):
                try:
                    patrol = Patrol.model_validate({"index": position + 1, **raw})
                except ValidationError:
                    logger.info("Dropping malformed patrol %r", raw)
                    continue
            else:
                continue
            by_index.setdefault(patrol.index, patrol)
        return [by_index.get(i) or Patrol(index=i) for i in range(1, PATROL_COUNT + 1)]

    @model_validator(mode="after")
    def _fill_and_repair(self) -> "Shift":
        anchor = self.start_time or self.end_time
        if anchor is not None:
            if not self.id:
                self.id = to_iso(anchor)
            if not self.date:
                self.date = anchor.date().isoformat()
        seen_active = False
        for patrol in self.patrols:
            if patrol.status is not PatrolStatus.ACTIVE:
                continue
            if seen_active:
                logger.warning("Shift %s had more than one active patrol; resetting patrol %d", self.id, patrol.index)
                patrol.start_time = None
            seen_active = True
        return self

    @field_serializer("start_time", "end_time")
    def _serialize_instant(self, value: datetime | None) -> str | None:
        return to_iso(value)

    @property
    def is_ended(self) -> bool:
        return self.end_time is not None

    def counter_value(self, counter: Counter | str) -> int:
        return coerce_count(getattr(self, COUNTER_FIELDS[resolve_counter(counter)]))

    def patrol_at(self, position: int) -> Patrol | None:
        """Return the patrol at 0-based ``position`` or ``None`` when out of range."""
        if 0 <= position < len(self.patrols):
            return self.patrols[position]
        return None

    def active_patrol(self) -> Patrol | None:
        return next((p for p in self.patrols if p.status is PatrolStatus.ACTIVE), None)


def shift_status(shift: Shift | None) -> ShiftStatus:
    if shift is None:
        return ShiftStatus.NONE
    return ShiftStatus.ENDED if shift.is_ended else ShiftStatus.ACTIVE


class TrackerState(BaseModel):
    """Top-level persisted state: the current shift and the last completed one."""

    model_config = _CAMEL

    current_shift: Shift | None = None
    last_completed_shift: Shift | None = None

    @property
    def has_data(self) -> bool:
        return self.current_shift is not None or self.last_completed_shift is not None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def _normalize_shift(raw: Any, slot: str) -> Shift | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        logger.warning("Ignoring non-object %s in persisted state", slot)
        return None
    try:
        return Shift.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Discarding unreadable %s: %s", slot, exc.errors(include_url=False))
        return None
    except (ValueError, OverflowError) as exc:
        logger.warning("Discarding unreadable %s: %s", slot, exc)
        return None


def normalize_state(payload: Any) -> TrackerState:
    """Build a well-formed :class:`TrackerState` from an arbitrary decoded blob."""
    if not isinstance(payload, dict):
        if payload is not None:
            logger.warning("Persisted state is not an object; using defaults")
        return TrackerState()
    return TrackerState(
        current_shift=_normalize_shift(payload.get("currentShift"), "currentShift"),
        last_completed_shift=_normalize_shift(payload.get("lastCompletedShift"), "lastCompletedShift"),
    )
