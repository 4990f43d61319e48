"""Payload adapter functions.

Mental model refresher:
- This is an adapter/edge module.
- It translates transport-shaped data (a `reminders.due` record value) into
  the domain records the dispatch coordinator works on.
- It validates shape and required fields, but it does not decide business
  outcomes like commit/no-commit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping

from ..domain.models import (
    ChannelPreference,
    NotificationSchedule,
    NotificationStatus,
    Owner,
    Pet,
    Visit,
)
from ..types import Payload


@dataclass(frozen=True)
class ReminderEvent:
    event_id: str
    schedule: NotificationSchedule
    owner: Owner


def parse_reminder_payload(payload: Payload) -> ReminderEvent:
    """Normalize a `reminders.due` payload into a schedule and its owner.

    Raises `ValueError` naming the first missing or malformed field.
    """
    schedule_raw = _as_mapping(payload.get("schedule"), "schedule")
    owner_raw = _as_mapping(payload.get("owner"), "owner")

    schedule = NotificationSchedule(
        id=_as_required_int(schedule_raw.get("schedule_id"), "schedule.schedule_id"),
        pet_id=_as_required_int(schedule_raw.get("pet_id"), "schedule.pet_id"),
        visit_id=_as_required_int(schedule_raw.get("visit_id"), "schedule.visit_id"),
        scheduled_time=_as_datetime(
            schedule_raw.get("scheduled_time"), "schedule.scheduled_time"
        ),
        channel_preference=_as_optional_preference(
            schedule_raw.get("channel_preference"), "schedule.channel_preference"
        ),
        message=_as_optional_message(schedule_raw.get("message")),
        status=NotificationStatus.PENDING,
    )

    owner = Owner(
        id=_as_required_int(owner_raw.get("owner_id"), "owner.owner_id"),
        first_name=str(owner_raw.get("first_name", "")).strip(),
        last_name=str(owner_raw.get("last_name", "")).strip(),
        email=_as_optional_str(owner_raw.get("email")),
        telephone=_as_optional_str(owner_raw.get("telephone")),
        notification_preference=_as_optional_preference(
            owner_raw.get("notification_preference"), "owner.notification_preference"
        ),
        pets=tuple(
            _parse_pet(item, index) for index, item in enumerate(owner_raw.get("pets") or [])
        ),
    )

    return ReminderEvent(
        event_id=_as_required_str(payload.get("event_id"), "event_id"),
        schedule=schedule,
        owner=owner,
    )


def _parse_pet(raw: Any, index: int) -> Pet:
    field_name = f"owner.pets[{index}]"
    pet_raw = _as_mapping(raw, field_name)
    return Pet(
        id=_as_required_int(pet_raw.get("pet_id"), f"{field_name}.pet_id"),
        name=_as_required_str(pet_raw.get("name"), f"{field_name}.name"),
        visits=tuple(
            _parse_visit(item, f"{field_name}.visits[{visit_index}]")
            for visit_index, item in enumerate(pet_raw.get("visits") or [])
        ),
    )


def _parse_visit(raw: Any, field_name: str) -> Visit:
    visit_raw = _as_mapping(raw, field_name)
    return Visit(
        id=_as_required_int(visit_raw.get("visit_id"), f"{field_name}.visit_id"),
        date=_as_date(visit_raw.get("date"), f"{field_name}.date"),
        description=_as_required_str(
            visit_raw.get("description"), f"{field_name}.description"
        ),
    )


def _as_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"Missing required field: {field_name}")
    return value


def _as_required_str(value: Any, field_name: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValueError(f"Missing required field: {field_name}")
    return text


def _as_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_optional_message(value: Any) -> str | None:
    # Operator text is kept verbatim; blank bodies are handled by the senders.
    if value is None or value == "":
        return None
    return str(value)


def _as_required_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid integer for {field_name}: {value!r}")
    text = _as_required_str(value, field_name)
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError(f"Invalid integer for {field_name}: {value!r}") from exc


def _as_optional_preference(value: Any, field_name: str) -> ChannelPreference | None:
    text = _as_optional_str(value)
    if text is None:
        return None
    try:
        return ChannelPreference(text.upper())
    except ValueError as exc:
        raise ValueError(f"Invalid channel preference for {field_name}: {value!r}") from exc


def _as_datetime(value: Any, field_name: str) -> datetime:
    text = _as_required_str(value, field_name)
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp for {field_name}: {value!r}") from exc


def _as_date(value: Any, field_name: str) -> date:
    text = _as_required_str(value, field_name)
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO date for {field_name}: {value!r}") from exc
