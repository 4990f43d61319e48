"""Consumer-handler adapter functions (Kafka-like flow without Kafka).

Mental model refresher:
- This is the controller-like entrypoint for event processing.
- Real Kafka code would call this after polling a record.
- Flow:
  record -> parse adapter -> dispatch coordinator -> commit/no-commit decision
- This module owns transport lifecycle behavior (parse errors, commit callbacks),
  not channel business rules.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..application.dispatch import DispatchCoordinator
from ..domain.models import NotificationStatus
from ..types import CommitFn, Payload, Record, RejectFn
from .payload import parse_reminder_payload


def handle_message(
    record: Record,
    *,
    coordinator: DispatchCoordinator,
    commit: CommitFn,
    reject: RejectFn | None = None,
) -> dict[str, Any]:
    """Handle one incoming record and decide commit/no-commit.

    Commit policy:
    - Commit when the schedule ends SENT or SKIPPED (opt-out is a final answer).
    - Do not commit on parse failures or when the schedule ends FAILED.
    """
    try:
        payload = _get_record_payload(record)
        event = parse_reminder_payload(payload)
    except Exception as exc:
        error = f"parse_failed: {exc}"
        if reject is not None:
            reject(record, error)
        return {
            "status": "parse_failed",
            "record_meta": _record_meta(record),
            "event": None,
            "delivered": False,
            "schedule_status": None,
            "should_commit": False,
            "error": error,
        }

    delivered = coordinator.dispatch(event.schedule, event.owner)
    schedule_status = event.schedule.status
    should_commit = schedule_status in (NotificationStatus.SENT, NotificationStatus.SKIPPED)

    if should_commit:
        commit(record)
        status = "processed_and_committed"
        error = None
    else:
        status = "processed_not_committed"
        error = f"schedule_{schedule_status.value.lower()}"
        if reject is not None:
            reject(record, error)

    return {
        "status": status,
        "record_meta": _record_meta(record),
        "event": event,
        "delivered": delivered,
        "schedule_status": schedule_status,
        "should_commit": should_commit,
        "error": error,
    }


def handle_batch(
    records: Sequence[Record],
    *,
    coordinator: DispatchCoordinator,
    commit: CommitFn,
    reject: RejectFn | None = None,
) -> list[dict[str, Any]]:
    """Handle a batch of records sequentially using `handle_message`."""
    results: list[dict[str, Any]] = []
    for record in records:
        result = handle_message(
            record,
            coordinator=coordinator,
            commit=commit,
            reject=reject,
        )
        results.append(result)
    return results


def _get_record_payload(record: Record) -> Payload:
    payload = record.get("value")
    if not isinstance(payload, dict):
        raise ValueError("record.value must be a dict payload")
    return payload


def _record_meta(record: Record) -> dict[str, Any]:
    return {
        "topic": record.get("topic"),
        "partition": record.get("partition"),
        "offset": record.get("offset"),
    }
