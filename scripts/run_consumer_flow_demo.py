#!/usr/bin/env python3
"""Run a Kafka-like consumer flow without Kafka."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from reminders.adapters.consumer_handler import handle_batch  # noqa: E402
from reminders.adapters.fake_senders import (  # noqa: E402
    send_email_via_console,
    send_sms_via_console,
)
from reminders.application.dispatch import DispatchCoordinator  # noqa: E402
from reminders.domain.email import EmailChannelSender  # noqa: E402
from reminders.domain.sms import SmsChannelSender  # noqa: E402


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    records = sample_records()
    committed_offsets: list[tuple[int, int]] = []
    rejected_offsets: list[tuple[int, int, str]] = []

    def commit(record: dict[str, Any]) -> None:
        partition = int(record.get("partition", -1))
        offset = int(record.get("offset", -1))
        committed_offsets.append((partition, offset))
        print(f"[COMMIT] partition={partition} offset={offset}")

    def reject(record: dict[str, Any], reason: str) -> None:
        partition = int(record.get("partition", -1))
        offset = int(record.get("offset", -1))
        rejected_offsets.append((partition, offset, reason))
        print(f"[NO-COMMIT] partition={partition} offset={offset} reason={reason}")

    coordinator = DispatchCoordinator(
        [
            EmailChannelSender(send_email_maybe_fail),
            SmsChannelSender(send_sms_maybe_fail),
        ]
    )
    results = handle_batch(records, coordinator=coordinator, commit=commit, reject=reject)

    print("")
    print("[BATCH SUMMARY]")
    for result in results:
        meta = result["record_meta"]
        print(
            f"offset={meta['offset']} status={result['status']} "
            f"schedule_status={result['schedule_status']} "
            f"should_commit={result['should_commit']} error={result['error']}"
        )

    print("")
    print("[OFFSETS]")
    print(f"committed={committed_offsets}")
    print(f"rejected={rejected_offsets}")
    return 0


def send_email_maybe_fail(*, from_email: str, to_email: str, subject: str, body: str) -> None:
    if to_email == "fail-email@example.com":
        raise RuntimeError("email provider unavailable")
    send_email_via_console(from_email=from_email, to_email=to_email, subject=subject, body=body)


def send_sms_maybe_fail(*, from_phone: str, to_phone_e164: str, message: str) -> str:
    if to_phone_e164 == "+15555559999":
        raise RuntimeError("sms provider unavailable")
    return send_sms_via_console(from_phone=from_phone, to_phone_e164=to_phone_e164, message=message)


def make_value(
    event_id: str | None,
    *,
    email: str | None,
    telephone: str | None,
    preference: str,
) -> dict[str, Any]:
    value: dict[str, Any] = {
        "schedule": {
            "schedule_id": 1,
            "pet_id": 7,
            "visit_id": 70,
            "scheduled_time": "2024-04-30T09:00:00",
        },
        "owner": {
            "owner_id": 3,
            "first_name": "Jane",
            "last_name": "Doe",
            "email": email,
            "telephone": telephone,
            "notification_preference": preference,
            "pets": [
                {
                    "pet_id": 7,
                    "name": "Rex",
                    "visits": [
                        {"visit_id": 70, "date": "2024-05-01", "description": "vaccination"}
                    ],
                }
            ],
        },
    }
    if event_id is not None:
        value["event_id"] = event_id
    return value


def sample_records() -> list[dict[str, Any]]:
    values = [
        make_value("evt-100", email="jane@example.com", telephone="6085551023", preference="BOTH"),
        make_value("evt-101", email=None, telephone="5555559999", preference="SMS"),
        make_value(None, email="jane@example.com", telephone=None, preference="EMAIL"),
        make_value("evt-103", email="jane@example.com", telephone=None, preference="NONE"),
        make_value(
            "evt-104", email="fail-email@example.com", telephone="6085551023", preference="BOTH"
        ),
    ]
    return [
        {"topic": "reminders.due", "partition": 0, "offset": 100 + index, "value": value}
        for index, value in enumerate(values)
    ]


if __name__ == "__main__":
    sys.exit(main())
