from __future__ import annotations

import unittest
from datetime import date, datetime
from typing import Any

from reminders.adapters.consumer_handler import handle_batch, handle_message
from reminders.adapters.payload import parse_reminder_payload
from reminders.application.dispatch import DispatchCoordinator
from reminders.domain.email import EmailChannelSender
from reminders.domain.models import ChannelPreference, NotificationStatus
from reminders.domain.sms import SmsChannelSender


def make_record(value: dict[str, Any], *, offset: int) -> dict[str, Any]:
    return {
        "topic": "reminders.due",
        "partition": 0,
        "offset": offset,
        "value": value,
    }


def make_payload(**owner_overrides: Any) -> dict[str, Any]:
    owner: dict[str, Any] = {
        "owner_id": 3,
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane@example.com",
        "telephone": "6085551023",
        "notification_preference": "EMAIL",
        "pets": [
            {
                "pet_id": 7,
                "name": "Rex",
                "visits": [{"visit_id": 70, "date": "2024-05-01", "description": "vaccination"}],
            }
        ],
    }
    return {
        "event_id": "evt-1",
        "schedule": {
            "schedule_id": 11,
            "pet_id": 7,
            "visit_id": 70,
            "scheduled_time": "2024-04-30T09:00:00",
        },
        "owner": owner | owner_overrides,
    }


def make_coordinator(*, email_error: str | None = None) -> DispatchCoordinator:
    def send_email(*, from_email: str, to_email: str, subject: str, body: str) -> None:
        if email_error:
            raise RuntimeError(email_error)

    def send_sms(*, from_phone: str, to_phone_e164: str, message: str) -> str:
        return "queued"

    return DispatchCoordinator([EmailChannelSender(send_email), SmsChannelSender(send_sms)])


class PayloadParsingTests(unittest.TestCase):
    def test_parse_reminder_payload_builds_domain_records(self) -> None:
        payload = make_payload()
        payload["schedule"]["channel_preference"] = "both"
        payload["schedule"]["message"] = "  Bring the card.  "

        event = parse_reminder_payload(payload)

        self.assertEqual(event.event_id, "evt-1")
        self.assertEqual(event.schedule.id, 11)
        self.assertEqual(event.schedule.scheduled_time, datetime(2024, 4, 30, 9, 0))
        self.assertEqual(event.schedule.channel_preference, ChannelPreference.BOTH)
        self.assertEqual(event.schedule.message, "  Bring the card.  ")
        self.assertEqual(event.schedule.status, NotificationStatus.PENDING)
        self.assertEqual(event.owner.full_name, "Jane Doe")
        self.assertEqual(event.owner.notification_preference, ChannelPreference.EMAIL)
        visit = event.owner.get_pet(7).get_visit(70)
        self.assertEqual(visit.date, date(2024, 5, 1))
        self.assertEqual(visit.description, "vaccination")

    def test_optional_fields_default(self) -> None:
        payload = make_payload(email="  ", telephone=None)
        del payload["owner"]["notification_preference"]

        event = parse_reminder_payload(payload)

        self.assertIsNone(event.owner.email)
        self.assertIsNone(event.owner.telephone)
        self.assertIsNone(event.schedule.channel_preference)
        self.assertIsNone(event.owner.notification_preference)
        self.assertIsNone(event.schedule.message)

    def test_empty_message_is_absent(self) -> None:
        payload = make_payload()
        payload["schedule"]["message"] = ""

        self.assertIsNone(parse_reminder_payload(payload).schedule.message)

    def test_requires_event_id(self) -> None:
        payload = make_payload()
        del payload["event_id"]

        with self.assertRaises(ValueError):
            parse_reminder_payload(payload)

    def test_rejects_unknown_preference(self) -> None:
        with self.assertRaises(ValueError) as exc:
            parse_reminder_payload(make_payload(notification_preference="PIGEON"))

        self.assertIn("owner.notification_preference", str(exc.exception))

    def test_rejects_bad_visit_date(self) -> None:
        payload = make_payload()
        payload["owner"]["pets"][0]["visits"][0]["date"] = "May 1st"

        with self.assertRaises(ValueError) as exc:
            parse_reminder_payload(payload)

        self.assertIn("owner.pets[0].visits[0].date", str(exc.exception))

    def test_rejects_missing_schedule(self) -> None:
        payload = make_payload()
        del payload["schedule"]

        with self.assertRaises(ValueError):
            parse_reminder_payload(payload)


class ConsumerHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.committed: list[int] = []
        self.rejected: list[tuple[int, str]] = []

    def commit(self, message_record: dict[str, Any]) -> None:
        self.committed.append(int(message_record["offset"]))

    def reject(self, message_record: dict[str, Any], reason: str) -> None:
        self.rejected.append((int(message_record["offset"]), reason))

    def test_handle_message_commits_when_sent(self) -> None:
        record = make_record(make_payload(), offset=10)

        result = handle_message(
            record, coordinator=make_coordinator(), commit=self.commit, reject=self.reject
        )

        self.assertEqual(result["status"], "processed_and_committed")
        self.assertTrue(result["delivered"])
        self.assertEqual(result["schedule_status"], NotificationStatus.SENT)
        self.assertEqual(self.committed, [10])
        self.assertEqual(self.rejected, [])

    def test_handle_message_commits_opt_out(self) -> None:
        record = make_record(make_payload(notification_preference="NONE"), offset=11)

        result = handle_message(
            record, coordinator=make_coordinator(), commit=self.commit, reject=self.reject
        )

        self.assertEqual(result["status"], "processed_and_committed")
        self.assertFalse(result["delivered"])
        self.assertEqual(result["schedule_status"], NotificationStatus.SKIPPED)
        self.assertEqual(self.committed, [11])

    def test_handle_message_does_not_commit_when_failed(self) -> None:
        record = make_record(make_payload(), offset=12)

        result = handle_message(
            record,
            coordinator=make_coordinator(email_error="smtp down"),
            commit=self.commit,
            reject=self.reject,
        )

        self.assertEqual(result["status"], "processed_not_committed")
        self.assertFalse(result["should_commit"])
        self.assertEqual(result["error"], "schedule_failed")
        self.assertEqual(self.committed, [])
        self.assertEqual(self.rejected, [(12, "schedule_failed")])

    def test_handle_message_without_any_preference_fails(self) -> None:
        payload = make_payload(notification_preference=None)
        record = make_record(payload, offset=15)

        result = handle_message(
            record, coordinator=make_coordinator(), commit=self.commit, reject=self.reject
        )

        self.assertFalse(result["delivered"])
        self.assertEqual(result["schedule_status"], NotificationStatus.FAILED)
        self.assertEqual(self.committed, [])
        self.assertEqual(self.rejected, [(15, "schedule_failed")])

    def test_handle_message_parse_failure_does_not_commit(self) -> None:
        bad_record = {
            "topic": "reminders.due",
            "partition": 0,
            "offset": 13,
            "value": {"event_id": "evt-x", "schedule": {}},
        }

        result = handle_message(
            bad_record, coordinator=make_coordinator(), commit=self.commit, reject=self.reject
        )

        self.assertEqual(result["status"], "parse_failed")
        self.assertFalse(result["should_commit"])
        self.assertIsNone(result["event"])
        self.assertEqual(self.committed, [])
        self.assertEqual(self.rejected[0][0], 13)
        self.assertIn("parse_failed", result["error"] or "")

    def test_handle_message_rejects_non_dict_value(self) -> None:
        record = {"topic": "reminders.due", "partition": 0, "offset": 14, "value": "oops"}

        result = handle_message(record, coordinator=make_coordinator(), commit=self.commit)

        self.assertEqual(result["status"], "parse_failed")
        self.assertEqual(self.committed, [])

    def test_handle_batch_mixes_commit_and_no_commit(self) -> None:
        sms_only_without_phone = make_payload(notification_preference="SMS", telephone=None)
        records = [
            make_record(make_payload(), offset=20),
            make_record(sms_only_without_phone, offset=21),
            make_record(make_payload(), offset=22),
        ]

        results = handle_batch(
            records, coordinator=make_coordinator(), commit=self.commit, reject=self.reject
        )

        self.assertEqual(len(results), 3)
        self.assertEqual(self.committed, [20, 22])
        self.assertEqual(self.rejected, [(21, "schedule_failed")])


if __name__ == "__main__":
    unittest.main()
