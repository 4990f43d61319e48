from __future__ import annotations

import unittest
from unittest import mock

from reminders.adapters import kafka_runtime
from reminders.adapters.real_senders import (
    MailgunEmailTransport,
    SmtpEmailTransport,
    TwilioSmsTransport,
)


class KafkaRuntimeHelperTests(unittest.TestCase):
    def test_deserialize_json_object_accepts_bytes(self) -> None:
        payload = kafka_runtime._deserialize_json_object(
            b'{"event_id":"evt-1","schedule":{"schedule_id":3}}'
        )
        self.assertEqual(payload["event_id"], "evt-1")
        self.assertEqual(payload["schedule"]["schedule_id"], 3)

    def test_deserialize_json_object_rejects_non_object_json(self) -> None:
        with self.assertRaises(ValueError):
            kafka_runtime._deserialize_json_object(b'["not","an","object"]')

    def test_bootstrap_servers_from_env_parses_csv(self) -> None:
        env = {"KAFKA_BOOTSTRAP_SERVERS": "localhost:9092, kafka:29092 "}
        with mock.patch.dict("os.environ", env, clear=True):
            servers = kafka_runtime._bootstrap_servers_from_env()
        self.assertEqual(servers, ["localhost:9092", "kafka:29092"])

    def test_bootstrap_servers_from_env_requires_value(self) -> None:
        with mock.patch.dict("os.environ", {}, clear=True):
            with self.assertRaises(RuntimeError):
                kafka_runtime._bootstrap_servers_from_env()

    def test_poll_timeout_must_be_positive(self) -> None:
        with mock.patch.dict("os.environ", {"KAFKA_POLL_TIMEOUT_SECONDS": "0"}, clear=True):
            with self.assertRaises(RuntimeError):
                kafka_runtime._poll_timeout_ms_from_env()

    def test_offset_and_metadata_prefers_three_arg_signature(self) -> None:
        calls: list[tuple[int, str, object | None]] = []

        def factory(offset: int, metadata: str, leader_epoch: object | None) -> tuple[int, str]:
            calls.append((offset, metadata, leader_epoch))
            return (offset, metadata)

        built = kafka_runtime._offset_and_metadata(factory, 99)
        self.assertEqual(built, (99, ""))
        self.assertEqual(calls, [(99, "", -1)])

    def test_offset_and_metadata_falls_back_to_two_arg_signature(self) -> None:
        calls: list[tuple[int, str]] = []

        def factory(offset: int, metadata: str) -> tuple[int, str]:
            calls.append((offset, metadata))
            return (offset, metadata)

        built = kafka_runtime._offset_and_metadata(factory, 42)
        self.assertEqual(built, (42, ""))
        self.assertEqual(calls, [(42, "")])

    def test_to_json_compatible_converts_non_json_types(self) -> None:
        value = {
            "raw_bytes": b"abc",
            "nested": {"items": [1, b"\xff", {"ok": True}]},
            "set_value": {"a", "b"},
            "object": object(),
        }

        converted = kafka_runtime._to_json_compatible(value)

        self.assertEqual(converted["raw_bytes"], "abc")
        self.assertEqual(converted["nested"]["items"][0], 1)
        self.assertEqual(converted["nested"]["items"][1], "\ufffd")
        self.assertIsInstance(converted["set_value"], list)
        self.assertIsInstance(converted["object"], str)

    def test_build_dlq_payload_includes_source_metadata_and_ids(self) -> None:
        source_payload = {
            "event_id": "evt-abc",
            "schedule": {"schedule_id": 17, "pet_id": 7},
        }

        dlq_payload = kafka_runtime._build_dlq_payload(
            source_topic="reminders.due",
            source_partition=0,
            source_offset=42,
            source_payload=source_payload,
            failure_reason="schedule_failed",
        )

        self.assertEqual(dlq_payload["event_type"], "reminders.due.dlq")
        self.assertEqual(dlq_payload["failure_reason"], "schedule_failed")
        self.assertEqual(dlq_payload["source"]["topic"], "reminders.due")
        self.assertEqual(dlq_payload["source"]["partition"], 0)
        self.assertEqual(dlq_payload["source"]["offset"], 42)
        self.assertEqual(dlq_payload["source_event_id"], "evt-abc")
        self.assertEqual(dlq_payload["source_schedule_id"], 17)
        self.assertIn("failed_at", dlq_payload)


class CoordinatorWiringTests(unittest.TestCase):
    def test_default_wiring_uses_smtp_and_twilio(self) -> None:
        env = {
            "TWILIO_ACCOUNT_SID": "AC123",
            "TWILIO_AUTH_TOKEN": "token-xyz",
            "TWILIO_FROM_PHONE": "+15555550111",
            "REMINDER_FROM_EMAIL": "clinic@example.org",
        }
        with mock.patch.dict("os.environ", env, clear=True):
            coordinator = kafka_runtime.build_coordinator_from_env()

        email_sender, sms_sender = coordinator.senders
        self.assertEqual(email_sender.channel, "email")
        self.assertIsInstance(email_sender._send_email, SmtpEmailTransport)
        self.assertEqual(email_sender.config.from_email, "clinic@example.org")
        self.assertEqual(sms_sender.channel, "sms")
        self.assertIsInstance(sms_sender._send_sms, TwilioSmsTransport)
        self.assertEqual(sms_sender.config.from_phone, "+15555550111")

    def test_mailgun_provider_and_sms_disabled(self) -> None:
        env = {
            "EMAIL_PROVIDER": "mailgun",
            "MAILGUN_API_KEY": "key-123",
            "MAILGUN_DOMAIN": "sandbox.example.com",
            "REMINDER_SMS_ENABLED": "false",
        }
        with mock.patch.dict("os.environ", env, clear=True):
            coordinator = kafka_runtime.build_coordinator_from_env()

        self.assertEqual(len(coordinator.senders), 1)
        self.assertIsInstance(coordinator.senders[0]._send_email, MailgunEmailTransport)

    def test_unknown_email_provider_is_rejected(self) -> None:
        env = {"EMAIL_PROVIDER": "carrier-pigeon", "REMINDER_SMS_ENABLED": "no"}
        with mock.patch.dict("os.environ", env, clear=True):
            with self.assertRaises(RuntimeError):
                kafka_runtime.build_coordinator_from_env()


if __name__ == "__main__":
    unittest.main()
