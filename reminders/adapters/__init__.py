"""Adapter layer: payload mapping, provider transports, storage and Kafka glue."""

from .consumer_handler import handle_batch, handle_message
from .fake_senders import send_email_via_console, send_sms_via_console
from .kafka_runtime import (
    build_coordinator_from_env,
    publish_reminder_due_event,
    run_reminder_worker_forever,
)
from .memory_store import InMemoryScheduleStore
from .payload import ReminderEvent, parse_reminder_payload
from .real_senders import MailgunEmailTransport, SmtpEmailTransport, TwilioSmsTransport

__all__ = [
    "InMemoryScheduleStore",
    "MailgunEmailTransport",
    "ReminderEvent",
    "SmtpEmailTransport",
    "TwilioSmsTransport",
    "build_coordinator_from_env",
    "handle_batch",
    "handle_message",
    "parse_reminder_payload",
    "publish_reminder_due_event",
    "run_reminder_worker_forever",
    "send_email_via_console",
    "send_sms_via_console",
]
