"""Compatibility facade for reminder dispatch.

Module layout by abstraction layer:
- adapters: payload mapping, provider transports, storage and Kafka glue
- domain: records plus email/sms decision logic
- application: orchestration across channels and schedules
"""

from .adapters.consumer_handler import handle_batch, handle_message
from .adapters.fake_senders import send_email_via_console, send_sms_via_console
from .adapters.kafka_runtime import (
    build_coordinator_from_env,
    publish_reminder_due_event,
    run_reminder_worker_forever,
)
from .adapters.memory_store import InMemoryScheduleStore
from .adapters.payload import parse_reminder_payload
from .application.batch import BatchProcessor
from .application.dispatch import DispatchCoordinator
from .application.schedules import ScheduleService
from .domain.email import EmailChannelConfig, EmailChannelSender
from .domain.models import (
    ChannelPreference,
    NotificationSchedule,
    NotificationStatus,
    Owner,
    Pet,
    Visit,
)
from .domain.preference import resolve_preference
from .domain.sms import SmsChannelConfig, SmsChannelSender

__all__ = [
    "BatchProcessor",
    "ChannelPreference",
    "DispatchCoordinator",
    "EmailChannelConfig",
    "EmailChannelSender",
    "InMemoryScheduleStore",
    "NotificationSchedule",
    "NotificationStatus",
    "Owner",
    "Pet",
    "ScheduleService",
    "SmsChannelConfig",
    "SmsChannelSender",
    "Visit",
    "build_coordinator_from_env",
    "handle_batch",
    "handle_message",
    "parse_reminder_payload",
    "publish_reminder_due_event",
    "resolve_preference",
    "run_reminder_worker_forever",
    "send_email_via_console",
    "send_sms_via_console",
]
