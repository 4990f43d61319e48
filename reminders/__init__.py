"""Multi-channel visit reminder dispatch."""

import logging

from .channels import (
    BatchProcessor,
    ChannelPreference,
    DispatchCoordinator,
    EmailChannelConfig,
    EmailChannelSender,
    InMemoryScheduleStore,
    NotificationSchedule,
    NotificationStatus,
    Owner,
    Pet,
    ScheduleService,
    SmsChannelConfig,
    SmsChannelSender,
    Visit,
    handle_batch,
    handle_message,
    parse_reminder_payload,
    resolve_preference,
    send_email_via_console,
    send_sms_via_console,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

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
    "handle_batch",
    "handle_message",
    "parse_reminder_payload",
    "resolve_preference",
    "send_email_via_console",
    "send_sms_via_console",
]
