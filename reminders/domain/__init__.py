"""Domain layer: reminder records and channel-specific decision logic."""

from .base import ChannelSender
from .email import EmailChannelConfig, EmailChannelSender
from .models import (
    ChannelPreference,
    NotificationSchedule,
    NotificationStatus,
    Owner,
    Pet,
    Visit,
)
from .preference import resolve_preference
from .sms import SmsChannelConfig, SmsChannelSender, to_e164

__all__ = [
    "ChannelPreference",
    "ChannelSender",
    "EmailChannelConfig",
    "EmailChannelSender",
    "NotificationSchedule",
    "NotificationStatus",
    "Owner",
    "Pet",
    "SmsChannelConfig",
    "SmsChannelSender",
    "Visit",
    "resolve_preference",
    "to_e164",
]
