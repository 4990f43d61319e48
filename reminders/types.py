"""Shared type aliases for the reminders package."""

from __future__ import annotations

from typing import Any, Callable, Mapping

Payload = Mapping[str, Any]
Record = Mapping[str, Any]

# Email transport: (*, from_email, to_email, subject, body) -> None, raises on failure.
SendEmailFn = Callable[..., None]
# SMS transport: (*, from_phone, to_phone_e164, message) -> delivery status, raises on failure.
SendSMSFn = Callable[..., str]

CommitFn = Callable[[Record], None]
RejectFn = Callable[[Record, str], None]
