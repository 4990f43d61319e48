"""Environment-variable configuration for provider adapters and channel senders.

Every value is read once, when a config object is built at startup. Nothing in
the dispatch path touches the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..domain.email import EmailChannelConfig
from ..domain.sms import SmsChannelConfig


@dataclass(frozen=True)
class SmtpConfig:
    host: str = "smtp.example.com"
    port: int = 587
    username: str | None = None
    password: str | None = None
    starttls: bool = True
    timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> SmtpConfig:
        return cls(
            host=os.getenv("SMTP_HOST", "smtp.example.com").strip(),
            port=int(os.getenv("SMTP_PORT", "587")),
            username=_optional_env("SMTP_USERNAME"),
            password=_optional_env("SMTP_PASSWORD"),
            starttls=env_bool("SMTP_STARTTLS", default=True),
            timeout_seconds=float(os.getenv("SMTP_TIMEOUT_SECONDS", "10")),
        )


@dataclass(frozen=True)
class MailgunConfig:
    api_key: str
    domain: str
    base_url: str = "https://api.mailgun.net"
    timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> MailgunConfig:
        return cls(
            api_key=required_env("MAILGUN_API_KEY"),
            domain=required_env("MAILGUN_DOMAIN"),
            base_url=os.getenv("MAILGUN_API_BASE_URL", "https://api.mailgun.net").rstrip("/"),
            timeout_seconds=float(os.getenv("MAILGUN_TIMEOUT_SECONDS", "10")),
        )


@dataclass(frozen=True)
class TwilioConfig:
    account_sid: str
    auth_token: str
    base_url: str = "https://api.twilio.com"
    timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> TwilioConfig:
        return cls(
            account_sid=required_env("TWILIO_ACCOUNT_SID"),
            auth_token=required_env("TWILIO_AUTH_TOKEN"),
            base_url=os.getenv("TWILIO_API_BASE_URL", "https://api.twilio.com").rstrip("/"),
            timeout_seconds=float(os.getenv("TWILIO_TIMEOUT_SECONDS", "10")),
        )


def email_channel_config_from_env() -> EmailChannelConfig:
    defaults = EmailChannelConfig()
    return EmailChannelConfig(
        from_email=os.getenv("REMINDER_FROM_EMAIL", defaults.from_email).strip(),
        subject_prefix=os.getenv("REMINDER_SUBJECT_PREFIX", defaults.subject_prefix),
        signature=os.getenv("REMINDER_SIGNATURE", defaults.signature),
    )


def sms_channel_config_from_env() -> SmsChannelConfig:
    defaults = SmsChannelConfig()
    return SmsChannelConfig(
        from_phone=os.getenv("TWILIO_FROM_PHONE", defaults.from_phone).strip(),
        message_prefix=os.getenv("REMINDER_SMS_PREFIX", defaults.message_prefix),
        default_country_code=os.getenv(
            "REMINDER_SMS_COUNTRY_CODE", defaults.default_country_code
        ).strip().lstrip("+"),
    )


def required_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value.strip()


def env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean value for {name}: {raw!r}")


def load_env_file(path: Path) -> None:
    """Load `KEY=VALUE` lines into the environment without overriding it."""
    if not path.exists():
        return

    for line in path.read_text(encoding="utf-8").splitlines():
        text = line.strip()
        if not text or text.startswith("#") or "=" not in text:
            continue
        key, value = text.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if value.startswith(("'", '"')) and value.endswith(("'", '"')) and len(value) >= 2:
            value = value[1:-1]
        os.environ.setdefault(key, value)


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None
