"""Real provider transports for production-like sending.

Mental model refresher:
- This module is an outbound adapter.
- Each transport is a callable matching the port the channel senders expect;
  provider settings arrive through a config object at construction.
- Failures raise `RuntimeError` with the provider's reason. The channel
  sender turns that into a FAILED schedule; nothing here decides status.
"""

from __future__ import annotations

import base64
import json
import smtplib
import urllib.error
import urllib.parse
import urllib.request
from email.message import EmailMessage

from .config import MailgunConfig, SmtpConfig, TwilioConfig


class SmtpEmailTransport:
    """Send email through an SMTP relay (STARTTLS + login when configured)."""

    def __init__(self, config: SmtpConfig) -> None:
        self.config = config

    def __call__(self, *, from_email: str, to_email: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = from_email
        message["To"] = to_email
        message["Subject"] = subject
        message.set_content(body)

        try:
            with smtplib.SMTP(
                self.config.host, self.config.port, timeout=self.config.timeout_seconds
            ) as server:
                if self.config.starttls:
                    server.starttls()
                if self.config.username:
                    server.login(self.config.username, self.config.password or "")
                server.send_message(message)
        except smtplib.SMTPAuthenticationError as exc:
            raise RuntimeError(f"SMTP authentication failed: {exc.smtp_code}") from exc
        except smtplib.SMTPRecipientsRefused as exc:
            raise RuntimeError(f"SMTP recipient refused: {to_email}") from exc
        except (smtplib.SMTPException, OSError) as exc:
            raise RuntimeError(f"SMTP email send failed: {exc}") from exc


class MailgunEmailTransport:
    """Send email via the Mailgun REST API."""

    def __init__(self, config: MailgunConfig) -> None:
        self.config = config

    def __call__(self, *, from_email: str, to_email: str, subject: str, body: str) -> None:
        encoded_domain = urllib.parse.quote(self.config.domain, safe="")
        endpoint = f"{self.config.base_url}/v3/{encoded_domain}/messages"
        payload = urllib.parse.urlencode(
            {"from": from_email, "to": to_email, "subject": subject, "text": body}
        ).encode("utf-8")

        request = urllib.request.Request(endpoint, data=payload, method="POST")
        request.add_header("Authorization", _basic_auth_header("api", self.config.api_key))
        request.add_header("Content-Type", "application/x-www-form-urlencoded")

        try:
            with urllib.request.urlopen(request, timeout=self.config.timeout_seconds) as response:
                status = int(response.getcode())
                if status < 200 or status >= 300:
                    raise RuntimeError(f"Mailgun email send failed with status {status}")
                response.read()
        except urllib.error.HTTPError as exc:
            details = exc.read().decode("utf-8", errors="replace")
            raise RuntimeError(
                f"Mailgun email send failed HTTP {exc.code}: {details[:300]}"
            ) from exc
        except urllib.error.URLError as exc:
            raise RuntimeError(f"Mailgun email send failed: {exc.reason}") from exc


class TwilioSmsTransport:
    """Send SMS via the Twilio REST API and return Twilio's message status."""

    def __init__(self, config: TwilioConfig) -> None:
        self.config = config

    def __call__(self, *, from_phone: str, to_phone_e164: str, message: str) -> str:
        endpoint = (
            f"{self.config.base_url}/2010-04-01/Accounts/"
            f"{self.config.account_sid}/Messages.json"
        )
        payload = urllib.parse.urlencode(
            {"To": to_phone_e164, "From": from_phone, "Body": message}
        ).encode("utf-8")

        request = urllib.request.Request(endpoint, data=payload, method="POST")
        request.add_header(
            "Authorization",
            _basic_auth_header(self.config.account_sid, self.config.auth_token),
        )
        request.add_header("Content-Type", "application/x-www-form-urlencoded")

        try:
            with urllib.request.urlopen(request, timeout=self.config.timeout_seconds) as response:
                status = int(response.getcode())
                if status < 200 or status >= 300:
                    raise RuntimeError(f"Twilio SMS send failed with status {status}")
                raw = response.read()
        except urllib.error.HTTPError as exc:
            details = exc.read().decode("utf-8", errors="replace")
            raise RuntimeError(
                f"Twilio SMS send failed HTTP {exc.code}: {details[:300]}"
            ) from exc
        except urllib.error.URLError as exc:
            raise RuntimeError(f"Twilio SMS send failed: {exc.reason}") from exc

        return _twilio_message_status(raw)


def _twilio_message_status(raw: bytes) -> str:
    try:
        parsed = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return "unknown"
    if isinstance(parsed, dict) and isinstance(parsed.get("status"), str):
        return parsed["status"]
    return "unknown"


def _basic_auth_header(username: str, password: str) -> str:
    token = f"{username}:{password}".encode("utf-8")
    encoded = base64.b64encode(token).decode("ascii")
    return f"Basic {encoded}"
