"""SMS channel rules.

Mental model refresher:
- Handles SMS and BOTH preferences.
- The default text is one short line with an opt-out hint.
- Owner phone numbers are stored as typed by the clinic; they are normalized
  to E.164 right before delivery.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..types import SendSMSFn
from .base import ChannelSender
from .models import ChannelPreference, Owner, Pet, Visit

logger = logging.getLogger(__name__)

_FORMATTING_CHARS = re.compile(r"[\s\-().]")
_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class SmsChannelConfig:
    from_phone: str = "+15551234567"
    message_prefix: str = "Pet Clinic Reminder"
    default_country_code: str = "1"


def to_e164(phone: str, default_country_code: str = "1") -> str:
    """Normalize a stored phone number to E.164.

    >>> to_e164("608-555-1023")
    '+16085551023'
    >>> to_e164("+44 20 7946 0958")
    '+442079460958'
    """
    text = phone.strip()
    if text.startswith("+"):
        return "+" + _FORMATTING_CHARS.sub("", text[1:])
    digits = _NON_DIGITS.sub("", text)
    return f"+{default_country_code}{digits}"


class SmsChannelSender(ChannelSender):
    channel = "sms"
    handled_preferences = frozenset({ChannelPreference.SMS, ChannelPreference.BOTH})

    def __init__(self, send_sms: SendSMSFn, config: SmsChannelConfig | None = None) -> None:
        super().__init__()
        self._send_sms = send_sms
        self.config = config or SmsChannelConfig()

    def _contact_for(self, owner: Owner) -> str | None:
        return owner.telephone

    def _default_message(self, owner: Owner, pet: Pet, visit: Visit) -> str:
        return (
            f"{self.config.message_prefix}: {pet.name} has a {visit.description} "
            f"on {visit.date.isoformat()}. "
            "Reply HELP for assistance or STOP to unsubscribe."
        )

    def _deliver(
        self, contact: str, body: str, *, pet: Pet | None, visit: Visit | None
    ) -> None:
        to_phone = to_e164(contact, self.config.default_country_code)
        status = self._send_sms(
            from_phone=self.config.from_phone,
            to_phone_e164=to_phone,
            message=body,
        )
        logger.info("SMS to %s accepted with status %s", to_phone, status)
