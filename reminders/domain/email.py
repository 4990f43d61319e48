"""Email channel rules.

Mental model refresher:
- Handles EMAIL and BOTH preferences.
- The default body is a full letter; the subject names the pet and visit.
- They do not parse Kafka records or commit offsets.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..types import SendEmailFn
from .base import ChannelSender
from .models import ChannelPreference, Owner, Pet, Visit


@dataclass(frozen=True)
class EmailChannelConfig:
    from_email: str = "noreply@petclinic.org"
    subject_prefix: str = "Pet Clinic Reminder"
    signature: str = "The Pet Clinic Team"


class EmailChannelSender(ChannelSender):
    channel = "email"
    handled_preferences = frozenset({ChannelPreference.EMAIL, ChannelPreference.BOTH})

    def __init__(
        self, send_email: SendEmailFn, config: EmailChannelConfig | None = None
    ) -> None:
        super().__init__()
        self._send_email = send_email
        self.config = config or EmailChannelConfig()

    def subject_for(self, pet: Pet | None, visit: Visit | None) -> str:
        if pet is None or visit is None:
            return self.config.subject_prefix
        return f"{self.config.subject_prefix}: {pet.name}'s {visit.description}"

    def _contact_for(self, owner: Owner) -> str | None:
        return owner.email

    def _default_message(self, owner: Owner, pet: Pet, visit: Visit) -> str:
        return (
            f"Dear {owner.full_name},\n\n"
            f"This is a reminder that your pet {pet.name} has a {visit.description} "
            f"scheduled on {visit.date.isoformat()}.\n\n"
            "Please contact us if you need to reschedule.\n\n"
            f"Regards,\n{self.config.signature}"
        )

    def _deliver(
        self, contact: str, body: str, *, pet: Pet | None, visit: Visit | None
    ) -> None:
        self._send_email(
            from_email=self.config.from_email,
            to_email=contact,
            subject=self.subject_for(pet, visit),
            body=body,
        )
