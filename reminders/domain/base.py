"""Channel sender contract shared by the email and SMS variants.

Mental model refresher:
- Domain modules hold channel/business rules.
- A sender decides, for one channel:
  - does the effective preference include this channel?
  - does the owner have a usable contact detail?
  - what text should be sent?
- The transport (SMTP, Twilio, console) is injected; a sender never lets a
  transport exception escape. It turns it into `FAILED` plus a log line.
"""

from __future__ import annotations

import abc
import logging

from .models import ChannelPreference, NotificationSchedule, NotificationStatus, Owner, Pet, Visit
from .preference import resolve_preference

logger = logging.getLogger(__name__)


class ChannelSender(abc.ABC):
    """One delivery channel.

    Subclasses set `channel` and `handled_preferences` and implement the
    three hooks used by `send`. Senders hold no per-attempt state, so one
    instance can serve concurrent dispatches.
    """

    channel: str = ""
    handled_preferences: frozenset[ChannelPreference] = frozenset()

    def can_handle(self, preference: ChannelPreference | None) -> bool:
        return preference in self.handled_preferences

    def send(self, schedule: NotificationSchedule, owner: Owner) -> bool:
        """Attempt delivery of `schedule` to `owner` on this channel.

        Returns True only when the transport accepted the message. Every
        attempt past the preference check leaves the schedule SENT or FAILED.
        """
        preference = resolve_preference(schedule, owner)
        if not self.can_handle(preference):
            logger.debug(
                "%s sender cannot handle preference %s for owner %s",
                self.channel,
                preference,
                owner.id,
            )
            return False

        contact = (self._contact_for(owner) or "").strip()
        if not contact:
            return self._fail(
                schedule,
                f"owner {owner.id} has no {self.channel} contact detail",
                level=logging.WARNING,
            )

        pet = owner.get_pet(schedule.pet_id)
        visit = pet.get_visit(schedule.visit_id) if pet is not None else None

        body = schedule.message if (schedule.message or "").strip() else None
        if body is None:
            if pet is None or visit is None:
                return self._fail(
                    schedule,
                    f"cannot build default {self.channel} message: pet {schedule.pet_id} "
                    f"or visit {schedule.visit_id} not found for owner {owner.id}",
                    level=logging.WARNING,
                )
            body = self._default_message(owner, pet, visit)

        try:
            self._deliver(contact, body, pet=pet, visit=visit)
        except Exception as exc:
            return self._fail(
                schedule,
                f"failed to send {self.channel} reminder to {contact}: {exc}",
                level=logging.ERROR,
            )

        schedule.mark(NotificationStatus.SENT)
        logger.info(
            "%s reminder for schedule %s sent to %s", self.channel, schedule.id, contact
        )
        return True

    def _fail(self, schedule: NotificationSchedule, error: str, *, level: int) -> bool:
        logger.log(level, "schedule %s: %s", schedule.id, error)
        schedule.mark(NotificationStatus.FAILED)
        return False

    @abc.abstractmethod
    def _contact_for(self, owner: Owner) -> str | None:
        """Address this channel delivers to, if the owner has one."""

    @abc.abstractmethod
    def _default_message(self, owner: Owner, pet: Pet, visit: Visit) -> str:
        """Body used when the schedule carries no message of its own."""

    @abc.abstractmethod
    def _deliver(
        self, contact: str, body: str, *, pet: Pet | None, visit: Visit | None
    ) -> None:
        """Hand the message to the transport. Raises on transport failure."""
