"""Domain records for visit reminders.

Mental model refresher:
- Owners, pets and visits are read-only input owned by other parts of the
  clinic system.
- A `NotificationSchedule` points at its pet and visit by id; only its
  `status` changes once it exists, and only through `mark`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

logger = logging.getLogger(__name__)


class ChannelPreference(StrEnum):
    """Which channels an owner (or a single schedule) wants reminders on."""

    EMAIL = "EMAIL"
    SMS = "SMS"
    BOTH = "BOTH"
    NONE = "NONE"


class NotificationStatus(StrEnum):
    """Lifecycle of one scheduled reminder."""

    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"

    @property
    def is_terminal(self) -> bool:
        return self is not NotificationStatus.PENDING


@dataclass(frozen=True)
class Visit:
    id: int
    date: date
    description: str


@dataclass(frozen=True)
class Pet:
    id: int
    name: str
    visits: tuple[Visit, ...] = ()

    def get_visit(self, visit_id: int) -> Visit | None:
        for visit in self.visits:
            if visit.id == visit_id:
                return visit
        return None


@dataclass(frozen=True)
class Owner:
    """Reminder recipient. Contact fields may be missing or blank."""

    id: int
    first_name: str
    last_name: str
    email: str | None = None
    telephone: str | None = None
    notification_preference: ChannelPreference | None = ChannelPreference.EMAIL
    pets: tuple[Pet, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def get_pet(self, pet_id: int) -> Pet | None:
        for pet in self.pets:
            if pet.id == pet_id:
                return pet
        return None

    def owns_pet(self, pet_id: int) -> bool:
        return self.get_pet(pet_id) is not None


@dataclass
class NotificationSchedule:
    """A reminder for one visit of one pet.

    `channel_preference` overrides the owner's default when set. `message`
    overrides the channel's default text when non-blank.
    """

    pet_id: int
    visit_id: int
    scheduled_time: datetime
    channel_preference: ChannelPreference | None = None
    message: str | None = None
    status: NotificationStatus = NotificationStatus.PENDING
    id: int | None = field(default=None, compare=False)

    def mark(self, status: NotificationStatus) -> None:
        """Assign `status`. Repeating the current status is a no-op."""
        if self.status == status:
            return
        logger.debug("schedule %s status %s -> %s", self.id, self.status, status)
        self.status = status
