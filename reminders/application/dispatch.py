"""Application orchestration across reminder channels.

Mental model refresher:
- Application layer coordinates use-case flow across domain modules.
- In this project it:
  1) honours the owner's opt-out
  2) asks every registered channel sender whether it handles the effective
     preference, and calls the ones that do
  3) aggregates a single delivered/not-delivered signal
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..domain.base import ChannelSender
from ..domain.models import ChannelPreference, NotificationSchedule, NotificationStatus, Owner
from ..domain.preference import resolve_preference

logger = logging.getLogger(__name__)


class DispatchCoordinator:
    """Sends one schedule through every channel its effective preference selects.

    Senders are tried in registration order.
    """

    def __init__(self, senders: Iterable[ChannelSender]) -> None:
        self._senders = tuple(senders)

    @property
    def senders(self) -> tuple[ChannelSender, ...]:
        return self._senders

    def dispatch(self, schedule: NotificationSchedule | None, owner: Owner | None) -> bool:
        """Deliver `schedule` to `owner`; True when at least one channel succeeded.

        Only `schedule.status` is mutated. Persisting it is up to the caller.
        """
        if owner is None:
            logger.error("Cannot send notification: owner is missing")
            return False
        if schedule is None:
            logger.error("Cannot send notification: schedule is missing")
            return False

        if owner.notification_preference == ChannelPreference.NONE:
            logger.info("Owner %s has opted out of notifications", owner.id)
            schedule.mark(NotificationStatus.SKIPPED)
            return False

        preference = resolve_preference(schedule, owner)
        results = [
            sender.send(schedule, owner)
            for sender in self._senders
            if sender.can_handle(preference)
        ]

        if not any(results):
            if not results:
                logger.warning(
                    "No channel handles preference %s for schedule %s", preference, schedule.id
                )
            else:
                logger.warning(
                    "No channel delivered schedule %s (%d attempted)", schedule.id, len(results)
                )
            schedule.mark(NotificationStatus.FAILED)
            return False

        # A later failing channel may have written FAILED after an earlier success.
        schedule.mark(NotificationStatus.SENT)
        return True
