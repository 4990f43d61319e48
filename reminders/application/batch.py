"""Batch processing of pending reminders."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..domain.models import NotificationSchedule, NotificationStatus, Owner
from .dispatch import DispatchCoordinator

logger = logging.getLogger(__name__)


def find_owner_for_pet(pet_id: int, owners: Iterable[Owner]) -> Owner | None:
    """First owner whose pets include `pet_id`."""
    for owner in owners:
        if owner.owns_pet(pet_id):
            return owner
    return None


class BatchProcessor:
    def __init__(self, coordinator: DispatchCoordinator) -> None:
        self.coordinator = coordinator

    def process_all(
        self, schedules: Sequence[NotificationSchedule], owners: Sequence[Owner]
    ) -> int:
        """Dispatch `schedules` in order and return how many were delivered.

        A schedule whose pet has no owner in `owners` is marked FAILED and the
        batch moves on.
        """
        sent_count = 0

        for schedule in schedules:
            owner = find_owner_for_pet(schedule.pet_id, owners)
            if owner is None:
                logger.warning("Could not find owner for pet %s", schedule.pet_id)
                schedule.mark(NotificationStatus.FAILED)
                continue

            if self.coordinator.dispatch(schedule, owner):
                sent_count += 1

        logger.info("Processed %d schedules, %d sent", len(schedules), sent_count)
        return sent_count

