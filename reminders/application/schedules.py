"""Creating, finding and running notification schedules.

The store is a port; `adapters.memory_store` provides an in-process one.
Dispatch itself only changes schedules in memory, so `dispatch_pending`
saves each one afterwards.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Collection, Protocol, Sequence

from ..domain.models import (
    ChannelPreference,
    NotificationSchedule,
    NotificationStatus,
    Owner,
)
from .batch import BatchProcessor

logger = logging.getLogger(__name__)


class ScheduleStore(Protocol):
    def find_by_id(self, schedule_id: int) -> NotificationSchedule | None: ...

    def save(self, schedule: NotificationSchedule) -> None: ...

    def find_pending(self) -> Collection[NotificationSchedule]: ...

    def find_by_visit_id(self, visit_id: int) -> Collection[NotificationSchedule]: ...

    def find_by_pet_id(self, pet_id: int) -> Collection[NotificationSchedule]: ...


class ScheduleService:
    def __init__(self, store: ScheduleStore) -> None:
        self.store = store

    def schedule_notification(
        self,
        *,
        pet_id: int,
        visit_id: int,
        scheduled_time: datetime,
        channel_preference: ChannelPreference | None = None,
        message: str | None = None,
    ) -> NotificationSchedule:
        """Create and store a PENDING reminder for a visit."""
        schedule = NotificationSchedule(
            pet_id=pet_id,
            visit_id=visit_id,
            scheduled_time=scheduled_time,
            channel_preference=channel_preference,
            message=message,
        )
        self.store.save(schedule)
        logger.info(
            "Scheduled reminder %s for pet %s visit %s at %s",
            schedule.id,
            pet_id,
            visit_id,
            scheduled_time.isoformat(),
        )
        return schedule

    def find_by_id(self, schedule_id: int) -> NotificationSchedule | None:
        return self.store.find_by_id(schedule_id)

    def find_pending(self) -> list[NotificationSchedule]:
        return list(self.store.find_pending())

    def find_by_visit_id(self, visit_id: int) -> list[NotificationSchedule]:
        return list(self.store.find_by_visit_id(visit_id))

    def find_by_pet_id(self, pet_id: int) -> list[NotificationSchedule]:
        return list(self.store.find_by_pet_id(pet_id))

    def update_status(
        self, schedule_id: int, status: NotificationStatus
    ) -> NotificationSchedule | None:
        schedule = self.store.find_by_id(schedule_id)
        if schedule is None:
            return None
        schedule.mark(status)
        self.store.save(schedule)
        return schedule

    def dispatch_pending(self, owners: Sequence[Owner], processor: BatchProcessor) -> int:
        """Run every pending schedule through `processor` and persist the outcome."""
        pending = self.find_pending()
        sent_count = processor.process_all(pending, owners)
        for schedule in pending:
            self.store.save(schedule)
        return sent_count
