"""In-process schedule store used by scripts and tests."""

from __future__ import annotations

import itertools

from ..domain.models import NotificationSchedule, NotificationStatus


class InMemoryScheduleStore:
    """Keeps schedules in insertion order and assigns ids on first save."""

    def __init__(self) -> None:
        self._schedules: dict[int, NotificationSchedule] = {}
        self._ids = itertools.count(1)

    def find_by_id(self, schedule_id: int) -> NotificationSchedule | None:
        return self._schedules.get(schedule_id)

    def save(self, schedule: NotificationSchedule) -> None:
        if schedule.id is None:
            schedule.id = next(self._ids)
        self._schedules[schedule.id] = schedule

    def find_pending(self) -> list[NotificationSchedule]:
        return [
            schedule
            for schedule in self._schedules.values()
            if schedule.status == NotificationStatus.PENDING
        ]

    def find_by_visit_id(self, visit_id: int) -> list[NotificationSchedule]:
        return [s for s in self._schedules.values() if s.visit_id == visit_id]

    def find_by_pet_id(self, pet_id: int) -> list[NotificationSchedule]:
        return [s for s in self._schedules.values() if s.pet_id == pet_id]
