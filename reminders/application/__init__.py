"""Application layer: use-case orchestration across channels and schedules."""

from .batch import BatchProcessor, find_owner_for_pet
from .dispatch import DispatchCoordinator
from .schedules import ScheduleService, ScheduleStore

__all__ = [
    "BatchProcessor",
    "DispatchCoordinator",
    "ScheduleService",
    "ScheduleStore",
    "find_owner_for_pet",
]
