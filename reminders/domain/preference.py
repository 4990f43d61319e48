"""Effective channel preference for one dispatch."""

from __future__ import annotations

from .models import ChannelPreference, NotificationSchedule, Owner


def resolve_preference(
    schedule: NotificationSchedule, owner: Owner
) -> ChannelPreference | None:
    """Schedule-level override first, owner default otherwise.

    `None` means neither is set; callers treat that as "no channel handles it".
    """
    if schedule.channel_preference is not None:
        return schedule.channel_preference
    return owner.notification_preference
