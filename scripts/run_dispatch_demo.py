#!/usr/bin/env python3
"""Run the pending-reminder batch locally with console transports."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from reminders.channels import (  # noqa: E402
    BatchProcessor,
    ChannelPreference,
    DispatchCoordinator,
    EmailChannelSender,
    InMemoryScheduleStore,
    Owner,
    Pet,
    ScheduleService,
    SmsChannelSender,
    Visit,
    send_email_via_console,
    send_sms_via_console,
)


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    owners = sample_owners()
    service = ScheduleService(InMemoryScheduleStore())
    seed_schedules(service)

    coordinator = DispatchCoordinator(
        [
            EmailChannelSender(send_email_via_console),
            SmsChannelSender(send_sms_via_console),
        ]
    )
    sent_count = service.dispatch_pending(owners, BatchProcessor(coordinator))

    print("")
    print("[SUMMARY]")
    for pet_id in (1, 2, 3, 99):
        for schedule in service.find_by_pet_id(pet_id):
            print(
                f"schedule_id={schedule.id} pet_id={schedule.pet_id} "
                f"preference={schedule.channel_preference} status={schedule.status}"
            )
    print(f"sent={sent_count}")
    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Dispatch sample visit reminders through console email/sms transports."
    )
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level.")
    return parser.parse_args()


def sample_owners() -> list[Owner]:
    return [
        Owner(
            id=1,
            first_name="Jane",
            last_name="Doe",
            email="jane.doe@example.com",
            telephone="6085551023",
            notification_preference=ChannelPreference.BOTH,
            pets=(Pet(id=1, name="Rex", visits=(Visit(1, date(2024, 5, 1), "vaccination"),)),),
        ),
        Owner(
            id=2,
            first_name="George",
            last_name="Franklin",
            email="",
            telephone="6085551749",
            notification_preference=ChannelPreference.SMS,
            pets=(Pet(id=2, name="Leo", visits=(Visit(2, date(2024, 5, 3), "checkup"),)),),
        ),
        Owner(
            id=3,
            first_name="Betty",
            last_name="Davis",
            email="betty@example.com",
            notification_preference=ChannelPreference.NONE,
            pets=(Pet(id=3, name="Basil", visits=(Visit(3, date(2024, 5, 4), "dental"),)),),
        ),
    ]


def seed_schedules(service: ScheduleService) -> None:
    at = datetime(2024, 4, 30, 9, 0)
    service.schedule_notification(pet_id=1, visit_id=1, scheduled_time=at)
    service.schedule_notification(
        pet_id=2,
        visit_id=2,
        scheduled_time=at,
        channel_preference=ChannelPreference.EMAIL,
    )
    service.schedule_notification(
        pet_id=2, visit_id=2, scheduled_time=at, message="Leo is due tomorrow at 10:00."
    )
    service.schedule_notification(pet_id=3, visit_id=3, scheduled_time=at)
    service.schedule_notification(pet_id=99, visit_id=99, scheduled_time=at)


if __name__ == "__main__":
    sys.exit(main())
