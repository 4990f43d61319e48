#!/usr/bin/env python3
"""Publish one `reminders.due` event to Kafka for local testing."""

from __future__ import annotations

import argparse
import sys
import uuid
from datetime import UTC, date, datetime
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from reminders.adapters.config import load_env_file  # noqa: E402
from reminders.adapters.kafka_runtime import publish_reminder_due_event  # noqa: E402


def main() -> int:
    load_env_file(REPO_ROOT / ".env")
    args = parse_args()
    payload = build_payload(args)
    metadata = publish_reminder_due_event(payload, topic=args.topic)

    print("[PUBLISHED]")
    print(f"topic={metadata['topic']}")
    print(f"partition={metadata['partition']}")
    print(f"offset={metadata['offset']}")
    print(f"event_id={payload['event_id']}")
    print(
        f"owner.preference={payload['owner']['notification_preference']} "
        f"schedule.preference={payload['schedule'].get('channel_preference')}"
    )
    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Publish one reminders.due event for Kafka testing."
    )
    parser.add_argument("--email", default=None, help="Owner email address.")
    parser.add_argument("--telephone", default=None, help="Owner phone number.")
    parser.add_argument(
        "--owner-preference",
        default="EMAIL",
        choices=["EMAIL", "SMS", "BOTH", "NONE"],
        help="Owner default notification preference.",
    )
    parser.add_argument(
        "--schedule-preference",
        default=None,
        choices=["EMAIL", "SMS", "BOTH", "NONE"],
        help="Optional schedule-level override.",
    )
    parser.add_argument("--message", default=None, help="Optional custom message text.")
    parser.add_argument("--pet-name", default="Rex", help="Pet name used in the default text.")
    parser.add_argument(
        "--visit-description", default="vaccination", help="Visit description."
    )
    parser.add_argument(
        "--visit-date",
        default=None,
        help="Visit date YYYY-MM-DD. Default: today (UTC).",
    )
    parser.add_argument(
        "--event-id",
        default=None,
        help="Optional event id. Default: generated UUID.",
    )
    parser.add_argument(
        "--topic",
        default=None,
        help="Override Kafka topic (defaults to KAFKA_TOPIC_REMINDERS_DUE).",
    )
    return parser.parse_args()


def build_payload(args: argparse.Namespace) -> dict[str, object]:
    if not args.email and not args.telephone:
        raise SystemExit("At least one of --email or --telephone is required.")

    event_id = args.event_id or f"evt-{uuid.uuid4()}"
    visit_date = args.visit_date or date.today().isoformat()

    schedule: dict[str, object] = {
        "schedule_id": uuid.uuid4().int % 1_000_000,
        "pet_id": 1,
        "visit_id": 1,
        "scheduled_time": datetime.now(tz=UTC).isoformat(),
    }
    if args.schedule_preference:
        schedule["channel_preference"] = args.schedule_preference
    if args.message:
        schedule["message"] = args.message

    return {
        "event_id": event_id,
        "event_type": "reminders.due",
        "occurred_at": datetime.now(tz=UTC).isoformat(),
        "schedule": schedule,
        "owner": {
            "owner_id": 1,
            "first_name": "Demo",
            "last_name": "Owner",
            "email": args.email,
            "telephone": args.telephone,
            "notification_preference": args.owner_preference,
            "pets": [
                {
                    "pet_id": 1,
                    "name": args.pet_name,
                    "visits": [
                        {
                            "visit_id": 1,
                            "date": visit_date,
                            "description": args.visit_description,
                        }
                    ],
                }
            ],
        },
    }


if __name__ == "__main__":
    sys.exit(main())
