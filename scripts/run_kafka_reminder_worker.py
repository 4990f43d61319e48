#!/usr/bin/env python3
"""Run the Kafka reminder worker.

This worker consumes `reminders.due` and sends through SMTP (or Mailgun when
`EMAIL_PROVIDER=mailgun`) and Twilio. Set `REMINDER_SMS_ENABLED=false` to run
email-only.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from reminders.adapters.config import load_env_file  # noqa: E402
from reminders.adapters.kafka_runtime import run_reminder_worker_forever  # noqa: E402


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_env_file(REPO_ROOT / ".env")
    return run_reminder_worker_forever()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run Kafka consumer loop for visit reminders."
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Root log level (default INFO).",
    )
    return parser.parse_args()


if __name__ == "__main__":
    sys.exit(main())
