"""Console transports for local smoke tests.

They satisfy the same ports as the real transports, so a coordinator can be
wired with them for demos without any provider account.
"""

from __future__ import annotations


def send_email_via_console(*, from_email: str, to_email: str, subject: str, body: str) -> None:
    print("[EMAIL]")
    print(f"from={from_email}")
    print(f"to={to_email}")
    print(f"subject={subject}")
    print(f"body={body}")


def send_sms_via_console(*, from_phone: str, to_phone_e164: str, message: str) -> str:
    print("[SMS]")
    print(f"from={from_phone}")
    print(f"to={to_phone_e164}")
    print(f"message={message}")
    return "queued"
