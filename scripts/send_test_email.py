#!/usr/bin/env python3
"""
Dev helper: send a test notification request to the local send-email function.

Builds a request body for one of the notification types and POST-s it to
the running function (``uvicorn app.send_email:app``).

Usage
-----
# Contact confirmation to yourself, targeting localhost:8001
python scripts/send_test_email.py --to you@example.com

# Contact confirmation plus the admin alert
python scripts/send_test_email.py --to you@example.com --admin-email ops@example.com

# Status update
python scripts/send_test_email.py --type status_update --status negosiasi --to you@example.com

# Pass-through email (no "type" field)
python scripts/send_test_email.py --type generic --to you@example.com

# Hammer the rate limiter from a fake client IP
python scripts/send_test_email.py --to you@example.com --repeat 11 --client-ip 1.2.3.4

Environment / .env
------------------
SEND_EMAIL_URL   Function URL (default: http://localhost:8001).
                 Overridden by --url.
"""

import argparse
import json
import os
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

def _build_contact(args) -> dict:
    payload = {
        "type": "contact",
        "name": args.name,
        "email": args.to,
        "phone": "08123456789",
        "company": "PT Contoh Sejahtera",
        "service": args.service,
        "landSize": "5 ha",
        "message": "Mohon informasi jadwal survei lokasi.",
    }
    if args.admin_email:
        payload["adminEmail"] = args.admin_email
    return payload


def _build_status_update(args) -> dict:
    return {
        "type": "status_update",
        "name": args.name,
        "email": args.to,
        "service": args.service,
        "oldStatus": "pending",
        "newStatus": args.status,
    }


def _build_welcome(args) -> dict:
    return {"type": "welcome", "name": args.name, "email": args.to}


def _build_generic(args) -> dict:
    return {
        "to": args.to,
        "subject": "Test email",
        "html": "<p>This is a test email from the send-email function.</p>",
    }


_PAYLOAD_BUILDERS = {
    "contact": _build_contact,
    "status_update": _build_status_update,
    "welcome": _build_welcome,
    "generic": _build_generic,
}


def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    # scripts/ lives one level below the project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_email.py",
        description="Send a test notification request to the send-email function.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_email.py --to you@example.com
              python scripts/send_test_email.py --type welcome --to you@example.com
              python scripts/send_test_email.py --to you@example.com --dry-run
        """),
    )
    parser.add_argument(
        "--url",
        default=os.getenv("SEND_EMAIL_URL", "http://localhost:8001"),
        help="Function URL (default: http://localhost:8001)",
    )
    parser.add_argument(
        "--type",
        dest="kind",
        default="contact",
        choices=list(_PAYLOAD_BUILDERS),
        help="Notification type to send (default: contact)",
    )
    parser.add_argument("--to", required=True, help="Recipient email address")
    parser.add_argument("--name", default="Ana", help='Customer name (default: "Ana")')
    parser.add_argument("--service", default="Land Clearing", help='Service name (default: "Land Clearing")')
    parser.add_argument(
        "--status",
        default="success",
        help="New status for --type status_update (default: success)",
    )
    parser.add_argument("--admin-email", default=None, help="Admin alert address for --type contact")
    parser.add_argument(
        "--client-ip",
        default=None,
        help="Value for the X-Forwarded-For header (rate-limit bucket)",
    )
    parser.add_argument("--repeat", type=int, default=1, help="Send the same request N times")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload JSON without sending it.",
    )

    args = parser.parse_args()

    payload = _PAYLOAD_BUILDERS[args.kind](args)

    print(f"Endpoint : {args.url}")
    print(f"Type     : {args.kind}")
    print(f"To       : {args.to}")

    if args.dry_run:
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2))
        return 0

    headers = {"X-Forwarded-For": args.client_ip} if args.client_ip else {}

    exit_code = 0
    with httpx.Client(timeout=30.0) as client:
        for attempt in range(1, args.repeat + 1):
            if args.repeat > 1:
                print(f"\nRequest {attempt}/{args.repeat}")
            try:
                response = client.post(args.url, json=payload, headers=headers)
            except httpx.HTTPError as e:
                print(f"\nERROR: Request failed: {e}", file=sys.stderr)
                return 1
            _print_response(response)
            if response.status_code != 200:
                exit_code = 1

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
