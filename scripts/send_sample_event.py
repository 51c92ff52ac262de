#!/usr/bin/env python3
"""
Dev helper: send a sample SES receipt notification to the local transformer.

Builds an SES notification ({"Records": [...]}) with overridable verdicts,
addresses, timestamp and processing time, and POST-s it to the /transform
endpoint.

Usage
-----
# Basic - all verdicts PASS, targeting localhost:8000
python scripts/send_sample_event.py

# Failing DKIM and a slow delivery
python scripts/send_sample_event.py --dkim FAIL --processing-time 2500

# Custom sender and several recipients
python scripts/send_sample_event.py --from ops@example.com --to a@x.com --to b@y.com

# Show the payload without sending it
python scripts/send_sample_event.py --dry-run

# Target a different backend URL
python scripts/send_sample_event.py --url http://staging.example.com
"""

import argparse
import json
import sys
import textwrap

import httpx


_VERDICTS = ("spam", "virus", "spf", "dkim", "dmarc")


# ---------------------------------------------------------------------------
# Payload builder
# ---------------------------------------------------------------------------

def build_notification(
    source: str,
    destination: list[str],
    timestamp: str,
    processing_time_ms: int,
    statuses: dict[str, str],
) -> dict:
    """
    Build an SES receipt notification with a single record.

    ``statuses`` maps each short verdict name ("spam", "virus", "spf", "dkim",
    "dmarc") to its status string.
    """
    receipt = {
        f"{name}Verdict": {"status": statuses.get(name, "PASS")}
        for name in _VERDICTS
    }
    receipt.update({
        "timestamp": timestamp,
        "processingTimeMillis": processing_time_ms,
        "recipients": list(destination),
        "action": {"type": "Lambda", "invocationType": "Event"},
    })

    return {
        "Records": [
            {
                "eventVersion": "1.0",
                "eventSource": "aws:ses",
                "ses": {
                    "receipt": receipt,
                    "mail": {
                        "timestamp": timestamp,
                        "source": source,
                        "messageId": "sample-message-id",
                        "destination": list(destination),
                        "headersTruncated": False,
                    },
                },
            }
        ]
    }


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        body = response.json()
    except ValueError:
        print(response.text)
        return
    print(json.dumps(body, indent=2))


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    parser = argparse.ArgumentParser(
        prog="send_sample_event.py",
        description="Send a sample SES receipt notification to the transformer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_sample_event.py
              python scripts/send_sample_event.py --spam FAIL
              python scripts/send_sample_event.py --timestamp 2024-03-15T10:00:00.000Z
              python scripts/send_sample_event.py --url http://localhost:8001
        """),
    )
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--from",
        dest="source",
        default="sender@example.com",
        help="Sender address (default: sender@example.com)",
    )
    parser.add_argument(
        "--to",
        dest="destination",
        action="append",
        default=None,
        metavar="ADDRESS",
        help="Recipient address; repeat for several (default: recipient@example.com)",
    )
    parser.add_argument(
        "--timestamp",
        default="2024-03-15T10:00:00.000Z",
        help="mail.timestamp value (default: 2024-03-15T10:00:00.000Z)",
    )
    parser.add_argument(
        "--processing-time",
        type=int,
        default=500,
        metavar="MS",
        help="receipt.processingTimeMillis (default: 500)",
    )
    for name in _VERDICTS:
        parser.add_argument(
            f"--{name}",
            default="PASS",
            metavar="STATUS",
            help=f"{name}Verdict status (default: PASS)",
        )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload JSON without sending it.",
    )

    args = parser.parse_args()

    payload = build_notification(
        source=args.source,
        destination=args.destination or ["recipient@example.com"],
        timestamp=args.timestamp,
        processing_time_ms=args.processing_time,
        statuses={name: getattr(args, name) for name in _VERDICTS},
    )

    endpoint = f"{args.url.rstrip('/')}/transform"

    if args.dry_run:
        print("[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2))
        return 0

    print(f"Endpoint  : {endpoint}")
    try:
        response = httpx.post(endpoint, json=payload, timeout=10.0)
    except httpx.HTTPError as exc:
        print(f"ERROR: request failed: {exc}", file=sys.stderr)
        return 1

    _print_response(response)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
