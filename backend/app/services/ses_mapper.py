"""
SES mapper service.

Converts an InboundEvent (one SES receipt record) into an OutboundEvent, the
flat shape consumed by dashboards and log pipelines:

    spam       receipt.spamVerdict.status == "PASS"
    virus      receipt.virusVerdict.status == "PASS"
    dns        SPF, DKIM and DMARC verdicts all "PASS"
    mes        English month name of mail.timestamp
    retrasado  receipt.processingTimeMillis > 1000
    emisor     local part of mail.source
    receptor   local parts of mail.destination, in order

Every field is read with an explicit presence check so a malformed payload
fails with a SesEventError instead of a KeyError/TypeError. Nothing here keeps
state between calls.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from app.errors import InvalidFieldType, InvalidTimestamp, MalformedAddress, MissingField
from app.models.ses_event import InboundEvent
from app.models.transformed_event import OutboundEvent

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_PASS = "PASS"

_DELAY_THRESHOLD_MS = 1000

# Fixed English names so the output never depends on the host locale.
_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


# ---------------------------------------------------------------------------
# Field access helpers
# ---------------------------------------------------------------------------

def _get(container: dict, key: str, path: str) -> Any:
    if key not in container:
        raise MissingField(path)
    return container[key]


def verdict_passed(receipt: dict, verdict: str) -> bool:
    """
    Return True iff ``receipt[verdict]["status"]`` is exactly "PASS".

    The comparison is case-sensitive: "pass", "FAIL" and "GRAY" are all False.
    """
    path = f"receipt.{verdict}"
    entry = _get(receipt, verdict, path)
    if not isinstance(entry, dict):
        raise MissingField(f"{path}.status")
    return _get(entry, "status", f"{path}.status") == _PASS


def local_part(address: Any, path: str = "address") -> str:
    """
    Return the text before the first '@' of an email address.

        "john.doe@example.com" -> "john.doe"
        "a@b@c"                -> "a"
        "noatsign"             -> MalformedAddress
    """
    if not isinstance(address, str):
        raise InvalidFieldType(path, "a string")
    if "@" not in address:
        raise MalformedAddress(address)
    return address.split("@", 1)[0]


def month_name(timestamp: Any) -> str:
    """
    Return the full English month name of an ISO-8601 timestamp.

    A trailing "Z" is read as UTC. Timestamps with an offset are converted to
    UTC first; naive timestamps are taken to be UTC already.
    """
    if not isinstance(timestamp, str) or not timestamp.strip():
        raise InvalidTimestamp(timestamp)

    value = timestamp.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        raise InvalidTimestamp(timestamp)

    return _MONTH_NAMES[parsed.month - 1]


def is_delayed(processing_time_ms: Any) -> bool:
    """Return True when processing took strictly longer than 1000 ms."""
    # bool is an int subclass; reject it explicitly
    if isinstance(processing_time_ms, bool) or not isinstance(processing_time_ms, (int, float)):
        raise InvalidFieldType("receipt.processingTimeMillis", "a number")
    return processing_time_ms > _DELAY_THRESHOLD_MS


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def map_event(event: InboundEvent) -> OutboundEvent:
    """
    Transform an InboundEvent into an OutboundEvent.

    Raises:
        MissingField: a verdict, status, timestamp, source, destination or
            processingTimeMillis key is absent.
        MalformedAddress: the sender or a recipient has no '@'.
        InvalidTimestamp: mail.timestamp cannot be parsed.
        InvalidFieldType: a present value has the wrong JSON type.
    """
    receipt = event.receipt
    mail = event.mail

    spf = verdict_passed(receipt, "spfVerdict")
    dkim = verdict_passed(receipt, "dkimVerdict")
    dmarc = verdict_passed(receipt, "dmarcVerdict")

    destination = _get(mail, "destination", "mail.destination")
    if not isinstance(destination, list):
        raise InvalidFieldType("mail.destination", "an array")

    outbound = OutboundEvent(
        spam=verdict_passed(receipt, "spamVerdict"),
        virus=verdict_passed(receipt, "virusVerdict"),
        dns=spf and dkim and dmarc,
        mes=month_name(_get(mail, "timestamp", "mail.timestamp")),
        retrasado=is_delayed(
            _get(receipt, "processingTimeMillis", "receipt.processingTimeMillis")
        ),
        emisor=local_part(_get(mail, "source", "mail.source"), "mail.source"),
        receptor=[
            local_part(address, f"mail.destination[{i}]")
            for i, address in enumerate(destination)
        ],
    )

    logger.debug(
        "map_event: source=%s recipients=%d spam=%s virus=%s dns=%s",
        event.eventSource,
        len(outbound.receptor),
        outbound.spam,
        outbound.virus,
        outbound.dns,
    )
    return outbound
