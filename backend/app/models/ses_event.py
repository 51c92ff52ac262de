"""
Inbound SES notification model.

SES delivers receipt events wrapped in an envelope:

    {"Records": [{"eventVersion": "1.0",
                  "eventSource": "aws:ses",
                  "ses": {"receipt": {...}, "mail": {...}}}]}

Only the first record is transformed. ``parse`` flattens the ``ses`` object
one level so the mapper can read ``event.receipt`` and ``event.mail``
directly. Verdict sub-fields are not checked here; the mapper validates them
when it reads them.
"""

from typing import Any

from pydantic import BaseModel

from app.errors import EmptyRecords, InvalidFieldType, MissingField


class InboundEvent(BaseModel):
    """A single SES receipt record with the ``ses`` wrapper removed."""

    eventVersion: str
    eventSource: str
    receipt: dict[str, Any]
    mail: dict[str, Any]


def _require(container: dict, key: str, path: str) -> Any:
    if key not in container:
        raise MissingField(path)
    return container[key]


def _require_object(container: dict, key: str, path: str) -> dict:
    value = _require(container, key, path)
    if not isinstance(value, dict):
        raise InvalidFieldType(path, "an object")
    return value


def _require_string(container: dict, key: str, path: str) -> str:
    value = _require(container, key, path)
    if not isinstance(value, str):
        raise InvalidFieldType(path, "a string")
    return value


def first_record(payload: Any) -> dict:
    """
    Return ``payload["Records"][0]``.

    Raises:
        InvalidFieldType: payload is not an object, Records is not a list, or
            the first record is not an object.
        MissingField: payload has no Records key.
        EmptyRecords: Records is an empty list.
    """
    if not isinstance(payload, dict):
        raise InvalidFieldType("body", "an object")

    records = _require(payload, "Records", "Records")
    if not isinstance(records, list):
        raise InvalidFieldType("Records", "an array")
    if not records:
        raise EmptyRecords()

    record = records[0]
    if not isinstance(record, dict):
        raise InvalidFieldType("Records[0]", "an object")
    return record


def parse(raw: dict) -> InboundEvent:
    """Build an InboundEvent from one raw SES record."""
    event_version = _require_string(raw, "eventVersion", "eventVersion")
    event_source = _require_string(raw, "eventSource", "eventSource")
    ses = _require_object(raw, "ses", "ses")
    receipt = _require_object(ses, "receipt", "ses.receipt")
    mail = _require_object(ses, "mail", "ses.mail")

    return InboundEvent(
        eventVersion=event_version,
        eventSource=event_source,
        receipt=receipt,
        mail=mail,
    )
