"""
Pydantic models returned by the transform endpoint.

Models:
  OutboundEvent   - the flattened view of an SES receipt event
  ErrorDetail     - structured detail of a rejected payload
  ErrorResponse   - 422 response body wrapping ErrorDetail
"""

from pydantic import BaseModel


class OutboundEvent(BaseModel):
    """
    Flattened SES receipt event for dashboards and log pipelines.

    Field names are part of the public contract consumed downstream and must
    not be renamed. extra="forbid" keeps the serialized body at exactly these
    seven keys.
    """
    model_config = {"extra": "forbid"}

    spam: bool              # spamVerdict passed
    virus: bool             # virusVerdict passed
    dns: bool               # SPF, DKIM and DMARC all passed
    mes: str                # English month name of mail.timestamp
    retrasado: bool         # processing took longer than 1000 ms
    emisor: str             # local part of the sender
    receptor: list[str]     # local parts of the recipients, in order


class ErrorDetail(BaseModel):
    """Body of the ``detail`` key in a 422 response."""
    detail: str
    error_code: str


class ErrorResponse(BaseModel):
    """422 response body, documented in the OpenAPI schema."""
    detail: ErrorDetail
