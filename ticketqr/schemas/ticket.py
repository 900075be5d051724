# ticketqr/schemas/ticket.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TicketPayload(BaseModel):
    """Plaintext carried inside a QR token (never persisted)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    booking_id: str = Field(alias="bookingId", min_length=1)
    ticket_type: str = Field(alias="ticketTypeLabel")
    epoch: int
    nonce_fragment: str = Field(alias="nonceFragment")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# ---- HTTP ----

class MintIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_id: str = Field(alias="bookingId", min_length=1, max_length=128)
    ticket_type: str = Field(default="General", alias="ticketType", max_length=64)


class MintOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    refresh_seconds: int = Field(alias="refreshSeconds")
    qr_png: str = Field(alias="qrPng")


class ScanIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    device_id: Optional[str] = Field(default=None, alias="deviceId", max_length=64)


class ScanOut(BaseModel):
    valid: bool


class ScanAuditOut(BaseModel):
    id: int
    booking_id: Optional[str] = None
    device_id: Optional[str] = None
    accepted: bool
    reason: str
    scanned_at: datetime

    model_config = {"from_attributes": True}
