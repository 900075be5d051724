# ticketqr/services/validator.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from ticketqr.core.config import QRConfig
from ticketqr.core.errors import DecodeError
from ticketqr.core.logging import log_error
from ticketqr.schemas.ticket import TicketPayload
from ticketqr.services.clock import RotationClock
from ticketqr.services.codec import TokenCodec

REASON_OK = "ok"
REASON_UNDECODABLE = "undecodable"
REASON_MALFORMED = "malformed"
REASON_EXPIRED = "expired"
REASON_FUTURE = "future"
REASON_ERROR = "error"


@dataclass(frozen=True)
class ScanVerdict:
    accepted: bool
    reason: str
    booking_id: Optional[str] = None
    ticket_type: Optional[str] = None
    epoch: Optional[int] = None


class QRValidator:
    """Scanner-side check of a presented QR string.

    Stateless: the same token keeps validating (on any device) until its
    epoch rolls over. Marking a booking as used is left to the caller.
    """

    def __init__(
        self,
        config: QRConfig,
        codec: Optional[TokenCodec] = None,
        clock: Optional[RotationClock] = None,
    ):
        self.config = config
        self.codec = codec or TokenCodec(config.secret_key)
        self.clock = clock or RotationClock(config.epoch_millis)

    def inspect(self, token: str) -> ScanVerdict:
        """Decide and explain. Never raises; the reason is for audit logs only."""
        try:
            data = self.codec.decode(token)
        except DecodeError:
            return ScanVerdict(False, REASON_UNDECODABLE)
        except Exception as exc:
            log_error("Unexpected failure decoding ticket token", exc)
            return ScanVerdict(False, REASON_ERROR)

        try:
            payload = TicketPayload.model_validate(data)
        except ValidationError:
            return ScanVerdict(False, REASON_MALFORMED)

        current = self.clock.current_epoch()
        found = dict(booking_id=payload.booking_id, ticket_type=payload.ticket_type, epoch=payload.epoch)
        if payload.epoch > current:
            return ScanVerdict(False, REASON_FUTURE, **found)
        # skew_epochs=0 -> igualdade exata com a janela atual
        if current - payload.epoch > self.config.skew_epochs:
            return ScanVerdict(False, REASON_EXPIRED, **found)
        return ScanVerdict(True, REASON_OK, **found)

    def validate(self, token: str) -> bool:
        try:
            return self.inspect(token).accepted
        except Exception as exc:
            log_error("Ticket validation crashed", exc)
            return False
