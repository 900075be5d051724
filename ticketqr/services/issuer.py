# ticketqr/services/issuer.py
from __future__ import annotations

from typing import Optional

from ticketqr.core.config import QRConfig
from ticketqr.core.errors import MintFailure
from ticketqr.core.logging import log_mint
from ticketqr.schemas.ticket import TicketPayload
from ticketqr.services.clock import RotationClock
from ticketqr.services.codec import TokenCodec


class QRIssuer:
    """Mints the string shown as a ticket's QR code.

    The display surface calls :meth:`mint` once when the ticket is shown and
    again every ``config.refresh_seconds``; each call replaces the previous
    code. See :class:`ticketqr.services.display.RotatingQRDisplay`.
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

    def nonce_fragment(self, booking_id: str, epoch: int) -> str:
        # Fernet abre com versão + timestamp fixos; pega o final (HMAC)
        sealed = self.codec.encrypt_text(f"{booking_id}-{epoch}").rstrip("=")
        return sealed[-self.config.nonce_length:]

    def mint(self, booking_id: str, ticket_type: str) -> str:
        if not booking_id:
            raise MintFailure("booking_id is required")
        try:
            epoch = self.clock.current_epoch()
            payload = TicketPayload(
                booking_id=str(booking_id),
                ticket_type=str(ticket_type or ""),
                epoch=epoch,
                nonce_fragment=self.nonce_fragment(str(booking_id), epoch),
            )
            token = self.codec.encode(payload.to_wire())
        except MintFailure:
            raise
        except Exception as exc:
            raise MintFailure(f"could not mint ticket code: {exc}") from exc
        log_mint(payload.booking_id, payload.ticket_type, epoch)
        return token
