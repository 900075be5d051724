# ticketqr/core/logging.py
"""
Logging setup and structured helpers for ticket QR events.

Uses the standard ``logging`` module; structured fields travel in ``extra``
so a JSON formatter can pick them up later. Tokens and keys are never logged.
"""

import logging
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("ticketqr")


def setup_logging(level: Optional[str] = None) -> None:
    if level is None:
        from ticketqr.core.config import settings
        level = settings.LOG_LEVEL
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def log_mint(booking_id: str, ticket_type: str, epoch: int) -> None:
    logger.debug(
        f"QR minted | booking: {booking_id} | type: {ticket_type} | epoch: {epoch}",
        extra={"event": "qr_mint", "booking_id": booking_id, "ticket_type": ticket_type, "epoch": epoch},
    )


def log_scan(
    accepted: bool,
    reason: str,
    booking_id: Optional[str] = None,
    device_id: Optional[str] = None,
    epoch: Optional[int] = None,
) -> None:
    """
    Log a scan decision.

    Rejections are logged at WARNING so repeated probing of a scanner with
    garbage or expired codes stands out in the audit trail.
    """
    log_data: Dict[str, Any] = {
        "event": "qr_scan",
        "accepted": accepted,
        "reason": reason,
        "booking_id": booking_id,
        "device_id": device_id,
        "epoch": epoch,
    }
    if accepted:
        logger.info(f"Ticket accepted | booking: {booking_id} | device: {device_id}", extra=log_data)
    else:
        logger.warning(
            f"Ticket rejected ({reason}) | booking: {booking_id} | device: {device_id}",
            extra=log_data,
        )


def log_error(message: str, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    log_data: Dict[str, Any] = {
        "event": "error",
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    if context:
        log_data.update(context)
    logger.error(f"{message}: {type(error).__name__}: {error}", extra=log_data, exc_info=error)
