# ticketqr/core/errors.py


class TicketQRError(Exception):
    """Base for every error raised by the ticket QR core."""


class DecodeError(TicketQRError):
    """Token is not valid ciphertext for the configured key, or its plaintext is not a payload."""


class MintFailure(TicketQRError):
    """A fresh token could not be produced; the display should show an error state."""


class QRConfigError(TicketQRError):
    """Startup configuration is unusable (missing key, bad intervals)."""
