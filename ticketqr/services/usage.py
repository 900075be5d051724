# ticketqr/services/usage.py
from typing import Optional, Protocol


class TicketUsageRecorder(Protocol):
    """Booking-store hook called after a scan is accepted.

    The QR core is stateless and accepts a valid code any number of times
    within its epoch; single-use entry, if wanted, is enforced here by the
    booking system.
    """

    def mark_used(self, booking_id: str, device_id: Optional[str] = None) -> None: ...
