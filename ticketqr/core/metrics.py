# ticketqr/core/metrics.py
from prometheus_client import Counter

TICKET_SCANS = Counter(
    "ticket_scans_total",
    "Ticket QR scans by outcome",
    ["result"],
)

TICKET_MINTS = Counter(
    "ticket_qr_mints_total",
    "Ticket QR codes minted over HTTP",
    ["result"],
)
