# ticketqr/api/v1/tickets.py
from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, WebSocket

from ticketqr.api.deps import get_issuer
from ticketqr.core.errors import MintFailure
from ticketqr.core.logging import log_error
from ticketqr.core.metrics import TICKET_MINTS
from ticketqr.schemas.ticket import MintIn, MintOut
from ticketqr.services.display import RotatingQRDisplay
from ticketqr.services.issuer import QRIssuer
from ticketqr.services.qr_image import qr_data_uri

router = APIRouter()

UNABLE_TO_DISPLAY = "unable to display ticket"


@router.post("/qr", response_model=MintOut)
def mint_qr(body: MintIn = Body(...), issuer: QRIssuer = Depends(get_issuer)):
    try:
        token = issuer.mint(body.booking_id, body.ticket_type)
    except MintFailure:
        TICKET_MINTS.labels(result="failed").inc()
        raise
    TICKET_MINTS.labels(result="ok").inc()
    return MintOut(token=token, refresh_seconds=issuer.config.refresh_seconds, qr_png=qr_data_uri(token))


async def _until_disconnect(websocket: WebSocket) -> None:
    while True:
        msg = await websocket.receive()
        if msg["type"] == "websocket.disconnect":
            return


def _release(getter: Optional[asyncio.Task], watcher: asyncio.Task, booking_id: str) -> None:
    """Cancel whatever is still pending and collect a failed watcher."""
    if getter is not None and not getter.done():
        getter.cancel()
    if not watcher.done():
        watcher.cancel()
    elif not watcher.cancelled() and watcher.exception() is not None:
        log_error("Live QR socket failed", watcher.exception(), {"booking_id": booking_id})


# WS /tickets/{booking_id}/qr/live?ticket_type=VIP
# empurra um código novo a cada refresh; o loop morre junto com o socket
@router.websocket("/{booking_id}/qr/live")
async def live_qr(
    websocket: WebSocket,
    booking_id: str,
    ticket_type: str = Query("General"),
    issuer: QRIssuer = Depends(get_issuer),
):
    await websocket.accept()
    codes: asyncio.Queue = asyncio.Queue()
    display = RotatingQRDisplay(
        issuer,
        booking_id,
        ticket_type,
        on_code=codes.put_nowait,
        on_error=codes.put_nowait,
    )
    watcher = asyncio.create_task(_until_disconnect(websocket))
    getter: Optional[asyncio.Task] = None
    try:
        async with display:
            while True:
                getter = asyncio.create_task(codes.get())
                done, _ = await asyncio.wait({getter, watcher}, return_when=asyncio.FIRST_COMPLETED)
                if watcher in done:
                    break
                item = getter.result()
                if isinstance(item, MintFailure):
                    await websocket.send_json({"error": UNABLE_TO_DISPLAY})
                else:
                    await websocket.send_json({"token": item, "refreshSeconds": display.refresh_seconds})
    finally:
        _release(getter, watcher, booking_id)
