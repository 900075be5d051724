# ticketqr/services/display.py
"""
Refresh loop for a ticket that is being shown on screen.

One :class:`RotatingQRDisplay` per displayed ticket. It mints immediately,
then every ``refresh_seconds`` (shorter than the epoch width, so a fresh code
is always up before the old one expires). The owner must ``stop()`` it, or
leave the ``async with`` block, when the ticket view goes away; otherwise the
background task keeps minting forever.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Optional

from ticketqr.core.errors import MintFailure
from ticketqr.core.logging import log_error, logger
from ticketqr.services.issuer import QRIssuer

CodeCallback = Callable[[str], None]
ErrorCallback = Callable[[MintFailure], None]


class RotatingQRDisplay:
    def __init__(
        self,
        issuer: QRIssuer,
        booking_id: str,
        ticket_type: str,
        on_code: CodeCallback,
        on_error: Optional[ErrorCallback] = None,
        refresh_seconds: Optional[float] = None,
    ):
        self.issuer = issuer
        self.booking_id = booking_id
        self.ticket_type = ticket_type
        self.on_code = on_code
        self.on_error = on_error
        self.refresh_seconds = refresh_seconds if refresh_seconds is not None else issuer.config.refresh_seconds
        self.current_code: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def refresh(self) -> Optional[str]:
        """Mint once and publish. A failure blanks the current code."""
        try:
            code = self.issuer.mint(self.booking_id, self.ticket_type)
        except MintFailure as exc:
            log_error("Unable to display ticket", exc, {"booking_id": self.booking_id})
            self.current_code = None
            if self.on_error is not None:
                self.on_error(exc)
            return None
        self.current_code = code
        self.on_code(code)
        return code

    async def _run(self) -> None:
        while True:
            try:
                self.refresh()
            except Exception as exc:
                # callback da tela quebrou; o próximo ciclo tenta de novo
                log_error("QR display callback failed", exc, {"booking_id": self.booking_id})
            await asyncio.sleep(self.refresh_seconds)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug(f"QR refresh started | booking: {self.booking_id}")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug(f"QR refresh stopped | booking: {self.booking_id}")

    async def __aenter__(self) -> "RotatingQRDisplay":
        self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()
