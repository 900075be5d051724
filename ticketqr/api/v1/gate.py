# ticketqr/api/v1/gate.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from ticketqr.api.deps import get_db, get_usage_recorder, get_validator
from ticketqr.core.logging import log_error, log_scan
from ticketqr.core.metrics import TICKET_SCANS
from ticketqr.crud.scan import scan_audit_crud
from ticketqr.schemas.ticket import ScanAuditOut, ScanIn, ScanOut
from ticketqr.services.usage import TicketUsageRecorder
from ticketqr.services.validator import QRValidator

router = APIRouter()


@router.post("/scan", response_model=ScanOut)
def gate_scan(
    body: ScanIn = Body(...),
    db: Session = Depends(get_db),
    validator: QRValidator = Depends(get_validator),
    recorder: Optional[TicketUsageRecorder] = Depends(get_usage_recorder),
):
    verdict = validator.inspect(body.token)
    log_scan(verdict.accepted, verdict.reason, verdict.booking_id, body.device_id, verdict.epoch)
    TICKET_SCANS.labels(result=verdict.reason).inc()

    try:
        scan_audit_crud.record(db, verdict=verdict, device_id=body.device_id)
    except Exception as exc:
        # auditoria fora do ar não muda a resposta do leitor
        db.rollback()
        log_error("Could not record scan audit", exc, {"booking_id": verdict.booking_id})

    if verdict.accepted and recorder is not None:
        try:
            recorder.mark_used(verdict.booking_id, body.device_id)
        except Exception as exc:
            # a entrada já foi liberada; só registra a falha do sistema de reservas
            log_error("Could not mark ticket as used", exc, {"booking_id": verdict.booking_id})

    # resposta binária: nada de diagnóstico para quem está sondando o leitor
    return ScanOut(valid=verdict.accepted)


# GET /gate/scans?booking_id=..&limit=..
@router.get("/scans", response_model=List[ScanAuditOut])
def list_scans(
    booking_id: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = scan_audit_crud.recent(db, booking_id=booking_id, limit=limit)
    return [ScanAuditOut.model_validate(r) for r in rows]
