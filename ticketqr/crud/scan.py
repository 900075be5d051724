from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from ticketqr.crud.base import CRUDBase
from ticketqr.models.scan import ScanAudit
from ticketqr.services.validator import ScanVerdict

class CRUDScanAudit(CRUDBase[ScanAudit]):
    def record(self, db: Session, *, verdict: ScanVerdict, device_id: Optional[str] = None) -> ScanAudit:
        row = ScanAudit(
            booking_id=verdict.booking_id,
            device_id=device_id,
            accepted=verdict.accepted,
            reason=verdict.reason,
        )
        return self.add(db, row)

    def recent(self, db: Session, *, booking_id: Optional[str] = None, limit: int = 50) -> List[ScanAudit]:
        stmt = select(ScanAudit)
        if booking_id is not None:
            stmt = stmt.where(ScanAudit.booking_id == booking_id)
        stmt = stmt.order_by(ScanAudit.id.desc()).limit(limit)
        return list(db.scalars(stmt).all())

scan_audit_crud = CRUDScanAudit(ScanAudit)
