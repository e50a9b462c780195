"""Employer worker roster routes."""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from wlp.database import get_db
from wlp.schemas.worker import WorkerBulkImport
from wlp.security.guard import RequireEmployer
from wlp.security.principal import Principal
from wlp.services import worker_service

router = APIRouter()


@router.get("/workers")
def list_workers(
    q: Optional[str] = Query(None, max_length=200),
    hotel_id: Optional[str] = Query(None, max_length=36),
    status: Optional[str] = Query(None, max_length=20),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    principal: Principal = RequireEmployer,
    db: Session = Depends(get_db),
):
    """Roster with per-hotel in-house counts; empty when no employer is linked."""
    return worker_service.roster(db, principal, q=q, hotel_id=hotel_id, status=status, start=start, end=end)


@router.post("/workers/bulk")
def import_workers(payload: WorkerBulkImport, principal: Principal = RequireEmployer, db: Session = Depends(get_db)):
    """Upsert workers from a CSV import."""
    count = worker_service.import_workers(db, principal, payload.workers)
    return {"ok": True, "count": count}
