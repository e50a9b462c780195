"""Employer account and dashboard routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from wlp.database import get_db
from wlp.schemas.employer import EmployerOut, EmployerUpsert
from wlp.security.guard import RequireEmployer
from wlp.security.principal import Principal
from wlp.services import credential_store, dashboard_service

router = APIRouter()


@router.get("/account")
def get_employer_account(principal: Principal = RequireEmployer, db: Session = Depends(get_db)):
    """Return the employer linked to the current user, or null."""
    employer = credential_store.get_linked_employer(db, principal)
    return {"employer": EmployerOut.model_validate(employer) if employer else None}


@router.post("/account", status_code=status.HTTP_201_CREATED)
def create_employer_account(
    payload: EmployerUpsert,
    principal: Principal = RequireEmployer,
    db: Session = Depends(get_db),
):
    """Create the employer and link it to the current user (only once)."""
    employer = credential_store.create_and_link_employer(db, principal, payload.name, payload.notes)
    return {"employer": EmployerOut.model_validate(employer)}


@router.put("/account")
def update_employer_account(
    payload: EmployerUpsert,
    principal: Principal = RequireEmployer,
    db: Session = Depends(get_db),
):
    employer = credential_store.update_linked_employer(db, principal, payload.name, payload.notes)
    return {"employer": EmployerOut.model_validate(employer)}


@router.get("/summary")
def employer_summary(principal: Principal = RequireEmployer, db: Session = Depends(get_db)):
    return dashboard_service.employer_summary(db, principal)
