# app/routers/services.py
"""Service ledger endpoints. Completing a vehicle's first service can start its warranty."""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.service import ServiceCreate, ServiceOut
from app.schemas.warranty import part_out
from app.services.service_ledger import complete_service, list_services, record_service
from app.services.warranty_assignment import with_components
from app.utils.pagination import paginate

router = APIRouter()


@router.get("/services", summary="List services")
def get_services(vehicle_id: Optional[int] = None, service_status: Optional[str] = None,
                 limit: Optional[int] = None, offset: int = 0, db: Session = Depends(get_db)):
    page = paginate(list_services(db, vehicle_id, service_status), limit, offset)
    page["rows"] = [ServiceOut.model_validate(s) for s in page["rows"]]
    return page


@router.post("/services", status_code=status.HTTP_201_CREATED, summary="Record a service")
def create_service(body: ServiceCreate, db: Session = Depends(get_db)):
    service, parts = record_service(db, body)
    return {
        "service": ServiceOut.model_validate(service),
        "assigned_warranties": [part_out(p, c) for p, c in with_components(db, parts)],
    }


@router.put("/services/{service_id}/complete", summary="Mark a service completed")
def mark_service_completed(service_id: int, db: Session = Depends(get_db)):
    service, parts = complete_service(db, service_id)
    return {
        "service": ServiceOut.model_validate(service),
        "assigned_warranties": [part_out(p, c) for p, c in with_components(db, parts)],
    }
