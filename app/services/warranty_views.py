# app/services/warranty_views.py
"""
Read-side warranty projections used by every warranty listing endpoint:
  - vehicle_warranty_status()  — one vehicle: info + per-component live status + usage + history
  - list_warranties()          — paginated part rows across vehicles
  - warranties_for_vehicle()   — the same row shape for one vehicle
  - warranty_status_summary()  — one line per vehicle holding warranties

All of them run warranty_status.compute_status() on read; none of them
persists the computed status.
"""

from dataclasses import asdict
from datetime import date, datetime
from typing import Optional, Union
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.errors import NotFoundError, ValidationError
from app.models.customer import Customer
from app.models.service import Service
from app.models.vehicle import Vehicle
from app.models.vehicle_model import VehicleModel
from app.models.vehicle_warranty_part import VehicleWarrantyPart
from app.models.warranty_component import WarrantyComponent
from app.services.warranty_assignment import list_parts
from app.services.warranty_catalog import list_components
from app.services.warranty_status import (
    ACTIVE, EXPIRED, EXPIRING_SOON, NOT_APPLICABLE, compute_status, compute_vehicle_statuses,
)
from app.services.warranty_usage import UsageSummary, service_history, summarize_many
from app.utils.pagination import clamp_limit, sanitize_search

LIVE_STATUSES = {ACTIVE, EXPIRING_SOON, EXPIRED}
ADMIN_STATUSES = {"suspended", "cancelled"}
PARTIALLY_EXPIRED = "partially_expired"   # vehicle summary only: some covered components expired

SORT_COLUMNS = {
    "end_date": VehicleWarrantyPart.end_date,
    "start_date": VehicleWarrantyPart.start_date,
    "created_at": VehicleWarrantyPart.created_at,
    "plate_number": Vehicle.plate_number,
    "customer_name": Customer.name,
    "component": WarrantyComponent.name,
}


def _vehicle_info(vehicle: Vehicle, customer: Optional[Customer], model: Optional[VehicleModel]) -> dict:
    return {
        "vehicle_id": vehicle.id,
        "plate_number": vehicle.plate_number,
        "vin_number": vehicle.vin_number,
        "year": vehicle.year,
        "purchase_date": vehicle.purchase_date,
        "warranty_start_date": vehicle.warranty_start_date,
        "current_km": vehicle.current_km,
        "customer_id": customer.id if customer else None,
        "customer_name": customer.name if customer else None,
        "customer_phone": customer.phone if customer else None,
        "model_id": model.id if model else None,
        "model_name": model.name if model else None,
        "model_category": model.category if model else None,
        "has_hybrid_battery": model.has_hybrid_battery if model else False,
    }


def _service_row(service: Service) -> dict:
    return {
        "id": service.id,
        "service_date": service.service_date,
        "service_type": service.service_type,
        "total_amount": service.total_amount,
        "service_status": service.service_status,
        "current_km": service.current_km,
        "warranty_used": service.warranty_used,
    }


def _vehicle_query(db: Session):
    return (
        db.query(Vehicle, Customer, VehicleModel)
        .outerjoin(Customer, Vehicle.customer_id == Customer.id)
        .outerjoin(VehicleModel, Vehicle.vehicle_model_id == VehicleModel.id)
    )


def _component_order(db: Session, assigned_names) -> list[str]:
    names = [c.name for c in list_components(db)]
    names.extend(n for n in assigned_names if n not in names)
    return names


def vehicle_warranty_status(db: Session, vehicle_id: int,
                            now: Optional[Union[date, datetime]] = None) -> dict:
    row = _vehicle_query(db).filter(Vehicle.id == vehicle_id).first()
    if not row:
        raise NotFoundError("Vehicle not found")
    vehicle, customer, model = row
    now = now or datetime.utcnow()

    by_name = {component.name: part for part, component in list_parts(db, vehicle_id)}
    statuses = compute_vehicle_statuses(by_name, _component_order(db, by_name), now, vehicle.current_km)
    usage = summarize_many(db, [vehicle_id])[vehicle_id]

    return {
        "vehicle_info": _vehicle_info(vehicle, customer, model),
        "warranty_status": {s.component: asdict(s) for s in statuses},
        "usage": asdict(usage),
        "service_history": [_service_row(s) for s in service_history(db, vehicle_id)],
    }


def _part_row(part, component, vehicle, customer, model, usage: UsageSummary, now) -> dict:
    view = compute_status(part, now, vehicle.current_km, component_name=component.name)
    today = now.date() if isinstance(now, datetime) else now
    return {
        "id": part.id,
        "vehicle_id": vehicle.id,
        "component_id": component.id,
        "component_name": component.name,
        "component_category": component.category,
        "warranty_years": part.warranty_years,
        "warranty_km": part.warranty_km,
        "start_date": part.start_date,
        "end_date": part.end_date,
        "km_limit": part.km_limit,
        "status": part.status,
        "live_status": view.status,
        "days_until_expiry": (part.end_date - today).days,
        "warranty_status": asdict(view),
        "vehicle_plate": vehicle.plate_number,
        "vehicle_vin": vehicle.vin_number,
        "vehicle_year": vehicle.year,
        "current_km": vehicle.current_km,
        "model_name": model.name if model else None,
        "customer_name": customer.name if customer else None,
        "customer_phone": customer.phone if customer else None,
        "customer_email": customer.email if customer else None,
        "services_used": usage.services_used,
        "total_cost_covered": usage.total_covered,
        "last_service_date": usage.last_service_date,
    }


def _matches(row: dict, status: Optional[str], expiring_soon: bool) -> bool:
    if expiring_soon and row["live_status"] != EXPIRING_SOON:
        return False
    if status in LIVE_STATUSES:
        # live filters only match parts that are administratively active
        return row["live_status"] == status and row["status"] == "active"
    return True


def list_warranties(db: Session, search: Optional[str] = None, status: Optional[str] = None,
                    vehicle_id: Optional[int] = None, expiring_soon: bool = False,
                    limit: Optional[int] = None, offset: int = 0,
                    sort_by: str = "end_date", sort_order: str = "asc",
                    now: Optional[Union[date, datetime]] = None) -> dict:
    """
    Denormalized warranty rows with live status. `status` is either a live
    status (active / expiring_soon / expired) or an administrative one
    (suspended / cancelled). Returns {"rows", "total", "limit", "offset"}.
    """
    if status and status not in LIVE_STATUSES | ADMIN_STATUSES:
        raise ValidationError(f"Unknown warranty status filter '{status}'")
    if sort_by not in SORT_COLUMNS:
        raise ValidationError(f"Cannot sort warranties by '{sort_by}'")
    now = now or datetime.utcnow()

    q = (
        db.query(VehicleWarrantyPart, WarrantyComponent, Vehicle, Customer, VehicleModel)
        .join(WarrantyComponent, VehicleWarrantyPart.warranty_component_id == WarrantyComponent.id)
        .join(Vehicle, VehicleWarrantyPart.vehicle_id == Vehicle.id)
        .outerjoin(Customer, Vehicle.customer_id == Customer.id)
        .outerjoin(VehicleModel, Vehicle.vehicle_model_id == VehicleModel.id)
    )
    if vehicle_id:
        q = q.filter(VehicleWarrantyPart.vehicle_id == vehicle_id)
    if status in ADMIN_STATUSES:
        q = q.filter(VehicleWarrantyPart.status == status)
    term = sanitize_search(search)
    if term:
        like = f"%{term}%"
        q = q.filter(or_(
            Customer.name.ilike(like, escape="\\"),
            Vehicle.plate_number.ilike(like, escape="\\"),
            VehicleModel.name.ilike(like, escape="\\"),
        ))

    column = SORT_COLUMNS[sort_by]
    q = q.order_by(column.desc() if sort_order.lower() == "desc" else column.asc(), VehicleWarrantyPart.id)

    results = q.all()
    usage = summarize_many(db, {r[2].id for r in results})
    rows = [
        _part_row(part, component, vehicle, customer, model, usage[vehicle.id], now)
        for part, component, vehicle, customer, model in results
    ]
    rows = [r for r in rows if _matches(r, status, expiring_soon)]

    limit = clamp_limit(limit)
    offset = max(0, offset or 0)
    return {"rows": rows[offset:offset + limit], "total": len(rows), "limit": limit, "offset": offset}


def warranties_for_vehicle(db: Session, vehicle_id: int,
                           now: Optional[Union[date, datetime]] = None) -> dict:
    row = _vehicle_query(db).filter(Vehicle.id == vehicle_id).first()
    if not row:
        raise NotFoundError("Vehicle not found")
    vehicle, customer, model = row
    now = now or datetime.utcnow()

    usage = summarize_many(db, [vehicle_id])[vehicle_id]
    rows = [
        _part_row(part, component, vehicle, customer, model, usage, now)
        for part, component in list_parts(db, vehicle_id)
    ]
    return {
        "vehicle_info": _vehicle_info(vehicle, customer, model),
        "warranties": rows,
        "usage": asdict(usage),
    }


def _overall_status(views) -> str:
    live = [v.status for v in views if v.status != NOT_APPLICABLE]
    if not live:
        return NOT_APPLICABLE
    if all(s == EXPIRED for s in live):
        return EXPIRED
    if EXPIRED in live:
        return PARTIALLY_EXPIRED
    if EXPIRING_SOON in live:
        return EXPIRING_SOON
    return ACTIVE


def warranty_status_summary(db: Session, now: Optional[Union[date, datetime]] = None) -> list[dict]:
    """One entry per vehicle holding at least one warranty part, soonest expiry first."""
    now = now or datetime.utcnow()
    results = (
        _vehicle_query(db)
        .add_entity(VehicleWarrantyPart)
        .add_entity(WarrantyComponent)
        .join(VehicleWarrantyPart, VehicleWarrantyPart.vehicle_id == Vehicle.id)
        .join(WarrantyComponent, VehicleWarrantyPart.warranty_component_id == WarrantyComponent.id)
        .order_by(Vehicle.id)
        .all()
    )

    grouped: dict[int, dict] = {}
    for vehicle, customer, model, part, component in results:
        entry = grouped.setdefault(vehicle.id, {"vehicle": vehicle, "customer": customer,
                                                "model": model, "parts": {}})
        entry["parts"][component.name] = part

    summary = []
    for entry in grouped.values():
        vehicle = entry["vehicle"]
        views = compute_vehicle_statuses(entry["parts"], list(entry["parts"]), now, vehicle.current_km)
        summary.append({
            **_vehicle_info(vehicle, entry["customer"], entry["model"]),
            "warranty_end_date": max(p.end_date for p in entry["parts"].values()),
            "next_expiry_date": min(p.end_date for p in entry["parts"].values()),
            "overall_status": _overall_status(views),
            "warranty_status": {v.component: asdict(v) for v in views},
        })
    summary.sort(key=lambda s: s["next_expiry_date"])
    return summary
