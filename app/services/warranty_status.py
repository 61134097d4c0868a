# app/services/warranty_status.py
"""
Live warranty status calculator. Pure: no DB access, no caching.
Re-run on every read, since `now` and the odometer change between reads.

Per assigned part:
  remaining_days  = max(0, end_date - today)
  remaining_km    = max(0, km_limit - current_km)
  is_expired      = today > end_date  OR  current_km > km_limit   (strict, either one)
  status          = expired → expiring_soon (days < 30 OR km < 10000) → active
  progress        = max(time progress, km progress), each capped at 100

A component without a part was never applicable to the vehicle and reports
`not_applicable`, never `expired`.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union
from app.config import settings

DAYS_PER_YEAR = 365.25

ACTIVE = "active"
EXPIRING_SOON = "expiring_soon"
EXPIRED = "expired"
NOT_APPLICABLE = "not_applicable"


@dataclass
class WarrantyStatusView:
    component: Optional[str]
    status: str                   # active | expiring_soon | expired | not_applicable
    message: str
    remaining_days: int
    remaining_years: float
    remaining_km: int
    expiry_date: Optional[date]
    is_expired: bool
    progress_percentage: float
    part_id: Optional[int] = None
    administrative_status: Optional[str] = None   # persisted flag on the part
    covers_service: bool = False
    original_warranty: Optional[str] = None
    remaining_display: Optional[str] = None


def _as_date(now: Union[date, datetime]) -> date:
    return now.date() if isinstance(now, datetime) else now


def not_applicable(component: Optional[str] = None) -> WarrantyStatusView:
    return WarrantyStatusView(
        component=component,
        status=NOT_APPLICABLE,
        message="Not applicable for this vehicle",
        remaining_days=0,
        remaining_years=0.0,
        remaining_km=0,
        expiry_date=None,
        is_expired=False,
        progress_percentage=0.0,
    )


def compute_status(part, now: Union[date, datetime], current_km: Optional[int],
                   component_name: Optional[str] = None,
                   expiring_days: Optional[int] = None,
                   expiring_km: Optional[int] = None) -> WarrantyStatusView:
    """Live status of one assigned part (or not_applicable when part is None)."""
    if part is None or not part.warranty_years or not part.km_limit:
        return not_applicable(component_name)

    expiring_days = settings.WARRANTY_EXPIRING_DAYS if expiring_days is None else expiring_days
    expiring_km = settings.WARRANTY_EXPIRING_KM if expiring_km is None else expiring_km
    today = _as_date(now)
    current_km = current_km or 0

    days_since_start = max(0, (today - part.start_date).days)
    remaining_days = max(0, (part.end_date - today).days)
    remaining_years = round(remaining_days / DAYS_PER_YEAR, 1)
    remaining_km = max(0, part.km_limit - current_km)

    is_expired = today > part.end_date or current_km > part.km_limit

    time_progress = min(100.0, days_since_start / (part.warranty_years * DAYS_PER_YEAR) * 100)
    km_progress = min(100.0, current_km / part.km_limit * 100)
    progress = round(max(time_progress, km_progress), 1)

    if is_expired:
        status, message = EXPIRED, "Warranty has expired"
    elif remaining_days < expiring_days:
        status, message = EXPIRING_SOON, "Warranty expires soon"
    elif remaining_km < expiring_km:
        status, message = EXPIRING_SOON, "Warranty mileage limit approaching"
    else:
        status, message = ACTIVE, "Warranty is active"

    return WarrantyStatusView(
        component=component_name,
        status=status,
        message=message,
        remaining_days=remaining_days,
        remaining_years=remaining_years,
        remaining_km=remaining_km,
        expiry_date=part.end_date,
        is_expired=is_expired,
        progress_percentage=progress,
        part_id=part.id,
        administrative_status=part.status,
        covers_service=status in (ACTIVE, EXPIRING_SOON) and part.status == "active",
        original_warranty=f"{part.warranty_years} Years / {part.km_limit:,} km",
        remaining_display=f"{remaining_years} Years / {remaining_km:,} km",
    )


def compute_vehicle_statuses(parts_by_component: dict, component_names, now: Union[date, datetime],
                             current_km: Optional[int]) -> list[WarrantyStatusView]:
    """One view per component name, in the given order."""
    return [
        compute_status(parts_by_component.get(name), now, current_km, component_name=name)
        for name in component_names
    ]
