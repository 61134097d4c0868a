# tests/test_warranty_status.py
"""Unit tests for the live warranty status calculator."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date, datetime
from app.models.vehicle_warranty_part import VehicleWarrantyPart
from app.services.warranty_status import (
    ACTIVE, EXPIRED, EXPIRING_SOON, NOT_APPLICABLE, compute_status, compute_vehicle_statuses,
)


def make_part(years=3, km=50000, start=date(2024, 1, 15), end=date(2027, 1, 15), status="active"):
    return VehicleWarrantyPart(
        id=1,
        vehicle_id=1,
        warranty_component_id=1,
        warranty_years=years,
        warranty_km=km,
        start_date=start,
        end_date=end,
        km_limit=km,
        status=status,
    )


class TestModelXScenarios:
    def test_expiring_soon_on_time_and_km(self):
        view = compute_status(make_part(), date(2026, 12, 20), 49500, component_name="Engine")
        assert view.status == EXPIRING_SOON
        assert view.remaining_days == 26
        assert view.remaining_km == 500
        assert view.is_expired is False
        assert view.component == "Engine"

    def test_km_alone_expires(self):
        view = compute_status(make_part(), date(2026, 6, 1), 51000)
        assert view.status == EXPIRED
        assert view.is_expired is True
        assert view.remaining_km == 0
        assert view.remaining_days == 228
        assert view.progress_percentage == 100.0

    def test_active_well_inside_terms(self):
        view = compute_status(make_part(), date(2025, 1, 15), 10000)
        assert view.status == ACTIVE
        assert view.covers_service is True
        assert view.original_warranty == "3 Years / 50,000 km"


class TestBoundaries:
    def test_now_equal_end_date_not_expired(self):
        view = compute_status(make_part(), date(2027, 1, 15), 0)
        assert view.is_expired is False
        assert view.status == EXPIRING_SOON
        assert view.remaining_days == 0

    def test_day_after_end_date_expired(self):
        view = compute_status(make_part(), date(2027, 1, 16), 0)
        assert view.is_expired is True
        assert view.status == EXPIRED

    def test_km_equal_limit_not_expired(self):
        view = compute_status(make_part(), date(2025, 1, 15), 50000)
        assert view.is_expired is False
        assert view.status == EXPIRING_SOON
        assert view.remaining_km == 0

    def test_km_one_over_limit_expired(self):
        view = compute_status(make_part(), date(2025, 1, 15), 50001)
        assert view.is_expired is True

    def test_thirty_days_left_is_active(self):
        view = compute_status(make_part(km=200000), date(2026, 12, 16), 0)
        assert view.remaining_days == 30
        assert view.status == ACTIVE

    def test_datetime_now_is_truncated_to_date(self):
        view = compute_status(make_part(), datetime(2027, 1, 15, 23, 59), 0)
        assert view.is_expired is False

    def test_custom_thresholds(self):
        view = compute_status(make_part(km=200000), date(2026, 11, 1), 0, expiring_days=90)
        assert view.status == EXPIRING_SOON


class TestNotApplicable:
    def test_missing_part_is_not_applicable(self):
        view = compute_status(None, date(2100, 1, 1), 999999, component_name="Battery Hybrid")
        assert view.status == NOT_APPLICABLE
        assert view.is_expired is False
        assert view.component == "Battery Hybrid"

    def test_vehicle_statuses_mark_unassigned_components(self):
        views = compute_vehicle_statuses(
            {"Engine": make_part()}, ["Engine", "Battery Hybrid"], date(2030, 1, 1), 0,
        )
        assert [v.component for v in views] == ["Engine", "Battery Hybrid"]
        assert views[0].status == EXPIRED
        assert views[1].status == NOT_APPLICABLE


class TestPurity:
    def test_identical_inputs_identical_output(self):
        part = make_part()
        first = compute_status(part, date(2026, 12, 20), 49500)
        second = compute_status(part, date(2026, 12, 20), 49500)
        assert first == second

    def test_cancelled_part_does_not_cover_service(self):
        view = compute_status(make_part(status="cancelled"), date(2025, 1, 15), 0)
        assert view.status == ACTIVE
        assert view.administrative_status == "cancelled"
        assert view.covers_service is False
