# tests/test_warranty_usage.py
"""Tests for the warranty usage tracker."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError
from app.models.service import Service
from app.services.warranty_usage import UsageSummary, service_history, summarize, summarize_many


def add_service(db, vehicle_id, service_date, amount, warranty_used=True):
    db.add(Service(
        vehicle_id=vehicle_id,
        service_date=service_date,
        service_type="repair",
        total_amount=Decimal(amount),
        service_status="completed",
        warranty_used=warranty_used,
        created_at=datetime.utcnow(),
    ))
    db.commit()


class TestUsageTracker:
    def test_zero_rows_gives_empty_summary(self, db, make_vehicle):
        vehicle = make_vehicle()
        usage = summarize(db, vehicle.id)
        assert usage == UsageSummary(services_used=0, total_covered=Decimal("0.00"), last_service_date=None)

    def test_only_warranty_services_counted(self, db, make_vehicle):
        vehicle = make_vehicle()
        add_service(db, vehicle.id, date(2024, 3, 1), "100.00")
        add_service(db, vehicle.id, date(2024, 9, 1), "150.00")
        add_service(db, vehicle.id, date(2024, 12, 1), "999.00", warranty_used=False)

        usage = summarize(db, vehicle.id)

        assert usage.services_used == 2
        assert usage.total_covered == Decimal("250.00")
        assert usage.last_service_date == date(2024, 9, 1)

    def test_many_vehicles(self, db, make_vehicle):
        first = make_vehicle(plate="A-1")
        second = make_vehicle(plate="B-2")
        add_service(db, first.id, date(2024, 3, 1), "80.50")

        usage = summarize_many(db, [first.id, second.id])

        assert usage[first.id].services_used == 1
        assert usage[first.id].total_covered == Decimal("80.50")
        assert usage[second.id] == UsageSummary()

    def test_history_newest_first(self, db, make_vehicle):
        vehicle = make_vehicle()
        add_service(db, vehicle.id, date(2024, 3, 1), "10.00")
        add_service(db, vehicle.id, date(2024, 9, 1), "20.00", warranty_used=False)

        history = service_history(db, vehicle.id)

        assert [s.service_date for s in history] == [date(2024, 9, 1), date(2024, 3, 1)]


class TestLedgerUnavailable:
    def test_summary_degrades_to_zero(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        usage = summarize(db, 7)

        assert usage == UsageSummary()
        db.rollback.assert_called_once()

    def test_history_degrades_to_empty(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        assert service_history(db, 7) == []
