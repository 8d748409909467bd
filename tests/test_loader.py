#!/usr/bin/env python3
"""Tests for YAML loading and saving utilities."""

from datetime import date

import pytest
import yaml

from fleetiq import (
    Fleet,
    MaintenancePlan,
    PlanStatus,
    Vehicle,
    load_fleet,
    save_plan_completion,
    save_vehicle_odometer,
)

SNAPSHOT = """
vehicles:
  - id: veh-1
    asset_code: TRK-001
    state: QLD
    current_odometer_km: 152000
    in_service_date: '2024-01-01'
    colour: white

templates:
  - id: tmpl-time
    name: Brake inspection
    trigger_type: TimeBased
    interval_days: 90

plans:
  - id: plan-1
    vehicle_id: veh-1
    maintenance_template_id: tmpl-time
    next_due_date: '2024-03-31'
  - vehicle_id: veh-1
    maintenance_template_id: tmpl-time
"""


@pytest.fixture
def snapshot(tmp_path):
    path = tmp_path / "fleet.yaml"
    path.write_text(SNAPSHOT)
    return path


# =============================================================================
# load_fleet tests
# =============================================================================


class TestLoadFleet:
    """Tests for load_fleet function."""

    def test_loads_entities(self, snapshot):
        fleet = load_fleet(snapshot)

        assert isinstance(fleet, Fleet)
        assert len(fleet.vehicles) == 1
        vehicle = fleet.vehicles.get("veh-1")
        assert isinstance(vehicle, Vehicle)
        assert vehicle.asset_code == "TRK-001"
        assert vehicle.current_odometer_km == 152000
        assert fleet.templates.get("tmpl-time").interval_days == 90
        assert isinstance(fleet.plans.get("plan-1"), MaintenancePlan)

    def test_skips_entries_without_id(self, snapshot):
        fleet = load_fleet(snapshot)
        assert len(fleet.plans) == 1

    def test_ignores_unknown_keys(self, snapshot):
        vehicle = load_fleet(snapshot).vehicles.get("veh-1")
        assert not hasattr(vehicle, "colour")

    def test_missing_sections_are_empty(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("vehicles: []\n")
        fleet = load_fleet(path)
        assert len(fleet.plans) == 0
        assert fleet.incidents == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "blank.yaml"
        path.write_text("")
        assert len(load_fleet(path).vehicles) == 0

    def test_numeric_ids_become_strings(self, tmp_path):
        path = tmp_path / "ids.yaml"
        path.write_text("vehicles:\n  - id: 42\n")
        assert load_fleet(path).vehicles.get("42") is not None

    def test_integer_references_resolve(self, tmp_path):
        """Integer ids and the *_id fields pointing at them line up."""
        path = tmp_path / "ids.yaml"
        path.write_text(
            "vehicles:\n"
            "  - id: 1\n"
            "    in_service_date: '2024-01-01'\n"
            "templates:\n"
            "  - id: 7\n"
            "    trigger_type: TimeBased\n"
            "    interval_days: 90\n"
            "plans:\n"
            "  - id: 3\n"
            "    vehicle_id: 1\n"
            "    maintenance_template_id: 7\n"
            "prestarts:\n"
            "  - id: 10\n"
            "    vehicle_id: 1\n"
            "    worker_name: Sam\n"
            "defects:\n"
            "  - id: 20\n"
            "    prestart_id: 10\n"
            "    severity: Critical\n"
        )
        fleet = load_fleet(path)
        assert fleet.plans.get("3").vehicle_id == "1"
        assert fleet.defects[0].prestart_id == "10"

        [due] = fleet.plan_schedule(date(2024, 5, 1))
        assert due.plan.id == "3"
        assert due.next_due_date == date(2024, 3, 31)

    def test_unquoted_yaml_dates_evaluate(self, tmp_path):
        path = tmp_path / "dates.yaml"
        path.write_text(
            "vehicles:\n"
            "  - id: veh-1\n"
            "    in_service_date: 2024-01-01\n"
            "templates:\n"
            "  - id: t\n"
            "    trigger_type: TimeBased\n"
            "    interval_days: 90\n"
            "plans:\n"
            "  - id: p\n"
            "    vehicle_id: veh-1\n"
            "    maintenance_template_id: t\n"
        )
        [due] = load_fleet(path).plan_schedule(date(2024, 5, 1))
        assert due.next_due_date == date(2024, 3, 31)
        assert due.status == PlanStatus.OVERDUE


# =============================================================================
# save_plan_completion tests
# =============================================================================


class TestSavePlanCompletion:
    """Tests for save_plan_completion function."""

    def test_records_completion_and_clears_due(self, snapshot):
        save_plan_completion(snapshot, "plan-1", date(2024, 4, 20), 151000)

        data = yaml.safe_load(snapshot.read_text())
        plan = data["plans"][0]
        assert plan["last_completed_date"] == "2024-04-20"
        assert plan["last_completed_odometer_km"] == 151000
        assert "next_due_date" not in plan
        assert "next_due_odometer_km" not in plan

    def test_due_rederived_after_completion(self, snapshot):
        save_plan_completion(snapshot, "plan-1", "2024-04-20")
        [due] = load_fleet(snapshot).plan_schedule(date(2024, 5, 1))
        assert due.next_due_date == date(2024, 7, 19)
        assert due.status == PlanStatus.SCHEDULED

    def test_odometer_optional(self, snapshot):
        save_plan_completion(snapshot, "plan-1", "2024-04-20")
        plan = yaml.safe_load(snapshot.read_text())["plans"][0]
        assert "last_completed_odometer_km" not in plan

    def test_preserves_other_sections(self, snapshot):
        save_plan_completion(snapshot, "plan-1", "2024-04-20")
        data = yaml.safe_load(snapshot.read_text())
        assert data["vehicles"][0]["colour"] == "white"
        assert len(data["plans"]) == 2

    def test_unknown_plan_raises(self, snapshot):
        with pytest.raises(KeyError, match="plan-9"):
            save_plan_completion(snapshot, "plan-9", "2024-04-20")


# =============================================================================
# save_vehicle_odometer tests
# =============================================================================


class TestSaveVehicleOdometer:
    """Tests for save_vehicle_odometer function."""

    def test_updates_odometer(self, snapshot):
        save_vehicle_odometer(snapshot, "veh-1", 155500)
        assert load_fleet(snapshot).vehicles.get("veh-1").current_odometer_km == 155500

    def test_unknown_vehicle_raises(self, snapshot):
        with pytest.raises(KeyError, match="veh-9"):
            save_vehicle_odometer(snapshot, "veh-9", 1000)
