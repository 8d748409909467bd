#!/usr/bin/env python3
"""Tests for fleet CLI formatting, table helpers and commands."""

from datetime import date

import pytest
import yaml

from fleetiq import (
    MaintenancePlan,
    MaintenanceTemplate,
    PlanDue,
    PlanStatus,
    RiskCounts,
    Vehicle,
    WorkerRisk,
)
from fleet import (
    format_km,
    format_remaining,
    truncate,
    make_plan_table,
    make_worker_table,
    main,
)

SNAPSHOT = """
vehicles:
  - id: veh-1
    asset_code: TRK-001
    rego: 123ABC
    state: QLD
    current_odometer_km: 152000
    in_service_date: '2024-01-01'
templates:
  - id: tmpl-brakes
    name: Brake inspection
    trigger_type: TimeBased
    interval_days: 90
    hvnl_relevance_flag: true
plans:
  - id: plan-1
    vehicle_id: veh-1
    maintenance_template_id: tmpl-brakes
prestarts:
  - id: ps-1
    vehicle_id: veh-1
    worker_name: Sam Carter
    prestart_datetime: '2024-04-20T06:00:00'
    overall_result: Fail
incidents:
  - id: inc-1
    driver_name: Sam Carter
    vehicle_id: veh-1
    incident_datetime: '2024-03-01T10:00:00'
    incident_type: HVNL Breach
    severity: Serious
downtime_events:
  - id: dt-1
    vehicle_id: veh-1
    start_datetime: '2024-04-02T08:00:00'
    downtime_hours: 12
    cause_category: CorrectiveRepair
"""


@pytest.fixture
def snapshot(tmp_path):
    path = tmp_path / "fleet.yaml"
    path.write_text(SNAPSHOT)
    return path


def make_due(**kwargs):
    vehicle = Vehicle("veh-1", asset_code="TRK-001")
    template = MaintenanceTemplate("t", name="Brake inspection", hvnl_relevance_flag=True)
    plan = MaintenancePlan("p1", "veh-1", "t")
    return PlanDue(plan=plan, vehicle=vehicle, template=template, **kwargs)


class TestFormatKm:
    """Tests for format_km."""

    def test_formats_number(self):
        assert format_km(152000) == "152,000"
        assert format_km(0) == "0"

    def test_none_returns_dash(self):
        assert format_km(None) == "-"


class TestFormatRemaining:
    """Tests for format_remaining."""

    def test_days_overdue(self):
        assert format_remaining(make_due(status=PlanStatus.OVERDUE, days_overdue=31)) == "-31d"

    def test_km_overdue(self):
        due = make_due(status=PlanStatus.OVERDUE, km_overdue=1200)
        assert format_remaining(due) == "-1,200 km"

    def test_days_until_due(self):
        assert format_remaining(make_due(status=PlanStatus.DUE_SOON, days_until_due=14)) == "14d"

    def test_nothing_known(self):
        assert format_remaining(make_due(status=PlanStatus.SCHEDULED)) == "-"


class TestTruncate:
    """Tests for truncate."""

    def test_none_returns_dash(self):
        assert truncate(None) == "-"

    def test_long_text_truncated_with_ellipsis(self):
        assert truncate("this is a very long note", max_len=15) == "this is a ve..."


class TestMakePlanTable:
    """Tests for make_plan_table."""

    def test_empty_list_returns_empty_rows(self):
        assert make_plan_table([]) == []

    def test_single_plan_row(self):
        due = make_due(
            status=PlanStatus.OVERDUE,
            next_due_date=date(2024, 3, 31),
            days_overdue=31,
        )
        [row] = make_plan_table([due])
        assert row == ["TRK-001", "Brake inspection [HVNL]", "Overdue", "2024-03-31", "-", "-31d"]


class TestMakeWorkerTable:
    """Tests for make_worker_table."""

    def test_worker_row(self):
        worker = WorkerRisk(
            worker_name="Sam",
            counts=RiskCounts(failed_prestarts_90d=3),
            states={"QLD", "NSW"},
        )
        [row] = make_worker_table([worker])
        assert row == ["Sam", "NSW, QLD", "3", "0", "0", "0", "0", "Amber", "Monitor"]


class TestCommands:
    """End-to-end command tests against a snapshot file."""

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.yaml"), "plans"]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_plans(self, snapshot, capsys):
        assert main([str(snapshot), "plans", "--as-of", "2024-05-01"]) == 0
        out = capsys.readouterr().out
        assert "OVERDUE:" in out
        assert "TRK-001 / 123ABC" in out
        assert "HVNL-critical overdue: 1" in out

    def test_plans_status_filter(self, snapshot, capsys):
        assert main([str(snapshot), "plans", "--as-of", "2024-05-01", "--status", "upcoming"]) == 0
        assert "No maintenance plans found." in capsys.readouterr().out

    def test_workers(self, snapshot, capsys):
        assert main([str(snapshot), "workers", "--as-of", "2024-05-01"]) == 0
        out = capsys.readouterr().out
        assert "Sam Carter" in out
        assert "Red" in out

    def test_worker_profile(self, snapshot, capsys):
        assert main([str(snapshot), "worker", "Sam Carter", "--as-of", "2024-05-01"]) == 0
        out = capsys.readouterr().out
        assert "Risk level: Red (Action Required)" in out
        assert "HVNL breaches (12m): 1" in out

    def test_unknown_worker(self, snapshot, capsys):
        assert main([str(snapshot), "worker", "Nobody"]) == 1

    def test_downtime(self, snapshot, capsys):
        args = [str(snapshot), "downtime", "--from", "2024-04-01", "--to", "2024-04-30"]
        assert main(args) == 0
        out = capsys.readouterr().out
        assert "12.0 h over 1 events" in out
        assert "Top cause: CorrectiveRepair" in out

    def test_downtime_bad_range(self, snapshot, capsys):
        args = [str(snapshot), "downtime", "--from", "2024-05-01", "--to", "2024-04-01"]
        assert main(args) == 1

    def test_complete_dry_run_leaves_file(self, snapshot, capsys):
        before = snapshot.read_text()
        args = [str(snapshot), "complete", "plan-1", "--date", "2024-04-30", "--dry-run"]
        assert main(args) == 0
        assert "dry run" in capsys.readouterr().out
        assert snapshot.read_text() == before

    def test_complete_saves(self, snapshot, capsys):
        args = [str(snapshot), "complete", "plan-1", "--date", "2024-04-30", "--odometer", "151900"]
        assert main(args) == 0
        plan = yaml.safe_load(snapshot.read_text())["plans"][0]
        assert plan["last_completed_date"] == "2024-04-30"
        assert plan["last_completed_odometer_km"] == 151900

    def test_complete_unknown_plan(self, snapshot, capsys):
        assert main([str(snapshot), "complete", "plan-9"]) == 1
        assert "Unknown plan" in capsys.readouterr().out

    def test_update_odometer(self, snapshot, capsys):
        assert main([str(snapshot), "update-odometer", "veh-1", "153000"]) == 0
        vehicle = yaml.safe_load(snapshot.read_text())["vehicles"][0]
        assert vehicle["current_odometer_km"] == 153000

    def test_bad_date_argument_exits(self, snapshot):
        with pytest.raises(SystemExit):
            main([str(snapshot), "plans", "--as-of", "01/05/2024"])
