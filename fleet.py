#!/usr/bin/env python3
"""
Unified CLI for fleet maintenance and safety risk.

Commands:
  plans            - Show maintenance plans that are overdue, due soon or scheduled
  workers          - Show worker risk levels
  worker           - Show one worker's risk profile
  downtime         - Summarise downtime hours for a period
  complete         - Record a completed service against a plan
  update-odometer  - Update a vehicle's current odometer
"""

import argparse
import logging
import sys
from datetime import date, datetime, time, timezone
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from fleetiq import (
    PlanDue,
    PlanStatus,
    VehicleFilter,
    WorkerRisk,
    load_fleet,
    parse_number,
    save_plan_completion,
    save_vehicle_odometer,
    summarize_schedule,
)
from fleetiq.downtime import DowntimeBucket

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format an odometer reading for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if value is not None else "-"


def format_hours(hours: float) -> str:
    return f"{hours:,.1f}"


def format_remaining(due: PlanDue) -> str:
    """Format time/distance remaining (e.g. '12d', '-5d', '-1,200 km')."""
    if due.days_overdue is not None:
        return f"-{due.days_overdue}d"
    if due.km_overdue is not None:
        return f"-{due.km_overdue:,.0f} km"
    if due.days_until_due is not None:
        return f"{due.days_until_due}d"
    return "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def iso_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}' (use YYYY-MM-DD)")


def vehicle_filter_from_args(args) -> VehicleFilter:
    return VehicleFilter(
        state=args.state,
        function_class=args.function_class,
        ownership=args.ownership,
        provider=args.provider,
    )


# =============================================================================
# Plans command
# =============================================================================


def make_plan_table(schedule: List[PlanDue]) -> List[List[str]]:
    """Convert plan status list to table rows."""
    rows = []
    for due in schedule:
        task = due.template.name or due.template.id
        if due.is_hvnl_critical:
            task += " [HVNL]"
        rows.append(
            [
                due.vehicle.name,
                truncate(task),
                due.status.label,
                format_date(due.next_due_date),
                format_km(due.next_due_odometer_km),
                format_remaining(due),
            ]
        )
    return rows


def cmd_plans(args):
    """Show maintenance plan status."""
    fleet = load_fleet(args.snapshot)
    as_of = args.as_of or datetime.now(timezone.utc)

    schedule = fleet.plan_schedule(
        as_of,
        vehicle_filter=vehicle_filter_from_args(args),
        date_from=args.date_from,
        date_to=args.date_to,
        status_filter=args.status,
    )
    summary = summarize_schedule(schedule)

    print(f"As of: {as_of:%Y-%m-%d}")
    print(
        f"Plans: {summary.total_plans} "
        f"(overdue {summary.overdue_count}, due soon {summary.due_soon_count}, "
        f"scheduled {summary.scheduled_count})"
    )
    if summary.hvnl_critical_overdue:
        print(f"HVNL-critical overdue: {summary.hvnl_critical_overdue}")
    print()

    if not schedule:
        print("No maintenance plans found.")
        return 0

    headers = ["Vehicle", "Task", "Status", "Due (date)", "Due (km)", "Remaining"]
    for status in PlanStatus:
        group = [d for d in schedule if d.status == status]
        if group:
            print(f"{status.label.upper()}:")
            print(tabulate(make_plan_table(group), headers=headers, tablefmt="simple"))
            print()

    return 0


# =============================================================================
# Workers command
# =============================================================================


def make_worker_table(workers: List[WorkerRisk]) -> List[List[str]]:
    """Convert worker risk list to table rows."""
    rows = []
    for w in workers:
        c = w.counts
        rows.append(
            [
                w.worker_name,
                ", ".join(sorted(w.states)) or "-",
                str(c.failed_prestarts_90d),
                str(c.critical_defects_90d),
                str(c.incidents_12m),
                str(c.hvnl_incidents_12m),
                str(c.at_fault_count_12m),
                w.level.label,
                w.level.action,
            ]
        )
    return rows


def cmd_workers(args):
    """Show worker risk levels."""
    fleet = load_fleet(args.snapshot)
    as_of = datetime.combine(args.as_of, time.max) if args.as_of else datetime.now(timezone.utc)

    workers = fleet.worker_risk(
        as_of,
        lookback_months=args.months,
        vehicle_filter=vehicle_filter_from_args(args),
        min_level=args.min_level,
    )

    print(f"As of: {as_of.date().isoformat()}")
    print(f"Workers: {len(workers)}")
    print()

    if not workers:
        print("No workers found.")
        return 0

    headers = [
        "Worker",
        "State",
        "Failed (90d)",
        "Critical (90d)",
        "Incidents",
        "HVNL",
        "At-Fault",
        "Risk",
        "Status",
    ]
    print(tabulate(make_worker_table(workers), headers=headers, tablefmt="simple"))
    return 0


def cmd_worker(args):
    """Show one worker's risk profile."""
    fleet = load_fleet(args.snapshot)
    as_of = datetime.combine(args.as_of, time.max) if args.as_of else datetime.now(timezone.utc)

    profile = fleet.worker_profile(args.name, as_of)
    if profile is None:
        print(f"Error: No records for worker '{args.name}'")
        return 1

    risk = profile.risk
    print(f"Worker: {risk.worker_name}")
    print(f"Risk level: {risk.level.label} ({risk.level.action})")
    print(f"Prestarts: {len(profile.prestarts)} ({len(profile.failed_prestarts)} failed, 90d)")
    print(f"Critical defects (90d): {len(profile.critical_defects)}")
    print(f"Incidents (12m): {len(profile.recent_incidents)}")
    print(f"HVNL breaches (12m): {len(profile.hvnl_incidents)}")
    print()

    if profile.recent_incidents:
        rows = [
            [
                str(i.incident_datetime or "-"),
                i.incident_type or "-",
                i.severity or "-",
                i.vehicle_id or "-",
            ]
            for i in profile.recent_incidents
        ]
        print(tabulate(rows, headers=["Date", "Type", "Severity", "Vehicle"], tablefmt="simple"))
    return 0


# =============================================================================
# Downtime command
# =============================================================================


def make_downtime_table(buckets: List[DowntimeBucket]) -> List[List[str]]:
    return [[b.name, format_hours(b.downtime_hours), str(b.event_count)] for b in buckets]


def cmd_downtime(args):
    """Summarise downtime hours for a period."""
    if args.date_from > args.date_to:
        print("Error: --from must not be after --to")
        return 1

    fleet = load_fleet(args.snapshot)
    summary = fleet.downtime(
        datetime.combine(args.date_from, time.min),
        datetime.combine(args.date_to, time.max),
        vehicle_filter=vehicle_filter_from_args(args),
    )

    print(f"Period: {args.date_from.isoformat()} to {args.date_to.isoformat()}")
    print(f"Downtime: {format_hours(summary.total_downtime_hours)} h over {summary.total_events} events")
    print(f"Top cause: {summary.top_cause}")
    print()

    if not summary.total_events:
        print("No downtime events found.")
        return 0

    headers = ["Name", "Hours", "Events"]
    causes = [
        [b.name, format_hours(b.downtime_hours), str(b.event_count), f"{b.percentage:.1f}%"]
        for b in summary.by_cause_category.values()
    ]
    print("BY CAUSE:")
    print(tabulate(causes, headers=headers + ["Share"], tablefmt="simple"))
    print()
    for title, buckets in (
        ("BY FUNCTION CLASS:", summary.by_function_class),
        ("BY STATE:", summary.by_state),
        ("BY HIRE PROVIDER:", summary.by_hire_provider),
    ):
        if buckets:
            print(title)
            print(tabulate(make_downtime_table(buckets), headers=headers, tablefmt="simple"))
            print()
    return 0


# =============================================================================
# Complete command
# =============================================================================


def cmd_complete(args):
    """Record a completed service against a plan."""
    fleet = load_fleet(args.snapshot)
    plan = fleet.plans.get(args.plan_id)
    if plan is None:
        print(f"Error: Unknown plan '{args.plan_id}'")
        return 1

    completed = args.date or date.today()
    template = fleet.templates.get(plan.maintenance_template_id)
    vehicle = fleet.vehicles.get(plan.vehicle_id)

    print(f"Recording completion in {args.snapshot}:")
    print(f"  Plan:     {plan.id}")
    if template is not None:
        print(f"  Task:     {template.name or template.id}")
    if vehicle is not None:
        print(f"  Vehicle:  {vehicle.name}")
    print(f"  Date:     {completed.isoformat()}")
    if args.odometer is not None:
        print(f"  Odometer: {format_km(args.odometer)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_plan_completion(args.snapshot, plan.id, completed, args.odometer)
    print("Completion saved.")
    return 0


# =============================================================================
# Update odometer command
# =============================================================================


def cmd_update_odometer(args):
    """Update a vehicle's current odometer."""
    fleet = load_fleet(args.snapshot)
    vehicle = fleet.vehicles.get(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1

    print(f"Vehicle: {vehicle.name}")
    print(f"Current odometer: {format_km(parse_number(vehicle.current_odometer_km))}")
    print(f"New odometer:     {format_km(args.odometer)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_vehicle_odometer(args.snapshot, vehicle.id, args.odometer)
    print("Odometer updated.")
    return 0


# =============================================================================
# Main
# =============================================================================


def add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--state", type=str, help="Only vehicles in this state")
    parser.add_argument("--function-class", type=str, help="Only this vehicle function class")
    parser.add_argument("--ownership", type=str, help="Only this ownership type")
    parser.add_argument("--provider", type=str, help="Only this hire provider id")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet maintenance and safety risk",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fleet.yaml plans
  %(prog)s fleet.yaml plans --status overdue --state QLD
  %(prog)s fleet.yaml workers --min-level amber
  %(prog)s fleet.yaml worker "Sam Carter"
  %(prog)s fleet.yaml downtime --from 2025-01-01 --to 2025-03-31
  %(prog)s fleet.yaml complete plan-1 --date 2025-02-01 --odometer 152000
  %(prog)s fleet.yaml update-odometer veh-1 152400
""",
    )
    parser.add_argument("snapshot", type=Path, help="Path to fleet snapshot YAML file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    plans_parser = subparsers.add_parser(
        "plans", help="Show maintenance plans that are overdue, due soon or scheduled"
    )
    plans_parser.add_argument("--as-of", type=iso_date, help="Reference date (default: today)")
    plans_parser.add_argument(
        "--status", choices=["overdue", "upcoming"], help="Only overdue or due-soon plans"
    )
    plans_parser.add_argument("--from", dest="date_from", type=iso_date, help="Earliest due date")
    plans_parser.add_argument("--to", dest="date_to", type=iso_date, help="Latest due date")
    add_filter_arguments(plans_parser)

    workers_parser = subparsers.add_parser("workers", help="Show worker risk levels")
    workers_parser.add_argument("--as-of", type=iso_date, help="Reference date (default: today)")
    workers_parser.add_argument(
        "--months", type=int, default=12, help="Incident lookback in months (default: 12)"
    )
    workers_parser.add_argument(
        "--min-level", choices=["amber", "red"], help="Only workers at or above this level"
    )
    add_filter_arguments(workers_parser)

    worker_parser = subparsers.add_parser("worker", help="Show one worker's risk profile")
    worker_parser.add_argument("name", type=str, help="Worker name")
    worker_parser.add_argument("--as-of", type=iso_date, help="Reference date (default: today)")

    downtime_parser = subparsers.add_parser("downtime", help="Summarise downtime for a period")
    downtime_parser.add_argument(
        "--from", dest="date_from", type=iso_date, required=True, help="Period start"
    )
    downtime_parser.add_argument(
        "--to", dest="date_to", type=iso_date, required=True, help="Period end"
    )
    add_filter_arguments(downtime_parser)

    complete_parser = subparsers.add_parser(
        "complete", help="Record a completed service against a plan"
    )
    complete_parser.add_argument("plan_id", type=str, help="Maintenance plan id")
    complete_parser.add_argument("--date", type=iso_date, help="Completion date (default: today)")
    complete_parser.add_argument("--odometer", type=float, help="Odometer at completion (km)")
    complete_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be saved without saving"
    )

    odometer_parser = subparsers.add_parser(
        "update-odometer", help="Update a vehicle's current odometer"
    )
    odometer_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    odometer_parser.add_argument("odometer", type=float, help="Current odometer (km)")
    odometer_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be updated without saving"
    )

    return parser


COMMANDS = {
    "plans": cmd_plans,
    "workers": cmd_workers,
    "worker": cmd_worker,
    "downtime": cmd_downtime,
    "complete": cmd_complete,
    "update-odometer": cmd_update_odometer,
}


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.snapshot.exists():
        print(f"Error: File not found: {args.snapshot}")
        return 1

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main() or 0)
