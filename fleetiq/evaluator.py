"""
Maintenance due-status evaluation.

Due dates and odometers are derived on every read from the plan's last
completion, the vehicle and the template. Nothing here writes back to the
plan or vehicle.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from .calculations import (
    calc_due_date,
    calc_due_odometer,
    check_status,
    is_past_due,
    parse_date,
    parse_datetime,
    parse_number,
)
from .entity_index import EntityIndex
from .plan import MaintenancePlan
from .plan_due import PlanDue
from .status import PlanStatus
from .template import MaintenanceTemplate
from .vehicle import Vehicle
from .vehicle_filter import VehicleFilter

logger = logging.getLogger(__name__)

DUE_SOON_DAYS = 30

STATUS_FILTERS = {
    "upcoming": PlanStatus.DUE_SOON,
    "overdue": PlanStatus.OVERDUE,
}


def _as_date(value: Union[date, datetime]) -> date:
    return parse_datetime(value).date() if isinstance(value, datetime) else value


def evaluate_plan(
    plan: MaintenancePlan,
    template: Optional[MaintenanceTemplate],
    vehicle: Optional[Vehicle],
    as_of: Union[date, datetime],
    due_soon_days: int = DUE_SOON_DAYS,
) -> Optional[PlanDue]:
    """
    Calculate when a plan is next due and how urgent it is.

    Logic:
    - Stored next_due_date / next_due_odometer_km are used as-is
    - Time-based (or hybrid) without a stored date: baseline is the last
      completion, else the vehicle's in-service date, else as_of
    - Odometer-based (or hybrid) without a stored reading: baseline is the
      last completion odometer, else the current odometer, else 0
    - Overdue if the date has passed or the odometer reached the due
      reading; DueSoon if the date falls within due_soon_days; else Scheduled

    Returns None when the template or vehicle is missing.
    """
    if template is None or vehicle is None:
        return None

    today = _as_date(as_of)
    current_km = parse_number(vehicle.current_odometer_km)

    due_date = parse_date(plan.next_due_date)
    if due_date is None and template.is_time_based:
        baseline = (
            parse_date(plan.last_completed_date)
            or parse_date(vehicle.in_service_date)
            or today
        )
        due_date = calc_due_date(baseline, parse_number(template.interval_days))

    due_km = parse_number(plan.next_due_odometer_km)
    if due_km is not None and due_km <= 0:
        due_km = None
    if due_km is None and template.is_odometer_based:
        baseline_km = parse_number(plan.last_completed_odometer_km)
        if baseline_km is None:
            baseline_km = current_km
        due_km = calc_due_odometer(baseline_km, parse_number(template.interval_km))

    status = check_status(as_of, due_date, due_km, current_km, due_soon_days)

    days_until_due = None
    days_overdue = None
    km_overdue = None
    if due_date is not None:
        delta = (due_date - today).days
        if is_past_due(due_date, as_of):
            days_overdue = -delta
        elif status != PlanStatus.OVERDUE:
            days_until_due = delta
    if due_km is not None and current_km is not None and current_km >= due_km:
        km_overdue = current_km - due_km

    return PlanDue(
        plan=plan,
        vehicle=vehicle,
        template=template,
        status=status,
        next_due_date=due_date,
        next_due_odometer_km=due_km,
        days_until_due=days_until_due,
        days_overdue=days_overdue,
        km_overdue=km_overdue,
    )


def schedule_plans(
    plans: Iterable[MaintenancePlan],
    vehicles: EntityIndex,
    templates: EntityIndex,
    as_of: Union[date, datetime],
    vehicle_filter: Optional[VehicleFilter] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    status_filter: Optional[str] = None,
    due_soon_days: int = DUE_SOON_DAYS,
) -> List[PlanDue]:
    """
    Evaluate all plans, dropping ones with unresolved vehicle/template ids.

    Args:
        date_from, date_to: inclusive bounds on next due date; plans with no
            due date are kept
        status_filter: "upcoming" (DueSoon), "overdue", or None/"all"

    Raises:
        ValueError: if status_filter is not recognised
    """
    wanted_status = None
    if status_filter and status_filter != "all":
        if status_filter not in STATUS_FILTERS:
            raise ValueError(f"Unknown status filter '{status_filter}'")
        wanted_status = STATUS_FILTERS[status_filter]

    results = []
    for plan in plans:
        vehicle = vehicles.get(plan.vehicle_id)
        if vehicle is None:
            logger.debug("Plan %s: unknown vehicle %s", plan.id, plan.vehicle_id)
            continue
        if vehicle_filter and not vehicle_filter.matches(vehicle):
            continue

        due = evaluate_plan(
            plan,
            templates.get(plan.maintenance_template_id),
            vehicle,
            as_of,
            due_soon_days,
        )
        if due is None:
            logger.debug(
                "Plan %s: unknown template %s", plan.id, plan.maintenance_template_id
            )
            continue

        if due.next_due_date is not None:
            if date_from and due.next_due_date < date_from:
                continue
            if date_to and due.next_due_date > date_to:
                continue

        if wanted_status and due.status != wanted_status:
            continue

        results.append(due)

    # Most urgent first, then soonest due
    results.sort(
        key=lambda d: (d.status.value, d.next_due_date or date.max, d.vehicle.name)
    )
    return results


@dataclass(frozen=True)
class ScheduleSummary:
    total_plans: int
    overdue_count: int
    due_soon_count: int
    scheduled_count: int
    hvnl_critical_overdue: int

    def to_dict(self) -> dict:
        return {
            "total_plans": self.total_plans,
            "overdue_count": self.overdue_count,
            "due_soon_count": self.due_soon_count,
            "scheduled_count": self.scheduled_count,
            "hvnl_critical_overdue": self.hvnl_critical_overdue,
        }


def summarize_schedule(schedule: List[PlanDue]) -> ScheduleSummary:
    """Count plans by status."""
    return ScheduleSummary(
        total_plans=len(schedule),
        overdue_count=sum(1 for d in schedule if d.is_overdue),
        due_soon_count=sum(1 for d in schedule if d.is_due_soon),
        scheduled_count=sum(1 for d in schedule if d.status == PlanStatus.SCHEDULED),
        hvnl_critical_overdue=sum(
            1 for d in schedule if d.is_overdue and d.is_hvnl_critical
        ),
    )
