"""
Fleet maintenance and safety risk models.

This package derives status from fleet entity snapshots:
- PlanStatus / RiskLevel: urgency and risk bands
- Vehicle, MaintenanceTemplate, MaintenancePlan: maintenance reference data
- PrestartCheck, PrestartDefect, IncidentRecord: worker safety records
- PlanDue: calculated plan status
- WorkerRisk: per-worker risk counters and band
- Fleet: snapshot aggregate with lookup indexes
"""

from .status import PlanStatus, RiskLevel
from .vehicle import Vehicle
from .template import MaintenanceTemplate, TriggerType
from .plan import MaintenancePlan
from .prestart import PrestartCheck, PrestartDefect
from .incident import IncidentRecord
from .hire_provider import HireProvider
from .downtime_event import AssetDowntimeEvent
from .entity_index import EntityIndex
from .vehicle_filter import VehicleFilter
from .plan_due import PlanDue
from .calculations import (
    calc_due_date,
    calc_due_odometer,
    check_status,
    is_past_due,
    parse_date,
    parse_datetime,
    parse_number,
)
from .evaluator import evaluate_plan, schedule_plans, summarize_schedule
from .risk import (
    RiskCounts,
    WorkerRisk,
    WorkerProfile,
    RiskStatusRecord,
    classify_risk,
    aggregate_worker_risk,
    filter_by_minimum_level,
    worker_profile,
    track_risk_status,
)
from .downtime import DowntimeSummary, aggregate_downtime
from .fleet import Fleet
from .loader import load_fleet, save_plan_completion, save_vehicle_odometer

__all__ = [
    "PlanStatus",
    "RiskLevel",
    "Vehicle",
    "MaintenanceTemplate",
    "TriggerType",
    "MaintenancePlan",
    "PrestartCheck",
    "PrestartDefect",
    "IncidentRecord",
    "HireProvider",
    "AssetDowntimeEvent",
    "EntityIndex",
    "VehicleFilter",
    "PlanDue",
    "calc_due_date",
    "calc_due_odometer",
    "check_status",
    "is_past_due",
    "parse_date",
    "parse_datetime",
    "parse_number",
    "evaluate_plan",
    "schedule_plans",
    "summarize_schedule",
    "RiskCounts",
    "WorkerRisk",
    "WorkerProfile",
    "RiskStatusRecord",
    "classify_risk",
    "aggregate_worker_risk",
    "filter_by_minimum_level",
    "worker_profile",
    "track_risk_status",
    "DowntimeSummary",
    "aggregate_downtime",
    "Fleet",
    "load_fleet",
    "save_plan_completion",
    "save_vehicle_odometer",
]
