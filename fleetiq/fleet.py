"""Fleet class - the snapshot aggregate for all fleet entities and derivations."""

from datetime import date, datetime
from typing import List, Optional

from .downtime import DowntimeSummary, aggregate_downtime
from .downtime_event import AssetDowntimeEvent
from .entity_index import EntityIndex
from .evaluator import DUE_SOON_DAYS, schedule_plans
from .hire_provider import HireProvider
from .incident import IncidentRecord
from .plan import MaintenancePlan
from .plan_due import PlanDue
from .prestart import PrestartCheck, PrestartDefect
from .risk import (
    INCIDENT_WINDOW_MONTHS,
    WorkerProfile,
    WorkerRisk,
    aggregate_worker_risk,
    filter_by_minimum_level,
    worker_profile,
)
from .template import MaintenanceTemplate
from .vehicle import Vehicle
from .vehicle_filter import VehicleFilter


class Fleet:
    """One snapshot of fleet entities with lookup indexes built once."""

    def __init__(
        self,
        vehicles: Optional[List[Vehicle]] = None,
        templates: Optional[List[MaintenanceTemplate]] = None,
        plans: Optional[List[MaintenancePlan]] = None,
        prestarts: Optional[List[PrestartCheck]] = None,
        defects: Optional[List[PrestartDefect]] = None,
        incidents: Optional[List[IncidentRecord]] = None,
        hire_providers: Optional[List[HireProvider]] = None,
        downtime_events: Optional[List[AssetDowntimeEvent]] = None,
    ):
        self.vehicles = EntityIndex(vehicles)
        self.templates = EntityIndex(templates)
        self.plans = EntityIndex(plans)
        self.prestarts = EntityIndex(prestarts)
        self.defects = list(defects or [])
        self.incidents = list(incidents or [])
        self.hire_providers = EntityIndex(hire_providers)
        self.downtime_events = list(downtime_events or [])

    def plan_schedule(
        self,
        as_of: date,
        vehicle_filter: Optional[VehicleFilter] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status_filter: Optional[str] = None,
        due_soon_days: int = DUE_SOON_DAYS,
    ) -> List[PlanDue]:
        """Due status for every resolvable plan, most urgent first."""
        return schedule_plans(
            self.plans,
            self.vehicles,
            self.templates,
            as_of,
            vehicle_filter=vehicle_filter,
            date_from=date_from,
            date_to=date_to,
            status_filter=status_filter,
            due_soon_days=due_soon_days,
        )

    def worker_risk(
        self,
        as_of: datetime,
        lookback_months: int = INCIDENT_WINDOW_MONTHS,
        vehicle_filter: Optional[VehicleFilter] = None,
        min_level: Optional[str] = None,
    ) -> List[WorkerRisk]:
        """Risk summaries for all workers, highest risk first."""
        workers = aggregate_worker_risk(
            self.prestarts,
            self.defects,
            self.incidents,
            self.vehicles,
            as_of,
            lookback_months=lookback_months,
            vehicle_filter=vehicle_filter,
        )
        return filter_by_minimum_level(workers, min_level)

    def worker_profile(
        self, worker_name: str, as_of: datetime
    ) -> Optional[WorkerProfile]:
        return worker_profile(
            worker_name,
            self.prestarts,
            self.defects,
            self.incidents,
            as_of,
            vehicles=self.vehicles,
        )

    def downtime(
        self,
        start: datetime,
        end: datetime,
        vehicle_filter: Optional[VehicleFilter] = None,
    ) -> DowntimeSummary:
        return aggregate_downtime(
            self.downtime_events,
            self.vehicles,
            self.hire_providers,
            start,
            end,
            vehicle_filter=vehicle_filter,
        )
