"""Downtime aggregation by cause, function class, state and hire provider."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .calculations import parse_datetime, parse_number
from .downtime_event import CAUSE_CATEGORIES, AssetDowntimeEvent
from .entity_index import EntityIndex
from .vehicle_filter import VehicleFilter

UNKNOWN = "Unknown"
UNKNOWN_PROVIDER = "Unknown Provider"


@dataclass
class DowntimeBucket:
    name: str
    downtime_hours: float = 0.0
    event_count: int = 0
    percentage: float = 0.0
    provider_id: Optional[str] = None

    def add(self, hours: float) -> None:
        self.downtime_hours += hours
        self.event_count += 1

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "downtime_hours": self.downtime_hours,
            "event_count": self.event_count,
        }
        if self.provider_id is not None:
            d["provider_id"] = self.provider_id
        return d


@dataclass
class DowntimeSummary:
    by_cause_category: Dict[str, DowntimeBucket] = field(default_factory=dict)
    by_function_class: List[DowntimeBucket] = field(default_factory=list)
    by_state: List[DowntimeBucket] = field(default_factory=list)
    by_hire_provider: List[DowntimeBucket] = field(default_factory=list)
    total_downtime_hours: float = 0.0
    total_events: int = 0

    @property
    def top_cause(self) -> str:
        causes = [b for b in self.by_cause_category.values() if b.downtime_hours > 0]
        if not causes:
            return "None"
        return max(causes, key=lambda b: b.downtime_hours).name

    @property
    def top_function_class(self) -> str:
        return self.by_function_class[0].name if self.by_function_class else "None"

    @property
    def top_hire_provider(self) -> str:
        return self.by_hire_provider[0].name if self.by_hire_provider else "None"

    def to_dict(self) -> dict:
        return {
            "byCauseCategory": {
                name: {
                    "downtime_hours": b.downtime_hours,
                    "event_count": b.event_count,
                    "percentage": b.percentage,
                }
                for name, b in self.by_cause_category.items()
            },
            "byFunctionClass": [b.to_dict() for b in self.by_function_class],
            "byHireProvider": [b.to_dict() for b in self.by_hire_provider],
            "byState": [b.to_dict() for b in self.by_state],
            "summary": {
                "total_downtime_hours": round(self.total_downtime_hours),
                "total_events": self.total_events,
                "top_cause": self.top_cause,
                "top_function_class": self.top_function_class,
                "top_hire_provider": self.top_hire_provider,
            },
        }


def _ranked(buckets: Dict[str, DowntimeBucket]) -> List[DowntimeBucket]:
    return sorted(buckets.values(), key=lambda b: (-b.downtime_hours, b.name))


def aggregate_downtime(
    events: Iterable[AssetDowntimeEvent],
    vehicles: EntityIndex,
    providers: EntityIndex,
    start: datetime,
    end: datetime,
    vehicle_filter: Optional[VehicleFilter] = None,
) -> DowntimeSummary:
    """
    Total downtime hours for active, filter-matching vehicles.

    Events count when their start falls within [start, end]. Categories
    outside the fixed list count toward the total but get no bucket.
    """
    start = parse_datetime(start)
    end = parse_datetime(end)
    summary = DowntimeSummary(
        by_cause_category={c: DowntimeBucket(name=c) for c in CAUSE_CATEGORIES}
    )
    by_function_class: Dict[str, DowntimeBucket] = {}
    by_state: Dict[str, DowntimeBucket] = {}
    by_provider: Dict[str, DowntimeBucket] = {}

    for event in events:
        vehicle = vehicles.get(event.vehicle_id)
        if vehicle is None or not vehicle.is_active:
            continue
        if vehicle_filter and not vehicle_filter.matches(vehicle):
            continue
        started = parse_datetime(event.start_datetime)
        if started is None or started < start or started > end:
            continue

        hours = parse_number(event.downtime_hours) or 0.0
        summary.total_downtime_hours += hours
        summary.total_events += 1

        category = event.cause_category or "Other"
        if category in summary.by_cause_category:
            summary.by_cause_category[category].add(hours)

        function_class = vehicle.vehicle_function_class or UNKNOWN
        by_function_class.setdefault(function_class, DowntimeBucket(function_class)).add(hours)

        state = vehicle.state or UNKNOWN
        by_state.setdefault(state, DowntimeBucket(state)).add(hours)

        provider_id = event.hire_provider_id or vehicle.hire_provider_id
        if provider_id:
            provider = providers.get(provider_id)
            provider_name = (provider.name if provider else None) or UNKNOWN_PROVIDER
            by_provider.setdefault(
                provider_name, DowntimeBucket(provider_name, provider_id=provider_id)
            ).add(hours)

    for bucket in summary.by_cause_category.values():
        if summary.total_downtime_hours > 0:
            bucket.percentage = bucket.downtime_hours / summary.total_downtime_hours * 100

    summary.by_function_class = _ranked(by_function_class)
    summary.by_state = _ranked(by_state)
    summary.by_hire_provider = _ranked(by_provider)
    return summary
