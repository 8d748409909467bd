"""
Worker risk scoring.

Counts prestart failures, critical defects and incidents per worker over
fixed lookback windows and classifies each worker Red, Amber or Green.
The thresholds are independent OR clauses, evaluated Red first.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Set

from dateutil.relativedelta import relativedelta

from .calculations import parse_datetime
from .entity_index import EntityIndex
from .incident import IncidentRecord
from .prestart import PrestartCheck, PrestartDefect
from .status import RiskLevel
from .vehicle_filter import VehicleFilter

logger = logging.getLogger(__name__)

PRESTART_WINDOW_DAYS = 90
INCIDENT_WINDOW_MONTHS = 12
ESCALATION_DAYS = 30

MINIMUM_LEVELS = {
    "amber": RiskLevel.AMBER,
    "red": RiskLevel.RED,
}


@dataclass
class RiskCounts:
    """Per-worker counters over the lookback windows."""

    failed_prestarts_90d: int = 0
    critical_defects_90d: int = 0
    incidents_12m: int = 0
    hvnl_incidents_12m: int = 0
    at_fault_count_12m: int = 0
    serious_hvnl_incidents_12m: int = 0


def classify_risk(counts: RiskCounts) -> RiskLevel:
    """
    Classify a worker from their counters.

    Red if any of: 2+ at-fault incidents; an HVNL breach of Critical or
    Serious severity; 3+ critical defects; 5+ failed prestarts.
    Amber if any of: 1 at-fault incident; any HVNL breach; 1-2 critical
    defects; 3-4 failed prestarts.
    """
    if (
        counts.at_fault_count_12m >= 2
        or (counts.hvnl_incidents_12m >= 1 and counts.serious_hvnl_incidents_12m >= 1)
        or counts.critical_defects_90d >= 3
        or counts.failed_prestarts_90d >= 5
    ):
        return RiskLevel.RED
    if (
        counts.at_fault_count_12m == 1
        or counts.hvnl_incidents_12m >= 1
        or 1 <= counts.critical_defects_90d <= 2
        or 3 <= counts.failed_prestarts_90d <= 4
    ):
        return RiskLevel.AMBER
    return RiskLevel.GREEN


@dataclass
class WorkerRisk:
    """Risk summary for one worker."""

    worker_name: str
    worker_external_id: Optional[str] = None
    counts: RiskCounts = field(default_factory=RiskCounts)
    states: Set[str] = field(default_factory=set)
    function_classes: Set[str] = field(default_factory=set)

    @property
    def level(self) -> RiskLevel:
        return classify_risk(self.counts)

    def to_dict(self) -> dict:
        level = self.level
        return {
            "worker_name": self.worker_name,
            "worker_external_id": self.worker_external_id,
            "state": ", ".join(sorted(self.states)),
            "vehicle_function_class": ", ".join(sorted(self.function_classes)),
            "failed_prestarts_90d": self.counts.failed_prestarts_90d,
            "critical_defects_90d": self.counts.critical_defects_90d,
            "incidents_12m": self.counts.incidents_12m,
            "hvnl_incidents_12m": self.counts.hvnl_incidents_12m,
            "at_fault_count_12m": self.counts.at_fault_count_12m,
            "risk_level": level.label,
            "status": level.action,
        }


class _Windows:
    """Lookback cutoffs relative to a reference time."""

    def __init__(self, as_of: datetime, lookback_months: int):
        as_of = parse_datetime(as_of)
        self.prestart_cutoff = as_of - timedelta(days=PRESTART_WINDOW_DAYS)
        self.incident_cutoff = as_of - relativedelta(months=lookback_months)

    @staticmethod
    def within(value, cutoff: datetime) -> bool:
        parsed = parse_datetime(value)
        return parsed is not None and parsed >= cutoff


def _count_defect(
    counts: RiskCounts,
    defect: PrestartDefect,
    prestart: PrestartCheck,
    windows: _Windows,
) -> None:
    reported = defect.reported_at or prestart.prestart_datetime
    if defect.is_critical and windows.within(reported, windows.prestart_cutoff):
        counts.critical_defects_90d += 1


def _count_incident(
    counts: RiskCounts, incident: IncidentRecord, windows: _Windows
) -> bool:
    """Add an incident to the counters. Returns False when outside the window."""
    if not windows.within(incident.incident_datetime, windows.incident_cutoff):
        return False
    counts.incidents_12m += 1
    if incident.counts_as_at_fault:
        counts.at_fault_count_12m += 1
    if incident.is_hvnl:
        counts.hvnl_incidents_12m += 1
        if incident.is_serious:
            counts.serious_hvnl_incidents_12m += 1
    return True


def aggregate_worker_risk(
    prestarts: Iterable[PrestartCheck],
    defects: Iterable[PrestartDefect],
    incidents: Iterable[IncidentRecord],
    vehicles: EntityIndex,
    as_of: datetime,
    lookback_months: int = INCIDENT_WINDOW_MONTHS,
    vehicle_filter: Optional[VehicleFilter] = None,
) -> List[WorkerRisk]:
    """
    Build risk summaries for every worker seen in prestarts or incidents.

    Prestarts on unknown vehicles are skipped, along with their defects.
    Incidents on unknown vehicles still count but bypass the vehicle filter.
    Results are sorted highest risk first, then by name.
    """
    windows = _Windows(as_of, lookback_months)
    workers: Dict[str, WorkerRisk] = {}
    counted: List[PrestartCheck] = []

    for p in EntityIndex(prestarts):
        name = p.worker
        if not name:
            continue
        vehicle = vehicles.get(p.vehicle_id)
        if vehicle is None:
            logger.debug("Prestart %s: unknown vehicle %s", p.id, p.vehicle_id)
            continue
        if vehicle_filter and not vehicle_filter.matches(vehicle):
            continue
        counted.append(p)

        worker = workers.setdefault(
            name, WorkerRisk(worker_name=name, worker_external_id=p.worker_external_id)
        )
        if p.failed and windows.within(p.prestart_datetime, windows.prestart_cutoff):
            worker.counts.failed_prestarts_90d += 1
        if vehicle.state:
            worker.states.add(vehicle.state)
        if vehicle.vehicle_function_class:
            worker.function_classes.add(vehicle.vehicle_function_class)

    prestart_index = EntityIndex(counted)
    for d in defects:
        prestart = prestart_index.get(d.prestart_id)
        if prestart is None:
            continue
        worker = workers.get(prestart.worker or "")
        if worker is None:
            continue
        _count_defect(worker.counts, d, prestart, windows)

    for inc in incidents:
        name = inc.driver_name
        if not name:
            continue
        vehicle = vehicles.get(inc.vehicle_id)
        if vehicle is not None and vehicle_filter and not vehicle_filter.matches(vehicle):
            continue

        worker = workers.get(name)
        if worker is None:
            worker = WorkerRisk(worker_name=name, worker_external_id=inc.driver_external_id)
            if vehicle is not None:
                if vehicle.state:
                    worker.states.add(vehicle.state)
                if vehicle.vehicle_function_class:
                    worker.function_classes.add(vehicle.vehicle_function_class)
            workers[name] = worker
        _count_incident(worker.counts, inc, windows)

    return sorted(workers.values(), key=lambda w: (w.level.value, w.worker_name))


def filter_by_minimum_level(
    workers: List[WorkerRisk], minimum: Optional[str]
) -> List[WorkerRisk]:
    """
    Keep workers at or above a risk level ("amber" or "red").

    Raises:
        ValueError: if minimum is not recognised
    """
    if not minimum or minimum == "all":
        return list(workers)
    if minimum not in MINIMUM_LEVELS:
        raise ValueError(f"Unknown risk level '{minimum}'")
    threshold = MINIMUM_LEVELS[minimum]
    return [w for w in workers if w.level.value <= threshold.value]


@dataclass
class WorkerProfile:
    """All records behind one worker's risk level."""

    risk: WorkerRisk
    prestarts: List[PrestartCheck]
    incidents: List[IncidentRecord]
    failed_prestarts: List[PrestartCheck]
    recent_incidents: List[IncidentRecord]
    hvnl_incidents: List[IncidentRecord]
    critical_defects: List[PrestartDefect]


def worker_profile(
    worker_name: str,
    prestarts: Iterable[PrestartCheck],
    defects: Iterable[PrestartDefect],
    incidents: Iterable[IncidentRecord],
    as_of: datetime,
    lookback_months: int = INCIDENT_WINDOW_MONTHS,
    vehicles: Optional[EntityIndex] = None,
) -> Optional[WorkerProfile]:
    """
    Collect one worker's records. None if the worker has no records.

    Given vehicles, prestarts on unknown vehicles are left out the same way
    aggregate_worker_risk leaves them out, so both report the same level.
    """
    windows = _Windows(as_of, lookback_months)
    own_prestarts = [
        p
        for p in prestarts
        if p.worker == worker_name and (vehicles is None or p.vehicle_id in vehicles)
    ]
    own_incidents = [i for i in incidents if i.driver_name == worker_name]
    if not own_prestarts and not own_incidents:
        return None

    risk = WorkerRisk(worker_name=worker_name)
    external_ids = [p.worker_external_id for p in own_prestarts] + [
        i.driver_external_id for i in own_incidents
    ]
    risk.worker_external_id = next((x for x in external_ids if x), None)

    failed = [
        p
        for p in own_prestarts
        if p.failed and windows.within(p.prestart_datetime, windows.prestart_cutoff)
    ]
    risk.counts.failed_prestarts_90d = len(failed)

    prestart_index = EntityIndex(own_prestarts)
    critical = []
    for d in defects:
        prestart = prestart_index.get(d.prestart_id)
        if prestart is None:
            continue
        before = risk.counts.critical_defects_90d
        _count_defect(risk.counts, d, prestart, windows)
        if risk.counts.critical_defects_90d > before:
            critical.append(d)

    recent = [i for i in own_incidents if _count_incident(risk.counts, i, windows)]

    return WorkerProfile(
        risk=risk,
        prestarts=own_prestarts,
        incidents=own_incidents,
        failed_prestarts=failed,
        recent_incidents=recent,
        hvnl_incidents=[i for i in recent if i.is_hvnl],
        critical_defects=critical,
    )


@dataclass(frozen=True)
class RiskStatusRecord:
    """Stored risk state for a worker between evaluations."""

    worker_name: str
    current_level: RiskLevel
    previous_level: RiskLevel
    first_detected: datetime
    alert_sent: bool = False
    escalation_sent: bool = False


@dataclass(frozen=True)
class RiskStatusUpdate:
    record: RiskStatusRecord
    new_alert: bool = False
    escalation: bool = False
    days_at_red: Optional[int] = None


def track_risk_status(
    worker_name: str,
    previous: Optional[RiskStatusRecord],
    current_level: RiskLevel,
    as_of: datetime,
    escalation_days: int = ESCALATION_DAYS,
) -> RiskStatusUpdate:
    """
    Work out the next stored risk status for a worker.

    - First sighting: record starts at the current level; alert if Red
    - Level change: first_detected and both flags reset
    - Newly Red: one alert
    - Red for escalation_days or more: one escalation
    """
    if previous is None:
        is_red = current_level == RiskLevel.RED
        record = RiskStatusRecord(
            worker_name=worker_name,
            current_level=current_level,
            previous_level=RiskLevel.GREEN,
            first_detected=as_of,
            alert_sent=is_red,
        )
        return RiskStatusUpdate(record=record, new_alert=is_red)

    record = previous
    if previous.current_level != current_level:
        record = replace(
            previous,
            current_level=current_level,
            previous_level=previous.current_level,
            first_detected=as_of,
            alert_sent=False,
            escalation_sent=False,
        )

    if current_level != RiskLevel.RED:
        return RiskStatusUpdate(record=record)

    new_alert = False
    if previous.current_level != RiskLevel.RED and not record.alert_sent:
        record = replace(record, alert_sent=True)
        new_alert = True

    escalation = False
    days_at_red = (as_of - record.first_detected).days
    if not record.escalation_sent and days_at_red >= escalation_days:
        record = replace(record, escalation_sent=True)
        escalation = True

    return RiskStatusUpdate(
        record=record,
        new_alert=new_alert,
        escalation=escalation,
        days_at_red=days_at_red,
    )
