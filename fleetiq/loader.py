"""YAML loading and saving utilities for fleet snapshots."""

import inspect
import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from .downtime_event import AssetDowntimeEvent
from .fleet import Fleet
from .hire_provider import HireProvider
from .incident import IncidentRecord
from .plan import MaintenancePlan
from .prestart import PrestartCheck, PrestartDefect
from .template import MaintenanceTemplate
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

# Snapshot section -> entity class
SECTIONS: Dict[str, Callable[..., Any]] = {
    "vehicles": Vehicle,
    "templates": MaintenanceTemplate,
    "plans": MaintenancePlan,
    "prestarts": PrestartCheck,
    "defects": PrestartDefect,
    "incidents": IncidentRecord,
    "hire_providers": HireProvider,
    "downtime_events": AssetDowntimeEvent,
}


def _is_id_field(key: str) -> bool:
    return key == "id" or key.endswith("_id")


def _parse_records(section: str, items: Optional[List[Dict[str, Any]]]) -> List[Any]:
    """
    Build entity objects, ignoring keys the entity does not know.

    Ids and *_id references are read as strings so that integer ids in the
    YAML still resolve against each other.
    """
    cls = SECTIONS[section]
    fields = inspect.signature(cls).parameters
    records = []
    for item in items or []:
        if not isinstance(item, dict) or item.get("id") is None:
            logger.debug("Skipping %s entry without id: %r", section, item)
            continue
        kwargs = {k: v for k, v in item.items() if k in fields}
        for key, value in kwargs.items():
            if _is_id_field(key) and value is not None:
                kwargs[key] = str(value)
        records.append(cls(**kwargs))
    return records


def _read(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _find(data: Dict[str, Any], section: str, record_id: str) -> Dict[str, Any]:
    for item in data.get(section) or []:
        if isinstance(item, dict) and str(item.get("id")) == str(record_id):
            return item
    raise KeyError(f"{section[:-1].capitalize()} '{record_id}' not found")


def load_fleet(filename: Union[str, Path]) -> Fleet:
    """Load a fleet snapshot from a YAML file."""
    data = _read(filename)
    return Fleet(**{s: _parse_records(s, data.get(s)) for s in SECTIONS})


def save_plan_completion(
    filename: Union[str, Path],
    plan_id: str,
    completed_date: Union[str, date],
    odometer_km: Optional[float] = None,
) -> None:
    """
    Record a completed service against a maintenance plan.

    Sets last_completed_date (and odometer, when given) and clears stored
    next-due values so they are derived again from the new completion.

    Raises:
        KeyError: if no plan has the given id
    """
    data = _read(filename)
    plan = _find(data, "plans", plan_id)

    if isinstance(completed_date, date):
        completed_date = completed_date.isoformat()
    plan["last_completed_date"] = completed_date
    if odometer_km is not None:
        plan["last_completed_odometer_km"] = odometer_km
    plan.pop("next_due_date", None)
    plan.pop("next_due_odometer_km", None)

    _write(filename, data)
    logger.info("Recorded completion of plan %s on %s", plan_id, completed_date)


def save_vehicle_odometer(
    filename: Union[str, Path], vehicle_id: str, odometer_km: float
) -> None:
    """
    Update a vehicle's current odometer reading.

    Raises:
        KeyError: if no vehicle has the given id
    """
    data = _read(filename)
    vehicle = _find(data, "vehicles", vehicle_id)
    vehicle["current_odometer_km"] = odometer_km
    _write(filename, data)
    logger.info("Updated vehicle %s odometer to %s km", vehicle_id, odometer_km)
