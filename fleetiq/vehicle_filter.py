"""VehicleFilter for narrowing results to part of the fleet."""

from dataclasses import dataclass
from typing import Optional

from .vehicle import Vehicle

ALL = "all"


def _matches(wanted: Optional[str], actual: Optional[str]) -> bool:
    return wanted is None or wanted == ALL or wanted == actual


@dataclass(frozen=True)
class VehicleFilter:
    """Dashboard filter fields. None or "all" disables a field."""

    state: Optional[str] = None
    function_class: Optional[str] = None
    ownership: Optional[str] = None
    provider: Optional[str] = None

    def matches(self, vehicle: Vehicle) -> bool:
        return (
            _matches(self.state, vehicle.state)
            and _matches(self.function_class, vehicle.vehicle_function_class)
            and _matches(self.ownership, vehicle.ownership_type)
            and _matches(self.provider, vehicle.hire_provider_id)
        )
