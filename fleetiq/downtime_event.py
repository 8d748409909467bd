"""AssetDowntimeEvent class for off-road periods."""

from typing import Any, Optional

CAUSE_CATEGORIES = (
    "PreventativeService",
    "CorrectiveRepair",
    "HireProviderDelay",
    "PartsDelay",
    "IncidentRepair",
    "Other",
)


class AssetDowntimeEvent:
    """A period a vehicle spent off the road."""

    def __init__(
        self,
        id: str,
        vehicle_id: Optional[str] = None,
        start_datetime: Any = None,
        downtime_hours: Any = None,
        cause_category: Optional[str] = None,
        hire_provider_id: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.start_datetime = start_datetime
        self.downtime_hours = downtime_hours
        self.cause_category = cause_category
        self.hire_provider_id = hire_provider_id
