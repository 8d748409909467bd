"""MaintenancePlan class binding a vehicle to a template."""

from typing import Any, Optional


class MaintenancePlan:
    """One maintenance task scheduled against one vehicle."""

    def __init__(
        self,
        id: str,
        vehicle_id: Optional[str] = None,
        maintenance_template_id: Optional[str] = None,
        last_completed_date: Any = None,
        last_completed_odometer_km: Any = None,
        next_due_date: Any = None,
        next_due_odometer_km: Any = None,
        status: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.maintenance_template_id = maintenance_template_id
        self.last_completed_date = last_completed_date
        self.last_completed_odometer_km = last_completed_odometer_km
        self.next_due_date = next_due_date
        self.next_due_odometer_km = next_due_odometer_km
        self.status = status
