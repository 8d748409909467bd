"""Vehicle class for fleet asset records."""

from typing import Any, Optional


class Vehicle:
    """A fleet asset as stored by the entity API."""

    def __init__(
        self,
        id: str,
        asset_code: Optional[str] = None,
        rego: Optional[str] = None,
        state: Optional[str] = None,
        ownership_type: Optional[str] = None,
        vehicle_function_class: Optional[str] = None,
        current_odometer_km: Any = None,
        in_service_date: Any = None,
        next_service_due_date: Any = None,
        hire_provider_id: Optional[str] = None,
        assignar_tracked: bool = False,
        status: Optional[str] = None,
    ):
        self.id = id
        self.asset_code = asset_code
        self.rego = rego
        self.state = state
        self.ownership_type = ownership_type
        self.vehicle_function_class = vehicle_function_class
        self.current_odometer_km = current_odometer_km
        self.in_service_date = in_service_date
        self.next_service_due_date = next_service_due_date
        self.hire_provider_id = hire_provider_id
        self.assignar_tracked = assignar_tracked or False
        self.status = status

    @property
    def name(self) -> str:
        """Display name: asset code and rego where known."""
        parts = [p for p in (self.asset_code, self.rego) if p]
        return " / ".join(parts) if parts else self.id

    @property
    def is_active(self) -> bool:
        """Vehicles without a recorded status count as active."""
        return self.status is None or self.status == "Active"
