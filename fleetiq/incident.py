"""IncidentRecord class for driver incidents."""

from typing import Any, Optional

HVNL_BREACH = "HVNL Breach"
SERIOUS_SEVERITIES = ("Critical", "Serious")


class IncidentRecord:
    """A safety or compliance incident attributed to a driver."""

    def __init__(
        self,
        id: str,
        driver_name: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        incident_datetime: Any = None,
        incident_type: Optional[str] = None,
        severity: Optional[str] = None,
        at_fault: Optional[bool] = None,
        driver_external_id: Optional[str] = None,
    ):
        self.id = id
        self.driver_name = driver_name
        self.vehicle_id = vehicle_id
        self.incident_datetime = incident_datetime
        self.incident_type = incident_type
        self.severity = severity
        self.at_fault = at_fault
        self.driver_external_id = driver_external_id

    @property
    def is_hvnl(self) -> bool:
        return self.incident_type == HVNL_BREACH

    @property
    def is_serious(self) -> bool:
        return self.severity in SERIOUS_SEVERITIES

    @property
    def counts_as_at_fault(self) -> bool:
        """Incidents are at-fault unless explicitly cleared."""
        return self.at_fault is not False
