"""Prestart check and defect records."""

from typing import Any, Optional


class PrestartCheck:
    """A pre-shift safety inspection performed by an operator."""

    def __init__(
        self,
        id: str,
        vehicle_id: Optional[str] = None,
        worker_name: Optional[str] = None,
        prestart_datetime: Any = None,
        overall_result: Optional[str] = None,
        operator_name: Optional[str] = None,
        worker_external_id: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.worker_name = worker_name
        self.prestart_datetime = prestart_datetime
        self.overall_result = overall_result
        self.operator_name = operator_name
        self.worker_external_id = worker_external_id

    @property
    def worker(self) -> Optional[str]:
        """Worker identity, falling back to the operator name."""
        return self.worker_name or self.operator_name or None

    @property
    def failed(self) -> bool:
        return self.overall_result == "Fail"


class PrestartDefect:
    """A defect raised during a prestart check."""

    def __init__(
        self,
        id: str,
        prestart_id: Optional[str] = None,
        severity: Optional[str] = None,
        reported_at: Any = None,
    ):
        self.id = id
        self.prestart_id = prestart_id
        self.severity = severity
        self.reported_at = reported_at

    @property
    def is_critical(self) -> bool:
        return self.severity == "Critical"
