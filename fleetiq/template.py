"""MaintenanceTemplate class for service interval definitions."""

from enum import Enum
from typing import Any, Optional


class TriggerType(Enum):
    TIME_BASED = "TimeBased"
    ODOMETER_BASED = "OdometerBased"
    HYBRID = "Hybrid"


class MaintenanceTemplate:
    """Reference data describing when a maintenance task falls due."""

    def __init__(
        self,
        id: str,
        trigger_type: Optional[str] = None,
        interval_days: Any = None,
        interval_km: Any = None,
        hvnl_relevance_flag: bool = False,
        priority: Optional[str] = None,
        name: Optional[str] = None,
        task_summary: Optional[str] = None,
    ):
        self.id = id
        self.trigger_type = trigger_type
        self.interval_days = interval_days
        self.interval_km = interval_km
        self.hvnl_relevance_flag = hvnl_relevance_flag or False
        self.priority = priority
        self.name = name
        self.task_summary = task_summary

    @property
    def trigger(self) -> Optional[TriggerType]:
        """Parsed trigger type, or None when unrecognised."""
        try:
            return TriggerType(self.trigger_type)
        except ValueError:
            return None

    @property
    def is_time_based(self) -> bool:
        return self.trigger in (TriggerType.TIME_BASED, TriggerType.HYBRID)

    @property
    def is_odometer_based(self) -> bool:
        return self.trigger in (TriggerType.ODOMETER_BASED, TriggerType.HYBRID)
