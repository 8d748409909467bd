"""PlanDue dataclass for calculated plan status."""

from dataclasses import dataclass
from datetime import date
from typing import Optional, TYPE_CHECKING

from .status import PlanStatus

if TYPE_CHECKING:
    from .plan import MaintenancePlan
    from .template import MaintenanceTemplate
    from .vehicle import Vehicle


@dataclass(frozen=True)
class PlanDue:
    """Derived due information for one maintenance plan."""

    plan: "MaintenancePlan"
    vehicle: "Vehicle"
    template: "MaintenanceTemplate"
    status: PlanStatus
    next_due_date: Optional[date] = None
    next_due_odometer_km: Optional[float] = None
    days_until_due: Optional[int] = None
    days_overdue: Optional[int] = None
    km_overdue: Optional[float] = None

    @property
    def is_overdue(self) -> bool:
        return self.status == PlanStatus.OVERDUE

    @property
    def is_due_soon(self) -> bool:
        return self.status == PlanStatus.DUE_SOON

    @property
    def is_hvnl_critical(self) -> bool:
        return bool(self.template.hvnl_relevance_flag)

    def to_dict(self) -> dict:
        """Flat record for JSON responses."""
        return {
            "plan_id": self.plan.id,
            "vehicle_id": self.vehicle.id,
            "asset_code": self.vehicle.asset_code,
            "rego": self.vehicle.rego,
            "state": self.vehicle.state,
            "template_id": self.template.id,
            "template_name": self.template.name,
            "trigger_type": self.template.trigger_type,
            "priority": self.template.priority,
            "status": self.status.label,
            "next_due_date": self.next_due_date.isoformat() if self.next_due_date else None,
            "next_due_odometer_km": self.next_due_odometer_km,
            "days_until_due": self.days_until_due,
            "days_overdue": self.days_overdue,
            "km_overdue": self.km_overdue,
            "is_overdue": self.is_overdue,
            "is_due_soon": self.is_due_soon,
            "is_hvnl_critical": self.is_hvnl_critical,
        }
