"""Status enums for maintenance urgency and worker risk."""

from enum import Enum


class PlanStatus(Enum):
    """Maintenance plan status categories. Lower value = more urgent."""

    OVERDUE = 1
    DUE_SOON = 2
    SCHEDULED = 3

    @property
    def label(self) -> str:
        return {
            PlanStatus.OVERDUE: "Overdue",
            PlanStatus.DUE_SOON: "DueSoon",
            PlanStatus.SCHEDULED: "Scheduled",
        }[self]


class RiskLevel(Enum):
    """Worker risk bands. Lower value = higher risk."""

    RED = 1
    AMBER = 2
    GREEN = 3

    @property
    def label(self) -> str:
        return self.name.title()

    @property
    def action(self) -> str:
        """Follow-up label shown next to the band."""
        return {
            RiskLevel.RED: "Action Required",
            RiskLevel.AMBER: "Monitor",
            RiskLevel.GREEN: "OK",
        }[self]
