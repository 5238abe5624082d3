"""Tracker module - in-memory capability, milestone and plan management."""

from .errors import CapabilityImportError, PlanSaveError, PlanValidationError, TrackerError
from .models import Capability, Milestone, MilestoneRef, Notification, Plan, PlanDiff, PlanPhase, PlanPhases, User
from .store import ProjectStore

__all__ = [
	"Capability",
	"Milestone",
	"MilestoneRef",
	"Notification",
	"Plan",
	"PlanDiff",
	"PlanPhase",
	"PlanPhases",
	"User",
	"ProjectStore",
	"TrackerError",
	"CapabilityImportError",
	"PlanValidationError",
	"PlanSaveError",
]
