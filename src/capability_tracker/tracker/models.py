"""
Tracker Models - Pydantic schemas for capabilities, milestones and plans.

Attributes are snake_case in Python and serialize with camelCase aliases,
so exported JSON keeps the shape consumers of the tracker already use
(``startDate``, ``capabilityId`` and so on).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PHASE_NAMES = ("requirements", "design", "development", "cst", "uat")

PHASE_LABELS = {
	"requirements": "REQ",
	"design": "DES",
	"development": "DEV",
	"cst": "CST",
	"uat": "UAT",
}


def _now() -> str:
	return datetime.now().isoformat()


class TrackerModel(BaseModel):
	"""Base model: camelCase aliases, either naming accepted on input."""
	model_config = ConfigDict(
		alias_generator=to_camel,
		populate_by_name=True,
	)

	def to_dict(self) -> dict[str, Any]:
		"""Dump to a JSON-ready dict using camelCase keys."""
		return self.model_dump(mode="json", by_alias=True)


class CapabilityStatus(str, Enum):
	"""Delivery status of a capability."""
	NOT_STARTED = "Not Started"
	IN_PROGRESS = "In Progress"
	AT_RISK = "At Risk"
	ON_TRACK = "On Track"
	COMPLETED = "Completed"


class RagStatus(str, Enum):
	"""Red/Amber/Green/Blue health indicator."""
	RED = "Red"
	AMBER = "Amber"
	GREEN = "Green"
	BLUE = "Blue"


class MilestoneType(str, Enum):
	TECHNICAL = "technical"
	BUSINESS = "business"


class MilestoneStatus(str, Enum):
	NOT_STARTED = "Not Started"
	IN_PROGRESS = "In Progress"
	ON_TRACK = "On Track"
	AT_RISK = "At Risk"
	OVERDUE = "Overdue"
	COMPLETED = "Completed"


class PlanType(str, Enum):
	"""Aspirational plans are targets, implementation plans are actuals."""
	ASPIRATIONAL = "aspirational"
	IMPLEMENTATION = "implementation"

	@property
	def phase_names(self) -> tuple[str, ...]:
		"""Phases a plan of this type schedules, in delivery order."""
		if self is PlanType.ASPIRATIONAL:
			return PHASE_NAMES
		return ("development", "cst", "uat")


class PlanStatus(str, Enum):
	DRAFT = "draft"
	ACTIVE = "active"
	COMPLETED = "completed"


class PhaseStatus(str, Enum):
	NOT_STARTED = "not-started"
	IN_PROGRESS = "in-progress"
	COMPLETED = "completed"
	DELAYED = "delayed"


class HistoryAction(str, Enum):
	CREATED = "created"
	UPDATED = "updated"
	APPROVED = "approved"
	STATUS_CHANGED = "status-changed"


class UserRole(str, Enum):
	ADMIN = "admin"
	MANAGER = "manager"
	USER = "user"


class NotificationType(str, Enum):
	PLAN_CREATED = "plan-created"
	PLAN_UPDATED = "plan-updated"
	PLAN_APPROVED = "plan-approved"
	PHASE_STARTED = "phase-started"
	PHASE_COMPLETED = "phase-completed"


class WorkstreamLead(TrackerModel):
	name: str = Field(default="")
	avatar: Optional[str] = Field(default=None)


class MilestoneRef(TrackerModel):
	"""
	Snapshot of a milestone taken when it is assigned to a capability.

	Not a live reference: later edits to the milestone do not show up here.
	"""
	id: str
	name: str
	date: str

	@classmethod
	def from_milestone(cls, milestone: "Milestone") -> "MilestoneRef":
		return cls(id=milestone.id, name=milestone.name, date=milestone.date)


class Capability(TrackerModel):
	"""A trackable unit of project work."""
	id: str = Field(default="", description="Unique capability identifier")
	name: str
	workstream: str
	workstream_lead: WorkstreamLead = Field(default_factory=WorkstreamLead)
	sme: str = Field(default="", description="Subject matter expert")
	ba: str = Field(default="", description="Business analyst")
	technical_milestone: Optional[MilestoneRef] = Field(default=None)
	business_milestone: Optional[MilestoneRef] = Field(default=None)
	status: CapabilityStatus = Field(default=CapabilityStatus.NOT_STARTED)
	rag: RagStatus = Field(default=RagStatus.GREEN)
	notes: Optional[str] = Field(default=None)


class Milestone(TrackerModel):
	"""A named target date, independent of any single capability."""
	id: str = Field(default="")
	name: str
	date: str = Field(description="ISO date, e.g. 2025-02-15")
	type: MilestoneType
	description: str = Field(default="")
	status: MilestoneStatus = Field(default=MilestoneStatus.NOT_STARTED)


class PlanPhase(TrackerModel):
	"""One stage of delivery within a plan."""
	start_date: str = Field(default="")
	end_date: str = Field(default="")
	status: PhaseStatus = Field(default=PhaseStatus.NOT_STARTED)
	progress: int = Field(default=0, ge=0, le=100)
	notes: Optional[str] = Field(default=None)
	assigned_to: Optional[str] = Field(default=None, description="User id")

	@property
	def has_dates(self) -> bool:
		return bool(self.start_date and self.end_date)


class PlanPhases(TrackerModel):
	"""The fixed set of named phases. Any phase may be absent."""
	requirements: Optional[PlanPhase] = Field(default=None)
	design: Optional[PlanPhase] = Field(default=None)
	development: Optional[PlanPhase] = Field(default=None)
	cst: Optional[PlanPhase] = Field(default=None)
	uat: Optional[PlanPhase] = Field(default=None)

	def get(self, name: str) -> Optional[PlanPhase]:
		if name not in PHASE_NAMES:
			raise ValueError(f"Unknown phase: {name}")
		return getattr(self, name)

	def items(self) -> list[tuple[str, PlanPhase]]:
		"""Present phases in delivery order."""
		return [(name, getattr(self, name)) for name in PHASE_NAMES if getattr(self, name) is not None]


class PlanMetadata(TrackerModel):
	created_by: str = Field(default="")
	last_updated_by: str = Field(default="")


class PlanApproval(TrackerModel):
	approved_by: str
	approved_at: str
	comments: Optional[str] = Field(default=None)


class FieldChange(TrackerModel):
	"""Before/after value of one top-level field (whole-value snapshots)."""
	model_config = ConfigDict(frozen=True)

	field: str
	old_value: Any = Field(default=None)
	new_value: Any = Field(default=None)


class PlanHistoryEntry(TrackerModel):
	"""An immutable entry in a plan's append-only history."""
	model_config = ConfigDict(frozen=True)

	id: str
	timestamp: str
	action: HistoryAction
	user_id: str
	changes: tuple[FieldChange, ...] = Field(default_factory=tuple)


class AnnotatedHistoryEntry(PlanHistoryEntry):
	"""A history entry labelled with the owning capability's name."""
	plan_name: str = Field(default="Unknown Plan")


class Plan(TrackerModel):
	"""
	A dated phase schedule for a capability.

	Plans are versioned: a revision is a new plan for the same capability
	and type with a higher version number. Updates to a plan append to its
	history rather than replacing it.
	"""
	id: str = Field(default="")
	capability_id: str
	type: PlanType
	version: int = Field(default=1, ge=1)
	created_at: str = Field(default_factory=_now)
	updated_at: str = Field(default_factory=_now)
	status: PlanStatus = Field(default=PlanStatus.DRAFT)
	phases: PlanPhases = Field(default_factory=PlanPhases)
	metadata: PlanMetadata = Field(default_factory=PlanMetadata)
	approval: Optional[PlanApproval] = Field(default=None)
	history: tuple[PlanHistoryEntry, ...] = Field(default_factory=tuple)

	def get_progress(self) -> dict:
		"""Average progress across the phases this plan's type schedules."""
		scheduled = [self.phases.get(name) for name in self.type.phase_names]
		present = [p for p in scheduled if p is not None]
		completed = len([p for p in present if p.status == PhaseStatus.COMPLETED])
		return {
			"total_phases": len(self.type.phase_names),
			"scheduled_phases": len(present),
			"completed_phases": completed,
			"percent_complete": round(sum(p.progress for p in present) / len(present), 1) if present else 0,
		}


class User(TrackerModel):
	id: str = Field(default="")
	name: str
	email: str
	role: UserRole = Field(default=UserRole.USER)
	avatar: Optional[str] = Field(default=None)


class NotificationMetadata(TrackerModel):
	plan_id: Optional[str] = Field(default=None)
	capability_id: Optional[str] = Field(default=None)
	phase: Optional[str] = Field(default=None)


class Notification(TrackerModel):
	id: str = Field(default="")
	type: NotificationType
	title: str
	message: str
	created_at: str = Field(default_factory=_now)
	read: bool = Field(default=False)
	metadata: NotificationMetadata = Field(default_factory=NotificationMetadata)


class PlanDiff(TrackerModel):
	"""Phase-level differences between two plans."""
	added: list[str] = Field(default_factory=list)
	removed: list[str] = Field(default_factory=list)
	changed: list[str] = Field(default_factory=list)

	@property
	def is_empty(self) -> bool:
		return not (self.added or self.removed or self.changed)
