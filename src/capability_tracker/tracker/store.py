"""
Project Store - in-memory state container for the tracker.

Features:
- CRUD operations for capabilities, milestones, plans and users
- Append-only plan history with field-level before/after values
- Plan versioning and latest-version queries
- Derived selectors for dashboards and timelines

Every record is replaced with a fresh model instance when it changes;
callers get copies and never mutate stored records in place. Nothing is
persisted: state lives as long as the store object.
"""

import logging
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel

from .compare import compare_phases
from .models import (
	PHASE_NAMES,
	AnnotatedHistoryEntry,
	Capability,
	CapabilityStatus,
	FieldChange,
	HistoryAction,
	Milestone,
	MilestoneRef,
	MilestoneType,
	Notification,
	Plan,
	PlanApproval,
	PlanDiff,
	PlanHistoryEntry,
	PlanMetadata,
	PlanPhase,
	PlanStatus,
	PlanType,
	RagStatus,
	User,
)
from .timeline import parse_date

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Fields maintained by the store itself
PROTECTED_PLAN_FIELDS = {"id", "history", "created_at"}


def _new_id() -> str:
	return str(uuid.uuid4())


def _field_name(model_cls: type[BaseModel], key: str) -> str:
	"""Resolve a field name or its camelCase alias to the field name."""
	if key in model_cls.model_fields:
		return key
	for name, info in model_cls.model_fields.items():
		if info.alias == key:
			return name
	raise ValueError(f"Unknown {model_cls.__name__} field: {key}")


def _normalize(model_cls: type[BaseModel], data: dict) -> dict:
	return {_field_name(model_cls, key): value for key, value in data.items()}


def _merge(record: ModelT, updates: dict) -> ModelT:
	"""Validate a record with updates applied on top of its current values."""
	merged = record.model_dump()
	merged.update(_normalize(type(record), updates))
	return type(record).model_validate(merged)


def _snapshot(value: Any) -> Any:
	"""Whole-value copy suitable for a history entry."""
	if isinstance(value, BaseModel):
		return value.model_dump(mode="json", by_alias=True)
	if isinstance(value, Enum):
		return value.value
	return value


def _parse_date(value: str) -> Optional[datetime]:
	if not value:
		return None
	try:
		return parse_date(value)
	except ValueError:
		return None


class ProjectStore:
	"""
	In-memory state container for capabilities, milestones and plans.

	Usage:
		store = ProjectStore(current_user="1")

		cap = store.add_capability({"name": "Portal", "workstream": "Backend Services"})
		plan = store.add_plan({"capability_id": cap.id, "type": "aspirational"})

		store.update_plan_phase(plan.id, "development", {"progress": 50})
		history = store.get_plan_history(plan.id)
	"""

	def __init__(
		self,
		capabilities: Iterable[Capability] = (),
		milestones: Iterable[Milestone] = (),
		plans: Iterable[Plan] = (),
		users: Iterable[User] = (),
		notifications: Iterable[Notification] = (),
		current_user: str = "1",
		clock: Optional[Callable[[], datetime]] = None,
	):
		self.capabilities: list[Capability] = list(capabilities)
		self.milestones: list[Milestone] = list(milestones)
		self.plans: list[Plan] = list(plans)
		self.users: list[User] = list(users)
		self.notifications: list[Notification] = list(notifications)
		self.current_user = current_user
		self._clock = clock or datetime.now

	@classmethod
	def from_seed(cls, data: dict, clock: Optional[Callable[[], datetime]] = None) -> "ProjectStore":
		"""Build a store from a seed mapping (camelCase or snake_case keys)."""
		return cls(
			capabilities=[Capability.model_validate(c) for c in data.get("capabilities", [])],
			milestones=[Milestone.model_validate(m) for m in data.get("milestones", [])],
			plans=[Plan.model_validate(p) for p in data.get("plans", [])],
			users=[User.model_validate(u) for u in data.get("users", [])],
			notifications=[Notification.model_validate(n) for n in data.get("notifications", [])],
			current_user=data.get("currentUser", data.get("current_user", "1")),
			clock=clock,
		)

	def current_time(self) -> datetime:
		return self._clock()

	def now(self) -> str:
		return self.current_time().isoformat()

	# -- generic collection helpers --

	@staticmethod
	def _find(records: list[ModelT], record_id: str) -> Optional[ModelT]:
		for record in records:
			if record.id == record_id:
				return record
		return None

	@staticmethod
	def _replace(records: list[ModelT], updated: ModelT) -> None:
		for i, record in enumerate(records):
			if record.id == updated.id:
				records[i] = updated
				return

	def _update_record(self, records: list[ModelT], record_id: str, updates: dict) -> Optional[ModelT]:
		record = self._find(records, record_id)
		if record is None:
			logger.debug(f"Update skipped, no record with id {record_id}")
			return None
		updates = {k: v for k, v in updates.items() if k != "id"}
		updated = _merge(record, updates)
		self._replace(records, updated)
		return updated

	@staticmethod
	def _delete_record(records: list[ModelT], record_id: str) -> tuple[list[ModelT], bool]:
		remaining = [r for r in records if r.id != record_id]
		return remaining, len(remaining) < len(records)

	@staticmethod
	def _log_delete(kind: str, record_id: str, removed: bool) -> None:
		if removed:
			logger.info(f"Deleted {kind} {record_id}")
		else:
			logger.debug(f"Delete skipped, no {kind} with id {record_id}")

	# -- capabilities --

	def add_capability(self, data: dict) -> Capability:
		"""Create a capability with a fresh id. Names need not be unique."""
		capability = Capability.model_validate({**_normalize(Capability, data), "id": _new_id()})
		self.capabilities.append(capability)
		logger.info(f"Created capability {capability.id} ({capability.name})")
		return capability

	def update_capability(self, capability_id: str, updates: dict) -> Optional[Capability]:
		updated = self._update_record(self.capabilities, capability_id, updates)
		if updated:
			logger.info(f"Updated capability {capability_id}")
		return updated

	def delete_capability(self, capability_id: str) -> None:
		self.capabilities, removed = self._delete_record(self.capabilities, capability_id)
		self._log_delete("capability", capability_id, removed)

	def get_capability(self, capability_id: str) -> Optional[Capability]:
		return self._find(self.capabilities, capability_id)

	def assign_milestone(self, capability_id: str, milestone_id: str) -> Optional[Capability]:
		"""
		Copy a milestone onto a capability.

		The milestone's type picks the technical or business slot. The
		capability keeps the copy even if the milestone is later edited or
		deleted.
		"""
		milestone = self.get_milestone(milestone_id)
		if milestone is None or self.get_capability(capability_id) is None:
			return None
		slot = "technical_milestone" if milestone.type == MilestoneType.TECHNICAL else "business_milestone"
		return self.update_capability(
			capability_id, {slot: MilestoneRef.from_milestone(milestone).model_dump()}
		)

	def clear_milestone(self, capability_id: str, milestone_type: MilestoneType | str) -> Optional[Capability]:
		slot = "technical_milestone" if MilestoneType(milestone_type) == MilestoneType.TECHNICAL else "business_milestone"
		return self.update_capability(capability_id, {slot: None})

	# -- milestones --

	def add_milestone(self, data: dict) -> Milestone:
		milestone = Milestone.model_validate({**_normalize(Milestone, data), "id": _new_id()})
		self.milestones.append(milestone)
		logger.info(f"Created milestone {milestone.id} ({milestone.name})")
		return milestone

	def update_milestone(self, milestone_id: str, updates: dict) -> Optional[Milestone]:
		updated = self._update_record(self.milestones, milestone_id, updates)
		if updated:
			logger.info(f"Updated milestone {milestone_id}")
		return updated

	def delete_milestone(self, milestone_id: str) -> None:
		self.milestones, removed = self._delete_record(self.milestones, milestone_id)
		self._log_delete("milestone", milestone_id, removed)

	def get_milestone(self, milestone_id: str) -> Optional[Milestone]:
		return self._find(self.milestones, milestone_id)

	# -- users --

	def add_user(self, data: dict) -> User:
		user = User.model_validate({**_normalize(User, data), "id": _new_id()})
		self.users.append(user)
		logger.info(f"Created user {user.id} ({user.name})")
		return user

	def update_user(self, user_id: str, updates: dict) -> Optional[User]:
		return self._update_record(self.users, user_id, updates)

	def delete_user(self, user_id: str) -> None:
		self.users, removed = self._delete_record(self.users, user_id)
		self._log_delete("user", user_id, removed)

	def get_user(self, user_id: str) -> Optional[User]:
		return self._find(self.users, user_id)

	# -- plans --

	def add_plan(self, data: dict) -> Plan:
		"""
		Create a plan.

		The store owns id, timestamps, version, status, history and
		metadata; any values passed for them are replaced.
		"""
		now = self.now()
		plan = Plan.model_validate({
			**_normalize(Plan, data),
			"id": _new_id(),
			"created_at": now,
			"updated_at": now,
			"version": 1,
			"status": PlanStatus.DRAFT,
			"history": [],
			"metadata": PlanMetadata(created_by=self.current_user, last_updated_by=self.current_user),
		})
		self.plans.append(plan)
		logger.info(f"Created {plan.type.value} plan {plan.id} for capability {plan.capability_id}")
		return plan

	def get_plan(self, plan_id: str) -> Optional[Plan]:
		return self._find(self.plans, plan_id)

	def _append_history(
		self,
		plan: Plan,
		action: HistoryAction,
		user_id: str,
		changes: list[FieldChange],
	) -> tuple[PlanHistoryEntry, ...]:
		entry = PlanHistoryEntry(
			id=_new_id(),
			timestamp=self.now(),
			action=action,
			user_id=user_id,
			changes=tuple(changes),
		)
		return plan.history + (entry,)

	def update_plan(self, plan_id: str, updates: dict) -> Optional[Plan]:
		"""
		Merge a partial update into a plan and record it in the history.

		One history entry is appended per call. Its changes list every
		top-level key in ``updates``, as passed, with the whole old and new
		values as stored; nested objects are not diffed.

		Raises:
			ValueError: unknown or store-owned field, or a version decrement
		"""
		plan = self.get_plan(plan_id)
		if plan is None:
			logger.debug(f"Update skipped, no plan with id {plan_id}")
			return None

		normalized = _normalize(Plan, updates)
		protected = PROTECTED_PLAN_FIELDS & normalized.keys()
		if protected:
			raise ValueError(f"Cannot update store-owned plan fields: {', '.join(sorted(protected))}")
		if "version" in normalized and int(normalized["version"]) < plan.version:
			raise ValueError(
				f"Plan version cannot decrease: {plan.version} -> {normalized['version']}"
			)

		updated = _merge(plan, normalized)
		updated = updated.model_copy(update={
			"updated_at": self.now(),
			"metadata": updated.metadata.model_copy(update={"last_updated_by": self.current_user}),
		})
		changes = [
			FieldChange(
				field=key,
				old_value=_snapshot(getattr(plan, _field_name(Plan, key))),
				new_value=_snapshot(getattr(updated, _field_name(Plan, key))),
			)
			for key in updates
		]
		updated = updated.model_copy(update={
			"history": self._append_history(plan, HistoryAction.UPDATED, self.current_user, changes),
		})
		self._replace(self.plans, updated)
		logger.info(f"Updated plan {plan_id} ({', '.join(normalized)})")
		return updated

	def revise_plan(self, plan_id: str) -> Optional[Plan]:
		"""
		Start a new version of a plan.

		The revision is a new draft plan for the same capability and type,
		carrying the same phases, numbered one past the highest existing
		version for that capability and type.
		"""
		plan = self.get_plan(plan_id)
		if plan is None:
			return None
		latest = self.get_latest_plan(plan.capability_id, plan.type)
		revision = self.add_plan({
			"capability_id": plan.capability_id,
			"type": plan.type,
			"phases": plan.phases.model_dump(),
		})
		revision = revision.model_copy(update={"version": latest.version + 1})
		self._replace(self.plans, revision)
		logger.info(f"Revised plan {plan_id} as {revision.id} (version {revision.version})")
		return revision

	def delete_plan(self, plan_id: str) -> None:
		self.plans, removed = self._delete_record(self.plans, plan_id)
		self._log_delete("plan", plan_id, removed)

	def approve_plan(self, plan_id: str, approver_id: str, comments: Optional[str] = None) -> Optional[Plan]:
		"""Mark a plan active and record the approval."""
		plan = self.get_plan(plan_id)
		if plan is None:
			return None

		now = self.now()
		change = FieldChange(field="status", old_value=plan.status.value, new_value=PlanStatus.ACTIVE.value)
		updated = plan.model_copy(update={
			"status": PlanStatus.ACTIVE,
			"updated_at": now,
			"approval": PlanApproval(approved_by=approver_id, approved_at=now, comments=comments),
			"history": self._append_history(plan, HistoryAction.APPROVED, approver_id, [change]),
		})
		self._replace(self.plans, updated)
		logger.info(f"Plan {plan_id} approved by {approver_id}")
		return updated

	def update_plan_phase(self, plan_id: str, phase_name: str, updates: dict) -> Optional[Plan]:
		"""
		Merge updates into one phase of a plan.

		Other phases are untouched. The history entry is scoped to
		``phases.<phase_name>`` and holds the whole phase before and after.
		"""
		if phase_name not in PHASE_NAMES:
			raise ValueError(f"Unknown phase: {phase_name}")
		plan = self.get_plan(plan_id)
		if plan is None:
			return None

		old_phase = plan.phases.get(phase_name)
		new_phase = _merge(old_phase or PlanPhase(), updates)
		change = FieldChange(
			field=f"phases.{phase_name}",
			old_value=_snapshot(old_phase),
			new_value=_snapshot(new_phase),
		)
		updated = plan.model_copy(update={
			"updated_at": self.now(),
			"phases": plan.phases.model_copy(update={phase_name: new_phase}),
			"history": self._append_history(plan, HistoryAction.UPDATED, self.current_user, [change]),
		})
		self._replace(self.plans, updated)
		logger.info(f"Updated phase {phase_name} of plan {plan_id}")
		return updated

	# -- plan queries --

	def get_capability_plans(self, capability_id: str) -> list[Plan]:
		return [p for p in self.plans if p.capability_id == capability_id]

	def get_latest_plan(self, capability_id: str, plan_type: PlanType | str) -> Optional[Plan]:
		"""
		Highest-version plan of a type for a capability.

		Ties on version go to the most recently created plan, then to the
		one later in the collection.
		"""
		plan_type = PlanType(plan_type)
		candidates = [
			(p.version, p.created_at, i, p)
			for i, p in enumerate(self.plans)
			if p.capability_id == capability_id and p.type == plan_type
		]
		if not candidates:
			return None
		return max(candidates, key=lambda c: c[:3])[3]

	def _plan_name(self, plan: Plan) -> str:
		capability = self.get_capability(plan.capability_id)
		return capability.name if capability else "Unknown Plan"

	def _annotate(self, plan: Plan) -> list[AnnotatedHistoryEntry]:
		name = self._plan_name(plan)
		return [AnnotatedHistoryEntry(**entry.model_dump(), plan_name=name) for entry in plan.history]

	def get_plan_history(self, plan_id: str) -> list[AnnotatedHistoryEntry]:
		plan = self.get_plan(plan_id)
		if plan is None:
			return []
		return self._annotate(plan)

	def compare_plans(self, plan_id1: str, plan_id2: str) -> PlanDiff:
		"""Phase-level diff of two plans; empty when either is missing."""
		plan1 = self.get_plan(plan_id1)
		plan2 = self.get_plan(plan_id2)
		if plan1 is None or plan2 is None:
			return PlanDiff()
		return compare_phases(plan1.phases, plan2.phases)

	# -- notifications --

	def add_notification(self, data: dict) -> Notification:
		notification = Notification.model_validate({
			**_normalize(Notification, data),
			"id": _new_id(),
			"created_at": self.now(),
			"read": False,
		})
		self.notifications.insert(0, notification)
		return notification

	def mark_notification_read(self, notification_id: str) -> Optional[Notification]:
		return self._update_record(self.notifications, notification_id, {"read": True})

	def mark_all_notifications_read(self) -> None:
		self.notifications = [n.model_copy(update={"read": True}) for n in self.notifications]

	def get_unread_notifications(self) -> list[Notification]:
		return [n for n in self.notifications if not n.read]

	# -- selectors --

	def search_capabilities(
		self,
		search: str = "",
		workstream: Optional[str] = None,
		status: Optional[str] = None,
		rag: Optional[str] = None,
	) -> list[Capability]:
		"""
		Filter capabilities.

		``search`` is a case-insensitive substring match over name,
		workstream and lead name. The other filters match exactly; None or
		"all" disables a filter.
		"""
		term = (search or "").lower()

		def matches(cap: Capability) -> bool:
			if term and not (
				term in cap.name.lower()
				or term in cap.workstream.lower()
				or term in cap.workstream_lead.name.lower()
			):
				return False
			if workstream not in (None, "all") and cap.workstream != workstream:
				return False
			if status not in (None, "all") and cap.status != CapabilityStatus(status):
				return False
			if rag not in (None, "all") and cap.rag != RagStatus(rag):
				return False
			return True

		return [c for c in self.capabilities if matches(c)]

	def get_workstreams(self) -> list[str]:
		return sorted({c.workstream for c in self.capabilities})

	def get_capabilities_stats(self, workstream: Optional[str] = None) -> dict:
		capabilities = self.search_capabilities(workstream=workstream)
		return {
			"total": len(capabilities),
			"in_progress": len([c for c in capabilities if c.status == CapabilityStatus.IN_PROGRESS]),
			"completed": len([c for c in capabilities if c.status == CapabilityStatus.COMPLETED]),
			"at_risk": len([c for c in capabilities if c.status == CapabilityStatus.AT_RISK]),
			"overdue": len([c for c in capabilities if c.rag == RagStatus.RED]),
		}

	def get_recent_activity(self) -> list[AnnotatedHistoryEntry]:
		"""Every plan's history, newest first."""
		entries = [entry for plan in self.plans for entry in self._annotate(plan)]
		return sorted(entries, key=lambda e: e.timestamp, reverse=True)

	def get_upcoming_deliveries(self, today: Optional[date] = None) -> list[dict]:
		"""Phases of known capabilities that end today or later, soonest first."""
		today = today or self.current_time().date()
		deliveries = []
		for plan in self.plans:
			capability = self.get_capability(plan.capability_id)
			if capability is None:
				continue
			for phase_name, phase in plan.phases.items():
				end = _parse_date(phase.end_date)
				if end is None or end.date() < today:
					continue
				deliveries.append({
					"id": f"{plan.id}-{phase_name}",
					"capability": capability.name,
					"phase": phase_name,
					"due_date": phase.end_date,
					"assigned_to": phase.assigned_to or "",
				})
		return sorted(deliveries, key=lambda d: d["due_date"])

	def get_gantt_data(self) -> list[dict]:
		data = []
		for plan in self.plans:
			capability = self.get_capability(plan.capability_id)
			if capability is None:
				continue
			data.append({
				"id": plan.id,
				"capability": capability.name,
				"phases": [
					{
						"phase": name,
						"start": phase.start_date,
						"end": phase.end_date,
						"progress": phase.progress,
						"status": phase.status.value,
					}
					for name, phase in plan.phases.items()
				],
			})
		return data

	def get_assigned_phases(self, user_id: str) -> list[dict]:
		assigned = []
		for plan in self.plans:
			capability = self.get_capability(plan.capability_id)
			if capability is None:
				continue
			for name, phase in plan.phases.items():
				if phase.assigned_to != user_id:
					continue
				assigned.append({
					"plan_id": plan.id,
					"capability_id": capability.id,
					"phase": name,
					"start_date": phase.start_date,
					"end_date": phase.end_date,
					"status": phase.status.value,
				})
		return assigned

	def get_usage_count(self, milestone_id: str) -> int:
		"""Capabilities holding a snapshot of this milestone in either slot."""
		return len([
			c for c in self.capabilities
			if (c.technical_milestone and c.technical_milestone.id == milestone_id)
			or (c.business_milestone and c.business_milestone.id == milestone_id)
		])
