"""
Plan form flow - validate phase schedules, then create or update a plan.

Validation runs before anything touches the store. Every violation is
collected so the caller can show them all at once; a plan that fails
validation is never partially saved.
"""

import logging
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from .errors import PlanSaveError, PlanValidationError
from .models import NotificationType, Plan, PlanPhase, PlanPhases, PlanStatus, PlanType
from .store import ProjectStore
from .timeline import parse_date

logger = logging.getLogger(__name__)


def _parse(value: str) -> Optional[datetime]:
	try:
		return parse_date(value)
	except ValueError:
		return None


def validate_plan_phases(plan_type: PlanType | str, phases: PlanPhases) -> dict[str, str]:
	"""
	Check a plan's phase dates.

	Returns a dict of error key -> message, empty when valid:
	- ``<phase>Start`` / ``<phase>End``: a required date is missing
	- ``<phase>Dates``: the phase ends before it starts
	- ``<phase>Sequence``: the phase starts before the previous one ends
	"""
	plan_type = PlanType(plan_type)
	names = plan_type.phase_names
	errors: dict[str, str] = {}

	for name in names:
		phase = phases.get(name) or PlanPhase()
		start = _parse(phase.start_date) if phase.start_date else None
		end = _parse(phase.end_date) if phase.end_date else None
		if start is None:
			errors[f"{name}Start"] = f"{name} start date is required"
		if end is None:
			errors[f"{name}End"] = f"{name} end date is required"
		if start and end and start > end:
			errors[f"{name}Dates"] = f"{name} end date must be after start date"

	for prev_name, name in zip(names, names[1:]):
		prev_phase = phases.get(prev_name)
		phase = phases.get(name)
		if prev_phase is None or phase is None:
			continue
		prev_end = _parse(prev_phase.end_date) if prev_phase.end_date else None
		start = _parse(phase.start_date) if phase.start_date else None
		if prev_end and start and start < prev_end:
			errors[f"{name}Sequence"] = f"{name} must start after {prev_name} ends"

	return errors


def save_plan(
	store: ProjectStore,
	capability_id: str,
	plan_type: PlanType | str,
	phases: PlanPhases | dict,
	status: PlanStatus | str = PlanStatus.DRAFT,
) -> Plan:
	"""
	Validate and save a plan for a capability.

	Updates the latest plan of this type if one exists, otherwise creates
	one. Posts a plan-created or plan-updated notification.

	Raises:
		PlanValidationError: phases fail validation (nothing saved)
		PlanSaveError: the store rejected an otherwise valid plan
	"""
	plan_type = PlanType(plan_type)
	try:
		phases = phases if isinstance(phases, PlanPhases) else PlanPhases.model_validate(phases)
	except ValidationError as e:
		raise PlanSaveError("Failed to save plan. Please try again.") from e

	errors = validate_plan_phases(plan_type, phases)
	if errors:
		logger.info(f"Plan for capability {capability_id} failed validation: {len(errors)} error(s)")
		raise PlanValidationError(errors)

	capability = store.get_capability(capability_id)
	label = capability.name if capability else capability_id
	existing = store.get_latest_plan(capability_id, plan_type)
	try:
		if existing:
			plan = store.update_plan(existing.id, {"status": PlanStatus(status), "phases": phases.model_dump()})
			notification_type = NotificationType.PLAN_UPDATED
			title = "Plan updated"
		else:
			plan = store.add_plan({
				"capability_id": capability_id,
				"type": plan_type,
				"phases": phases.model_dump(),
			})
			notification_type = NotificationType.PLAN_CREATED
			title = "Plan created"
	except (ValueError, ValidationError) as e:
		logger.warning(f"Failed to save plan for capability {capability_id}: {e}")
		raise PlanSaveError("Failed to save plan. Please try again.") from e

	store.add_notification({
		"type": notification_type,
		"title": title,
		"message": f"{plan_type.value.capitalize()} plan for {label} saved (version {plan.version})",
		"metadata": {"plan_id": plan.id, "capability_id": capability_id},
	})
	return plan
