"""Tests for phase-level plan comparison."""

from capability_tracker.tracker.compare import compare_phases
from capability_tracker.tracker.models import PhaseStatus, PlanPhase, PlanPhases

from .helpers import aspirational_phases


def test_identical_phases():
	diff = compare_phases(aspirational_phases(), aspirational_phases())
	assert diff.is_empty


def test_added_and_removed():
	first = PlanPhases(requirements=PlanPhase(start_date="2025-01-01", end_date="2025-01-31"))
	second = PlanPhases(uat=PlanPhase(start_date="2025-06-01", end_date="2025-06-30"))
	diff = compare_phases(first, second)
	assert diff.added == ["uat"]
	assert diff.removed == ["requirements"]
	assert diff.changed == []


def test_changed_fields_use_wire_names():
	first = aspirational_phases()
	second = first.model_copy(update={
		"design": PlanPhase(start_date="2025-02-03", end_date="2025-03-07", status=PhaseStatus.DELAYED),
	})
	diff = compare_phases(first, second)
	assert diff.changed == ["design.startDate", "design.endDate", "design.status"]


def test_progress_and_notes_are_ignored():
	first = aspirational_phases()
	second = first.model_copy(update={
		"cst": PlanPhase(start_date="2025-05-01", end_date="2025-05-31", progress=80, notes="halfway", assigned_to="2"),
	})
	assert compare_phases(first, second).is_empty


def test_results_follow_phase_order():
	first = PlanPhases()
	second = aspirational_phases()
	assert compare_phases(first, second).added == ["requirements", "design", "development", "cst", "uat"]
