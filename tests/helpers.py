"""Shared test fixtures and helpers for capability-tracker tests."""

from datetime import datetime, timedelta
from typing import Callable
from unittest.mock import MagicMock

from capability_tracker.tracker.models import Capability, Plan, PlanPhase, PlanPhases, PlanType
from capability_tracker.tracker.store import ProjectStore


class FakeClock:
	"""Deterministic clock: each call advances by one second."""

	def __init__(self, start: datetime = datetime(2025, 1, 15, 9, 0, 0)):
		self.current = start

	def __call__(self) -> datetime:
		value = self.current
		self.current += timedelta(seconds=1)
		return value


def make_store(clock: Callable[[], datetime] | None = None) -> ProjectStore:
	"""Create an empty store with two users and a deterministic clock."""
	store = ProjectStore(current_user="1", clock=clock or FakeClock())
	store.add_user({"name": "Sarah Chen", "email": "sarah.chen@example.com", "role": "manager"})
	store.add_user({"name": "David Rodriguez", "email": "david.rodriguez@example.com"})
	return store


def add_capability(store: ProjectStore, name: str = "Customer Portal", workstream: str = "Frontend Development", **extra) -> Capability:
	return store.add_capability({
		"name": name,
		"workstream": workstream,
		"workstream_lead": {"name": "Sarah Chen"},
		**extra,
	})


def aspirational_phases() -> PlanPhases:
	"""A valid, correctly sequenced five-phase schedule."""
	return PlanPhases(
		requirements=PlanPhase(start_date="2025-01-01", end_date="2025-01-31"),
		design=PlanPhase(start_date="2025-02-01", end_date="2025-02-28"),
		development=PlanPhase(start_date="2025-03-01", end_date="2025-04-30"),
		cst=PlanPhase(start_date="2025-05-01", end_date="2025-05-31"),
		uat=PlanPhase(start_date="2025-06-01", end_date="2025-06-30"),
	)


def implementation_phases() -> PlanPhases:
	return PlanPhases(
		development=PlanPhase(start_date="2025-03-10", end_date="2025-05-15"),
		cst=PlanPhase(start_date="2025-05-16", end_date="2025-06-10"),
		uat=PlanPhase(start_date="2025-06-11", end_date="2025-07-05"),
	)


def add_plan(store: ProjectStore, capability_id: str, plan_type: PlanType = PlanType.ASPIRATIONAL, phases: PlanPhases | None = None) -> Plan:
	if phases is None:
		phases = aspirational_phases() if plan_type == PlanType.ASPIRATIONAL else implementation_phases()
	return store.add_plan({
		"capability_id": capability_id,
		"type": plan_type,
		"phases": phases.model_dump(),
	})


def capture_tools(config: MagicMock, store: ProjectStore, register_fn: Callable) -> dict:
	"""Register tools on a mock MCP and return the captured tool functions.

	Args:
		config: Mock config object to pass to the registration function
		store: Store the tools operate on
		register_fn: The registration function (e.g., register_plan_tools)

	Returns:
		Dict mapping tool name to the tool function
	"""
	captured = {}

	class MockMCP:
		def tool(self):
			def decorator(fn):
				captured[fn.__name__] = fn
				return fn
			return decorator

	register_fn(MockMCP(), config, store)
	return captured
