"""
Plan tools - save, version, approve and compare capability plans.

Plans are created through ``save_plan``, which validates the phase
schedule first. Validation failures come back as an error with the
per-field messages under ``errors``.
"""

from mcp.server.fastmcp import FastMCP

from ..config import Config
from ..tracker import planning
from ..tracker.errors import PlanSaveError, PlanValidationError
from ..tracker.exports import export_plans_csv, export_plans_json
from ..tracker.store import ProjectStore
from ..tracker.timeline import phase_bars, timeline_headers, timeline_window
from .utils import ToolInputError, dump, error, parse_json_object


def register_plan_tools(mcp: FastMCP, config: Config, store: ProjectStore) -> None:
	"""Register plan tools."""

	@mcp.tool()
	async def save_plan(capability_id: str, plan_type: str, phases: str, status: str = "draft") -> str:
		"""
		Validate and save a plan for a capability.

		Updates the latest plan of this type if there is one, otherwise
		creates version 1. Every scheduled phase needs a start and end date,
		and each phase must start after the previous one ends.

		Args:
			capability_id: The capability ID
			plan_type: aspirational (requirements, design, development, cst, uat)
				or implementation (development, cst, uat)
			phases: JSON object keyed by phase, e.g.
				'{"development": {"startDate": "2025-01-01", "endDate": "2025-02-01"}}'
			status: draft, active, or completed
		"""
		try:
			plan = planning.save_plan(store, capability_id, plan_type, parse_json_object(phases, "phases"), status)
		except PlanValidationError as e:
			return error(str(e), errors=e.errors)
		except (PlanSaveError, ToolInputError, ValueError) as e:
			return error(str(e))
		return dump({"success": True, "plan": plan.to_dict()})

	@mcp.tool()
	async def get_plan(plan_id: str) -> str:
		"""
		Get a plan with its progress summary.

		Args:
			plan_id: The plan ID
		"""
		plan = store.get_plan(plan_id)
		if not plan:
			return error(f"Plan not found: {plan_id}")
		return dump({"plan": plan.to_dict(), "progress": plan.get_progress()})

	@mcp.tool()
	async def list_capability_plans(capability_id: str) -> str:
		"""
		List every plan (all types and versions) for a capability.

		Args:
			capability_id: The capability ID
		"""
		plans = store.get_capability_plans(capability_id)
		return dump({"plans": [p.to_dict() for p in plans], "count": len(plans)})

	@mcp.tool()
	async def get_latest_plan(capability_id: str, plan_type: str) -> str:
		"""
		Get the highest-version plan of a type for a capability.

		Args:
			capability_id: The capability ID
			plan_type: aspirational or implementation
		"""
		try:
			plan = store.get_latest_plan(capability_id, plan_type)
		except ValueError as e:
			return error(str(e))
		return dump({"plan": plan.to_dict() if plan else None})

	@mcp.tool()
	async def update_plan(plan_id: str, updates: str) -> str:
		"""
		Merge top-level field updates into a plan and record them in its history.

		Args:
			plan_id: The plan ID
			updates: JSON object of fields, e.g. '{"status": "active"}'
		"""
		try:
			plan = store.update_plan(plan_id, parse_json_object(updates))
		except (ToolInputError, ValueError) as e:
			return error(str(e))
		if not plan:
			return error(f"Plan not found: {plan_id}")
		return dump({"success": True, "plan": plan.to_dict()})

	@mcp.tool()
	async def update_plan_phase(plan_id: str, phase: str, updates: str) -> str:
		"""
		Update one phase of a plan, leaving the others untouched.

		Args:
			plan_id: The plan ID
			phase: requirements, design, development, cst, or uat
			updates: JSON object of phase fields, e.g. '{"progress": 50, "status": "in-progress"}'
		"""
		try:
			plan = store.update_plan_phase(plan_id, phase, parse_json_object(updates))
		except (ToolInputError, ValueError) as e:
			return error(str(e))
		if not plan:
			return error(f"Plan not found: {plan_id}")
		return dump({"success": True, "plan": plan.to_dict()})

	@mcp.tool()
	async def approve_plan(plan_id: str, comments: str = "") -> str:
		"""
		Approve a plan as the current user. The plan becomes active.

		Args:
			plan_id: The plan ID
			comments: Optional approval comments
		"""
		plan = store.approve_plan(plan_id, store.current_user, comments or None)
		if not plan:
			return error(f"Plan not found: {plan_id}")
		return dump({"success": True, "plan": plan.to_dict()})

	@mcp.tool()
	async def revise_plan(plan_id: str) -> str:
		"""
		Start a new draft version of a plan with the same phases.

		Args:
			plan_id: The plan to revise
		"""
		plan = store.revise_plan(plan_id)
		if not plan:
			return error(f"Plan not found: {plan_id}")
		return dump({"success": True, "plan": plan.to_dict()})

	@mcp.tool()
	async def delete_plan(plan_id: str) -> str:
		"""
		Delete a plan. Deleting an unknown ID is not an error.

		Args:
			plan_id: The plan ID
		"""
		store.delete_plan(plan_id)
		return dump({"success": True, "plan_id": plan_id})

	@mcp.tool()
	async def get_plan_history(plan_id: str) -> str:
		"""
		Get a plan's history, oldest first, labelled with the capability name.

		Args:
			plan_id: The plan ID
		"""
		entries = store.get_plan_history(plan_id)
		return dump({"history": [e.to_dict() for e in entries], "count": len(entries)})

	@mcp.tool()
	async def compare_plans(plan_id1: str, plan_id2: str) -> str:
		"""
		Compare the phases of two plans.

		Lists phases only in the second plan (added), only in the first
		(removed), and in both with different dates or status (changed).

		Args:
			plan_id1: The baseline plan ID
			plan_id2: The plan to compare against it
		"""
		return dump(store.compare_plans(plan_id1, plan_id2).to_dict())

	@mcp.tool()
	async def get_timeline(granularity: str = "") -> str:
		"""
		Lay out every plan on a shared timeline.

		Bar offsets are percentages of the window and may fall outside 0-100.

		Args:
			granularity: weeks, months, or quarters (defaults to configured view)
		"""
		try:
			window = timeline_window(store.plans, store.current_time())
			headers = timeline_headers(window, granularity or config.timeline_view)
		except ValueError as e:
			return error(str(e))
		rows = []
		for plan in store.plans:
			capability = store.get_capability(plan.capability_id)
			rows.append({
				"planId": plan.id,
				"capability": capability.name if capability else "Unknown Plan",
				"type": plan.type.value,
				"version": plan.version,
				"bars": [
					{"phase": b.phase, "label": b.label, "left": round(b.left, 2), "width": round(b.width, 2)}
					for b in phase_bars(plan, window)
				],
			})
		return dump({
			"window": {"start": window.start.isoformat(), "end": window.end.isoformat()},
			"headers": [
				{"label": h.label, "sublabel": h.sublabel, "isCurrent": h.is_current}
				for h in headers
			],
			"rows": rows,
		})

	@mcp.tool()
	async def export_plans(format: str = "json") -> str:
		"""
		Export the latest aspirational and implementation plan per capability.

		Args:
			format: json or csv
		"""
		if format == "json":
			return export_plans_json(store)
		if format == "csv":
			return export_plans_csv(store)
		return error(f"Unsupported export format: {format}")
