"""Milestone management tools."""

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from ..config import Config
from ..tracker.exports import export_milestones_csv
from ..tracker.models import MilestoneType
from ..tracker.store import ProjectStore
from .utils import ToolInputError, dump, error, parse_json_object


def register_milestone_tools(mcp: FastMCP, config: Config, store: ProjectStore) -> None:
	"""Register milestone tools."""

	@mcp.tool()
	async def list_milestones(search: str = "", milestone_type: str = "all") -> str:
		"""
		List milestones with how many capabilities carry each one.

		Args:
			search: Case-insensitive match on name or description
			milestone_type: technical, business, or "all"
		"""
		term = search.lower()
		milestones = [
			m for m in store.milestones
			if (not term or term in m.name.lower() or term in m.description.lower())
			and (milestone_type == "all" or m.type.value == milestone_type)
		]
		return dump({
			"milestones": [
				{**m.to_dict(), "usageCount": store.get_usage_count(m.id)}
				for m in milestones
			],
			"count": len(milestones),
		})

	@mcp.tool()
	async def create_milestone(
		name: str,
		date: str,
		milestone_type: str,
		description: str = "",
		status: str = "Not Started",
	) -> str:
		"""
		Create a milestone.

		Args:
			name: Milestone name
			date: ISO date (YYYY-MM-DD)
			milestone_type: technical or business
			description: What the milestone marks
			status: Not Started, In Progress, On Track, At Risk, Overdue, Completed
		"""
		try:
			milestone = store.add_milestone({
				"name": name,
				"date": date,
				"type": MilestoneType(milestone_type),
				"description": description,
				"status": status,
			})
		except (ValueError, ValidationError) as e:
			return error(str(e))
		return dump({"success": True, "milestone": milestone.to_dict()})

	@mcp.tool()
	async def update_milestone(milestone_id: str, updates: str) -> str:
		"""
		Update fields of a milestone.

		Capabilities that already carry this milestone keep their old copy.

		Args:
			milestone_id: The milestone ID
			updates: JSON object of fields, e.g. '{"date": "2025-03-01"}'
		"""
		try:
			milestone = store.update_milestone(milestone_id, parse_json_object(updates))
		except (ToolInputError, ValueError) as e:
			return error(str(e))
		if not milestone:
			return error(f"Milestone not found: {milestone_id}")
		return dump({"success": True, "milestone": milestone.to_dict()})

	@mcp.tool()
	async def delete_milestone(milestone_id: str) -> str:
		"""
		Delete a milestone. Copies held by capabilities are kept.

		Args:
			milestone_id: The milestone ID
		"""
		store.delete_milestone(milestone_id)
		return dump({"success": True, "milestone_id": milestone_id})

	@mcp.tool()
	async def export_milestones() -> str:
		"""Export all milestones, with usage counts, as CSV text."""
		return export_milestones_csv(store)
