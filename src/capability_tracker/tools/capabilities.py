"""Capability management tools."""

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from ..config import Config
from ..tracker.errors import CapabilityImportError
from ..tracker.exports import export_capabilities_csv
from ..tracker.imports import import_capabilities_csv
from ..tracker.store import ProjectStore
from .utils import ToolInputError, dump, error, parse_json_object


def register_capability_tools(mcp: FastMCP, config: Config, store: ProjectStore) -> None:
	"""Register capability tools."""

	@mcp.tool()
	async def list_capabilities(
		search: str = "",
		workstream: str = "all",
		status: str = "all",
		rag: str = "all",
	) -> str:
		"""
		List capabilities, optionally filtered.

		Args:
			search: Case-insensitive match on name, workstream or lead
			workstream: Exact workstream name, or "all"
			status: Not Started, In Progress, At Risk, On Track, Completed, or "all"
			rag: Red, Amber, Green, Blue, or "all"
		"""
		try:
			capabilities = store.search_capabilities(search, workstream, status, rag)
		except ValueError as e:
			return error(str(e))
		return dump({
			"capabilities": [c.to_dict() for c in capabilities],
			"showing": len(capabilities),
			"total": len(store.capabilities),
		})

	@mcp.tool()
	async def get_capability(capability_id: str) -> str:
		"""
		Get a capability and its plans.

		Args:
			capability_id: The capability ID
		"""
		capability = store.get_capability(capability_id)
		if not capability:
			return error(f"Capability not found: {capability_id}")
		return dump({
			"capability": capability.to_dict(),
			"plans": [p.to_dict() for p in store.get_capability_plans(capability_id)],
		})

	@mcp.tool()
	async def create_capability(
		name: str,
		workstream: str,
		lead: str = "",
		sme: str = "",
		ba: str = "",
		status: str = "Not Started",
		rag: str = "Green",
		notes: str = "",
	) -> str:
		"""
		Create a capability.

		Args:
			name: Capability name
			workstream: Workstream (e.g., "Backend Services")
			lead: Workstream lead's name
			sme: Subject matter expert
			ba: Business analyst
			status: Not Started, In Progress, At Risk, On Track, Completed
			rag: Red, Amber, Green, Blue
			notes: Free-text notes
		"""
		try:
			capability = store.add_capability({
				"name": name,
				"workstream": workstream,
				"workstream_lead": {"name": lead},
				"sme": sme,
				"ba": ba,
				"status": status,
				"rag": rag,
				"notes": notes or None,
			})
		except ValidationError as e:
			return error(str(e))
		return dump({"success": True, "capability": capability.to_dict()})

	@mcp.tool()
	async def update_capability(capability_id: str, updates: str) -> str:
		"""
		Update fields of a capability.

		Args:
			capability_id: The capability ID
			updates: JSON object of fields, e.g. '{"rag": "Red", "status": "At Risk"}'
		"""
		try:
			capability = store.update_capability(capability_id, parse_json_object(updates))
		except (ToolInputError, ValueError) as e:
			return error(str(e))
		if not capability:
			return error(f"Capability not found: {capability_id}")
		return dump({"success": True, "capability": capability.to_dict()})

	@mcp.tool()
	async def delete_capability(capability_id: str) -> str:
		"""
		Delete a capability. Deleting an unknown ID is not an error.

		Args:
			capability_id: The capability ID
		"""
		store.delete_capability(capability_id)
		return dump({"success": True, "capability_id": capability_id})

	@mcp.tool()
	async def assign_milestone(capability_id: str, milestone_id: str) -> str:
		"""
		Copy a milestone onto a capability (technical or business by milestone type).

		The capability keeps its copy even if the milestone is edited later.

		Args:
			capability_id: The capability ID
			milestone_id: The milestone ID
		"""
		capability = store.assign_milestone(capability_id, milestone_id)
		if not capability:
			return error("Capability or milestone not found")
		return dump({"success": True, "capability": capability.to_dict()})

	@mcp.tool()
	async def import_capabilities(csv_text: str) -> str:
		"""
		Import capabilities from CSV text.

		The header must include Name, Workstream, Lead, SME, BA, Status, RAG.

		Args:
			csv_text: The CSV file content
		"""
		try:
			count = import_capabilities_csv(store, csv_text)
		except CapabilityImportError as e:
			return error(str(e), title="Import Error")
		return dump({"success": True, "imported": count})

	@mcp.tool()
	async def export_capabilities(search: str = "", workstream: str = "all", status: str = "all", rag: str = "all") -> str:
		"""
		Export (filtered) capabilities as CSV text.

		Args:
			search: Case-insensitive match on name, workstream or lead
			workstream: Exact workstream name, or "all"
			status: Capability status, or "all"
			rag: RAG value, or "all"
		"""
		try:
			capabilities = store.search_capabilities(search, workstream, status, rag)
		except ValueError as e:
			return error(str(e))
		return export_capabilities_csv(capabilities)

	@mcp.tool()
	async def get_capability_stats(workstream: str = "all") -> str:
		"""
		Key metrics: total, in progress, completed, at risk, overdue (RAG red).

		Args:
			workstream: Restrict to one workstream, or "all"
		"""
		return dump(store.get_capabilities_stats(workstream=workstream))
