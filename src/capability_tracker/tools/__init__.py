"""MCP tool modules for capability-tracker."""

from mcp.server.fastmcp import FastMCP

from ..config import Config
from ..tracker.store import ProjectStore
from .capabilities import register_capability_tools
from .core import register_core_tools
from .milestones import register_milestone_tools
from .plans import register_plan_tools
from .users import register_user_tools


def register_all_tools(mcp: FastMCP, config: Config, store: ProjectStore) -> None:
	"""Register all tool modules with the MCP server."""
	register_core_tools(mcp, config, store)
	register_capability_tools(mcp, config, store)
	register_milestone_tools(mcp, config, store)
	register_plan_tools(mcp, config, store)
	register_user_tools(mcp, config, store)
