"""Core health check tool."""

import json

from mcp.server.fastmcp import FastMCP

from ..config import Config
from ..tracker.store import ProjectStore


def register_core_tools(mcp: FastMCP, config: Config, store: ProjectStore) -> None:
	"""Register core tools."""

	@mcp.tool()
	async def health_check() -> str:
		"""
		Check the health of the capability-tracker server.
		Returns configuration paths and the size of each collection.
		"""
		status = {
			"server": "running",
			"config_dir": str(config.config_dir),
			"data_dir": str(config.data_dir),
			"current_user": store.current_user,
			"capabilities": len(store.capabilities),
			"milestones": len(store.milestones),
			"plans": len(store.plans),
			"users": len(store.users),
			"unread_notifications": len(store.get_unread_notifications()),
		}
		return json.dumps(status, indent=2)
