"""User, notification and activity tools."""

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from ..config import Config
from ..tracker.store import ProjectStore
from .utils import ToolInputError, dump, error, parse_json_object


def register_user_tools(mcp: FastMCP, config: Config, store: ProjectStore) -> None:
	"""Register user, notification and activity tools."""

	@mcp.tool()
	async def list_users() -> str:
		"""List users and show which one is current."""
		return dump({
			"users": [u.to_dict() for u in store.users],
			"currentUser": store.current_user,
		})

	@mcp.tool()
	async def create_user(name: str, email: str, role: str = "user") -> str:
		"""
		Create a user.

		Args:
			name: Full name
			email: Email address
			role: admin, manager, or user
		"""
		try:
			user = store.add_user({"name": name, "email": email, "role": role})
		except ValidationError as e:
			return error(str(e))
		return dump({"success": True, "user": user.to_dict()})

	@mcp.tool()
	async def update_user(user_id: str, updates: str) -> str:
		"""
		Update fields of a user.

		Args:
			user_id: The user ID
			updates: JSON object of fields, e.g. '{"role": "admin"}'
		"""
		try:
			user = store.update_user(user_id, parse_json_object(updates))
		except (ToolInputError, ValueError) as e:
			return error(str(e))
		if not user:
			return error(f"User not found: {user_id}")
		return dump({"success": True, "user": user.to_dict()})

	@mcp.tool()
	async def delete_user(user_id: str) -> str:
		"""
		Delete a user.

		Args:
			user_id: The user ID
		"""
		store.delete_user(user_id)
		return dump({"success": True, "user_id": user_id})

	@mcp.tool()
	async def list_notifications(unread_only: bool = False) -> str:
		"""
		List notifications, newest first.

		Args:
			unread_only: Only return unread notifications
		"""
		notifications = store.get_unread_notifications() if unread_only else store.notifications
		return dump({
			"notifications": [n.to_dict() for n in notifications],
			"unread": len(store.get_unread_notifications()),
		})

	@mcp.tool()
	async def mark_notification_read(notification_id: str) -> str:
		"""
		Mark one notification read.

		Args:
			notification_id: The notification ID
		"""
		notification = store.mark_notification_read(notification_id)
		if not notification:
			return error(f"Notification not found: {notification_id}")
		return dump({"success": True, "notification": notification.to_dict()})

	@mcp.tool()
	async def mark_all_notifications_read() -> str:
		"""Mark every notification read."""
		store.mark_all_notifications_read()
		return dump({"success": True, "unread": 0})

	@mcp.tool()
	async def get_recent_activity(limit: int = 20) -> str:
		"""
		Plan history across all plans, newest first.

		Args:
			limit: Maximum entries to return
		"""
		entries = store.get_recent_activity()[:limit]
		return dump({"activity": [e.to_dict() for e in entries]})

	@mcp.tool()
	async def get_upcoming_deliveries() -> str:
		"""Phases ending today or later, soonest first."""
		return dump({"deliveries": store.get_upcoming_deliveries()})

	@mcp.tool()
	async def get_assigned_phases(user_id: str = "") -> str:
		"""
		Phases assigned to a user.

		Args:
			user_id: The user ID (defaults to the current user)
		"""
		return dump({"phases": store.get_assigned_phases(user_id or store.current_user)})
