"""Shared utilities for visualizer views."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

RAG_STYLES = {
	"Red": "red",
	"Amber": "yellow",
	"Green": "green",
	"Blue": "blue",
}

STATUS_STYLES = {
	"Not Started": "dim",
	"In Progress": "yellow",
	"At Risk": "red",
	"On Track": "green",
	"Overdue": "red",
	"Delayed": "red",
	"Completed": "bold green",
}

PHASE_STATUS_STYLES = {
	"not-started": "dim",
	"in-progress": "yellow",
	"completed": "green",
	"delayed": "red",
}


def format_timestamp(iso_str: str, now: Optional[datetime] = None) -> str:
	"""Format an ISO timestamp as relative time (e.g. '2m ago') or absolute."""
	try:
		dt = datetime.fromisoformat(iso_str)
		delta = (now or datetime.now()) - dt
		total_secs = int(delta.total_seconds())

		if total_secs < 0:
			return iso_str[:19]
		if total_secs < 60:
			return f"{total_secs}s ago"
		if total_secs < 3600:
			return f"{total_secs // 60}m ago"
		if total_secs < 86400:
			return f"{total_secs // 3600}h ago"
		days = total_secs // 86400
		return f"{days}d ago"
	except (ValueError, TypeError):
		return str(iso_str)[:19]


def format_date(value: str) -> str:
	"""Format an ISO date as e.g. 'Jan 10, 2025'. Unparseable input is returned as-is."""
	if not value:
		return "-"
	try:
		dt = datetime.fromisoformat(value)
	except ValueError:
		return value
	return f"{dt:%b} {dt.day}, {dt.year}"


def styled(text: str, styles: dict[str, str]) -> str:
	"""Wrap text in the Rich style registered for it, if any."""
	style = styles.get(text)
	if not style:
		return text
	return f"[{style}]{text}[/{style}]"


def truncate(text: str, max_len: int = 60) -> str:
	"""Shorten text for table display."""
	if not text:
		return ""
	text = text.strip()
	if len(text) <= max_len:
		return text
	return text[:max_len - 3] + "..."


def describe_value(value: Any, max_len: int = 40) -> str:
	"""Compact rendering of a history value (whole-object snapshots included)."""
	if value is None:
		return "-"
	if isinstance(value, Enum):
		value = value.value
	if isinstance(value, dict):
		parts = [f"{k}={v}" for k, v in value.items() if v not in (None, "")]
		return truncate(", ".join(parts), max_len)
	return truncate(str(value), max_len)


def initials(name: str) -> str:
	"""Initials of a person's name, e.g. 'Sarah Chen' -> 'SC'."""
	return "".join(part[0] for part in name.split() if part)
