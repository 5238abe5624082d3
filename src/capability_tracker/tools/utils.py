"""Helpers shared by the MCP tool modules."""

import json
from typing import Any


class ToolInputError(ValueError):
	"""Raised when a tool argument cannot be decoded."""
	pass


def parse_json_object(raw: str, name: str = "updates") -> dict:
	"""Decode a JSON object argument, e.g. '{"status": "At Risk"}'."""
	if not raw:
		return {}
	try:
		data = json.loads(raw)
	except json.JSONDecodeError as e:
		raise ToolInputError(f"{name} is not valid JSON: {e}") from e
	if not isinstance(data, dict):
		raise ToolInputError(f"{name} must be a JSON object")
	return data


def dump(data: Any) -> str:
	return json.dumps(data, indent=2)


def error(message: str, **extra: Any) -> str:
	return json.dumps({"error": message, **extra})
