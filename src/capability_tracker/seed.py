"""Built-in sample data and seed-file loading."""

import json
import logging
from pathlib import Path
from typing import Optional

from .tracker.store import ProjectStore

logger = logging.getLogger(__name__)


def default_seed() -> dict:
	"""Sample data a fresh tracker starts with."""
	return {
		"capabilities": [
			{
				"id": "1",
				"name": "Customer Portal Enhancement",
				"workstream": "Frontend Development",
				"workstreamLead": {"name": "Sarah Chen", "avatar": "/avatars/sarah.jpg"},
				"sme": "Mike Johnson",
				"ba": "Lisa Wang",
				"technicalMilestone": {"id": "1", "name": "UI Framework Complete", "date": "2025-01-20"},
				"businessMilestone": {"id": "1", "name": "User Acceptance", "date": "2025-02-15"},
				"status": "In Progress",
				"rag": "Amber",
				"notes": "UI framework development on track",
			},
		],
		"milestones": [
			{
				"id": "1",
				"name": "API Development Complete",
				"date": "2025-02-15",
				"type": "technical",
				"description": "Core API endpoints development and testing completed",
				"status": "In Progress",
			},
		],
		"plans": [],
		"users": [
			{
				"id": "1",
				"name": "Sarah Chen",
				"email": "sarah.chen@example.com",
				"role": "manager",
				"avatar": "/avatars/sarah.jpg",
			},
			{
				"id": "2",
				"name": "David Rodriguez",
				"email": "david.rodriguez@example.com",
				"role": "user",
				"avatar": "/avatars/david.jpg",
			},
		],
		"notifications": [],
		"currentUser": "1",
	}


def load_seed(seed_file: Optional[Path] = None) -> dict:
	"""Read a seed JSON file, or return the built-in sample data."""
	if seed_file is None:
		return default_seed()
	with open(seed_file) as f:
		data = json.load(f)
	logger.info(f"Loaded seed data from {seed_file}")
	return data


def build_store(seed_file: Optional[Path] = None, current_user: Optional[str] = None) -> ProjectStore:
	"""Create a store from a seed file (or the sample data)."""
	store = ProjectStore.from_seed(load_seed(seed_file))
	if current_user:
		store.current_user = current_user
	return store
