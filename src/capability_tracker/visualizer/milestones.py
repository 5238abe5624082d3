"""Rich views for milestones."""

from typing import Optional

from rich.console import Console
from rich.table import Table

from ..tracker.models import MilestoneType
from ..tracker.store import ProjectStore
from .utils import STATUS_STYLES, format_date, styled, truncate


def render_milestone_tables(
	store: ProjectStore,
	search: str = "",
	console: Optional[Console] = None,
) -> None:
	"""Render technical and business milestones with usage counts."""
	console = console or Console()
	term = search.lower()

	for milestone_type in MilestoneType:
		milestones = [
			m for m in store.milestones
			if m.type == milestone_type and (not term or term in m.name.lower())
		]
		title = f"{milestone_type.value.capitalize()} Milestones"

		if not milestones:
			console.print(f"[dim]No {milestone_type.value} milestones.[/dim]")
			continue

		table = Table(title=title)
		table.add_column("Milestone", style="cyan")
		table.add_column("Target Date")
		table.add_column("Description")
		table.add_column("Status")
		table.add_column("Usage Count", justify="right")

		for m in milestones:
			table.add_row(
				m.name,
				format_date(m.date),
				truncate(m.description, 50),
				styled(m.status.value, STATUS_STYLES),
				f"{store.get_usage_count(m.id)} capabilities",
			)
		console.print(table)
