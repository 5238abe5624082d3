"""Rich views for capabilities."""

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from ..tracker.models import Capability
from .utils import RAG_STYLES, STATUS_STYLES, initials, styled, truncate


def render_capability_table(
	capabilities: Sequence[Capability],
	console: Optional[Console] = None,
	total: Optional[int] = None,
) -> None:
	"""Render capabilities with lead, roles, milestones and RAG."""
	console = console or Console()

	if not capabilities:
		console.print("[dim]No capabilities match the current filters.[/dim]")
		return

	table = Table(title="Capabilities")
	table.add_column("Capability", style="cyan")
	table.add_column("Workstream")
	table.add_column("Lead")
	table.add_column("SME")
	table.add_column("BA")
	table.add_column("Technical Milestone")
	table.add_column("Business Milestone")
	table.add_column("Status")
	table.add_column("RAG", justify="center")

	for cap in capabilities:
		lead = cap.workstream_lead.name
		tech = cap.technical_milestone
		biz = cap.business_milestone
		table.add_row(
			truncate(cap.name, 40),
			cap.workstream,
			f"[dim]{initials(lead)}[/dim] {lead}" if lead else "-",
			cap.sme or "-",
			cap.ba or "-",
			f"{tech.name} [dim]({tech.date})[/dim]" if tech else "-",
			f"{biz.name} [dim]({biz.date})[/dim]" if biz else "-",
			styled(cap.status.value, STATUS_STYLES),
			styled(cap.rag.value, RAG_STYLES),
		)

	console.print(table)
	total = len(capabilities) if total is None else total
	console.print(f"[dim]Showing 1 to {len(capabilities)} of {total} capabilities[/dim]")
