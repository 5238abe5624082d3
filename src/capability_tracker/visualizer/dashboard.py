"""Combined dashboard view."""

from datetime import date
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..tracker.store import ProjectStore
from .utils import format_date, format_timestamp


def render_dashboard(
	store: ProjectStore,
	workstream: Optional[str] = None,
	today: Optional[date] = None,
	console: Optional[Console] = None,
) -> None:
	"""Render key metrics, recent plan activity and upcoming deliveries."""
	console = console or Console()

	console.print()
	console.rule("[bold cyan]Capability Dashboard[/bold cyan]")
	console.print()

	# Top: key metrics
	stats = store.get_capabilities_stats(workstream=workstream)
	summary = (
		f"[bold]Total capabilities:[/bold] {stats['total']}  |  "
		f"[bold]In progress:[/bold] {stats['in_progress']}  |  "
		f"[bold]At risk:[/bold] [red]{stats['at_risk']}[/red]  |  "
		f"[bold]Overdue (RAG red):[/bold] [red]{stats['overdue']}[/red]  |  "
		f"[bold]Completed:[/bold] [green]{stats['completed']}[/green]"
	)
	title = f"Summary ({workstream})" if workstream and workstream != "all" else "Summary"
	console.print(Panel(summary, title=title, border_style="green"))
	console.print()

	# Middle: recent plan activity
	activity = store.get_recent_activity()[:10]
	if activity:
		table = Table(title="Recent Activity")
		table.add_column("When")
		table.add_column("Capability", style="cyan")
		table.add_column("Action")
		table.add_column("By")
		table.add_column("Changed")
		for entry in activity:
			user = store.get_user(entry.user_id)
			table.add_row(
				format_timestamp(entry.timestamp, now=store.current_time()),
				entry.plan_name,
				entry.action.value,
				user.name if user else entry.user_id,
				", ".join(c.field for c in entry.changes),
			)
		console.print(table)
	else:
		console.print("[dim]No plan activity yet.[/dim]")
	console.print()

	# Bottom: upcoming deliveries
	names = {c.name for c in store.search_capabilities(workstream=workstream)}
	deliveries = [d for d in store.get_upcoming_deliveries(today) if d["capability"] in names][:10]
	if deliveries:
		table = Table(title="Upcoming Deliveries")
		table.add_column("Due")
		table.add_column("Capability", style="cyan")
		table.add_column("Phase")
		table.add_column("Assigned To")
		for d in deliveries:
			user = store.get_user(d["assigned_to"]) if d["assigned_to"] else None
			table.add_row(
				format_date(d["due_date"]),
				d["capability"],
				d["phase"].upper() if d["phase"] in ("cst", "uat") else d["phase"].capitalize(),
				user.name if user else (d["assigned_to"] or "-"),
			)
		console.print(table)
	else:
		console.print("[dim]No upcoming deliveries.[/dim]")
	console.print()

	unread = store.get_unread_notifications()
	if unread:
		console.print(f"[bold]{len(unread)} unread notification(s)[/bold]")
		for n in unread[:5]:
			console.print(f"  - {n.title}: {n.message}")
		console.print()
