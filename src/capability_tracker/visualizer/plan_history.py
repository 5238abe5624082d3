"""Rich views for plan history and plan comparison."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..tracker.store import ProjectStore
from .utils import describe_value, format_timestamp


def render_plan_history(store: ProjectStore, plan_id: str, console: Optional[Console] = None) -> None:
	"""Render a plan's history entries, newest first, with field-level changes."""
	console = console or Console()
	history = store.get_plan_history(plan_id)

	if not history:
		console.print(f"[dim]No history recorded for plan '{plan_id}'.[/dim]")
		return

	table = Table(title=f"History: {history[0].plan_name}")
	table.add_column("When")
	table.add_column("Action", style="cyan")
	table.add_column("By")
	table.add_column("Field")
	table.add_column("Old")
	table.add_column("New")

	for entry in reversed(history):
		user = store.get_user(entry.user_id)
		who = user.name if user else entry.user_id
		when = format_timestamp(entry.timestamp, now=store.current_time())
		if not entry.changes:
			table.add_row(when, entry.action.value, who, "-", "-", "-")
			continue
		for i, change in enumerate(entry.changes):
			table.add_row(
				when if i == 0 else "",
				entry.action.value if i == 0 else "",
				who if i == 0 else "",
				change.field,
				f"[red]{describe_value(change.old_value)}[/red]",
				f"[green]{describe_value(change.new_value)}[/green]",
			)

	console.print(table)


def render_plan_comparison(
	store: ProjectStore,
	plan_id1: str,
	plan_id2: str,
	console: Optional[Console] = None,
) -> None:
	"""Render the phase differences between two plans."""
	console = console or Console()
	plan1 = store.get_plan(plan_id1)
	plan2 = store.get_plan(plan_id2)
	diff = store.compare_plans(plan_id1, plan_id2)

	title = "Plan Comparison"
	if plan1 and plan2:
		title = f"Plan Comparison: v{plan1.version} -> v{plan2.version}"

	if diff.is_empty:
		console.print(Panel("[dim]No differences found.[/dim]", title=title, border_style="cyan"))
		return

	lines = []
	for name in diff.added:
		lines.append(f"[green]+ {name}[/green]")
	for name in diff.removed:
		lines.append(f"[red]- {name}[/red]")
	for field in diff.changed:
		phase_name, attr = field.split(".", 1)
		old = new = ""
		if plan1 and plan2:
			snake = {"startDate": "start_date", "endDate": "end_date"}.get(attr, attr)
			old = describe_value(getattr(plan1.phases.get(phase_name), snake))
			new = describe_value(getattr(plan2.phases.get(phase_name), snake))
		lines.append(f"[yellow]~ {field}[/yellow]  {old} -> {new}")

	console.print(Panel("\n".join(lines), title=title, border_style="cyan"))
