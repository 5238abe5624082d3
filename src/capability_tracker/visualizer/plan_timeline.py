"""Rich Gantt-style view of capability plans."""

from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..tracker.models import Plan, PlanType
from ..tracker.store import ProjectStore
from ..tracker.timeline import (
	Granularity,
	PhaseBar,
	TimelineWindow,
	phase_bars,
	timeline_headers,
	timeline_window,
)
from .utils import PHASE_STATUS_STYLES, STATUS_STYLES, format_date, styled

PHASE_STYLES = {
	"requirements": "on blue",
	"design": "on magenta",
	"development": "on dark_blue",
	"cst": "on green",
	"uat": "on dark_orange",
}


def _column(percent: float, width: int) -> int:
	"""Map a percentage to a character column, clamped to the drawable area."""
	return max(0, min(width, round(percent / 100 * width)))


def render_bar_row(bars: list[PhaseBar], width: int) -> Text:
	"""Draw phase bars on a fixed-width track. Bars outside the window are clipped."""
	track = Text(" " * width)
	for bar in bars:
		start = _column(bar.left, width)
		end = _column(bar.left + bar.width, width)
		if end <= start:
			if start >= width:
				continue
			end = start + 1
		label = bar.label[:end - start].center(end - start)
		track = track[:start] + Text(label, style=f"bold white {PHASE_STYLES[bar.phase]}") + track[end:]
	return track


def render_header_row(window: TimelineWindow, granularity: Granularity, width: int) -> Text:
	"""Tick labels placed at each header's position, skipped where they would overlap."""
	row = Text(" " * width)
	next_free = 0
	for header in timeline_headers(window, granularity):
		col = _column(window.position(header.start), width)
		if granularity == Granularity.MONTHS:
			label = f"{header.label[:3]} {header.sublabel[2:]}"
		elif granularity == Granularity.QUARTERS:
			label = f"{header.label[:2]} {header.sublabel}"
		else:
			label = header.label.split(" - ")[0]
		if col < next_free or col + len(label) > width:
			continue
		style = "bold cyan" if header.is_current else "dim"
		row = row[:col] + Text(label, style=style) + row[col + len(label):]
		next_free = col + len(label) + 1
	return row


def render_plans_timeline(
	store: ProjectStore,
	granularity: Granularity | str = Granularity.MONTHS,
	workstream: Optional[str] = None,
	status: Optional[str] = None,
	width: int = 60,
	now: Optional[datetime] = None,
	console: Optional[Console] = None,
) -> None:
	"""Render the latest aspirational and implementation plan of each capability on one timeline."""
	console = console or Console()
	granularity = Granularity(granularity)
	capabilities = store.search_capabilities(workstream=workstream, status=status)

	if not capabilities:
		console.print("[dim]No capabilities match the current filters.[/dim]")
		return

	window = timeline_window(store.plans, now=now)

	table = Table(title=f"Capability Plans ({format_date(window.start.date().isoformat())} - "
		f"{format_date(window.end.date().isoformat())})")
	table.add_column("Capability", style="cyan", no_wrap=True)
	table.add_column("Plan", no_wrap=True)
	table.add_column(render_header_row(window, granularity, width), no_wrap=True, min_width=width)

	for cap in capabilities:
		first = True
		for plan_type in PlanType:
			plan = store.get_latest_plan(cap.id, plan_type)
			label = f"{plan_type.value[:4].capitalize()}. v{plan.version}" if plan else f"[dim]{plan_type.value[:4].capitalize()}. -[/dim]"
			track = render_bar_row(phase_bars(plan, window), width) if plan else Text("")
			table.add_row(
				f"{cap.name}\n[dim]{styled(cap.status.value, STATUS_STYLES)}[/dim]" if first else "",
				label,
				track,
			)
			first = False

	console.print(table)
	legend = "  ".join(f"[bold white {style}] {name.upper()} [/]" for name, style in PHASE_STYLES.items())
	console.print(legend)


def render_plan_summary(plan: Plan, store: ProjectStore, console: Optional[Console] = None) -> None:
	"""Render a plan's phases with dates, status and progress."""
	console = console or Console()
	capability = store.get_capability(plan.capability_id)
	progress = plan.get_progress()

	table = Table(title=(
		f"{capability.name if capability else 'Unknown capability'} - "
		f"{plan.type.value.capitalize()} Plan v{plan.version} ({plan.status.value})"
	))
	table.add_column("Phase", style="cyan")
	table.add_column("Start")
	table.add_column("End")
	table.add_column("Status")
	table.add_column("Progress", justify="right")
	table.add_column("Assigned To")

	for name in plan.type.phase_names:
		phase = plan.phases.get(name)
		if phase is None:
			table.add_row(name, "-", "-", "[dim]not planned[/dim]", "-", "-")
			continue
		user = store.get_user(phase.assigned_to) if phase.assigned_to else None
		table.add_row(
			name,
			format_date(phase.start_date),
			format_date(phase.end_date),
			styled(phase.status.value, PHASE_STATUS_STYLES),
			f"{phase.progress}%",
			user.name if user else (phase.assigned_to or "-"),
		)

	console.print(table)
	console.print(
		f"[bold]Progress:[/bold] {progress['percent_complete']:.0f}%  "
		f"[bold]Phases:[/bold] {progress['completed_phases']}/{progress['total_phases']} complete"
	)
	if plan.approval:
		console.print(
			f"[bold]Approved by:[/bold] {plan.approval.approved_by} on {format_date(plan.approval.approved_at[:10])}"
			+ (f" - {plan.approval.comments}" if plan.approval.comments else "")
		)
