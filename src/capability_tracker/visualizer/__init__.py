"""Visualizer package - Rich terminal views for capabilities, milestones and plans."""

from .capabilities import render_capability_table
from .dashboard import render_dashboard
from .milestones import render_milestone_tables
from .plan_history import render_plan_comparison, render_plan_history
from .plan_timeline import render_plan_summary, render_plans_timeline

__all__ = [
	"render_capability_table",
	"render_dashboard",
	"render_milestone_tables",
	"render_plan_comparison",
	"render_plan_history",
	"render_plan_summary",
	"render_plans_timeline",
]
