"""CLI for capability-tracker: viz, export, import, serve, setup and doctor commands."""

import argparse
import json
import platform
import sys
from pathlib import Path

from importlib.metadata import version as pkg_version

from .config import TIMELINE_VIEWS, load_config
from .logging_config import setup_logging
from .seed import build_store
from .tracker.errors import CapabilityImportError
from .tracker.store import ProjectStore

DEFAULT_CONFIG_TOML = """\
# capability-tracker configuration
# current_user = "1"
# timeline_view = "months"  # weeks | months | quarters
# seed_file = "~/capability-tracker/seed.json"
"""


def _load_store(args: argparse.Namespace) -> ProjectStore:
	"""Build the store for this invocation from --seed or the configured seed file."""
	config = load_config()
	seed_file = Path(args.seed) if getattr(args, "seed", None) else config.seed_file
	try:
		return build_store(seed_file, config.current_user)
	except (OSError, json.JSONDecodeError, ValueError) as e:
		print(f"Error: could not load seed data from {seed_file}: {e}")
		sys.exit(1)


def _write_output(text: str, output: str | None) -> None:
	if output:
		Path(output).write_text(text + "\n")
		print(f"Wrote {output}")
	else:
		print(text)


def cmd_setup(args: argparse.Namespace) -> None:
	"""Create config directories and a commented config.toml."""
	if getattr(args, "check", False):
		cmd_setup_check()
		return

	config = load_config()
	print("capability-tracker setup")
	print(f"{'=' * 40}")
	print()
	print(f"  Config: {config.config_dir}")
	print(f"  Data:   {config.data_dir}")
	print(f"  Logs:   {config.log_dir}")
	print()

	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		toml_path.write_text(DEFAULT_CONFIG_TOML)
		print(f"  Config file created: {toml_path}")
	else:
		print(f"  Config file exists: {toml_path}")
	print()
	print("  Next: add 'capability-tracker serve' to your MCP client config.")


def cmd_setup_check() -> None:
	"""Print configured paths and whether they exist."""
	print("capability-tracker config check")
	print(f"{'=' * 40}")
	print()

	config = load_config()
	checks = [
		("Config dir", config.config_dir),
		("Data dir", config.data_dir),
		("Export dir", config.export_dir),
		("Log dir", config.log_dir),
		("config.toml", config.config_dir / "config.toml"),
	]
	if config.seed_file:
		checks.append(("Seed file", config.seed_file))

	all_ok = True
	for label, path in checks:
		exists = path.exists()
		status = "OK" if exists else "MISSING"
		if not exists:
			all_ok = False
		print(f"  [{status:7s}] {label}: {path}")

	print()
	if not all_ok:
		print("  Some paths are missing. Run 'capability-tracker setup' to configure.")
	else:
		print("  All paths configured.")


def cmd_serve(args: argparse.Namespace) -> None:
	"""Run the MCP server (stdio transport)."""
	from .server import mcp
	mcp.run()


def cmd_doctor(args: argparse.Namespace) -> None:
	"""Health check - verify installation and configuration."""
	print("capability-tracker doctor")
	print(f"{'=' * 40}")

	issues: list[str] = []

	py_ver = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
	print(f"  Python:       {py_ver}")
	print(f"  Platform:     {platform.system()} {platform.machine()}")
	print()

	print("  Core deps:")
	for dep in ["mcp", "pydantic", "platformdirs", "rich"]:
		try:
			print(f"    {dep:22s} {pkg_version(dep)}")
		except Exception:
			print(f"    {dep:22s} NOT INSTALLED")
			issues.append(f"{dep} package not installed")
	print()

	print("  Config:")
	try:
		config = load_config()
		print(f"    timeline_view:       {config.timeline_view}")
		print(f"    current_user:        {config.current_user}")
		if config.seed_file and not config.seed_file.exists():
			issues.append(f"seed file not found: {config.seed_file}")
	except Exception as e:
		issues.append(f"config.toml: {e}")
		print(f"    error: {e}")
	print()

	if issues:
		print(f"  {len(issues)} issue(s) found:")
		for issue in issues:
			print(f"    - {issue}")
		sys.exit(1)
	else:
		print("  All checks passed.")


def cmd_viz(args: argparse.Namespace) -> None:
	"""Visualizer subcommand - Rich terminal views of the tracker."""
	from .visualizer import (
		render_capability_table,
		render_dashboard,
		render_milestone_tables,
		render_plan_comparison,
		render_plan_history,
		render_plan_summary,
		render_plans_timeline,
	)

	viz_target = getattr(args, "viz_target", None)
	if viz_target is None:
		print("Usage: capability-tracker viz {capabilities|milestones|plans|plan|dashboard|history|compare}")
		print("Run 'capability-tracker viz --help' for details.")
		sys.exit(1)

	store = _load_store(args)

	if viz_target == "capabilities":
		try:
			capabilities = store.search_capabilities(args.search, args.workstream, args.status, args.rag)
		except ValueError as e:
			print(f"Error: {e}")
			sys.exit(1)
		render_capability_table(capabilities, total=len(store.capabilities))

	elif viz_target == "milestones":
		render_milestone_tables(store, search=args.search)

	elif viz_target == "plans":
		view = args.view or load_config().timeline_view
		try:
			render_plans_timeline(store, granularity=view, workstream=args.workstream, status=args.status, width=args.width)
		except ValueError as e:
			print(f"Error: {e}")
			sys.exit(1)

	elif viz_target == "plan":
		plan = store.get_plan(args.plan_id)
		if plan is None:
			print(f"No plan '{args.plan_id}' found.")
			sys.exit(1)
		render_plan_summary(plan, store)

	elif viz_target == "dashboard":
		render_dashboard(store, workstream=args.workstream)

	elif viz_target == "history":
		render_plan_history(store, args.plan_id)

	elif viz_target == "compare":
		render_plan_comparison(store, args.plan_id1, args.plan_id2)


def cmd_export(args: argparse.Namespace) -> None:
	"""Export capabilities, milestones or plans."""
	from .tracker.exports import export_capabilities_csv, export_milestones_csv, export_plans_csv, export_plans_json

	store = _load_store(args)
	target = args.export_target

	if target == "capabilities":
		text = export_capabilities_csv(store.capabilities)
	elif target == "milestones":
		text = export_milestones_csv(store)
	elif target == "plans":
		text = export_plans_csv(store) if args.format == "csv" else export_plans_json(store)
	else:
		print("Usage: capability-tracker export {capabilities|milestones|plans}")
		sys.exit(1)

	_write_output(text, args.output)


def cmd_import(args: argparse.Namespace) -> None:
	"""Import capabilities from a CSV file into the seed data and print the result."""
	from .tracker.imports import import_capabilities_csv

	store = _load_store(args)
	try:
		content = Path(args.file).read_bytes()
	except OSError as e:
		print(f"Error: cannot read {args.file}: {e}")
		sys.exit(1)

	try:
		count = import_capabilities_csv(store, content)
	except CapabilityImportError as e:
		print(f"Import Error: {e}")
		sys.exit(1)

	print(f"Successfully imported {count} capabilities")
	if args.output:
		data = {"capabilities": [c.to_dict() for c in store.capabilities]}
		_write_output(json.dumps(data, indent=2), args.output)


def main() -> None:
	"""CLI entry point."""
	parser = argparse.ArgumentParser(
		prog="capability-tracker",
		description="Track capabilities, milestones and versioned delivery plans",
	)
	parser.add_argument("--seed", type=str, default=None, help="Seed JSON file to load at startup")
	parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING or ERROR")
	subparsers = parser.add_subparsers(dest="command")

	# setup
	setup_parser = subparsers.add_parser("setup", help="Create config directories and config.toml")
	setup_parser.add_argument("--check", action="store_true", help="Check current config")
	setup_parser.set_defaults(func=cmd_setup)

	# serve
	serve_parser = subparsers.add_parser("serve", help="Run MCP server (stdio)")
	serve_parser.set_defaults(func=cmd_serve)

	# doctor
	doctor_parser = subparsers.add_parser("doctor", help="Health check")
	doctor_parser.set_defaults(func=cmd_doctor)

	# viz
	viz_parser = subparsers.add_parser("viz", help="Visualize capabilities, milestones and plans")
	viz_subparsers = viz_parser.add_subparsers(dest="viz_target")

	viz_caps = viz_subparsers.add_parser("capabilities", help="Capabilities table")
	viz_caps.add_argument("--search", type=str, default="", help="Match name, workstream or lead")
	viz_caps.add_argument("--workstream", type=str, default="all", help="Filter by workstream")
	viz_caps.add_argument("--status", type=str, default="all", help="Filter by status")
	viz_caps.add_argument("--rag", type=str, default="all", help="Filter by RAG")
	viz_caps.set_defaults(func=cmd_viz)

	viz_milestones = viz_subparsers.add_parser("milestones", help="Technical and business milestones")
	viz_milestones.add_argument("--search", type=str, default="", help="Match name or description")
	viz_milestones.set_defaults(func=cmd_viz)

	viz_plans = viz_subparsers.add_parser("plans", help="Plans timeline")
	viz_plans.add_argument("--view", choices=TIMELINE_VIEWS, default=None, help="Header granularity")
	viz_plans.add_argument("--workstream", type=str, default=None, help="Filter by workstream")
	viz_plans.add_argument("--status", type=str, default=None, help="Filter by capability status")
	viz_plans.add_argument("--width", type=int, default=60, help="Timeline width in columns")
	viz_plans.set_defaults(func=cmd_viz)

	viz_plan = viz_subparsers.add_parser("plan", help="Single plan summary")
	viz_plan.add_argument("plan_id", help="Plan ID")
	viz_plan.set_defaults(func=cmd_viz)

	viz_dashboard = viz_subparsers.add_parser("dashboard", help="Metrics, activity and deliveries")
	viz_dashboard.add_argument("--workstream", type=str, default=None, help="Restrict metrics to a workstream")
	viz_dashboard.set_defaults(func=cmd_viz)

	viz_history = viz_subparsers.add_parser("history", help="Plan history")
	viz_history.add_argument("plan_id", help="Plan ID")
	viz_history.set_defaults(func=cmd_viz)

	viz_compare = viz_subparsers.add_parser("compare", help="Compare two plans")
	viz_compare.add_argument("plan_id1", help="Baseline plan ID")
	viz_compare.add_argument("plan_id2", help="Plan ID to compare")
	viz_compare.set_defaults(func=cmd_viz)

	viz_parser.set_defaults(func=cmd_viz)

	# export
	export_parser = subparsers.add_parser("export", help="Export data as CSV or JSON")
	export_parser.add_argument("export_target", choices=["capabilities", "milestones", "plans"])
	export_parser.add_argument("--format", choices=["json", "csv"], default="json", help="Plans format (default: json)")
	export_parser.add_argument("--output", "-o", type=str, default=None, help="Write to file instead of stdout")
	export_parser.set_defaults(func=cmd_export)

	# import
	import_parser = subparsers.add_parser("import", help="Import capabilities from CSV")
	import_parser.add_argument("import_target", choices=["capabilities"])
	import_parser.add_argument("file", help="CSV file path")
	import_parser.add_argument("--output", "-o", type=str, default=None, help="Write the resulting capabilities as JSON")
	import_parser.set_defaults(func=cmd_import)

	args = parser.parse_args()

	if not args.command:
		parser.print_help()
		sys.exit(1)

	config = load_config()
	setup_logging(args.log_level or config.log_level, log_dir=config.log_dir)
	args.func(args)
