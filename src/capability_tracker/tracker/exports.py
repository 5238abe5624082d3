"""CSV and JSON exports of capabilities, milestones and plans."""

import csv
import io
import json
from typing import Iterable, Optional

from .models import Capability, Plan, PlanType
from .store import ProjectStore

CAPABILITY_HEADERS = [
	"Name", "Workstream", "Lead", "SME", "BA", "Status", "RAG",
	"Technical Milestone", "Business Milestone",
]

MILESTONE_HEADERS = ["Milestone Name", "Target Date", "Type", "Description", "Status", "Usage Count"]

PLAN_HEADERS = [
	"Capability", "Workstream", "Status",
	"Aspirational Plan Start", "Aspirational Plan End",
	"Implementation Plan Start", "Implementation Plan End",
]


def _writer(buf: io.StringIO, quoting: int = csv.QUOTE_MINIMAL):
	return csv.writer(buf, quoting=quoting, lineterminator="\n")


def export_capabilities_csv(capabilities: Iterable[Capability]) -> str:
	"""Capabilities as CSV, every field double-quoted."""
	buf = io.StringIO()
	writer = _writer(buf, csv.QUOTE_ALL)
	writer.writerow(CAPABILITY_HEADERS)
	for cap in capabilities:
		writer.writerow([
			cap.name,
			cap.workstream,
			cap.workstream_lead.name,
			cap.sme,
			cap.ba,
			cap.status.value,
			cap.rag.value,
			cap.technical_milestone.name if cap.technical_milestone else "",
			cap.business_milestone.name if cap.business_milestone else "",
		])
	return buf.getvalue().rstrip("\n")


def export_milestones_csv(store: ProjectStore) -> str:
	"""Milestones as CSV with usage counts computed now."""
	buf = io.StringIO()
	writer = _writer(buf)
	writer.writerow(MILESTONE_HEADERS)
	for milestone in store.milestones:
		writer.writerow([
			milestone.name,
			milestone.date,
			milestone.type.value,
			milestone.description,
			milestone.status.value,
			store.get_usage_count(milestone.id),
		])
	return buf.getvalue().rstrip("\n")


def _plan_summary(plan: Optional[Plan]) -> Optional[dict]:
	if plan is None:
		return None
	return {
		"version": plan.version,
		"phases": plan.phases.model_dump(mode="json", by_alias=True, exclude_none=True),
	}


def build_plan_export(store: ProjectStore) -> list[dict]:
	"""Latest aspirational and implementation plan for every capability."""
	return [
		{
			"capability": cap.name,
			"workstream": cap.workstream,
			"status": cap.status.value,
			"aspirationalPlan": _plan_summary(store.get_latest_plan(cap.id, PlanType.ASPIRATIONAL)),
			"implementationPlan": _plan_summary(store.get_latest_plan(cap.id, PlanType.IMPLEMENTATION)),
		}
		for cap in store.capabilities
	]


def export_plans_json(store: ProjectStore) -> str:
	return json.dumps(build_plan_export(store), indent=2)


def _phase_date(plan: Optional[dict], phase: str, key: str) -> str:
	if not plan:
		return ""
	return plan["phases"].get(phase, {}).get(key, "") or ""


def export_plans_csv(store: ProjectStore) -> str:
	"""Plan date summary as CSV: unquoted header, quoted values."""
	buf = io.StringIO()
	_writer(buf).writerow(PLAN_HEADERS)
	rows = _writer(buf, csv.QUOTE_ALL)
	for item in build_plan_export(store):
		aspirational = item["aspirationalPlan"]
		implementation = item["implementationPlan"]
		rows.writerow([
			item["capability"],
			item["workstream"],
			item["status"],
			_phase_date(aspirational, "requirements", "startDate"),
			_phase_date(aspirational, "uat", "endDate"),
			_phase_date(implementation, "development", "startDate"),
			_phase_date(implementation, "uat", "endDate"),
		])
	return buf.getvalue().rstrip("\n")
