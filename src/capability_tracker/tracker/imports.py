"""Capability import from CSV."""

import csv
import io
import logging

from pydantic import ValidationError

from .errors import CapabilityImportError
from .store import ProjectStore

logger = logging.getLogger(__name__)

REQUIRED_HEADERS = ["Name", "Workstream", "Lead", "SME", "BA", "Status", "RAG"]

HEADER_ERROR = "CSV file must have headers: " + ", ".join(REQUIRED_HEADERS)
PARSE_ERROR = "Failed to parse CSV file. Please check the format."


def _clean(value: str) -> str:
	return value.replace('"', "").strip()


def parse_capability_rows(file_content: str | bytes) -> list[dict]:
	"""
	Parse capability CSV text into capability data dicts.

	Header names are matched exactly (quotes and surrounding whitespace
	stripped) in any order. Rows with fewer values than the required
	headers, or without a name or workstream, are skipped.

	Raises:
		CapabilityImportError: missing headers or unparseable content
	"""
	if isinstance(file_content, bytes):
		try:
			file_content = file_content.decode("utf-8-sig")
		except UnicodeDecodeError as e:
			raise CapabilityImportError(PARSE_ERROR) from e

	try:
		rows = list(csv.reader(io.StringIO(file_content)))
	except csv.Error as e:
		raise CapabilityImportError(PARSE_ERROR) from e

	if not rows:
		raise CapabilityImportError(HEADER_ERROR)

	headers = [_clean(h) for h in rows[0]]
	missing = [h for h in REQUIRED_HEADERS if h not in headers]
	if missing:
		raise CapabilityImportError(HEADER_ERROR)

	index = {h: headers.index(h) for h in REQUIRED_HEADERS}
	parsed = []
	for row in rows[1:]:
		values = [_clean(v) for v in row]
		if not any(values) or len(values) < len(REQUIRED_HEADERS):
			continue

		def cell(header: str) -> str:
			i = index[header]
			return values[i] if i < len(values) else ""

		data = {
			"name": cell("Name"),
			"workstream": cell("Workstream"),
			"workstream_lead": {"name": cell("Lead")},
			"sme": cell("SME"),
			"ba": cell("BA"),
			"status": cell("Status") or "Not Started",
			"rag": cell("RAG") or "Blue",
			"notes": "",
		}
		if not data["name"] or not data["workstream"]:
			continue
		parsed.append(data)
	return parsed


def import_capabilities_csv(store: ProjectStore, file_content: str | bytes) -> int:
	"""
	Import capabilities from CSV text into the store.

	Returns:
		Number of capabilities imported

	Raises:
		CapabilityImportError: the file as a whole cannot be imported
	"""
	imported = 0
	for data in parse_capability_rows(file_content):
		try:
			store.add_capability(data)
		except ValidationError as e:
			logger.debug(f"Skipped capability row {data['name']!r}: {e}")
			continue
		imported += 1
	logger.info(f"Imported {imported} capabilities")
	return imported
