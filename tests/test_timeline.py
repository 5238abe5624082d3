"""Tests for timeline window, header and bar layout."""

from datetime import datetime, timezone

import pytest

from capability_tracker.tracker.models import Plan, PlanPhase, PlanPhases, PlanType
from capability_tracker.tracker.timeline import (
	Granularity,
	TimelineWindow,
	parse_date,
	phase_bars,
	position,
	shift_months,
	timeline_headers,
	timeline_window,
)

from .helpers import aspirational_phases


def _plan(phases: PlanPhases, plan_type: PlanType = PlanType.ASPIRATIONAL) -> Plan:
	return Plan(id="p1", capability_id="c1", type=plan_type, phases=phases)


class TestShiftMonths:
	def test_forward_across_year(self):
		assert shift_months(datetime(2025, 11, 10), 3) == datetime(2026, 2, 10)

	def test_backward_across_year(self):
		assert shift_months(datetime(2025, 3, 15), -6) == datetime(2024, 9, 15)

	def test_clamps_day_to_month_length(self):
		assert shift_months(datetime(2025, 1, 31), 1) == datetime(2025, 2, 28)
		assert shift_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)


class TestParseDate:
	def test_naive_values_unchanged(self):
		assert parse_date("2025-03-01") == datetime(2025, 3, 1)
		assert parse_date(datetime(2025, 3, 1, 12)) == datetime(2025, 3, 1, 12)

	def test_offset_aware_values_become_naive_utc(self):
		assert parse_date("2025-01-10T02:00:00+02:00") == datetime(2025, 1, 10)
		assert parse_date("2025-01-10T00:00:00Z") == datetime(2025, 1, 10)
		assert parse_date(datetime(2025, 1, 10, 5, tzinfo=timezone.utc)).tzinfo is None

	def test_rejects_non_dates(self):
		with pytest.raises(ValueError):
			parse_date("soon")


class TestWindow:
	def test_no_plans_centres_on_now(self):
		window = timeline_window([], now=datetime(2025, 6, 15))
		assert window.start == datetime(2024, 12, 15)
		assert window.end == datetime(2025, 12, 15)
		assert window.current == datetime(2025, 6, 15)

	def test_pads_phase_dates_six_months(self):
		window = timeline_window([_plan(aspirational_phases())], now=datetime(2025, 3, 1))
		assert window.start == datetime(2024, 7, 1)
		assert window.end == datetime(2025, 12, 30)

	def test_undated_phases_are_ignored(self):
		phases = PlanPhases(
			development=PlanPhase(start_date="2025-03-01", end_date="2025-03-31"),
			cst=PlanPhase(start_date="2025-04-01"),
			uat=PlanPhase(start_date="soon", end_date="later"),
		)
		window = timeline_window([_plan(phases)], now=datetime(2025, 1, 1))
		assert window.start == datetime(2024, 9, 1)
		assert window.end == datetime(2025, 9, 30)

	def test_mixes_offset_aware_and_naive_dates(self):
		phases = PlanPhases(
			development=PlanPhase(start_date="2025-03-01", end_date="2025-03-31T00:00:00Z"),
			cst=PlanPhase(start_date="2025-04-01T02:00:00+02:00", end_date="2025-04-30"),
		)
		plan = _plan(phases)
		window = timeline_window([plan], now=datetime(2025, 1, 1, tzinfo=timezone.utc))
		assert window.start == datetime(2024, 9, 1)
		assert window.end == datetime(2025, 10, 30)
		assert window.current == datetime(2025, 1, 1)

		bars = phase_bars(plan, window)
		assert [b.phase for b in bars] == ["development", "cst"]
		assert bars[1].start == datetime(2025, 4, 1)
		assert window.position("2025-03-31T00:00:00Z") == pytest.approx(bars[0].left + bars[0].width)


class TestPosition:
	@pytest.fixture
	def window(self):
		return TimelineWindow(start=datetime(2025, 1, 1), end=datetime(2025, 1, 11), current=datetime(2025, 1, 1))

	def test_midpoint(self, window):
		assert position(window, datetime(2025, 1, 6)) == pytest.approx(50.0)
		assert window.position("2025-01-06") == pytest.approx(50.0)

	def test_not_clamped(self, window):
		assert position(window, datetime(2024, 12, 31)) == pytest.approx(-10.0)
		assert position(window, datetime(2025, 1, 21)) == pytest.approx(200.0)

	def test_zero_span(self):
		window = TimelineWindow(start=datetime(2025, 1, 1), end=datetime(2025, 1, 1), current=datetime(2025, 1, 1))
		assert position(window, datetime(2025, 6, 1)) == 0.0


class TestHeaders:
	def test_months(self):
		window = TimelineWindow(start=datetime(2025, 1, 15), end=datetime(2025, 4, 10), current=datetime(2025, 2, 3))
		headers = timeline_headers(window, "months")
		assert [h.label for h in headers] == ["January", "February", "March", "April"]
		assert [h.is_current for h in headers] == [False, True, False, False]
		assert headers[0].sublabel == "2025"

	def test_quarters(self):
		window = TimelineWindow(start=datetime(2025, 2, 10), end=datetime(2025, 8, 1), current=datetime(2025, 5, 5))
		headers = timeline_headers(window, Granularity.QUARTERS)
		assert [h.label for h in headers] == ["Q1 (Jan-Feb-Mar)", "Q2 (Apr-May-Jun)", "Q3 (Jul-Aug-Sep)"]
		assert [h.is_current for h in headers] == [False, True, False]

	def test_weeks_start_on_sunday(self):
		window = TimelineWindow(start=datetime(2025, 1, 1), end=datetime(2025, 1, 14), current=datetime(2025, 1, 8, 12))
		headers = timeline_headers(window, "weeks")
		assert headers[0].start == datetime(2024, 12, 29)
		assert headers[0].label == "Dec 29 - Jan 4"
		assert headers[0].sublabel == "2024"
		assert [h.is_current for h in headers] == [False, True, False]

	def test_unknown_granularity(self):
		window = TimelineWindow(start=datetime(2025, 1, 1), end=datetime(2025, 2, 1), current=datetime(2025, 1, 1))
		with pytest.raises(ValueError):
			timeline_headers(window, "days")


class TestPhaseBars:
	def test_bars_for_scheduled_phases(self):
		window = TimelineWindow(start=datetime(2025, 1, 1), end=datetime(2025, 12, 31), current=datetime(2025, 1, 1))
		bars = phase_bars(_plan(aspirational_phases()), window)
		assert [b.phase for b in bars] == ["requirements", "design", "development", "cst", "uat"]
		assert bars[0].left == pytest.approx(0.0)
		assert bars[0].label == "REQ"
		assert all(b.width > 0 for b in bars)

	def test_implementation_plan_ignores_early_phases(self):
		window = TimelineWindow(start=datetime(2025, 1, 1), end=datetime(2025, 12, 31), current=datetime(2025, 1, 1))
		bars = phase_bars(_plan(aspirational_phases(), PlanType.IMPLEMENTATION), window)
		assert [b.phase for b in bars] == ["development", "cst", "uat"]

	def test_skips_inverted_and_undated_phases(self):
		window = TimelineWindow(start=datetime(2025, 1, 1), end=datetime(2025, 12, 31), current=datetime(2025, 1, 1))
		phases = PlanPhases(
			development=PlanPhase(start_date="2025-05-01", end_date="2025-04-01"),
			cst=PlanPhase(start_date="2025-05-01"),
			uat=PlanPhase(start_date="2025-06-01", end_date="2025-06-30"),
		)
		bars = phase_bars(_plan(phases, PlanType.IMPLEMENTATION), window)
		assert [b.phase for b in bars] == ["uat"]
