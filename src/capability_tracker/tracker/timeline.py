"""
Timeline layout for the plans Gantt view.

Maps phase date ranges onto percentage offsets inside a date window. The
math is purely presentational and is recomputed on every render; offsets
are not clamped here, so a renderer must treat values below 0 or above 100
as outside the window.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Optional

from .models import PHASE_LABELS, Plan

PADDING_MONTHS = 6


class Granularity(str, Enum):
	"""Tick-mark spacing for timeline headers."""
	WEEKS = "weeks"
	MONTHS = "months"
	QUARTERS = "quarters"


@dataclass(frozen=True)
class TimelineWindow:
	"""Date range the timeline spans, plus the moment it was computed for."""
	start: datetime
	end: datetime
	current: datetime

	def position(self, when: datetime | str) -> float:
		return position(self, when)


@dataclass(frozen=True)
class TimelineHeader:
	label: str
	sublabel: str
	start: datetime
	is_current: bool = False


@dataclass(frozen=True)
class PhaseBar:
	phase: str
	label: str
	left: float
	width: float
	start: datetime
	end: datetime


def shift_months(when: datetime, months: int) -> datetime:
	"""Move a datetime by whole months, clamping the day to the month's length."""
	index = when.month - 1 + months
	year = when.year + index // 12
	month = index % 12 + 1
	day = min(when.day, calendar.monthrange(year, month)[1])
	return when.replace(year=year, month=month, day=day)


def parse_date(value: datetime | str) -> datetime:
	"""Parse an ISO date or datetime. Offset-aware values become naive UTC."""
	if not isinstance(value, datetime):
		value = datetime.fromisoformat(value)
	if value.tzinfo is not None:
		value = value.astimezone(timezone.utc).replace(tzinfo=None)
	return value


def phase_dates(plans: Iterable[Plan]) -> list[datetime]:
	"""Start and end dates of every phase that has both set."""
	dates = []
	for plan in plans:
		for _, phase in plan.phases.items():
			if not phase.has_dates:
				continue
			try:
				dates.extend([parse_date(phase.start_date), parse_date(phase.end_date)])
			except ValueError:
				continue
	return dates


def timeline_window(plans: Iterable[Plan], now: Optional[datetime] = None) -> TimelineWindow:
	"""
	Window spanning all phase dates, padded six months on each side.

	With no dated phases the window is six months either side of ``now``.
	"""
	now = parse_date(now or datetime.now())
	dates = phase_dates(plans)
	if not dates:
		return TimelineWindow(
			start=shift_months(now, -PADDING_MONTHS),
			end=shift_months(now, PADDING_MONTHS),
			current=now,
		)
	return TimelineWindow(
		start=shift_months(min(dates), -PADDING_MONTHS),
		end=shift_months(max(dates), PADDING_MONTHS),
		current=now,
	)


def position(window: TimelineWindow, when: datetime | str) -> float:
	"""Percentage offset of a date within the window. Not clamped."""
	span = (window.end - window.start).total_seconds()
	if span <= 0:
		return 0.0
	return (parse_date(when) - window.start).total_seconds() / span * 100


def _week_headers(window: TimelineWindow) -> list[TimelineHeader]:
	headers = []
	start = window.start.replace(hour=0, minute=0, second=0, microsecond=0)
	# weeks start on Sunday
	week_start = start - timedelta(days=(start.weekday() + 1) % 7)
	while week_start <= window.end:
		week_end = week_start + timedelta(days=6)
		headers.append(TimelineHeader(
			label=f"{week_start:%b} {week_start.day} - {week_end:%b} {week_end.day}",
			sublabel=f"{week_start.year}",
			start=week_start,
			is_current=week_start <= window.current < week_start + timedelta(days=7),
		))
		week_start += timedelta(days=7)
	return headers


def _month_headers(window: TimelineWindow) -> list[TimelineHeader]:
	headers = []
	month_start = window.start.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
	while month_start <= window.end:
		headers.append(TimelineHeader(
			label=f"{month_start:%B}",
			sublabel=f"{month_start.year}",
			start=month_start,
			is_current=(month_start.year, month_start.month) == (window.current.year, window.current.month),
		))
		month_start = shift_months(month_start, 1)
	return headers


def _quarter_headers(window: TimelineWindow) -> list[TimelineHeader]:
	headers = []
	first_month = (window.start.month - 1) // 3 * 3 + 1
	quarter_start = window.start.replace(month=first_month, day=1, hour=0, minute=0, second=0, microsecond=0)
	current_quarter = (window.current.year, (window.current.month - 1) // 3)
	while quarter_start <= window.end:
		quarter = (quarter_start.month - 1) // 3
		months = "-".join(f"{shift_months(quarter_start, i):%b}" for i in range(3))
		headers.append(TimelineHeader(
			label=f"Q{quarter + 1} ({months})",
			sublabel=f"{quarter_start.year}",
			start=quarter_start,
			is_current=(quarter_start.year, quarter) == current_quarter,
		))
		quarter_start = shift_months(quarter_start, 3)
	return headers


def timeline_headers(window: TimelineWindow, granularity: Granularity | str = Granularity.MONTHS) -> list[TimelineHeader]:
	"""Tick-mark headers over the window. Does not affect position math."""
	granularity = Granularity(granularity)
	if granularity == Granularity.WEEKS:
		return _week_headers(window)
	if granularity == Granularity.QUARTERS:
		return _quarter_headers(window)
	return _month_headers(window)


def phase_bars(plan: Plan, window: TimelineWindow) -> list[PhaseBar]:
	"""
	Bars for the phases a plan's type schedules.

	Phases without both dates, or ending before they start, get no bar.
	"""
	bars = []
	for name in plan.type.phase_names:
		phase = plan.phases.get(name)
		if phase is None or not phase.has_dates:
			continue
		try:
			start = parse_date(phase.start_date)
			end = parse_date(phase.end_date)
		except ValueError:
			continue
		left = position(window, start)
		width = position(window, end) - left
		if width < 0:
			continue
		bars.append(PhaseBar(
			phase=name,
			label=PHASE_LABELS[name],
			left=left,
			width=width,
			start=start,
			end=end,
		))
	return bars
