"""Period windows used to filter dated records.

All windows are closed-inclusive: ``start`` is 00:00:00.000 of the first day
and ``end`` is 23:59:59.999 of the last day. Weeks start on Sunday.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from ..core.enums import WindowKind
from ..core.exceptions import ValidationError
from .datetime_utils import today_local

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class DateWindow:
    start: datetime
    end: datetime

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def contains(self, moment: Union[date, datetime]) -> bool:
        if not isinstance(moment, datetime):
            moment = datetime.combine(moment, time.min)
        return self.start <= moment <= self.end

    def as_dict(self) -> dict:
        return {"start": self.start.isoformat(timespec="milliseconds"), "end": self.end.isoformat(timespec="milliseconds")}


def _span(first: date, last: date) -> DateWindow:
    return DateWindow(start=datetime.combine(first, time.min), end=datetime.combine(last, END_OF_DAY))


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def parse_kind(value: Union[str, WindowKind, None], *, default: WindowKind = WindowKind.DAY) -> WindowKind:
    if value is None or value == "":
        return default
    try:
        return WindowKind(value)
    except ValueError:
        raise ValidationError(f"Unsupported range: {value}")


def window(kind: Union[str, WindowKind], anchor: Optional[date] = None, *, today: Optional[date] = None) -> DateWindow:
    """Build the window of ``kind`` that contains ``anchor``.

    ``anchor`` defaults to today for every kind except ``custom``, which
    needs an explicit date.
    """
    kind = parse_kind(kind)
    if isinstance(anchor, datetime):
        anchor = anchor.date()

    if anchor is None:
        if kind == WindowKind.CUSTOM:
            raise ValidationError("Custom date is required")
        anchor = today or today_local()

    if kind in (WindowKind.DAY, WindowKind.CUSTOM):
        return _span(anchor, anchor)
    if kind == WindowKind.WEEK:
        first = week_start(anchor)
        return _span(first, first + timedelta(days=6))
    if kind == WindowKind.MONTH:
        return _span(anchor.replace(day=1), month_end(anchor))
    return _span(date(anchor.year, 1, 1), date(anchor.year, 12, 31))


def previous_anchor(kind: Union[str, WindowKind], anchor: date) -> date:
    """Anchor of the period immediately before the one containing ``anchor``."""
    kind = parse_kind(kind)
    if kind == WindowKind.WEEK:
        return anchor - timedelta(days=7)
    if kind == WindowKind.MONTH:
        return anchor.replace(day=1) - timedelta(days=1)
    if kind == WindowKind.YEAR:
        return date(anchor.year - 1, 1, 1)
    return anchor - timedelta(days=1)


def attendance_window(filter_name: Optional[str], custom_date: Optional[date] = None, *, today: Optional[date] = None) -> DateWindow:
    """Day window for the admin attendance views: today, yesterday or custom.

    Unknown filters fall back to today.
    """
    today = today or today_local()
    name = (filter_name or "today").strip().lower()

    if name == "yesterday":
        return window(WindowKind.DAY, today - timedelta(days=1))
    if name == WindowKind.CUSTOM.value:
        return window(WindowKind.CUSTOM, custom_date)
    return window(WindowKind.DAY, today)
