"""Report-summary periods.

One policy for every caller: local calendar dates and Sunday-based weeks
(the same conventions as ``common.date_window``).

* ``to_date=True`` (AI generation): the period runs up to today.
* ``to_date=False`` (manual creation): the period runs to the end of the
  calendar week/month.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Union

from ..common.date_window import month_end, week_start
from ..common.datetime_utils import today_local
from ..core.enums import SummaryType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ReportPeriod:
    start_date: date
    end_date: date


def parse_summary_type(value: Union[str, SummaryType, None]) -> SummaryType:
    if not value:
        raise ValidationError("Type is required")
    try:
        return SummaryType(value)
    except ValueError:
        raise ValidationError("Invalid summary type")


def resolve(summary_type: Union[str, SummaryType], *, today: Optional[date] = None, to_date: bool = True) -> ReportPeriod:
    summary_type = parse_summary_type(summary_type)
    today = today or today_local()

    if summary_type == SummaryType.DAILY:
        return ReportPeriod(start_date=today, end_date=today)

    if summary_type == SummaryType.WEEKLY:
        start = week_start(today)
        return ReportPeriod(start_date=start, end_date=today if to_date else start + timedelta(days=6))

    start = today.replace(day=1)
    return ReportPeriod(start_date=start, end_date=today if to_date else month_end(today))
