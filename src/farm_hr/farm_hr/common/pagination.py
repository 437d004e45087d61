from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total_records: int) -> int:
        return math.ceil(total_records / self.limit) if total_records else 0

    def as_dict(self, total_records: int) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total_records": total_records,
            "total_pages": self.total_pages(total_records),
        }


def parse_page(page: Optional[Any], limit: Optional[Any]) -> Page:
    """Read page/limit query values; anything missing or not positive falls back to defaults."""

    def _as_int(value: Optional[Any], default: int) -> int:
        try:
            number = int(value)
        except (TypeError, ValueError):
            return default
        return number if number > 0 else default

    return Page(page=_as_int(page, DEFAULT_PAGE), limit=_as_int(limit, DEFAULT_PAGE_SIZE))
