from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Team role stored on the user row."""

    TEAM_MEMBER = "Team Member"
    TEAM_LEADER = "Team Leader"


class SuperRole(str, Enum):
    """Elevated role on top of the team role (e.g. managing AI summaries)."""

    ADMIN = "Admin"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    ON_LEAVE = "On Leave"


class SummaryType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class WindowKind(str, Enum):
    """Named period used to build a date window."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    CUSTOM = "custom"


class MilkPeriod(str, Enum):
    MORNING = "morning"
    EVENING = "evening"
