# app/services/scheduling/time_utils.py
"""
Wall-clock helpers shared by every scheduling component.

Times are minutes-of-day with no timezone; dates only matter for picking
the weekday.
"""
import enum
import re
from datetime import date

from app.core.exceptions import ValidationError

_HHMM_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])(:[0-5][0-9])?$")

MINUTES_PER_DAY = 24 * 60


class Weekday(str, enum.Enum):
    """Day names as stored in working-hours templates, indexed Sunday=0..Saturday=6"""
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @property
    def index(self) -> int:
        return list(Weekday).index(self)

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        return list(cls)[index]

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        # date.weekday() is Monday=0; shift so Sunday=0
        return cls.from_index((value.weekday() + 1) % 7)


def parse_hhmm(value: str, field: str = "time") -> str:
    """
    Validate an HH:MM string and return it normalised to zero-padded HH:MM.

    A trailing :SS component is accepted and dropped.

    Raises:
        ValidationError: if the value is not a valid wall-clock time
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be in HH:MM format")

    match = _HHMM_PATTERN.match(value.strip())
    if not match:
        raise ValidationError(f"{field} must be in HH:MM format")

    return f"{int(match.group(1)):02d}:{match.group(2)}"


def to_minutes(value: str) -> int:
    """Minutes since midnight for an HH:MM string"""
    normalised = parse_hhmm(value)
    hours, minutes = normalised.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total_minutes: int) -> str:
    """HH:MM for a minutes-of-day value; values past midnight wrap around"""
    total_minutes %= MINUTES_PER_DAY
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"
