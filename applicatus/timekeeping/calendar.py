"""
Aventurian (Derian) Calendar System.

Twelve god-months of 30 days each, followed by the five Nameless Days.
A year has exactly 365 days. Years are counted "BF" (after the Fall of Bosparan).

All date arithmetic goes through the linear day index:
    index = year * 365 + month_offset + day - 1
"""

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Optional
import logging
import re

logger = logging.getLogger(__name__)


DAYS_PER_MONTH = 30
NAMELESS_DAYS_COUNT = 5
DAYS_PER_YEAR = 12 * DAYS_PER_MONTH + NAMELESS_DAYS_COUNT  # 365
DEFAULT_ERA = "BF"

# Moon cycle of Mada
MADA_CYCLE = 28


class DerianMonth(str, Enum):
    """The twelve god-months plus the Nameless Days as a 13th pseudo-month."""

    PRAIOS = "Praios"
    RONDRA = "Rondra"
    EFFERD = "Efferd"
    TRAVIA = "Travia"
    BORON = "Boron"
    HESINDE = "Hesinde"
    FIRUN = "Firun"
    TSA = "Tsa"
    PHEX = "Phex"
    PERAINE = "Peraine"
    INGERIMM = "Ingerimm"
    RAHJA = "Rahja"
    NAMELESS_DAYS = "Namenlose Tage"

    @property
    def number(self) -> int:
        """1-12 for the god-months, 13 for the Nameless Days."""
        return MONTH_ORDER.index(self) + 1

    @property
    def days(self) -> int:
        return NAMELESS_DAYS_COUNT if self is DerianMonth.NAMELESS_DAYS else DAYS_PER_MONTH

    @property
    def offset(self) -> int:
        """Days of the year before the first day of this month."""
        return (self.number - 1) * DAYS_PER_MONTH


MONTH_ORDER: list[DerianMonth] = list(DerianMonth)

# Lookup by name for convenience
MONTH_BY_NAME: dict[str, DerianMonth] = {m.value.lower(): m for m in DerianMonth}


class Weekday(str, Enum):
    """The seven days of the Aventurian week. Day index 0 (1 Praios 0 BF) is a Windstag."""

    WINDSTAG = "Windstag"
    ERDSTAG = "Erdstag"
    MARKTTAG = "Markttag"
    PRAIOSTAG = "Praiostag"
    ROHALSTAG = "Rohalstag"
    FEUERTAG = "Feuertag"
    WASSERTAG = "Wassertag"


class MoonPhase(str, Enum):
    """Phases of Mada."""

    NEW_MOON = "Neumond"
    WAXING_CRESCENT = "Zunehmende Sichel"
    FIRST_QUARTER = "Erstes Viertel"
    WAXING_GIBBOUS = "Zunehmender Mond"
    FULL_MOON = "Vollmond"
    WANING_GIBBOUS = "Abnehmender Mond"
    LAST_QUARTER = "Letztes Viertel"
    WANING_CRESCENT = "Abnehmende Sichel"


@total_ordering
@dataclass(frozen=True)
class DerianDate:
    """
    A date of the Aventurian calendar.

    Attributes:
        day: 1-30, or 1-5 during the Nameless Days
        month: The month
        year: Year BF (may be negative for dates before the Fall)
    """

    day: int
    month: DerianMonth
    year: int

    def __post_init__(self):
        if not 1 <= self.day <= self.month.days:
            raise ValueError(f"Invalid day {self.day} for {self.month.value}")

    def to_day_index(self) -> int:
        return to_day_index(self)

    def add_days(self, days: int) -> "DerianDate":
        """Return the date ``days`` later (earlier for negative values)."""
        return from_day_index(to_day_index(self) + days)

    def __lt__(self, other: "DerianDate") -> bool:
        if not isinstance(other, DerianDate):
            return NotImplemented
        return to_day_index(self) < to_day_index(other)

    def __str__(self) -> str:
        return format_date(self)


def to_day_index(date: DerianDate) -> int:
    """Linear day index of a date."""
    return date.year * DAYS_PER_YEAR + date.month.offset + date.day - 1


def from_day_index(index: int) -> DerianDate:
    """Inverse of to_day_index."""
    year, day_of_year = divmod(index, DAYS_PER_YEAR)
    month_index, day_in_month = divmod(day_of_year, DAYS_PER_MONTH)
    if month_index >= 12:
        return DerianDate(day=day_of_year - 12 * DAYS_PER_MONTH + 1, month=DerianMonth.NAMELESS_DAYS, year=year)
    return DerianDate(day=day_in_month + 1, month=MONTH_ORDER[month_index], year=year)


DATE_PATTERN = re.compile(
    r"^\s*(\d+)\.?\s+(Namenlose\s+Tage|[A-Za-zÄÖÜäöüß]+)\s+(-?\d+)(?:\s+([A-Za-z]+))?\s*$",
    re.IGNORECASE,
)


def parse_date_with_era(text: str) -> Optional[tuple[DerianDate, str]]:
    """Parse "<day> <month> <year> [era]", keeping the era suffix."""
    if not text:
        return None
    match = DATE_PATTERN.match(text)
    if not match:
        return None

    month = get_month_by_name(" ".join(match.group(2).split()))
    if month is None:
        return None
    day = int(match.group(1))
    if not 1 <= day <= month.days:
        return None
    era = match.group(4) or DEFAULT_ERA
    return DerianDate(day=day, month=month, year=int(match.group(3))), era


def parse_date(text: str) -> Optional[DerianDate]:
    """
    Parse a date string such as "15 Praios 1040 BF" or "3 Namenlose Tage 1040 BF".

    Returns:
        The DerianDate, or None if the text is not a valid date
    """
    parsed = parse_date_with_era(text)
    return parsed[0] if parsed else None


def format_date(date: DerianDate, era: str = DEFAULT_ERA) -> str:
    """Format a date as "<day> <month> <year> <era>"."""
    return f"{date.day} {date.month.value} {date.year} {era}"


def get_month_by_name(name: str) -> Optional[DerianMonth]:
    """Get a month by its name (case-insensitive)."""
    return MONTH_BY_NAME.get(name.lower())


def get_year_length() -> int:
    """Get the total number of days in the Aventurian year."""
    return sum(m.days for m in DerianMonth)


def validate_date(day: int, month_name: str, year: int) -> bool:
    """Check whether day, month name and year form a valid date."""
    month = get_month_by_name(month_name)
    return month is not None and 1 <= day <= month.days


def is_expired(expiry_date: str, current_date: str) -> bool:
    """
    Check whether ``current_date`` lies after ``expiry_date``.

    Unparseable dates (including the unlimited marker) never expire.
    """
    expiry = parse_date(expiry_date)
    current = parse_date(current_date)
    if expiry is None or current is None:
        return False
    return current > expiry


def get_weekday(date: DerianDate) -> Weekday:
    """Weekday of a date."""
    return list(Weekday)[to_day_index(date) % 7]


def get_mada_phase(date: DerianDate) -> MoonPhase:
    """Phase of Mada on a date (28-day cycle)."""
    day_in_cycle = (to_day_index(date) + 1) % MADA_CYCLE
    if day_in_cycle == 0:
        return MoonPhase.NEW_MOON
    elif day_in_cycle <= 3:
        return MoonPhase.WAXING_CRESCENT
    elif day_in_cycle <= 6:
        return MoonPhase.FIRST_QUARTER
    elif day_in_cycle <= 10:
        return MoonPhase.WAXING_GIBBOUS
    elif day_in_cycle <= 14:
        return MoonPhase.FULL_MOON
    elif day_in_cycle <= 17:
        return MoonPhase.WANING_GIBBOUS
    elif day_in_cycle <= 20:
        return MoonPhase.LAST_QUARTER
    return MoonPhase.WANING_CRESCENT


def next_winter_solstice(date: DerianDate) -> DerianDate:
    """The next 1 Firun strictly after ``date``."""
    solstice = DerianDate(day=1, month=DerianMonth.FIRUN, year=date.year)
    if solstice <= date:
        solstice = DerianDate(day=1, month=DerianMonth.FIRUN, year=date.year + 1)
    return solstice
