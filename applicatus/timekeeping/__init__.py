"""
Aventurian calendar and duration handling.

Date arithmetic, shelf-life expiry and effect durations.
"""

from applicatus.timekeeping.calendar import (
    DAYS_PER_YEAR,
    DerianDate,
    DerianMonth,
    MoonPhase,
    Weekday,
    format_date,
    from_day_index,
    get_mada_phase,
    get_weekday,
    is_expired,
    next_winter_solstice,
    parse_date,
    parse_date_with_era,
    to_day_index,
    validate_date,
)
from applicatus.timekeeping.durations import (
    UNLIMITED,
    UNLIMITED_DATE,
    DurationEvaluation,
    calculate_effect_expiry,
    calculate_expiry_date,
    evaluate_duration_specification,
    resolve_duration,
)

__all__ = [
    "DAYS_PER_YEAR",
    "DerianDate",
    "DerianMonth",
    "MoonPhase",
    "Weekday",
    "format_date",
    "from_day_index",
    "get_mada_phase",
    "get_weekday",
    "is_expired",
    "next_winter_solstice",
    "parse_date",
    "parse_date_with_era",
    "to_day_index",
    "validate_date",
    "UNLIMITED",
    "UNLIMITED_DATE",
    "DurationEvaluation",
    "calculate_effect_expiry",
    "calculate_expiry_date",
    "evaluate_duration_specification",
    "resolve_duration",
]
