"""
Duration and shelf-life resolution.

Resolves the duration texts of recipes and spells into day counts:

- "3 Monde", "1 Jahr", "2 Wochen"      fixed amount times unit
- "W3+1 Monate", "2W6 Tage"            rolled amount times unit
- "Etwa 3 Wochen"                      treated as exactly 3 weeks
- "einige Jahre" / "mehrere Jahre"     3 / 5 units
- "unbegrenzt", "ewig"                 unlimited
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
import logging

from applicatus.data_models import Sampler, roll_dice, roll_spec, try_parse_dice
from applicatus.timekeeping.calendar import (
    DerianDate,
    format_date,
    from_day_index,
    parse_date_with_era,
    to_day_index,
)

logger = logging.getLogger(__name__)


class DurationSentinel(str, Enum):
    """Marker for durations that never run out."""

    UNLIMITED = "unbegrenzt"


UNLIMITED = DurationSentinel.UNLIMITED

# Expiry "date" of anything with unlimited shelf life
UNLIMITED_DATE = "Unbegrenzt"

UNIT_DAYS: dict[str, int] = {
    "tag": 1,
    "tage": 1,
    "tagen": 1,
    "woche": 7,
    "wochen": 7,
    "mond": 30,
    "monde": 30,
    "monden": 30,
    "monat": 30,
    "monate": 30,
    "monaten": 30,
    "jahr": 365,
    "jahre": 365,
    "jahren": 365,
}

# Rulebook idioms: "einige Jahre" means three years, "mehrere Jahre" five
IDIOM_AMOUNTS: dict[str, int] = {
    "einige": 3,
    "mehrere": 5,
}

UNLIMITED_WORDS = ("ewig", "unendlich")
APPROXIMATION_WORDS = ("etwa", "ca.", "ungefähr")


def unit_to_days(unit: str) -> Optional[int]:
    """Day equivalent of a unit word, or None if it is not a duration unit."""
    return UNIT_DAYS.get(unit.strip().lower())


def resolve_duration(
    text: str,
    rng: Optional[Sampler] = None,
) -> Union[int, DurationSentinel, None]:
    """
    Resolve a duration text into a number of days.

    Args:
        text: Duration text, e.g. "3 Monde", "W3+1 Monate", "unbegrenzt"
        rng: Sampler for rolled durations

    Returns:
        Day count, UNLIMITED, or None if the text cannot be resolved
    """
    if not text or not text.strip():
        return None

    lowered = text.strip().lower()
    if "unbegrenzt" in lowered or lowered in UNLIMITED_WORDS:
        return UNLIMITED

    parts = lowered.split()
    if parts and parts[0] in APPROXIMATION_WORDS:
        parts = parts[1:]
    if len(parts) != 2:
        logger.debug(f"Unrecognized duration {text!r}")
        return None

    amount_text, unit = parts
    factor = unit_to_days(unit)
    if factor is None:
        logger.debug(f"Unknown duration unit in {text!r}")
        return None

    if amount_text in IDIOM_AMOUNTS:
        amount = IDIOM_AMOUNTS[amount_text]
    elif amount_text.isdigit():
        amount = int(amount_text)
    else:
        spec = try_parse_dice(amount_text)
        if spec is None:
            logger.debug(f"Unrecognized duration amount in {text!r}")
            return None
        amount = roll_spec(spec, rng, f"Duration {text}").total

    return max(0, amount) * factor


def calculate_expiry_date(
    current_date: Union[str, DerianDate],
    duration_text: str,
    rng: Optional[Sampler] = None,
) -> Union[str, DerianDate]:
    """
    Calculate the date on which something with the given shelf life expires.

    Args:
        current_date: Date string ("15 Praios 1040 BF") or DerianDate
        duration_text: Shelf life, e.g. "3 Monde"
        rng: Sampler for rolled shelf lives

    Returns:
        The expiry date in the same form as ``current_date``, UNLIMITED_DATE
        for unlimited shelf life, or ``current_date`` unchanged when either
        input cannot be parsed.
    """
    if isinstance(current_date, DerianDate):
        date, era = current_date, None
    else:
        parsed = parse_date_with_era(current_date)
        if parsed is None:
            logger.warning(f"Cannot parse date {current_date!r}; expiry left unchanged")
            return current_date
        date, era = parsed

    days = resolve_duration(duration_text, rng)
    if days is None:
        logger.warning(f"Cannot resolve shelf life {duration_text!r}; expiry left unchanged")
        return current_date
    if days is UNLIMITED:
        return UNLIMITED_DATE

    expiry = from_day_index(to_day_index(date) + days)
    if era is None:
        return expiry
    return format_date(expiry, era)


# =============================================================================
# EFFECT DURATION SPECIFICATIONS
# =============================================================================


@dataclass(frozen=True)
class DurationEvaluation:
    """An evaluated effect duration such as "14 Tage"."""

    amount: int
    unit: str

    def to_duration_text(self) -> str:
        return f"{self.amount} {self.unit}"


class _DurationExpression:
    """
    Parser for duration expressions: sums and products of numbers, ``ZfP*``
    and dice terms (``3*ZfP*+2``, ``2W6+ZfP*``).
    """

    POINTS_KEYWORD = "ZFP*"

    def __init__(self, text: str, points: int, rng: Optional[Sampler]):
        self._text = text
        self._points = points
        self._rng = rng
        self._index = 0

    def parse(self) -> Optional[int]:
        value = self._parse_sum()
        self._skip_whitespace()
        if value is None or self._index != len(self._text):
            return None
        return value

    def _parse_sum(self) -> Optional[int]:
        value = self._parse_product()
        if value is None:
            return None
        while True:
            self._skip_whitespace()
            if self._match("+"):
                rhs = self._parse_product()
                if rhs is None:
                    return None
                value += rhs
            elif self._match("-"):
                rhs = self._parse_product()
                if rhs is None:
                    return None
                value -= rhs
            else:
                return value

    def _parse_product(self) -> Optional[int]:
        value = self._parse_factor()
        if value is None:
            return None
        while True:
            self._skip_whitespace()
            if not self._match("*"):
                return value
            rhs = self._parse_factor()
            if rhs is None:
                return None
            value *= rhs

    def _parse_factor(self) -> Optional[int]:
        self._skip_whitespace()
        if self._match("+"):
            return self._parse_factor()
        if self._match("-"):
            value = self._parse_factor()
            return -value if value is not None else None
        if self._match_keyword(self.POINTS_KEYWORD):
            return self._points

        digits = self._read_digits()
        if digits:
            if self._peek().lower() == "w":
                return self._roll_term(int(digits))
            return int(digits)
        if self._peek().lower() == "w":
            return self._roll_term(1)
        return None

    def _roll_term(self, count: int) -> Optional[int]:
        if count <= 0:
            return None
        self._index += 1
        sides = self._read_digits()
        if not sides or int(sides) < 2:
            return None
        return roll_dice(f"{count}W{sides}", self._rng)

    def _skip_whitespace(self) -> None:
        while self._index < len(self._text) and self._text[self._index].isspace():
            self._index += 1

    def _read_digits(self) -> str:
        start = self._index
        while self._index < len(self._text) and self._text[self._index].isdigit():
            self._index += 1
        return self._text[start:self._index]

    def _match(self, expected: str) -> bool:
        if self._peek() == expected:
            self._index += 1
            return True
        return False

    def _match_keyword(self, keyword: str) -> bool:
        candidate = self._text[self._index:self._index + len(keyword)]
        if candidate.upper() == keyword:
            self._index += len(keyword)
            return True
        return False

    def _peek(self) -> str:
        return self._text[self._index] if self._index < len(self._text) else ""


def evaluate_duration_specification(
    specification: str,
    points: int,
    rng: Optional[Sampler] = None,
) -> Optional[DurationEvaluation]:
    """
    Evaluate an effect duration such as "3*ZfP*+2 Tage".

    Args:
        specification: Expression followed by a unit word
        points: ZfP* of the casting
        rng: Sampler for dice terms

    Returns:
        The evaluated duration, or None if the text is invalid or the
        amount is not positive
    """
    trimmed = (specification or "").strip()
    parts = trimmed.split()
    if len(parts) < 2:
        return None
    unit = parts[-1]
    if unit_to_days(unit) is None:
        return None
    expression = trimmed[: -len(unit)].strip()
    amount = _DurationExpression(expression, points, rng).parse()
    if amount is None or amount <= 0:
        return None
    return DurationEvaluation(amount=amount, unit=unit)


def calculate_effect_expiry(
    current_date: Union[str, DerianDate],
    specification: str,
    points: int,
    rng: Optional[Sampler] = None,
) -> Union[str, DerianDate, None]:
    """
    Expiry date of a long-lasting effect such as a stored spell.

    Args:
        current_date: Date the effect starts
        specification: Effect duration, e.g. "3*ZfP*+2 Tage"
        points: ZfP* of the casting
        rng: Sampler for dice terms

    Returns:
        The expiry date in the same form as ``current_date``, or None when
        the specification does not evaluate to a positive duration
    """
    evaluation = evaluate_duration_specification(specification, points, rng)
    if evaluation is None:
        logger.debug(f"No effect duration from {specification!r} with ZfP*={points}")
        return None
    return calculate_expiry_date(current_date, evaluation.to_duration_text(), rng)
