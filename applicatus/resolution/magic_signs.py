"""
Magic Sign Activation.

A magic sign (Zauberzeichen) is drawn outside of play; activating it is a
check on KL/IN/FF against the ritual knowledge rating (RkW). The sign's
activation modifier eases the check. The points left over are called RkP*.

Mechanics:
- Double or triple twenty spoils the sign (botch); a spoiled sign never
  takes effect
- A successful activation lasts for the sign's duration:
    RkW/2 days (rounded up), one month, one quarter, or until the next
    winter solstice (1 Firun)
- The Sigil of the Invisible Bearer lowers an object's weight by 2 stone
  per RkP*, never below 1 stone
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union
import logging

from applicatus.data_models import Sampler
from applicatus.resolution.check_resolver import CheckOutcome, resolve_check
from applicatus.timekeeping import (
    DerianDate,
    calculate_expiry_date,
    format_date,
    next_winter_solstice,
    parse_date_with_era,
)

logger = logging.getLogger(__name__)


RITUAL_POINTS_NAME = "RkP*"

# Stone of weight removed per RkP* by the Sigil of the Invisible Bearer
WEIGHT_REDUCTION_PER_POINT = 2


class MagicSignDuration(Enum):
    """How long an activated sign lasts."""

    HALF_RATING_DAYS = ("RkW/2 Tage", None)
    ONE_MONTH = ("1 Monat", "30 Tage")
    ONE_QUARTER = ("1 Quartal", "90 Tage")
    UNTIL_WINTER_SOLSTICE = ("Bis Wintersonnenwende", None)

    def __init__(self, display_name: str, duration_text: Optional[str]):
        self.display_name = display_name
        self.duration_text = duration_text

    @classmethod
    def from_name(cls, name: str) -> "MagicSignDuration":
        """Look up a duration by member or display name (case-insensitive)."""
        lowered = name.strip().lower()
        for duration in cls:
            if lowered in (duration.name.lower(), duration.display_name.lower()):
                return duration
        raise ValueError(f"Unknown magic sign duration: {name!r}")


def calculate_magic_sign_expiry(
    duration: MagicSignDuration,
    ritual_rating: int,
    current_date: Union[str, DerianDate],
) -> Union[str, DerianDate]:
    """
    Date on which an activated sign stops working.

    Args:
        duration: The sign's duration
        ritual_rating: Ritual knowledge rating (RkW) of the activator
        current_date: Date of the activation

    Returns:
        The expiry date in the same form as ``current_date``, or
        ``current_date`` unchanged when it cannot be parsed
    """
    if duration is MagicSignDuration.HALF_RATING_DAYS:
        days = (max(0, ritual_rating) + 1) // 2
        return calculate_expiry_date(current_date, f"{days} Tage")
    if duration.duration_text is not None:
        return calculate_expiry_date(current_date, duration.duration_text)

    if isinstance(current_date, DerianDate):
        return next_winter_solstice(current_date)
    parsed = parse_date_with_era(current_date)
    if parsed is None:
        logger.warning(f"Cannot parse date {current_date!r}; expiry left unchanged")
        return current_date
    date, era = parsed
    return format_date(next_winter_solstice(date), era)


def calculate_weight_reduction(ritual_points: int, original_weight: int) -> int:
    """
    Weight in stone of an object carrying the Sigil of the Invisible Bearer.

    Objects of at least 1 stone never drop below 1 stone.
    """
    if original_weight <= 0:
        return 0
    reduced = original_weight - WEIGHT_REDUCTION_PER_POINT * max(0, ritual_points)
    return max(1, reduced)


@dataclass(frozen=True)
class MagicSignActivationResult:
    """Result of a magic sign activation."""

    check: CheckOutcome
    duration: MagicSignDuration
    activation_modifier: int = 0
    expiry_date: Union[str, DerianDate, None] = None

    @property
    def success(self) -> bool:
        return self.check.success

    @property
    def ritual_points(self) -> int:
        return self.check.extra_points

    @property
    def is_botched(self) -> bool:
        return self.check.is_double_twenty or self.check.is_triple_twenty

    def describe(self) -> str:
        lines = [
            "Zauberzeichen-Aktivierung (KL/IN/FF)",
            f"RkW: {self.check.effective_rating}"
            + (f" {self.activation_modifier:+d} Erleichterung" if self.activation_modifier else ""),
            self.check.describe(RITUAL_POINTS_NAME),
        ]
        if self.is_botched:
            lines.append("Patzer - Zeichen verdorben!")
        elif self.expiry_date is not None:
            lines.append(f"Wirkt bis: {self.expiry_date}")
        return "\n".join(lines)


def activate_magic_sign(
    ritual_rating: int,
    cleverness: int,
    intuition: int,
    dexterity: int,
    activation_modifier: int = 0,
    duration: MagicSignDuration = MagicSignDuration.HALF_RATING_DAYS,
    current_date: Union[str, DerianDate, None] = None,
    rng: Optional[Sampler] = None,
    rolls: Optional[Sequence[int]] = None,
) -> MagicSignActivationResult:
    """
    Activate a magic sign.

    Args:
        ritual_rating: Ritual knowledge rating (RkW)
        cleverness: KL
        intuition: IN
        dexterity: FF
        activation_modifier: Ease granted by the sign; positive makes it easier
        duration: The sign's duration
        current_date: Activation date; None skips the expiry date
        rng: Sampler for the check
        rolls: Predetermined check rolls

    Returns:
        MagicSignActivationResult; the expiry date is set only for a
        successful activation
    """
    check = resolve_check(
        ritual_rating,
        -activation_modifier,
        (cleverness, intuition, dexterity),
        rng=rng,
        rolls=rolls,
    )
    result = MagicSignActivationResult(check=check, duration=duration, activation_modifier=activation_modifier)

    if result.is_botched:
        logger.info(f"Magic sign botched: {check.describe(RITUAL_POINTS_NAME)}")
        return result
    if not check.success or current_date is None:
        return result

    expiry = calculate_magic_sign_expiry(duration, ritual_rating, current_date)
    return MagicSignActivationResult(
        check=check,
        duration=duration,
        activation_modifier=activation_modifier,
        expiry_date=expiry,
    )
