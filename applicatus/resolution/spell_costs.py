"""
Spell resource costs and spell storage (Applicatus).

Resource costs are posted as a base cost plus an optional formula over the
ZfP* of the casting ("16-ZfP/2"). Storing a spell with the Applicatus costs
a rolled amount of astral points depending on how long the spell is stored,
and requires an Applicatus check before the stored spell's own check.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union
import logging

from applicatus.data_models import DiceSpec, Sampler, parse_dice, roll_spec
from applicatus.formula import evaluate
from applicatus.resolution.check_resolver import CheckOutcome, resolve_check
from applicatus.timekeeping import DerianDate, calculate_effect_expiry

logger = logging.getLogger(__name__)


# Kraftkontrolle and Kraftfokus each save one point
MAX_COST_REDUCING_TRAITS = 2


class CastingTradition(str, Enum):
    """Casting tradition; decides what a failed spell costs."""

    GUILD = "guild"  # Gildenmagier: half cost, rounded up
    WITCH = "witch"  # Hexe: a third of the cost, rounded to nearest


class ApplicatusDuration(Enum):
    """How long a spell stays stored, with check difficulty and cost dice."""

    DAY = ("Tag", 0, "2W6")
    MOON = ("Mond", 3, "3W6")
    QUARTER = ("Quartal", 5, "3W6+2")
    WINTER_SOLSTICE = ("Wintersonnenwende", 7, "4W6")

    def __init__(self, display_name: str, difficulty_modifier: int, cost_dice: str):
        self.display_name = display_name
        self.difficulty_modifier = difficulty_modifier
        self.cost_dice = cost_dice

    @property
    def cost_spec(self) -> DiceSpec:
        return parse_dice(self.cost_dice)

    @classmethod
    def from_name(cls, name: str) -> "ApplicatusDuration":
        """Look up a duration by member or display name (case-insensitive)."""
        lowered = name.strip().lower()
        for duration in cls:
            if lowered in (duration.name.lower(), duration.display_name.lower()):
                return duration
        raise ValueError(f"Unknown Applicatus duration: {name!r}")


def _validate_traits(cost_reducing_traits: int) -> None:
    if not 0 <= cost_reducing_traits <= MAX_COST_REDUCING_TRAITS:
        raise ValueError(
            f"Cost-reducing traits must be between 0 and {MAX_COST_REDUCING_TRAITS}, "
            f"got {cost_reducing_traits}"
        )


def calculate_resource_cost(
    formula: Optional[str],
    extra_points: int,
    success: bool,
    base_cost: int = 0,
    tradition: CastingTradition = CastingTradition.GUILD,
    cost_reducing_traits: int = 0,
) -> int:
    """
    Calculate the astral point cost of a casting.

    Args:
        formula: Cost formula over ZfP, or None for base cost only
        extra_points: ZfP* of the check; a failed check counts as 0
        success: Whether the check succeeded
        base_cost: Flat cost added to the formula value
        tradition: Casting tradition, used for failed checks
        cost_reducing_traits: Number of cost-reducing traits (0-2)

    Returns:
        The cost in astral points

    Raises:
        ValueError: On negative extra points for a success, negative base
            cost, or a trait count outside 0-2
    """
    if base_cost < 0:
        raise ValueError(f"Base cost must not be negative, got {base_cost}")
    _validate_traits(cost_reducing_traits)
    if success and extra_points < 0:
        raise ValueError(f"A successful check cannot have negative extra points ({extra_points})")

    # A failed check has no ZfP* left to pay with
    points = extra_points if success else max(0, extra_points)
    formula_value = evaluate(formula, points) if formula else None
    if formula and formula_value is None:
        logger.warning(f"Unusable cost formula {formula!r}; charging base cost only")
    raw_cost = max(0, base_cost + (formula_value or 0))

    if success:
        if raw_cost == 0:
            return 0
        return max(1, raw_cost - cost_reducing_traits)

    if tradition is CastingTradition.WITCH:
        return (raw_cost + 1) // 3
    return (raw_cost + 1) // 2


def calculate_applicatus_cost(
    duration: ApplicatusDuration,
    saving_percent: int = 0,
    cost_reducing_traits: int = 0,
    rng: Optional[Sampler] = None,
) -> tuple[int, int, str]:
    """
    Roll the astral point cost of storing a spell.

    Args:
        duration: Storage duration, decides the cost dice
        saving_percent: Percentage saved on the rolled cost (rounded down)
        cost_reducing_traits: Number of cost-reducing traits (0-2)
        rng: Sampler for the cost dice

    Returns:
        Tuple of (final cost, rolled cost, roll description)

    Raises:
        ValueError: On a saving outside 0-100 or a trait count outside 0-2
    """
    if not 0 <= saving_percent <= 100:
        raise ValueError(f"Saving percent must be between 0 and 100, got {saving_percent}")
    _validate_traits(cost_reducing_traits)

    result = roll_spec(duration.cost_spec, rng, f"Applicatus {duration.display_name}")
    base = result.total
    saving = base * saving_percent // 100
    final = max(0, base - saving - cost_reducing_traits)
    return final, base, str(result)


@dataclass(frozen=True)
class ApplicatusCheckResult:
    """Outcome of storing a spell: the Applicatus check and the spell check."""

    applicatus: CheckOutcome
    spell: Optional[CheckOutcome]
    expiry_date: Union[str, DerianDate, None] = None

    @property
    def success(self) -> bool:
        return self.spell is not None and self.spell.success

    def describe(self) -> str:
        lines = [f"Applicatus: {self.applicatus.describe()}"]
        if self.spell is None:
            lines.append("Zauber: nicht gewirkt")
        else:
            lines.append(f"Zauber: {self.spell.describe()}")
        if self.expiry_date is not None:
            lines.append(f"Wirkt bis: {self.expiry_date}")
        return "\n".join(lines)


def resolve_applicatus_check(
    spell_rating: int,
    spell_difficulty: int,
    spell_attributes: Sequence[int],
    applicatus_rating: int,
    cleverness: int,
    dexterity: int,
    duration: ApplicatusDuration = ApplicatusDuration.DAY,
    applicatus_difficulty: int = 0,
    effect_duration: Optional[str] = None,
    current_date: Union[str, DerianDate, None] = None,
    rng: Optional[Sampler] = None,
) -> ApplicatusCheckResult:
    """
    Store a spell: Applicatus check (KL/FF/FF) first, then the spell's check.

    The stored spell is only checked when the Applicatus succeeds. The
    duration's difficulty modifier is added to the Applicatus check.

    With ``effect_duration`` (e.g. "3*ZfP*+2 Tage") and ``current_date`` a
    successful spell gets the date its long-lasting effect ends.
    """
    applicatus = resolve_check(
        applicatus_rating,
        applicatus_difficulty + duration.difficulty_modifier,
        (cleverness, dexterity, dexterity),
        rng=rng,
    )
    if not applicatus.success:
        logger.info("Applicatus failed; stored spell not cast")
        return ApplicatusCheckResult(applicatus=applicatus, spell=None)

    spell = resolve_check(spell_rating, spell_difficulty, spell_attributes, rng=rng)
    expiry = None
    if spell.success and effect_duration and current_date is not None:
        expiry = calculate_effect_expiry(current_date, effect_duration, spell.extra_points, rng)
    return ApplicatusCheckResult(applicatus=applicatus, spell=spell, expiry_date=expiry)
