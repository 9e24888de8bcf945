"""
Three-Attribute Check Resolution.

Implements the 3W20 check used for talents and spells.

Check Mechanics:
- Roll three W20, one against each attribute of the check
- The rating minus the difficulty is the point budget
- Every roll above its attribute consumes the overflow from the budget
- The remaining budget is the extra points (TaP* / ZfP*); success iff >= 0
- Two or three 1s: automatic success, two or three 20s: automatic failure
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence
import logging

from applicatus.data_models import Sampler, system_sampler

logger = logging.getLogger(__name__)


CHECK_DIE_SIDES = 20
ATTRIBUTES_PER_CHECK = 3


class CriticalKind(str, Enum):
    """Classification of a check roll."""

    NONE = "none"
    DOUBLE_ONE = "double_one"
    TRIPLE_ONE = "triple_one"
    DOUBLE_TWENTY = "double_twenty"
    TRIPLE_TWENTY = "triple_twenty"

    @property
    def forces_success(self) -> bool:
        return self in (CriticalKind.DOUBLE_ONE, CriticalKind.TRIPLE_ONE)

    @property
    def forces_failure(self) -> bool:
        return self in (CriticalKind.DOUBLE_TWENTY, CriticalKind.TRIPLE_TWENTY)


@dataclass(frozen=True)
class CheckOutcome:
    """
    Result of a three-attribute check.

    Created fresh per check and never mutated; callers derive costs and
    qualities from it.
    """

    success: bool
    rolls: tuple[int, int, int]
    extra_points: int
    is_double_one: bool = False
    is_triple_one: bool = False
    is_double_twenty: bool = False
    is_triple_twenty: bool = False

    # Inputs, for display
    effective_rating: int = 0
    difficulty: int = 0

    @property
    def critical(self) -> CriticalKind:
        if self.is_triple_one:
            return CriticalKind.TRIPLE_ONE
        if self.is_double_one:
            return CriticalKind.DOUBLE_ONE
        if self.is_triple_twenty:
            return CriticalKind.TRIPLE_TWENTY
        if self.is_double_twenty:
            return CriticalKind.DOUBLE_TWENTY
        return CriticalKind.NONE

    def describe(self, points_name: str = "ZfP*") -> str:
        """One-line summary, e.g. "Erfolg (4/12/9), ZfP* 3"."""
        rolls = "/".join(str(r) for r in self.rolls)
        verdict = "Erfolg" if self.success else "Misserfolg"
        summary = f"{verdict} ({rolls}), {points_name} {self.extra_points}"
        critical = self.critical
        if critical is CriticalKind.TRIPLE_ONE:
            summary += " - Dreifach-1!"
        elif critical is CriticalKind.DOUBLE_ONE:
            summary += " - Doppel-1!"
        elif critical is CriticalKind.TRIPLE_TWENTY:
            summary += " - Dreifach-20!"
        elif critical is CriticalKind.DOUBLE_TWENTY:
            summary += " - Doppel-20!"
        return summary


def effective_rating(base: int, exchanged_points: int = 0) -> int:
    """
    Rating after exchanging resource points for rating.

    Each exchanged point adds 2, up to twice the base rating.

    Raises:
        ValueError: If ``exchanged_points`` is negative
    """
    if exchanged_points < 0:
        raise ValueError(f"Exchanged points must not be negative, got {exchanged_points}")
    boosted = base + 2 * exchanged_points
    cap = 2 * base
    if base >= 0:
        return min(boosted, cap)
    # For a negative base the cap bounds from below
    return max(boosted, cap)


def classify_rolls(rolls: Sequence[int]) -> CriticalKind:
    """Classify three check rolls."""
    ones = sum(1 for r in rolls if r == 1)
    twenties = sum(1 for r in rolls if r == CHECK_DIE_SIDES)
    if ones == 3:
        return CriticalKind.TRIPLE_ONE
    if ones == 2:
        return CriticalKind.DOUBLE_ONE
    if twenties == 3:
        return CriticalKind.TRIPLE_TWENTY
    if twenties == 2:
        return CriticalKind.DOUBLE_TWENTY
    return CriticalKind.NONE


def resolve_check(
    rating: int,
    difficulty: int,
    attributes: Sequence[int],
    exchanged_points: int = 0,
    rng: Optional[Sampler] = None,
    rolls: Optional[Sequence[int]] = None,
) -> CheckOutcome:
    """
    Resolve a three-attribute check.

    Args:
        rating: Skill rating (TaW/ZfW)
        difficulty: Difficulty modifier; positive makes the check harder
        attributes: The three attribute values of the check
        exchanged_points: Resource points exchanged for +2 rating each
        rng: Sampler for the three W20
        rolls: Predetermined rolls instead of sampling

    Returns:
        CheckOutcome with success, rolls and extra points

    Raises:
        ValueError: On malformed attributes or rolls
    """
    if len(attributes) != ATTRIBUTES_PER_CHECK:
        raise ValueError(f"A check needs exactly 3 attributes, got {len(attributes)}")

    skill = effective_rating(rating, exchanged_points)

    if rolls is None:
        sample = rng or system_sampler
        rolls = [sample(CHECK_DIE_SIDES) for _ in range(ATTRIBUTES_PER_CHECK)]
    if len(rolls) != ATTRIBUTES_PER_CHECK:
        raise ValueError(f"A check needs exactly 3 rolls, got {len(rolls)}")
    for roll in rolls:
        if not 1 <= roll <= CHECK_DIE_SIDES:
            raise ValueError(f"Check roll out of range 1-20: {roll}")

    roll_tuple = (rolls[0], rolls[1], rolls[2])
    critical = classify_rolls(roll_tuple)
    budget = max(0, skill - difficulty)

    if critical.forces_success:
        extra = budget
        success = True
    elif critical.forces_failure:
        extra = 0
        success = False
    else:
        overflow = sum(max(0, roll - attribute) for roll, attribute in zip(roll_tuple, attributes))
        extra = budget - overflow
        success = extra >= 0

    outcome = CheckOutcome(
        success=success,
        rolls=roll_tuple,
        extra_points=extra,
        is_double_one=critical is CriticalKind.DOUBLE_ONE,
        is_triple_one=critical is CriticalKind.TRIPLE_ONE,
        is_double_twenty=critical is CriticalKind.DOUBLE_TWENTY,
        is_triple_twenty=critical is CriticalKind.TRIPLE_TWENTY,
        effective_rating=skill,
        difficulty=difficulty,
    )
    logger.debug(
        f"Check rating={skill} difficulty={difficulty} attributes={tuple(attributes)}: "
        f"{outcome.describe()}"
    )
    return outcome


@dataclass(frozen=True)
class AttributeCheckResult:
    """Result of a single-attribute W20 check."""

    success: bool
    roll: int
    attribute: int
    difficulty: int = 0

    @property
    def margin(self) -> int:
        """Points to spare; negative on failure."""
        return self.attribute - self.difficulty - self.roll


def resolve_attribute_check(
    attribute: int,
    difficulty: int = 0,
    rng: Optional[Sampler] = None,
) -> AttributeCheckResult:
    """
    Roll one W20 against an attribute.

    Success iff roll + difficulty <= attribute.
    """
    roll = (rng or system_sampler)(CHECK_DIE_SIDES)
    return AttributeCheckResult(
        success=roll + difficulty <= attribute,
        roll=roll,
        attribute=attribute,
        difficulty=difficulty,
    )
