"""
Potion Brewing.

A brewing check is a talent check (Alchimie or Kochen (Tränke)) made harder
by the recipe's brewing difficulty, the laboratory, ingredient substitutions
and an optional voluntary handicap. On success the quality points decide the
potion quality:

    quality points = TaP* + 2 x voluntary handicap + astral charging + 2W6

A failed check always yields quality M.

Diluting a potion turns one into 1 + n potions, each n quality steps weaker;
diluted below A a potion becomes X (ineffective). The dilution check uses
the recipe's brewing difficulty, eased by what an analysis revealed.
"""

from dataclasses import dataclass
from enum import Enum
from math import ceil
from typing import Iterable, Optional, Sequence
import logging

from applicatus.data_models import Sampler, roll_spec, parse_dice
from applicatus.resolution.check_resolver import CheckOutcome, resolve_check

logger = logging.getLogger(__name__)


QUALITY_DICE = parse_dice("2W6")


class PotionQuality(str, Enum):
    """Potion quality, A weakest to F strongest, M failed, X diluted to nothing."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    M = "M"
    X = "X"


# Dilution steps walk down this order
DILUTION_ORDER = [
    PotionQuality.A,
    PotionQuality.B,
    PotionQuality.C,
    PotionQuality.D,
    PotionQuality.E,
    PotionQuality.F,
]

MAX_DILUTION_STEPS = 10


# Upper bound of quality points for each tier; anything above is F
QUALITY_TIERS = [
    (6, PotionQuality.A),
    (12, PotionQuality.B),
    (18, PotionQuality.C),
    (24, PotionQuality.D),
    (30, PotionQuality.E),
]


class SubstitutionType(Enum):
    """Ingredient substitutions and their difficulty modifier."""

    OPTIMIZING = ("Optimierende Substitution", -3)
    EQUIVALENT = ("Gleichwertige Substitution", 0)
    SENSIBLE = ("Sinnvolle Substitution", 3)
    POSSIBLE = ("Mögliche Substitution", 6)

    def __init__(self, display_name: str, modifier: int):
        self.display_name = display_name
        self.modifier = modifier


def quality_from_points(quality_points: int) -> PotionQuality:
    """Quality tier of a successful brew."""
    for upper_bound, quality in QUALITY_TIERS:
        if quality_points <= upper_bound:
            return quality
    return PotionQuality.F


def max_voluntary_handicap(brewing_difficulty: int) -> int:
    """At most one and a half times the brewing difficulty, rounded up."""
    return ceil(brewing_difficulty * 1.5)


def astral_charging_cost(quality_points: int) -> int:
    """Astral points for charging ``quality_points`` QP: 2^(n-1)."""
    if quality_points <= 0:
        return 0
    return 2 ** (quality_points - 1)


def max_quality_points_from_resource(available: int) -> int:
    """Most quality points that ``available`` astral points can charge."""
    if available <= 0:
        return 0
    points = 0
    while astral_charging_cost(points + 1) <= available:
        points += 1
    return points


@dataclass(frozen=True)
class BrewingResult:
    """Result of a brewing check."""

    check: CheckOutcome
    quality_points: int
    quality: PotionQuality
    total_modifier: int
    voluntary_handicap: int = 0
    astral_charging: int = 0
    quality_dice: tuple[int, ...] = ()
    astral_cost: int = 0

    @property
    def success(self) -> bool:
        return self.check.success

    def describe(self, reveal_quality: bool = True) -> str:
        lines = [f"Brauprobe: {self.check.describe('TaP*')}"]
        if self.success:
            dice = "+".join(str(d) for d in self.quality_dice)
            lines.append(f"Freiwilliger Handicap: {self.voluntary_handicap} -> +{2 * self.voluntary_handicap} QP")
            if self.astral_charging:
                lines.append(f"Astrale Aufladung: +{self.astral_charging} QP ({self.astral_cost} AsP)")
            lines.append(f"2W6: {dice} = {sum(self.quality_dice)}")
            lines.append(f"Gesamt: {self.quality_points} Qualitätspunkte")
        if reveal_quality:
            lines.append(f"Qualität: {self.quality.value}")
        lines.append(f"Modifikator gesamt: {self.total_modifier:+d}")
        return "\n".join(lines)


def total_brewing_modifier(
    brewing_difficulty: int,
    voluntary_handicap: int = 0,
    substitutions: Iterable[SubstitutionType] = (),
    lab_modifier: int = 0,
) -> int:
    """Sum of all modifiers of the brewing check."""
    return lab_modifier + brewing_difficulty + voluntary_handicap + sum(s.modifier for s in substitutions)


def brew_potion(
    rating: int,
    attributes: Sequence[int],
    brewing_difficulty: int,
    voluntary_handicap: int = 0,
    substitutions: Iterable[SubstitutionType] = (),
    lab_modifier: int = 0,
    mastery_points: int = 0,
    astral_charging: int = 0,
    available_astral: Optional[int] = None,
    rng: Optional[Sampler] = None,
    rolls: Optional[Sequence[int]] = None,
) -> BrewingResult:
    """
    Brew a potion.

    Args:
        rating: Talent rating (Alchimie or Kochen (Tränke))
        attributes: The three attributes of the talent check
        brewing_difficulty: The recipe's brewing difficulty
        voluntary_handicap: Extra difficulty taken for quality (0 or >= 2)
        substitutions: Ingredient substitutions used
        lab_modifier: Modifier for the available laboratory
        mastery_points: Astral points spent on magical mastery (+2 rating each)
        astral_charging: Quality points bought with astral energy
        available_astral: Astral points of the brewer; None skips the check
        rng: Sampler for the check and quality dice
        rolls: Predetermined check rolls

    Returns:
        BrewingResult with quality points and quality

    Raises:
        ValueError: On an invalid handicap, mastery or charging
    """
    substitutions = list(substitutions)
    max_handicap = max_voluntary_handicap(brewing_difficulty)
    if voluntary_handicap != 0 and voluntary_handicap < 2:
        raise ValueError(f"Voluntary handicap must be 0 or at least 2, got {voluntary_handicap}")
    if voluntary_handicap > max_handicap:
        raise ValueError(f"Voluntary handicap must be at most {max_handicap}, got {voluntary_handicap}")
    if mastery_points < 0:
        raise ValueError(f"Mastery points must not be negative, got {mastery_points}")
    if mastery_points > rating // 2:
        raise ValueError(f"At most {rating // 2} mastery points for rating {rating}, got {mastery_points}")
    if astral_charging < 0:
        raise ValueError(f"Astral charging must not be negative, got {astral_charging}")

    astral_cost = mastery_points + astral_charging_cost(astral_charging)
    if available_astral is not None and astral_cost > available_astral:
        raise ValueError(f"Not enough astral energy: need {astral_cost}, have {available_astral}")

    modifier = total_brewing_modifier(brewing_difficulty, voluntary_handicap, substitutions, lab_modifier)
    check = resolve_check(rating, modifier, attributes, exchanged_points=mastery_points, rng=rng, rolls=rolls)

    if not check.success:
        logger.info(f"Brewing failed: {check.describe('TaP*')}")
        return BrewingResult(
            check=check,
            quality_points=0,
            quality=PotionQuality.M,
            total_modifier=modifier,
            voluntary_handicap=voluntary_handicap,
            astral_charging=astral_charging,
            astral_cost=astral_cost,
        )

    dice = roll_spec(QUALITY_DICE, rng, "Brewing quality")
    quality_points = check.extra_points + 2 * voluntary_handicap + astral_charging + dice.total
    quality = quality_from_points(quality_points)
    logger.info(f"Brewed potion with {quality_points} QP, quality {quality.value}")
    return BrewingResult(
        check=check,
        quality_points=quality_points,
        quality=quality,
        total_modifier=modifier,
        voluntary_handicap=voluntary_handicap,
        astral_charging=astral_charging,
        quality_dice=tuple(dice.rolls),
        astral_cost=astral_cost,
    )


# =============================================================================
# DILUTION
# =============================================================================


def diluted_quality(quality: PotionQuality, steps: int) -> PotionQuality:
    """Quality after a successful dilution by ``steps``."""
    if quality is PotionQuality.M:
        return PotionQuality.M
    if quality is PotionQuality.X:
        return PotionQuality.X
    index = DILUTION_ORDER.index(quality) - steps
    return DILUTION_ORDER[index] if index >= 0 else PotionQuality.X


@dataclass(frozen=True)
class DilutionResult:
    """Result of a dilution check."""

    check: CheckOutcome
    original_quality: PotionQuality
    new_quality: PotionQuality
    dilution_steps: int
    total_modifier: int
    astral_cost: int = 0

    @property
    def success(self) -> bool:
        # A spoiled potion stays spoiled however the check goes
        return self.check.success and self.original_quality is not PotionQuality.M

    @property
    def potion_count(self) -> int:
        return self.dilution_steps + 1

    def describe(self, reveal_quality: bool = True) -> str:
        lines = [
            f"Verdünnungsprobe: {self.check.describe('TaP*')}",
            f"Anzahl Tränke: {self.potion_count}",
        ]
        if reveal_quality:
            lines.append(f"Neue Qualität: {self.new_quality.value}")
        lines.append(f"Modifikator gesamt: {self.total_modifier:+d}")
        return "\n".join(lines)


def dilute_potion(
    quality: PotionQuality,
    dilution_steps: int,
    rating: int,
    attributes: Sequence[int],
    brewing_difficulty: int,
    analysis_facilitation: int = 0,
    mastery_points: int = 0,
    available_astral: Optional[int] = None,
    rng: Optional[Sampler] = None,
    rolls: Optional[Sequence[int]] = None,
) -> DilutionResult:
    """
    Dilute a potion into ``dilution_steps + 1`` weaker potions.

    The check is always rolled, even for a spoiled (M) potion.

    Args:
        quality: Actual quality of the potion
        dilution_steps: Quality steps to dilute by (1-10)
        rating: Talent rating (Alchimie or Kochen (Tränke))
        attributes: The three attributes of the talent check
        brewing_difficulty: The recipe's brewing difficulty
        analysis_facilitation: Ease from analysing the recipe
        mastery_points: Astral points spent on magical mastery (at most the rating)
        available_astral: Astral points of the brewer; None skips the check
        rng: Sampler for the check
        rolls: Predetermined check rolls

    Returns:
        DilutionResult; a failed check spoils the potions (M)

    Raises:
        ValueError: On steps outside 1-10 or invalid mastery points
    """
    if not 1 <= dilution_steps <= MAX_DILUTION_STEPS:
        raise ValueError(f"Dilution steps must be between 1 and {MAX_DILUTION_STEPS}, got {dilution_steps}")
    if mastery_points < 0:
        raise ValueError(f"Mastery points must not be negative, got {mastery_points}")
    if mastery_points > max(0, rating):
        raise ValueError(f"At most {max(0, rating)} mastery points for rating {rating}, got {mastery_points}")
    if available_astral is not None and mastery_points > available_astral:
        raise ValueError(f"Not enough astral energy: need {mastery_points}, have {available_astral}")

    modifier = brewing_difficulty - analysis_facilitation
    check = resolve_check(rating, modifier, attributes, exchanged_points=mastery_points, rng=rng, rolls=rolls)

    if check.success:
        new_quality = diluted_quality(quality, dilution_steps)
    else:
        new_quality = PotionQuality.M
    logger.info(f"Diluted {quality.value} by {dilution_steps} steps into {new_quality.value}")
    return DilutionResult(
        check=check,
        original_quality=quality,
        new_quality=new_quality,
        dilution_steps=dilution_steps,
        total_modifier=modifier,
        astral_cost=mastery_points,
    )
