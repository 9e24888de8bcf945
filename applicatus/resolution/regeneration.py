"""
Nightly Regeneration.

Life energy (LE) regenerates W6 per night, plus the rest modifier and any
personal bonus. A successful KO roll on a W20 adds one more point.

Astral energy (AE) regenerates the same way with an IN roll, or with
Meisterliche Regeneration a fixed 1/3 of max(KL, IN) (rounded) + 3
instead of the W6 and modifier. Karma energy (KE) regenerates 1 point.

The rest modifier ranges from -6 (bad weather, no camp) to +2 (a good bed).
Gains never drop below 0; the attribute roll bonus comes after that floor.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from applicatus.data_models import Sampler, system_sampler

logger = logging.getLogger(__name__)


MIN_REST_MODIFIER = -6
MAX_REST_MODIFIER = 2

REGENERATION_DIE = 6
ATTRIBUTE_DIE = 20
MASTERY_REGENERATION_BASE = 3
KARMA_REGENERATION = 1


def clamp_rest_modifier(modifier: int) -> int:
    """Clamp the rest modifier to the allowed range."""
    return max(MIN_REST_MODIFIER, min(MAX_REST_MODIFIER, modifier))


def mastery_regeneration(cleverness: int, intuition: int) -> int:
    """Fixed AE gain of Meisterliche Regeneration: max(KL, IN)/3 rounded, + 3."""
    return (max(cleverness, intuition) + 1) // 3 + MASTERY_REGENERATION_BASE


@dataclass
class RegenerationResult:
    """Energy regained in one night, with how each gain came about."""

    le_gain: int = 0
    ae_gain: int = 0
    ke_gain: int = 0
    le_details: list[str] = field(default_factory=list)
    ae_details: list[str] = field(default_factory=list)
    ke_details: list[str] = field(default_factory=list)

    def describe(self) -> str:
        parts = []
        for name, gain, details in (
            ("LE", self.le_gain, self.le_details),
            ("AE", self.ae_gain, self.ae_details),
            ("KE", self.ke_gain, self.ke_details),
        ):
            if details:
                parts.append(f"{name} +{gain} ({', '.join(details)})")
        return ", ".join(parts) if parts else "Keine Regeneration"


def _attribute_roll(name: str, attribute: int, sample: Sampler) -> tuple[int, str]:
    roll = sample(ATTRIBUTE_DIE)
    if roll <= attribute:
        return 1, f"{name}-Probe: {roll}≤{attribute} ✓"
    return 0, f"{name}-Probe: {roll}>{attribute} ✗"


def perform_regeneration(
    constitution: int,
    modifier: int = 0,
    le_bonus: int = 0,
    has_astral: bool = False,
    intuition: int = 0,
    cleverness: int = 0,
    ae_bonus: int = 0,
    mastery: bool = False,
    has_karma: bool = False,
    rng: Optional[Sampler] = None,
) -> RegenerationResult:
    """
    Roll one night of regeneration.

    Dice are rolled in this order: LE W6, KO W20, then for astral users
    AE W6 (skipped with mastery) and IN W20.

    Args:
        constitution: KO, for the LE bonus roll
        modifier: Rest modifier, clamped to -6..+2
        le_bonus: Personal LE regeneration bonus
        has_astral: Whether the character has astral energy
        intuition: IN, for the AE bonus roll and mastery
        cleverness: KL, for mastery
        ae_bonus: Personal AE regeneration bonus
        mastery: Meisterliche Regeneration
        has_karma: Whether the character has karma energy
        rng: Sampler for all dice

    Returns:
        RegenerationResult with the gains and their breakdown
    """
    sample = rng or system_sampler
    clamped = clamp_rest_modifier(modifier)
    if clamped != modifier:
        logger.debug(f"Rest modifier {modifier} clamped to {clamped}")
    result = RegenerationResult()

    die = sample(REGENERATION_DIE)
    result.le_details.append(f"W6={die}")
    le_gain = die
    if clamped:
        le_gain += clamped
        result.le_details.append(f"Mod={clamped}")
    if le_bonus:
        le_gain += le_bonus
        result.le_details.append(f"Bonus={le_bonus}")
    bonus, detail = _attribute_roll("KO", constitution, sample)
    result.le_gain = max(0, le_gain) + bonus
    result.le_details.append(detail)

    if has_astral:
        if mastery:
            ae_gain = mastery_regeneration(cleverness, intuition)
            result.ae_details.append(f"Meisterlich={ae_gain}")
        else:
            die = sample(REGENERATION_DIE)
            result.ae_details.append(f"W6={die}")
            ae_gain = die
            if clamped:
                ae_gain += clamped
                result.ae_details.append(f"Mod={clamped}")
        if ae_bonus:
            ae_gain += ae_bonus
            result.ae_details.append(f"Bonus={ae_bonus}")
        bonus, detail = _attribute_roll("IN", intuition, sample)
        result.ae_gain = max(0, ae_gain) + bonus
        result.ae_details.append(detail)

    if has_karma:
        result.ke_gain = KARMA_REGENERATION
        result.ke_details.append(f"Fix={KARMA_REGENERATION}")

    logger.info(f"Regeneration: {result.describe()}")
    return result
