"""
Herb Search.

A herb search is a three-attribute check (MU/IN/FF) on the herb search
rating, derived from the talents Sinnenschärfe, Wildnisleben and
Pflanzenkunde. The check is made harder by the herb's identification
difficulty and its occurrence in the landscape, and easier with terrain or
local knowledge. Each portion beyond the first costs half the difficulty in
TaP*.
"""

from dataclasses import dataclass, field
from math import ceil
from typing import Any, Optional, Sequence
import logging

from applicatus.data_models import Sampler
from applicatus.harvest import HarvestItem, merge_harvests, roll_quantity
from applicatus.resolution.check_resolver import CheckOutcome, resolve_check

logger = logging.getLogger(__name__)


TERRAIN_KNOWLEDGE_BONUS = 3  # Geländekunde
LOCAL_KNOWLEDGE_BONUS = 7  # Ortskenntnis

SEARCH_DURATION = "1 Stunde"
DOUBLED_SEARCH_DURATION = "2 Stunden"


def herb_search_rating(senses: int, wilderness: int, herb_lore: int) -> int:
    """
    Herb search rating from the three search talents.

    The rounded average, but never more than twice the lowest talent.
    """
    average = (senses + wilderness + herb_lore + 1) // 3
    return min(average, 2 * min(senses, wilderness, herb_lore))


def search_difficulty(
    identification: int,
    occurrence: int,
    has_terrain_knowledge: bool = False,
    has_local_knowledge: bool = False,
) -> int:
    """
    Difficulty of searching for a specific herb.

    Args:
        identification: The herb's identification difficulty
        occurrence: Modifier for how common the herb is in the landscape
        has_terrain_knowledge: Geländekunde for the landscape (-3)
        has_local_knowledge: Ortskenntnis (-7)

    Returns:
        Difficulty; negative values make the check easier
    """
    difficulty = identification + occurrence
    if has_terrain_knowledge:
        difficulty -= TERRAIN_KNOWLEDGE_BONUS
    if has_local_knowledge:
        difficulty -= LOCAL_KNOWLEDGE_BONUS
    return difficulty


def portion_count(points: int, difficulty: int) -> int:
    """
    Number of portions found with the given TaP*.

    The first portion comes with success; each further portion costs half
    the difficulty (at least 1) in TaP*.
    """
    if points < 0:
        return 0
    cost_per_portion = max(1, difficulty // 2)
    return 1 + points // cost_per_portion


@dataclass
class HerbSearchResult:
    """Result of a herb search."""

    check: CheckOutcome
    effective_rating: int
    difficulty: int
    portion_count: int = 0
    search_duration: str = SEARCH_DURATION
    harvested_items: list[HarvestItem] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.check.success

    @property
    def points(self) -> int:
        return self.check.extra_points

    def to_dict(self) -> dict[str, Any]:
        """Serialize for display."""
        return {
            "success": self.success,
            "rolls": list(self.check.rolls),
            "points": self.points,
            "effective_rating": self.effective_rating,
            "difficulty": self.difficulty,
            "portion_count": self.portion_count,
            "search_duration": self.search_duration,
            "harvested_items": [
                {"product_name": item.product_name, "quantity": item.quantity}
                for item in self.harvested_items
            ],
        }


def perform_herb_search(
    senses: int,
    wilderness: int,
    herb_lore: int,
    attributes: Sequence[int],
    identification: int,
    occurrence: int,
    base_quantity: str = "",
    has_terrain_knowledge: bool = False,
    has_local_knowledge: bool = False,
    doubled_search_time: bool = False,
    rng: Optional[Sampler] = None,
    rolls: Optional[Sequence[int]] = None,
) -> HerbSearchResult:
    """
    Search for a specific herb.

    Args:
        senses: Sinnenschärfe
        wilderness: Wildnisleben
        herb_lore: Pflanzenkunde
        attributes: MU, IN, FF of the searcher
        identification: The herb's identification difficulty
        occurrence: Occurrence modifier in the landscape
        base_quantity: Harvest description of one portion, e.g. "W6 Blätter"
        has_terrain_knowledge: Geländekunde for the landscape
        has_local_knowledge: Ortskenntnis
        doubled_search_time: Search two hours instead of one (rating x1.5)
        rng: Sampler for the check and harvest rolls
        rolls: Predetermined check rolls

    Returns:
        HerbSearchResult; on success with the merged harvest of all portions
    """
    rating = herb_search_rating(senses, wilderness, herb_lore)
    if doubled_search_time:
        rating = ceil(rating * 1.5)
    difficulty = search_difficulty(identification, occurrence, has_terrain_knowledge, has_local_knowledge)

    check = resolve_check(rating, difficulty, attributes, rng=rng, rolls=rolls)
    result = HerbSearchResult(
        check=check,
        effective_rating=rating,
        difficulty=difficulty,
        search_duration=DOUBLED_SEARCH_DURATION if doubled_search_time else SEARCH_DURATION,
    )
    if not check.success:
        logger.info(f"Herb search failed: {check.describe('TaP*')}")
        return result

    result.portion_count = portion_count(check.extra_points, difficulty)
    if base_quantity:
        portions = [
            roll_quantity(base_quantity, point_total=check.extra_points, rng=rng)
            for _ in range(result.portion_count)
        ]
        result.harvested_items = merge_harvests(portions)
    logger.info(f"Herb search found {result.portion_count} portion(s) with TaP* {check.extra_points}")
    return result
