"""Check resolution module.

Provides the three-attribute check and the rule procedures built on it:
spell costs, spell storage, herb search, potion brewing and dilution,
magic sign activation and nightly regeneration.
"""

from applicatus.resolution.check_resolver import (
    AttributeCheckResult,
    CheckOutcome,
    CriticalKind,
    classify_rolls,
    effective_rating,
    resolve_attribute_check,
    resolve_check,
)
from applicatus.resolution.spell_costs import (
    ApplicatusCheckResult,
    ApplicatusDuration,
    CastingTradition,
    calculate_applicatus_cost,
    calculate_resource_cost,
    resolve_applicatus_check,
)
from applicatus.resolution.herb_search import (
    HerbSearchResult,
    herb_search_rating,
    perform_herb_search,
    portion_count,
    search_difficulty,
)
from applicatus.resolution.brewing import (
    BrewingResult,
    DilutionResult,
    PotionQuality,
    SubstitutionType,
    astral_charging_cost,
    brew_potion,
    dilute_potion,
    diluted_quality,
    max_quality_points_from_resource,
    max_voluntary_handicap,
    quality_from_points,
)
from applicatus.resolution.magic_signs import (
    MagicSignActivationResult,
    MagicSignDuration,
    activate_magic_sign,
    calculate_magic_sign_expiry,
    calculate_weight_reduction,
)
from applicatus.resolution.regeneration import (
    RegenerationResult,
    clamp_rest_modifier,
    mastery_regeneration,
    perform_regeneration,
)

__all__ = [
    "AttributeCheckResult",
    "CheckOutcome",
    "CriticalKind",
    "classify_rolls",
    "effective_rating",
    "resolve_attribute_check",
    "resolve_check",
    "ApplicatusCheckResult",
    "ApplicatusDuration",
    "CastingTradition",
    "calculate_applicatus_cost",
    "calculate_resource_cost",
    "resolve_applicatus_check",
    "HerbSearchResult",
    "herb_search_rating",
    "perform_herb_search",
    "portion_count",
    "search_difficulty",
    "BrewingResult",
    "DilutionResult",
    "PotionQuality",
    "SubstitutionType",
    "astral_charging_cost",
    "brew_potion",
    "dilute_potion",
    "diluted_quality",
    "max_quality_points_from_resource",
    "max_voluntary_handicap",
    "quality_from_points",
    "MagicSignActivationResult",
    "MagicSignDuration",
    "activate_magic_sign",
    "calculate_magic_sign_expiry",
    "calculate_weight_reduction",
    "RegenerationResult",
    "clamp_rest_modifier",
    "mastery_regeneration",
    "perform_regeneration",
]
