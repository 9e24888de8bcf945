"""
Harvest quantity parsing.

Turns herb yield descriptions ("2W6 Kolben; W3 Stängel") into HarvestItems
and rolls them for concrete harvests.
"""

from applicatus.harvest.quantity_parser import (
    Comparator,
    HarvestItem,
    QuantityParser,
    Threshold,
    merge_harvests,
    parse,
    roll_quantity,
    word_to_number,
)

__all__ = [
    "Comparator",
    "HarvestItem",
    "QuantityParser",
    "Threshold",
    "merge_harvests",
    "parse",
    "roll_quantity",
    "word_to_number",
]
