"""
Harvest Quantity Parser

Parses the free-text harvest descriptions of herbs into product/quantity
items. The descriptions come from the herb catalog and look like:

- "W6 Blätter", "2W20 Blüten", "W20+5 Schoten"      (dice quantities)
- "eine Pflanze", "vier Blätter", "12 Stängel"      (fixed quantities)
- "2W6 Kolben; W3 Stängel", "2 Blätter und eine Samenkapsel"
- "Strauch mit W6 Blüten"                           (sub-quantity)
- "IF TaP*>=7: 7W6 Beeren"                          (only with enough TaP*)
- "2W6 Knospen (nur die Hälfte ernten)"             (asides are ignored)
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Union
import logging
import re

from applicatus.data_models import DiceSpec, Sampler, roll_spec, try_parse_dice

logger = logging.getLogger(__name__)


class Comparator(str, Enum):
    """Comparison operators allowed in TaP* conditions."""

    AT_LEAST = ">="
    GREATER = ">"
    AT_MOST = "<="
    LESS = "<"
    EQUAL = "="

    @classmethod
    def from_symbol(cls, symbol: str) -> "Comparator":
        if symbol == "==":
            return cls.EQUAL
        return cls(symbol)

    def holds(self, points: int, value: int) -> bool:
        if self is Comparator.AT_LEAST:
            return points >= value
        if self is Comparator.GREATER:
            return points > value
        if self is Comparator.AT_MOST:
            return points <= value
        if self is Comparator.LESS:
            return points < value
        return points == value


@dataclass(frozen=True)
class Threshold:
    """A TaP* condition gating a harvest item."""

    comparator: Comparator
    value: int

    def is_met(self, points: int) -> bool:
        return self.comparator.holds(points, self.value)

    def __str__(self) -> str:
        return f"TaP*{self.comparator.value}{self.value}"


@dataclass(frozen=True)
class HarvestItem:
    """
    One harvestable product of a herb.

    Attributes:
        product_name: Name of the product (e.g. "Blätter", "Stein Rinde")
        quantity: DiceSpec for unrolled dice quantities, otherwise an int
        threshold: TaP* condition the item depends on, if any
        rolled: Whether ``quantity`` is the result of a roll
        dice_notation: The dice that were rolled (e.g. "2W6")
        individual_rolls: Single die values when more than one die was rolled
    """

    product_name: str
    quantity: Union[DiceSpec, int]
    threshold: Optional[Threshold] = None
    rolled: bool = False
    dice_notation: Optional[str] = None
    individual_rolls: tuple[int, ...] = ()

    @property
    def is_dice(self) -> bool:
        return isinstance(self.quantity, DiceSpec)

    @property
    def quantity_text(self) -> str:
        return str(self.quantity)

    @property
    def required_points(self) -> Optional[int]:
        return self.threshold.value if self.threshold else None

    def __str__(self) -> str:
        return f"{self.quantity_text} {self.product_name}"


# German number words used in the herb catalog
NUMBER_WORDS = {
    "ein": 1,
    "eine": 1,
    "einer": 1,
    "einem": 1,
    "einen": 1,
    "zwei": 2,
    "drei": 3,
    "vier": 4,
    "fünf": 5,
    "sechs": 6,
    "sieben": 7,
    "acht": 8,
    "neun": 9,
    "zehn": 10,
    "elf": 11,
    "zwölf": 12,
}


def word_to_number(word: str) -> int:
    """Convert a German number word or digit string; unknown words count as 1."""
    lowered = word.lower()
    if lowered in NUMBER_WORDS:
        return NUMBER_WORDS[lowered]
    if lowered.isdigit():
        return int(lowered)
    return 1


class QuantityParser:
    """
    Parser for harvest quantity descriptions.

    Stateless apart from the compiled patterns; one instance can be shared.
    """

    ASIDE = re.compile(r"\s*\([^)]*\)")
    SEMICOLON = re.compile(r"\s*;\s*")
    CONNECTIVE = re.compile(r"\s+und\s+")
    CONDITION = re.compile(r"IF\s+TaP\*\s*(>=|<=|==|=|>|<)\s*(\d+)\s*:\s*(.+)", re.IGNORECASE)
    # Last "mit" wins: "Strauch mit W6 Blüten" -> "W6 Blüten"
    SUB_QUANTITY = re.compile(r".*\s+mit\s+(.+)")
    DICE_QUANTITY = re.compile(r"(\d*W\d+(?:[+\-]\d+)?)\s+(.+)", re.IGNORECASE)
    NUMBER_QUANTITY = re.compile(
        r"(\d+|eine?|zwei|drei|vier|fünf|sechs|sieben|acht|neun|zehn|elf|zwölf)\s+(.+)",
        re.IGNORECASE,
    )
    # Text after a comma is narration: "5 Blüten, die kurz vor dem Verblühen sind"
    NARRATION_SEPARATOR = ","

    def split_segments(self, text: str) -> list[str]:
        """Strip asides and split the description into product segments."""
        cleaned = self.ASIDE.sub("", text).strip()
        if ";" in cleaned:
            parts = self.SEMICOLON.split(cleaned)
        else:
            parts = self.CONNECTIVE.split(cleaned)
        return [part.strip() for part in parts if part.strip()]

    def parse(
        self,
        text: str,
        roll: bool = False,
        point_total: Optional[int] = None,
        rng: Optional[Sampler] = None,
    ) -> list[HarvestItem]:
        """
        Parse a harvest description.

        Args:
            text: The description from the herb catalog
            roll: Roll dice quantities instead of keeping the notation
            point_total: TaP* of the search; conditional segments that are not
                met are omitted. Without it, conditional items are kept.
            rng: Sampler for rolling

        Returns:
            Items in the order they appear in the description
        """
        if not text or not text.strip():
            return []

        items = []
        for segment in self.split_segments(text):
            item = self.parse_segment(segment, roll, point_total, rng)
            if item is not None:
                items.append(item)
        return items

    def parse_segment(
        self,
        segment: str,
        roll: bool = False,
        point_total: Optional[int] = None,
        rng: Optional[Sampler] = None,
    ) -> Optional[HarvestItem]:
        """Parse a single segment; None when a TaP* condition is not met."""
        segment = segment.strip()
        if not segment:
            return None

        condition = self.CONDITION.fullmatch(segment)
        if condition:
            threshold = Threshold(Comparator.from_symbol(condition.group(1)), int(condition.group(2)))
            if point_total is not None and not threshold.is_met(point_total):
                logger.debug(f"Skipping {segment!r}: {threshold} not met by {point_total}")
                return None
            inner = self.parse_segment(condition.group(3), roll, point_total, rng)
            return replace(inner, threshold=threshold) if inner else None

        sub_quantity = self.SUB_QUANTITY.fullmatch(segment)
        working = sub_quantity.group(1) if sub_quantity else segment
        working = working.split(self.NARRATION_SEPARATOR)[0].strip()

        dice_match = self.DICE_QUANTITY.fullmatch(working)
        if dice_match:
            spec = try_parse_dice(dice_match.group(1))
            if spec is not None:
                product_name = dice_match.group(2).strip()
                if roll:
                    result = roll_spec(spec, rng, f"Harvest: {product_name}")
                    return HarvestItem(
                        product_name=product_name,
                        quantity=result.total,
                        rolled=True,
                        dice_notation=str(spec),
                        individual_rolls=tuple(result.rolls) if spec.count > 1 else (),
                    )
                return HarvestItem(product_name=product_name, quantity=spec)

        number_match = self.NUMBER_QUANTITY.fullmatch(working)
        if number_match:
            return HarvestItem(
                product_name=number_match.group(2).strip(),
                quantity=word_to_number(number_match.group(1)),
            )

        # "Saft einer Pflanze" is one portion of sap
        if working.lower().startswith("saft"):
            return HarvestItem(product_name="Saft", quantity=1)

        return HarvestItem(product_name=working, quantity=1)


_parser = QuantityParser()


def parse(
    text: str,
    roll: bool = False,
    point_total: Optional[int] = None,
    rng: Optional[Sampler] = None,
) -> list[HarvestItem]:
    """Parse a harvest description with the shared parser."""
    return _parser.parse(text, roll, point_total, rng)


def roll_quantity(
    text: str,
    point_total: Optional[int] = None,
    rng: Optional[Sampler] = None,
) -> list[HarvestItem]:
    """Parse a harvest description and roll every dice quantity."""
    return _parser.parse(text, roll=True, point_total=point_total, rng=rng)


def merge_harvests(portions: Iterable[list[HarvestItem]]) -> list[HarvestItem]:
    """
    Sum several rolled portions into one item per product.

    ``individual_rolls`` of a merged item holds the per-portion quantities.
    Unrolled dice quantities cannot be summed and are skipped.
    """
    totals: dict[str, list[HarvestItem]] = {}
    for portion in portions:
        for item in portion:
            if item.is_dice:
                logger.warning(f"Cannot merge unrolled quantity {item}")
                continue
            totals.setdefault(item.product_name, []).append(item)

    merged = []
    for product_name, items in totals.items():
        merged.append(
            HarvestItem(
                product_name=product_name,
                quantity=sum(item.quantity for item in items),
                threshold=items[0].threshold,
                rolled=any(item.rolled for item in items),
                dice_notation=next((i.dice_notation for i in items if i.dice_notation), None),
                individual_rolls=tuple(item.quantity for item in items),
            )
        )
    return merged
