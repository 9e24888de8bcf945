"""
Shared data structures for the Applicatus rules core.

These structures are plain values: no structure holds a reference to another
component, and no component keeps global random state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Optional
import logging
import random
import re

logger = logging.getLogger(__name__)


# Receives the die size, returns a value in [1, sides]
Sampler = Callable[[int], int]


# =============================================================================
# DICE NOTATION
# =============================================================================


DICE_PATTERN = re.compile(r"^\s*(\d+)?[Ww](\d+)([+-]\d+)?\s*$")

# Most dice a single expression may roll
MAX_DICE_COUNT = 100


class DiceNotationError(ValueError):
    """Raised when a string is not a dice expression."""


@dataclass(frozen=True)
class DiceSpec:
    """
    A parsed dice expression such as ``2W6+5``.

    ``notation`` keeps the text as written (``W6`` stays ``W6``) for display;
    it does not take part in equality.
    """

    count: int
    sides: int
    modifier: int = 0
    notation: str = field(default="", compare=False)

    def __post_init__(self):
        if self.count < 1:
            raise DiceNotationError(f"Dice count must be at least 1, got {self.count}")
        if self.count > MAX_DICE_COUNT:
            raise DiceNotationError(f"Dice count must be at most {MAX_DICE_COUNT}, got {self.count}")
        if self.sides < 2:
            raise DiceNotationError(f"Die size must be at least 2, got {self.sides}")

    @property
    def minimum(self) -> int:
        return self.count + self.modifier

    @property
    def maximum(self) -> int:
        return self.count * self.sides + self.modifier

    def canonical(self) -> str:
        """Notation with explicit count, e.g. ``1W3+1``."""
        if self.modifier > 0:
            return f"{self.count}W{self.sides}+{self.modifier}"
        if self.modifier < 0:
            return f"{self.count}W{self.sides}{self.modifier}"
        return f"{self.count}W{self.sides}"

    def __str__(self) -> str:
        return self.notation or self.canonical()


def parse_dice(text: str) -> DiceSpec:
    """
    Parse German dice notation (``3W6``, ``W20+5``, ``1w6-2``).

    Raises:
        DiceNotationError: If the text is not a dice expression or rolls
            more than MAX_DICE_COUNT dice
    """
    if text is None:
        raise DiceNotationError("not a dice expression: None")
    match = DICE_PATTERN.match(text)
    if not match:
        raise DiceNotationError(f"not a dice expression: {text!r}")

    count = int(match.group(1)) if match.group(1) else 1
    sides = int(match.group(2))
    modifier = int(match.group(3)) if match.group(3) else 0
    return DiceSpec(count=count, sides=sides, modifier=modifier, notation=text.strip())


def try_parse_dice(text: str) -> Optional[DiceSpec]:
    """Parse dice notation, returning None instead of raising."""
    try:
        return parse_dice(text)
    except DiceNotationError:
        return None


def system_sampler(sides: int) -> int:
    """Uniform die roll from the module's own random source."""
    return random.randint(1, sides)


def fixed_sampler(values: Iterable[int]) -> Sampler:
    """
    Build a sampler that replays the given values in order.

    Raises IndexError once the values are exhausted, so a test that rolls more
    dice than expected fails loudly.
    """
    remaining = list(values)
    position = [0]

    def sample(sides: int) -> int:
        if position[0] >= len(remaining):
            raise IndexError("fixed sampler exhausted")
        value = remaining[position[0]]
        position[0] += 1
        return value

    return sample


def constant_sampler(value: int) -> Sampler:
    """Build a sampler that always returns ``value``."""
    return lambda sides: value


@dataclass
class DiceResult:
    """Result of a dice roll with full information."""
    notation: str
    rolls: list[int]
    modifier: int
    total: int
    reason: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        if self.modifier > 0:
            return f"{self.notation}: {self.rolls} + {self.modifier} = {self.total}"
        elif self.modifier < 0:
            return f"{self.notation}: {self.rolls} - {abs(self.modifier)} = {self.total}"
        return f"{self.notation}: {self.rolls} = {self.total}"


def roll_spec(spec: DiceSpec, rng: Optional[Sampler] = None, reason: str = "") -> DiceResult:
    """Roll an already parsed DiceSpec."""
    sample = rng or system_sampler
    rolls = [sample(spec.sides) for _ in range(spec.count)]
    return DiceResult(
        notation=str(spec),
        rolls=rolls,
        modifier=spec.modifier,
        total=sum(rolls) + spec.modifier,
        reason=reason,
    )


def roll_dice_detailed(text: str, rng: Optional[Sampler] = None, reason: str = "") -> Optional[DiceResult]:
    """Parse and roll dice notation, keeping the individual die values."""
    spec = try_parse_dice(text)
    if spec is None:
        logger.debug(f"Not rolling unparseable dice notation {text!r}")
        return None
    return roll_spec(spec, rng, reason)


def roll_dice(text: str, rng: Optional[Sampler] = None) -> Optional[int]:
    """
    Parse and roll dice notation.

    Args:
        text: Dice notation, e.g. "3W6+2"
        rng: Sampler for single dice (default: module random source)

    Returns:
        The rolled total, or None if the notation is invalid
    """
    result = roll_dice_detailed(text, rng)
    return result.total if result else None


# =============================================================================
# DICE ROLLER
# =============================================================================


class DiceRoller:
    """
    Seedable randomization interface.

    Each roller owns its random source and roll log, so two rollers never
    influence each other. Pass ``roller.sample`` wherever a Sampler is taken.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[Sampler] = None):
        self._random = random.Random(seed)
        self._sampler = rng
        self._roll_log: list[DiceResult] = []

    def set_seed(self, seed: int) -> None:
        """Reseed the random source for reproducibility."""
        self._random.seed(seed)

    def sample(self, sides: int) -> int:
        """Roll a single die with the given number of sides."""
        if self._sampler is not None:
            return self._sampler(sides)
        return self._random.randint(1, sides)

    def randint(self, a: int, b: int, reason: str = "") -> int:
        """Return an integer in [a, b] and log it as a roll."""
        if self._sampler is not None:
            value = a - 1 + self._sampler(b - a + 1)
        else:
            value = self._random.randint(a, b)
        self._roll_log.append(
            DiceResult(notation=f"range({a}-{b})", rolls=[value], modifier=0, total=value, reason=reason)
        )
        return value

    def roll(self, dice: str, reason: str = "") -> DiceResult:
        """
        Roll dice using German notation (e.g. '2W6', '1W20+5', 'W6-2').

        Args:
            dice: Dice notation string
            reason: Why this roll is being made (for logging)

        Returns:
            DiceResult with individual rolls and total

        Raises:
            DiceNotationError: If the notation is invalid
        """
        result = roll_spec(parse_dice(dice), self.sample, reason)
        self._roll_log.append(result)
        logger.debug(f"Rolled {result} ({reason})")
        return result

    def roll_d20(self, reason: str = "") -> DiceResult:
        """Convenience method for W20 rolls."""
        return self.roll("1W20", reason)

    def roll_d6(self, num_dice: int = 1, reason: str = "") -> DiceResult:
        """Convenience method for W6 rolls."""
        return self.roll(f"{num_dice}W6", reason)

    def get_roll_log(self) -> list[DiceResult]:
        """Get the complete roll log of this roller."""
        return self._roll_log.copy()

    def clear_roll_log(self) -> None:
        """Clear the roll log."""
        self._roll_log = []
