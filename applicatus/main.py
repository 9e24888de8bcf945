"""
Applicatus Rules Core - Command Line Entry Point

Resolves single rules questions from the command line: dice rolls, cost
formulas, harvest descriptions, shelf lives, checks and spell costs.
"""

import argparse
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from applicatus.data_models import DiceRoller, DiceNotationError
from applicatus.formula import evaluate
from applicatus.harvest import parse as parse_harvest
from applicatus.resolution import CastingTradition, calculate_resource_cost, resolve_check
from applicatus.timekeeping import UNLIMITED_DATE, calculate_expiry_date, parse_date


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


DEFAULT_DATE = "1 Praios 1040 BF"


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class RulesConfig:
    """Configuration for a command line session."""

    seed: Optional[int] = None
    current_date: str = DEFAULT_DATE
    tradition: CastingTradition = CastingTradition.GUILD
    cost_reducing_traits: int = 0

    # Runtime options
    verbose: bool = False

    def __post_init__(self):
        """Normalize the tradition and check the date."""
        if isinstance(self.tradition, str):
            self.tradition = CastingTradition(self.tradition)
        if parse_date(self.current_date) is None:
            raise ValueError(f"Invalid current date: {self.current_date!r}")

    def create_roller(self) -> DiceRoller:
        return DiceRoller(seed=self.seed)


# =============================================================================
# COMMANDS
# =============================================================================

def command_roll(args: argparse.Namespace, config: RulesConfig) -> int:
    roller = config.create_roller()
    for _ in range(args.times):
        try:
            result = roller.roll(args.notation, reason="command line")
        except DiceNotationError as e:
            print(f"Error: {e}")
            return 1
        print(result)
    return 0


def command_formula(args: argparse.Namespace, config: RulesConfig) -> int:
    value = evaluate(args.formula, args.points)
    if value is None:
        print(f"Error: invalid formula {args.formula!r}")
        return 1
    print(value)
    return 0


def command_harvest(args: argparse.Namespace, config: RulesConfig) -> int:
    roller = config.create_roller()
    items = parse_harvest(args.text, roll=args.roll, point_total=args.points, rng=roller.sample)
    if not items:
        print("Nothing to harvest")
        return 0
    for item in items:
        line = str(item)
        if item.dice_notation:
            line += f" ({item.dice_notation}"
            if item.individual_rolls:
                line += f": {', '.join(str(r) for r in item.individual_rolls)}"
            line += ")"
        if item.threshold:
            line += f" [{item.threshold}]"
        print(line)
    return 0


def command_expiry(args: argparse.Namespace, config: RulesConfig) -> int:
    roller = config.create_roller()
    expiry = calculate_expiry_date(config.current_date, args.duration, rng=roller.sample)
    if expiry == config.current_date:
        logger.warning(f"Shelf life {args.duration!r} could not be resolved")
    print(expiry if expiry != UNLIMITED_DATE else f"{UNLIMITED_DATE} haltbar")
    return 0


def command_check(args: argparse.Namespace, config: RulesConfig) -> int:
    roller = config.create_roller()
    try:
        outcome = resolve_check(
            args.rating,
            args.difficulty,
            args.attributes,
            exchanged_points=args.exchange,
            rng=roller.sample,
            rolls=args.rolls,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    print(outcome.describe(args.points_name))
    return 0


def command_cost(args: argparse.Namespace, config: RulesConfig) -> int:
    try:
        cost = calculate_resource_cost(
            args.formula,
            args.points,
            success=not args.failed,
            base_cost=args.base,
            tradition=config.tradition,
            cost_reducing_traits=config.cost_reducing_traits,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    print(f"{cost} AsP")
    return 0


COMMANDS = {
    "roll": command_roll,
    "formula": command_formula,
    "harvest": command_harvest,
    "expiry": command_expiry,
    "check": command_check,
    "cost": command_cost,
}


# =============================================================================
# ARGUMENTS
# =============================================================================

def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Applicatus - rules core for Das Schwarze Auge",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m applicatus.main roll 2W6+3                    # Roll dice
  python -m applicatus.main formula "16-ZfP/2" 6          # Evaluate a cost formula
  python -m applicatus.main harvest "2W6 Kolben; W3 Stängel" --roll
  python -m applicatus.main --date "15 Praios 1040 BF" expiry "1 Jahr"
  python -m applicatus.main check 10 2 12 13 14           # ZfW 10, +2, KL/IN/CH
  python -m applicatus.main --tradition witch cost 8 0 --failed
        """
    )

    # General options
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible rolls",
    )
    parser.add_argument(
        "--date",
        type=str,
        default=DEFAULT_DATE,
        help=f"Current date (default: {DEFAULT_DATE})",
    )
    parser.add_argument(
        "--tradition",
        type=str,
        default=CastingTradition.GUILD.value,
        choices=[t.value for t in CastingTradition],
        help="Casting tradition for failed spell costs (default: guild)",
    )
    parser.add_argument(
        "--traits",
        type=int,
        default=0,
        choices=[0, 1, 2],
        help="Number of cost-reducing traits (default: 0)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    roll_parser = subparsers.add_parser("roll", help="Roll dice notation")
    roll_parser.add_argument("notation", help="Dice notation, e.g. 3W6+2")
    roll_parser.add_argument("--times", type=int, default=1, help="Number of rolls (default: 1)")

    formula_parser = subparsers.add_parser("formula", help="Evaluate a cost formula")
    formula_parser.add_argument("formula", help="Formula, e.g. 16-ZfP/2")
    formula_parser.add_argument("points", type=int, help="Value for ZfP")

    harvest_parser = subparsers.add_parser("harvest", help="Parse a harvest description")
    harvest_parser.add_argument("text", help="Harvest description")
    harvest_parser.add_argument("--points", type=int, default=None, help="TaP* of the search")
    harvest_parser.add_argument("--roll", action="store_true", help="Roll dice quantities")

    expiry_parser = subparsers.add_parser("expiry", help="Expiry date for a shelf life")
    expiry_parser.add_argument("duration", help="Shelf life, e.g. '3 Monde'")

    check_parser = subparsers.add_parser("check", help="Resolve a three-attribute check")
    check_parser.add_argument("rating", type=int, help="Talent or spell rating")
    check_parser.add_argument("difficulty", type=int, help="Difficulty modifier")
    check_parser.add_argument("attributes", type=int, nargs=3, help="The three attribute values")
    check_parser.add_argument("--exchange", type=int, default=0, help="Resource points exchanged for rating")
    check_parser.add_argument("--rolls", type=int, nargs=3, default=None, help="Predetermined rolls")
    check_parser.add_argument("--points-name", default="ZfP*", help="Label for extra points (default: ZfP*)")

    cost_parser = subparsers.add_parser("cost", help="Astral point cost of a casting")
    cost_parser.add_argument("formula", help="Cost formula")
    cost_parser.add_argument("points", type=int, help="ZfP* of the check")
    cost_parser.add_argument("--base", type=int, default=0, help="Flat base cost")
    cost_parser.add_argument("--failed", action="store_true", help="The check failed")

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> RulesConfig:
    """Create RulesConfig from parsed arguments."""
    return RulesConfig(
        seed=args.seed,
        current_date=args.date,
        tradition=CastingTradition(args.tradition),
        cost_reducing_traits=args.traits,
        verbose=args.verbose,
    )


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        config = create_config_from_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    return COMMANDS[args.command](args, config)


if __name__ == "__main__":
    raise SystemExit(main())
