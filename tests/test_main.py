"""
Tests for the command line entry point and configuration.
"""

import pytest

from applicatus.main import RulesConfig, create_config_from_args, main, parse_arguments
from applicatus.resolution import CastingTradition


class TestConfiguration:
    """Tests for RulesConfig and argument parsing."""

    def test_defaults(self):
        """Test default configuration."""
        config = create_config_from_args(parse_arguments(["roll", "W6"]))
        assert config.seed is None
        assert config.current_date == "1 Praios 1040 BF"
        assert config.tradition is CastingTradition.GUILD
        assert config.cost_reducing_traits == 0

    def test_global_options(self):
        """Test global options end up in the configuration."""
        args = parse_arguments(
            ["--seed", "3", "--date", "15 Praios 1040 BF", "--tradition", "witch", "--traits", "2", "-v", "roll", "W6"]
        )
        config = create_config_from_args(args)
        assert config.seed == 3
        assert config.current_date == "15 Praios 1040 BF"
        assert config.tradition is CastingTradition.WITCH
        assert config.cost_reducing_traits == 2
        assert config.verbose

    def test_tradition_string_normalized(self):
        """Test the tradition may be given as a string."""
        assert RulesConfig(tradition="witch").tradition is CastingTradition.WITCH

    def test_invalid_date_rejected(self):
        """Test an invalid current date raises."""
        with pytest.raises(ValueError):
            RulesConfig(current_date="morgen")

    def test_command_required(self):
        """Test that a command must be given."""
        with pytest.raises(SystemExit):
            parse_arguments([])


class TestCommands:
    """Tests for the subcommands."""

    def test_roll_reproducible(self, capsys):
        """Test seeded rolls print the same result."""
        assert main(["--seed", "5", "roll", "3W6"]) == 0
        first = capsys.readouterr().out
        assert main(["--seed", "5", "roll", "3W6"]) == 0
        assert capsys.readouterr().out == first

    def test_roll_invalid(self, capsys):
        """Test invalid notation fails."""
        assert main(["roll", "3D6"]) == 1
        assert "Error" in capsys.readouterr().out

    def test_formula(self, capsys):
        """Test formula evaluation."""
        assert main(["formula", "16-ZfP/2", "6"]) == 0
        assert capsys.readouterr().out.strip() == "13"

    def test_formula_invalid(self, capsys):
        """Test invalid formulas fail."""
        assert main(["formula", "16-X", "6"]) == 1

    def test_harvest(self, capsys):
        """Test parsing a harvest description."""
        assert main(["harvest", "2 Blätter und eine geschlossene Samenkapsel"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert lines == ["2 Blätter", "1 geschlossene Samenkapsel"]

    def test_harvest_condition(self, capsys):
        """Test a condition that is not met."""
        assert main(["harvest", "IF TaP*>=7: 7W6 Beeren", "--points", "5"]) == 0
        assert "Nothing to harvest" in capsys.readouterr().out

    def test_expiry(self, capsys):
        """Test expiry dates from the configured date."""
        assert main(["--date", "15 Praios 1040 BF", "expiry", "1 Jahr"]) == 0
        assert capsys.readouterr().out.strip() == "15 Praios 1041 BF"

    def test_expiry_unlimited(self, capsys):
        """Test unlimited shelf life."""
        assert main(["expiry", "unbegrenzt"]) == 0
        assert "Unbegrenzt" in capsys.readouterr().out

    def test_check_with_rolls(self, capsys):
        """Test a check with predetermined rolls."""
        assert main(["check", "10", "2", "12", "13", "14", "--rolls", "15", "13", "16"]) == 0
        assert capsys.readouterr().out.strip() == "Erfolg (15/13/16), ZfP* 3"

    def test_check_invalid_rolls(self, capsys):
        """Test rolls outside 1-20 fail."""
        assert main(["check", "10", "2", "12", "13", "14", "--rolls", "25", "1", "1"]) == 1

    def test_cost(self, capsys):
        """Test cost with traits."""
        assert main(["--traits", "2", "cost", "16-ZfP/2", "4"]) == 0
        assert capsys.readouterr().out.strip() == "12 AsP"

    def test_cost_failed_witch(self, capsys):
        """Test a failed witch casting."""
        assert main(["--tradition", "witch", "cost", "11", "0", "--failed"]) == 0
        assert capsys.readouterr().out.strip() == "4 AsP"

    def test_invalid_date_option(self, capsys):
        """Test an invalid --date fails before running a command."""
        assert main(["--date", "gestern", "roll", "W6"]) == 2
