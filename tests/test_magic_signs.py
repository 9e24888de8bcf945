"""
Unit tests for magic sign activation.
"""

import pytest

from applicatus.data_models import fixed_sampler
from applicatus.resolution import (
    MagicSignDuration,
    activate_magic_sign,
    calculate_magic_sign_expiry,
    calculate_weight_reduction,
)
from applicatus.timekeeping import DerianDate, DerianMonth


KL_IN_FF = (12, 13, 11)


def activate(ritual_rating=8, activation_modifier=0, **kwargs):
    return activate_magic_sign(ritual_rating, *KL_IN_FF, activation_modifier=activation_modifier, **kwargs)


class TestActivation:
    """Tests for the activation check."""

    def test_modifier_eases_check(self):
        """Test the activation modifier adds to the budget."""
        result = activate(activation_modifier=2, rolls=[10, 14, 11])
        assert result.success
        assert result.check.difficulty == -2
        assert result.ritual_points == 9

    def test_checks_kl_in_ff(self):
        """Test the three attributes are KL, IN and FF in that order."""
        result = activate(ritual_rating=0, rolls=[12, 13, 12])
        assert not result.success
        assert result.ritual_points == -1

    def test_failed_activation_has_no_expiry(self):
        """Test a failed activation never expires."""
        result = activate(ritual_rating=2, current_date="15 Praios 1040 BF", rolls=[15, 15, 15])
        assert not result.success
        assert not result.is_botched
        assert result.expiry_date is None

    @pytest.mark.parametrize("rolls", [[20, 20, 3], [20, 20, 20]])
    def test_botch_spoils_sign(self, rolls):
        """Test double and triple twenty spoil the sign."""
        result = activate(current_date="15 Praios 1040 BF", rolls=rolls)
        assert result.is_botched
        assert not result.success
        assert result.expiry_date is None
        assert "verdorben" in result.describe()

    def test_success_sets_expiry(self):
        """Test a successful activation gets an expiry date."""
        result = activate(current_date="15 Praios 1040 BF", rng=fixed_sampler([5, 5, 5]))
        assert result.success
        assert result.expiry_date == "19 Praios 1040 BF"
        assert "Wirkt bis: 19 Praios 1040 BF" in result.describe()

    def test_without_date_no_expiry(self):
        """Test no date means no expiry calculation."""
        assert activate(rolls=[5, 5, 5]).expiry_date is None


class TestMagicSignExpiry:
    """Tests for sign durations."""

    @pytest.mark.parametrize("rating,expected", [(8, "19 Praios 1040 BF"), (7, "19 Praios 1040 BF"), (5, "18 Praios 1040 BF")])
    def test_half_rating_rounded_up(self, rating, expected):
        """Test RkW/2 days, rounded up."""
        assert calculate_magic_sign_expiry(MagicSignDuration.HALF_RATING_DAYS, rating, "15 Praios 1040 BF") == expected

    def test_month_and_quarter(self):
        """Test 30 and 90 days."""
        assert calculate_magic_sign_expiry(MagicSignDuration.ONE_MONTH, 8, "15 Praios 1040 BF") == "15 Rondra 1040 BF"
        assert calculate_magic_sign_expiry(MagicSignDuration.ONE_QUARTER, 8, "15 Praios 1040 BF") == "15 Travia 1040 BF"

    @pytest.mark.parametrize(
        "current,expected",
        [
            ("15 Praios 1040 BF", "1 Firun 1040 BF"),
            ("1 Firun 1040 BF", "1 Firun 1041 BF"),
            ("3 Namenlose Tage 1040 BF", "1 Firun 1041 BF"),
        ],
    )
    def test_until_winter_solstice(self, current, expected):
        """Test the next 1 Firun after the activation."""
        assert calculate_magic_sign_expiry(MagicSignDuration.UNTIL_WINTER_SOLSTICE, 8, current) == expected

    def test_date_object_in_date_object_out(self):
        """Test a DerianDate input returns a DerianDate."""
        start = DerianDate(day=10, month=DerianMonth.TSA, year=1040)
        expiry = calculate_magic_sign_expiry(MagicSignDuration.UNTIL_WINTER_SOLSTICE, 8, start)
        assert expiry == DerianDate(day=1, month=DerianMonth.FIRUN, year=1041)

    def test_unparseable_date_unchanged(self):
        """Test an invalid date is returned as given."""
        assert calculate_magic_sign_expiry(MagicSignDuration.UNTIL_WINTER_SOLSTICE, 8, "morgen") == "morgen"

    def test_from_name(self):
        """Test lookup by display or member name."""
        assert MagicSignDuration.from_name("1 Quartal") is MagicSignDuration.ONE_QUARTER
        assert MagicSignDuration.from_name("until_winter_solstice") is MagicSignDuration.UNTIL_WINTER_SOLSTICE
        with pytest.raises(ValueError):
            MagicSignDuration.from_name("ewig")


class TestWeightReduction:
    """Tests for the Sigil of the Invisible Bearer."""

    def test_two_stone_per_point(self):
        """Test the weight drops by twice the RkP*."""
        assert calculate_weight_reduction(3, 10) == 4

    def test_never_below_one_stone(self):
        """Test the floor of 1 stone."""
        assert calculate_weight_reduction(5, 10) == 1
        assert calculate_weight_reduction(2, 1) == 1

    def test_weightless_object(self):
        """Test objects without weight stay weightless."""
        assert calculate_weight_reduction(3, 0) == 0
