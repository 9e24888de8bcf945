"""
Unit tests for three-attribute check resolution.
"""

import pytest

from applicatus.data_models import constant_sampler, fixed_sampler
from applicatus.resolution import (
    CheckOutcome,
    CriticalKind,
    classify_rolls,
    effective_rating,
    resolve_attribute_check,
    resolve_check,
)


ATTRIBUTES = (12, 13, 14)


class TestEffectiveRating:
    """Tests for exchanging resource points for rating."""

    def test_no_exchange(self):
        """Test the base rating is unchanged."""
        assert effective_rating(7) == 7

    def test_two_per_point(self):
        """Test each exchanged point adds two."""
        assert effective_rating(10, 2) == 14

    def test_capped_at_double(self):
        """Test the cap at twice the base rating."""
        assert effective_rating(4, 10) == 8

    def test_zero_base(self):
        """Test a zero rating cannot be raised."""
        assert effective_rating(0, 3) == 0

    def test_negative_base(self):
        """Test a negative base rating."""
        assert effective_rating(-3) == -3
        assert effective_rating(-3, 1) == -1

    def test_negative_exchange_rejected(self):
        """Test negative exchanged points raise ValueError."""
        with pytest.raises(ValueError):
            effective_rating(10, -1)


class TestClassify:
    """Tests for critical roll classification."""

    @pytest.mark.parametrize(
        "rolls,kind",
        [
            ((1, 1, 1), CriticalKind.TRIPLE_ONE),
            ((1, 7, 1), CriticalKind.DOUBLE_ONE),
            ((20, 20, 20), CriticalKind.TRIPLE_TWENTY),
            ((20, 3, 20), CriticalKind.DOUBLE_TWENTY),
            ((1, 20, 5), CriticalKind.NONE),
            ((1, 20, 20), CriticalKind.DOUBLE_TWENTY),
        ],
    )
    def test_kinds(self, rolls, kind):
        """Test every classification."""
        assert classify_rolls(rolls) is kind


class TestResolveCheck:
    """Tests for resolving checks."""

    def test_all_rolls_below_attributes(self):
        """Test the full budget remains."""
        outcome = resolve_check(10, 2, ATTRIBUTES, rolls=[5, 6, 7])
        assert outcome.success
        assert outcome.extra_points == 8
        assert outcome.rolls == (5, 6, 7)
        assert outcome.critical is CriticalKind.NONE

    def test_overflow_consumes_budget(self):
        """Test overflow is subtracted from the budget."""
        outcome = resolve_check(10, 2, ATTRIBUTES, rolls=[15, 13, 16])
        assert outcome.extra_points == 8 - 3 - 0 - 2
        assert outcome.success

    def test_exact_zero_is_success(self):
        """Test that zero remaining points succeed."""
        outcome = resolve_check(5, 0, ATTRIBUTES, rolls=[17, 13, 14])
        assert outcome.extra_points == 0
        assert outcome.success

    def test_negative_extra_points_fail(self):
        """Test failure reports negative extra points."""
        outcome = resolve_check(4, 0, ATTRIBUTES, rolls=[18, 13, 14])
        assert outcome.extra_points == -2
        assert not outcome.success

    def test_difficulty_above_rating(self):
        """Test the budget floors at zero."""
        outcome = resolve_check(3, 8, ATTRIBUTES, rolls=[5, 5, 15])
        assert outcome.extra_points == -1
        assert not outcome.success

    def test_negative_difficulty_eases(self):
        """Test a negative difficulty raises the budget."""
        outcome = resolve_check(4, -3, ATTRIBUTES, rolls=[5, 5, 5])
        assert outcome.extra_points == 7

    @pytest.mark.parametrize("rolls", [[1, 1, 20], [1, 19, 1], [20, 1, 1]])
    def test_double_one_forces_success(self, rolls):
        """Test two 1s succeed regardless of rating and attributes."""
        outcome = resolve_check(0, 15, (1, 1, 1), rolls=rolls)
        assert outcome.success
        assert outcome.is_double_one
        assert not outcome.is_triple_one
        assert outcome.extra_points == 0

    def test_double_one_keeps_budget(self):
        """Test two 1s yield the full budget."""
        outcome = resolve_check(12, 4, (5, 5, 5), rolls=[1, 20, 1])
        assert outcome.extra_points == 8

    def test_triple_one(self):
        """Test three 1s."""
        outcome = resolve_check(7, 0, ATTRIBUTES, rolls=[1, 1, 1])
        assert outcome.success
        assert outcome.is_triple_one
        assert not outcome.is_double_one
        assert outcome.critical is CriticalKind.TRIPLE_ONE

    @pytest.mark.parametrize("rolls", [[20, 20, 1], [20, 2, 20], [3, 20, 20]])
    def test_double_twenty_forces_failure(self, rolls):
        """Test two 20s fail regardless of rating and attributes."""
        outcome = resolve_check(30, -10, (25, 25, 25), rolls=rolls)
        assert not outcome.success
        assert outcome.is_double_twenty
        assert outcome.extra_points == 0

    def test_triple_twenty(self):
        """Test three 20s."""
        outcome = resolve_check(30, 0, (25, 25, 25), rolls=[20, 20, 20])
        assert not outcome.success
        assert outcome.is_triple_twenty
        assert not outcome.is_double_twenty

    def test_exchanged_points_raise_rating(self):
        """Test exchanged points in the effective rating."""
        outcome = resolve_check(6, 0, ATTRIBUTES, exchanged_points=2, rolls=[5, 5, 5])
        assert outcome.effective_rating == 10
        assert outcome.extra_points == 10

    def test_sampler_used_without_rolls(self):
        """Test three W20 are drawn from the sampler."""
        seen = []

        def sampler(sides):
            seen.append(sides)
            return 10

        outcome = resolve_check(5, 0, ATTRIBUTES, rng=sampler)
        assert seen == [20, 20, 20]
        assert outcome.rolls == (10, 10, 10)

    @pytest.mark.parametrize("attributes", [(12, 13), (12, 13, 14, 15), ()])
    def test_wrong_attribute_count(self, attributes):
        """Test malformed attributes raise ValueError."""
        with pytest.raises(ValueError):
            resolve_check(5, 0, attributes, rolls=[5, 5, 5])

    @pytest.mark.parametrize("rolls", [[0, 5, 5], [5, 21, 5], [5, 5]])
    def test_malformed_rolls(self, rolls):
        """Test rolls outside 1-20 raise ValueError."""
        with pytest.raises(ValueError):
            resolve_check(5, 0, ATTRIBUTES, rolls=rolls)

    def test_outcome_is_immutable(self):
        """Test outcomes cannot be changed."""
        outcome = resolve_check(5, 0, ATTRIBUTES, rolls=[5, 5, 5])
        with pytest.raises(AttributeError):
            outcome.success = False

    def test_describe(self):
        """Test the summary line."""
        outcome = CheckOutcome(success=True, rolls=(1, 1, 9), extra_points=4, is_double_one=True)
        assert outcome.describe() == "Erfolg (1/1/9), ZfP* 4 - Doppel-1!"
        failed = resolve_check(2, 0, ATTRIBUTES, rolls=[18, 5, 5])
        assert failed.describe("TaP*") == "Misserfolg (18/5/5), TaP* -4"


class TestAttributeCheck:
    """Tests for single-attribute checks."""

    def test_success_at_attribute(self):
        """Test rolling exactly the attribute succeeds."""
        result = resolve_attribute_check(12, rng=constant_sampler(12))
        assert result.success
        assert result.margin == 0

    def test_difficulty_applies(self):
        """Test difficulty is added to the roll."""
        result = resolve_attribute_check(12, difficulty=3, rng=fixed_sampler([10]))
        assert not result.success
        assert result.margin == -1
