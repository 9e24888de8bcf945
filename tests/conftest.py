"""
Pytest fixtures for the Applicatus rules core test suite.

Provides seeded rollers and deterministic samplers.
"""

import pytest

from applicatus.data_models import DiceRoller, constant_sampler, fixed_sampler
from applicatus.timekeeping import DerianDate, DerianMonth


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    return DiceRoller(seed=42)


@pytest.fixture
def always_one():
    """Sampler that rolls 1 on every die."""
    return constant_sampler(1)


@pytest.fixture
def always_max():
    """Sampler that rolls the maximum on every die."""
    return lambda sides: sides


@pytest.fixture
def replay():
    """Factory for samplers replaying fixed values."""
    return fixed_sampler


# =============================================================================
# TIME AND DATE FIXTURES
# =============================================================================


@pytest.fixture
def praios_date():
    """15 Praios 1040 BF."""
    return DerianDate(day=15, month=DerianMonth.PRAIOS, year=1040)
