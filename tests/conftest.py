"""Pytest configuration and fixtures."""

import pytest

from bank_library.bank import Bank
from bank_library.config import BankLibraryConfig
from bank_library.observers import EventJournal


@pytest.fixture
def config() -> BankLibraryConfig:
    """Default rates and period, independent of the environment"""
    return BankLibraryConfig(demand_interest_rate=1, deposit_interest_rate=40, deposit_period_days=30)


@pytest.fixture
def bank(config) -> Bank:
    """Bank accepting both account variants"""
    return Bank("Test Bank", config=config)


@pytest.fixture
def journal() -> EventJournal:
    """Empty notification journal"""
    return EventJournal()
