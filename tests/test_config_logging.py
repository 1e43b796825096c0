"""
Tests for configuration and structured logging
"""

import json
import logging
import sys

import pytest
from pydantic import ValidationError

from bank_library import config as config_module
from bank_library.accounts import AccountType
from bank_library.bank import Bank
from bank_library.config import BankLibraryConfig, get_config, reload_config
from bank_library.errors import AccountCreationError
from bank_library.logging_config import (
    JSONFormatter, get_logger, log_action, setup_logging, setup_logging_from_config
)


@pytest.fixture
def restore_config():
    """Put back the global configuration instance replaced by reload_config()"""
    original = config_module.config
    yield
    config_module.config = original


@pytest.fixture
def scratch_logger():
    """Logger configured by setup_logging, reset afterwards"""
    name = "bank_library_test"
    yield name
    logger = logging.getLogger(name)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def package_logger():
    """Reset the package logger after setup_logging_from_config touched it"""
    logger = logging.getLogger("bank_library")
    yield logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestConfig:
    """Test environment-based configuration"""

    def test_defaults(self, monkeypatch):
        for name in ("DEMAND_INTEREST_RATE", "DEPOSIT_INTEREST_RATE", "DEPOSIT_PERIOD_DAYS"):
            monkeypatch.delenv(f"BANKLIB_{name}", raising=False)

        settings = BankLibraryConfig()

        assert settings.demand_interest_rate == 1
        assert settings.deposit_interest_rate == 40
        assert settings.deposit_period_days == 30
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"

    def test_environment_overrides(self, monkeypatch, restore_config):
        monkeypatch.setenv("BANKLIB_DEPOSIT_INTEREST_RATE", "12")
        monkeypatch.setenv("BANKLIB_DEPOSIT_PERIOD_DAYS", "7")

        settings = reload_config()

        assert settings.deposit_interest_rate == 12
        assert settings.deposit_period_days == 7
        assert get_config() is settings
        assert config_module.config is settings

    def test_period_must_be_positive(self, monkeypatch):
        """A zero-day deposit period is refused when settings load"""
        monkeypatch.setenv("BANKLIB_DEPOSIT_PERIOD_DAYS", "0")

        with pytest.raises(ValidationError):
            BankLibraryConfig()

    def test_bank_uses_global_config_by_default(self, monkeypatch, restore_config):
        monkeypatch.setenv("BANKLIB_DEMAND_INTEREST_RATE", "5")
        reload_config()

        account = Bank("Env Bank").open(AccountType.ORDINARY, 100)

        assert account.interest_rate == 5


class TestJSONFormatter:
    """Test JSON log formatting"""

    def make_record(self, **fields) -> logging.LogRecord:
        record = logging.LogRecord("bank_library.bank", logging.INFO, __file__, 1, "Opened account", (), None)
        for key, value in fields.items():
            setattr(record, key, value)
        return record

    def test_structured_fields(self):
        record = self.make_record(action="account.open", resource="Test Bank", account_id=1,
                                  extra={"initial_sum": "100"})

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["message"] == "Opened account"
        assert entry["action"] == "account.open"
        assert entry["resource"] == "Test Bank"
        assert entry["account_id"] == 1
        assert entry["extra"] == {"initial_sum": "100"}
        assert "timestamp" in entry

    def test_missing_fields_omitted(self):
        entry = json.loads(JSONFormatter().format(self.make_record()))

        assert "action" not in entry
        assert "account_id" not in entry

    def test_exception_included(self):
        try:
            raise AccountCreationError("Unknown account type: 'savings'")
        except AccountCreationError:
            record = logging.LogRecord("bank_library.bank", logging.ERROR, __file__, 1,
                                       "failed", (), sys.exc_info())

        entry = json.loads(JSONFormatter().format(record))

        assert "AccountCreationError" in entry["exception"]


class TestSetupLogging:
    """Test logger setup helpers"""

    def test_setup_json(self, scratch_logger):
        logger = setup_logging("DEBUG", logger_name=scratch_logger)

        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_text(self, scratch_logger):
        logger = setup_logging("WARNING", logger_name=scratch_logger, log_format="text")

        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_twice_keeps_one_handler(self, scratch_logger):
        setup_logging(logger_name=scratch_logger)
        logger = setup_logging(logger_name=scratch_logger)

        assert len(logger.handlers) == 1

    def test_log_action_output(self, scratch_logger, capsys):
        logger = setup_logging("INFO", logger_name=scratch_logger)

        log_action(logger, "info", "Closed account 4", action="account.close", account_id=4)
        log_action(logger, "debug", "not shown")

        lines = [line for line in capsys.readouterr().err.splitlines() if line]
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["action"] == "account.close"
        assert entry["account_id"] == 4

    def test_get_logger(self):
        assert get_logger("bank_library.bank") is logging.getLogger("bank_library.bank")

    def test_accounts_and_channels_use_package_loggers(self, bank):
        account = bank.open(AccountType.ORDINARY, 1)

        assert account.logger is get_logger("bank_library.accounts")
        assert account.events.logger is get_logger("bank_library.events")
        assert bank.logger is get_logger("bank_library.bank")

    def test_setup_from_config(self, package_logger):
        settings = BankLibraryConfig(log_level="WARNING", log_format="text")

        logger = setup_logging_from_config(settings)

        assert logger is package_logger
        assert logger.level == logging.WARNING
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
