"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class BankLibraryConfig(BaseSettings):
    """Bank library configuration"""

    # Interest rates, integer percentages applied once per accrual cycle
    demand_interest_rate: int = 1
    deposit_interest_rate: int = 40

    # Deposit accounts accept transactions and accrue interest only on
    # multiples of this many elapsed days
    deposit_period_days: int = Field(30, ge=1)

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    class Config:
        env_prefix = "BANKLIB_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = BankLibraryConfig()


def get_config() -> BankLibraryConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankLibraryConfig:
    """Reload configuration from environment"""
    global config
    config = BankLibraryConfig()
    return config
