"""
Configuration module for the contract ledger.

All configuration values are loaded from environment variables with sensible defaults.
"""
import os
from dataclasses import dataclass, field


UNPAY_KEEP_BALANCES = "keep_balances"
UNPAY_REVERSE = "reverse"


def _get_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.getenv(key, default)


@dataclass
class LedgerConfig:
    """Balance ledger policies."""

    # What happens to contract balances when a paid installment is reset to pending
    unpay_policy: str = field(default_factory=lambda: _get_str("UNPAY_POLICY", UNPAY_KEEP_BALANCES))

    def __post_init__(self):
        if self.unpay_policy not in (UNPAY_KEEP_BALANCES, UNPAY_REVERSE):
            raise ValueError(
                f"UNPAY_POLICY must be '{UNPAY_KEEP_BALANCES}' or '{UNPAY_REVERSE}', got '{self.unpay_policy}'"
            )

    @property
    def reverses_on_unpay(self) -> bool:
        return self.unpay_policy == UNPAY_REVERSE


@dataclass
class MoneyConfig:
    """Money formatting."""
    currency_symbol: str = field(default_factory=lambda: _get_str("CURRENCY_SYMBOL", "€"))


@dataclass
class CalendarConfig:
    """Business-day calendar settings."""
    timezone: str = field(default_factory=lambda: _get_str("BUSINESS_TIMEZONE", "Europe/Lisbon"))


# Global config instances (lazy loaded)
_ledger_config = None
_money_config = None
_calendar_config = None


def get_ledger_config() -> LedgerConfig:
    """Get ledger policy configuration."""
    global _ledger_config
    if _ledger_config is None:
        _ledger_config = LedgerConfig()
    return _ledger_config


def get_money_config() -> MoneyConfig:
    """Get money formatting configuration."""
    global _money_config
    if _money_config is None:
        _money_config = MoneyConfig()
    return _money_config


def get_calendar_config() -> CalendarConfig:
    """Get calendar configuration."""
    global _calendar_config
    if _calendar_config is None:
        _calendar_config = CalendarConfig()
    return _calendar_config


def reload_config():
    """Force reload of all configuration from environment variables."""
    global _ledger_config, _money_config, _calendar_config
    _ledger_config = LedgerConfig()
    _money_config = MoneyConfig()
    _calendar_config = CalendarConfig()
