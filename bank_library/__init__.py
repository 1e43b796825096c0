"""
Bank Library

An in-memory model of demand and deposit accounts managed by a bank,
with synchronous notifications for every account state change and
batch interest accrual using Decimal arithmetic.
"""

from .accounts import Account, AccountIdAllocator, AccountState, AccountType, DemandAccount, DepositAccount
from .bank import Bank
from .errors import AccountCreationError, AccountNotFoundError, AccountStateError, BankLibraryError
from .events import AccountEvent, AccountEventArgs, EventChannel

__version__ = "1.0.0"

__all__ = [
    "Account",
    "AccountCreationError",
    "AccountEvent",
    "AccountEventArgs",
    "AccountIdAllocator",
    "AccountNotFoundError",
    "AccountState",
    "AccountStateError",
    "AccountType",
    "Bank",
    "BankLibraryError",
    "DemandAccount",
    "DepositAccount",
    "EventChannel",
]
