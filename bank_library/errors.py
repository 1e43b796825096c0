"""
Error Types Module

Exceptions raised for usage errors. Business rejections such as
insufficient funds are not errors: they are reported through account
notifications and never raised.
"""

from typing import Any, Optional


class BankLibraryError(Exception):
    """Base class for all bank library errors"""


class AccountCreationError(BankLibraryError):
    """Raised when a bank cannot create an account of the requested type"""

    def __init__(self, message: str, account_type: Any = None):
        super().__init__(message)
        self.account_type = account_type


class AccountNotFoundError(BankLibraryError):
    """Raised when no live account has the requested id"""

    def __init__(self, account_id: int):
        super().__init__(f"Account {account_id} not found")
        self.account_id = account_id


class AccountStateError(BankLibraryError):
    """Raised when an operation does not fit the account's lifecycle state"""

    def __init__(self, account_id: int, state: Any, operation: Optional[str] = None):
        state_name = getattr(state, "value", state)
        if operation:
            message = f"Cannot {operation} account {account_id} in state '{state_name}'"
        else:
            message = f"Account {account_id} is in state '{state_name}'"
        super().__init__(message)
        self.account_id = account_id
        self.state = state
        self.operation = operation
