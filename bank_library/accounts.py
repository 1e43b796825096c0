"""
Account Management Module

Defines the account lifecycle, balances and interest accrual for demand
and deposit accounts. Both variants share one data layout and one set of
deposit/withdraw/interest routines; they differ only in the eligibility
predicates consulted before those routines run.

Business rejections (insufficient funds, a closed deposit window) are
reported through the account's notifications with a zero amount and are
never raised.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Type

from .errors import AccountStateError
from .events import AccountEvent, EventChannel, Observer
from .logging_config import get_logger


ZERO = Decimal("0")
DEFAULT_PERIOD_DAYS = 30


class AccountType(Enum):
    """Account kinds a bank can open"""
    ORDINARY = "ordinary"  # Demand account, low rate, never gated
    DEPOSIT = "deposit"    # Deposit account, high rate, 30-day gate


class AccountState(Enum):
    """Account lifecycle states"""
    CREATED = "created"  # Constructed, not yet opened
    OPEN = "open"        # Accepts operations
    CLOSED = "closed"    # Terminal


def to_decimal(value) -> Decimal:
    """Convert an int, str or Decimal amount to Decimal without float noise"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class AccountIdAllocator:
    """
    Hands out account ids from a monotonically increasing counter.

    A bank owns one allocator by default; banks that must never reuse ids
    between them can share a single instance.
    """

    def __init__(self, start: int = 1):
        if start < 1:
            raise ValueError("Account ids start at 1 or above")
        self._next_id = start

    def next_id(self) -> int:
        """Reserve and return the next id"""
        account_id = self._next_id
        self._next_id += 1
        return account_id

    def peek(self) -> int:
        """Return the id the next call to next_id() will hand out"""
        return self._next_id


class Account(ABC):
    """
    Base account with balance, integer interest rate and day counter.

    Variants override the eligibility predicates ``transactions_allowed``
    and ``interest_due`` and the text of their notifications; the shared
    routines below do the rest.
    """

    account_type: Optional[AccountType] = None

    def __init__(self, account_id: int, initial_sum, interest_rate: int):
        if isinstance(account_id, bool) or not isinstance(account_id, int) or account_id < 1:
            raise ValueError("Account id must be a positive integer")
        if isinstance(interest_rate, bool) or not isinstance(interest_rate, int):
            raise ValueError("Interest rate must be an integer percentage")

        self._id = account_id
        self._balance = to_decimal(initial_sum)
        self._interest_rate = interest_rate
        self._elapsed_days = 0
        self._state = AccountState.CREATED
        self._events = EventChannel(self)
        self.logger = get_logger("bank_library.accounts")

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(id={self._id}, balance={self._balance}, "
                f"rate={self._interest_rate}%, days={self._elapsed_days}, state={self._state.value})")

    @property
    def id(self) -> int:
        return self._id

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def current_sum(self) -> Decimal:
        """Alias of ``balance``"""
        return self._balance

    @property
    def interest_rate(self) -> int:
        return self._interest_rate

    @property
    def percentage(self) -> int:
        """Alias of ``interest_rate``"""
        return self._interest_rate

    @property
    def elapsed_days(self) -> int:
        return self._elapsed_days

    @property
    def state(self) -> AccountState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state == AccountState.OPEN

    @property
    def events(self) -> EventChannel:
        """Notification channel of this account"""
        return self._events

    def subscribe(self, kind: AccountEvent, observer: Observer) -> None:
        """Attach an observer to one of this account's event kinds"""
        self._events.subscribe(kind, observer)

    # Eligibility predicates

    def transactions_allowed(self) -> bool:
        """Check if deposits and withdrawals may run today"""
        return True

    def interest_due(self) -> bool:
        """Check if interest accrues on the current day"""
        return True

    # Notification text

    @abstractmethod
    def _opened_message(self) -> str:
        """Message sent with the opened notification"""

    def _deposit_rejected_message(self) -> str:
        return f"Deposits to account {self._id} are not accepted now"

    def _withdraw_rejected_message(self) -> str:
        return f"Withdrawals from account {self._id} are not accepted now"

    # Operations

    def _require_state(self, state: AccountState, operation: str) -> None:
        if self._state != state:
            raise AccountStateError(self._id, self._state, operation)

    def open(self) -> None:
        """Mark the account open and fire the opened notification"""
        self._require_state(AccountState.CREATED, "open")
        self._state = AccountState.OPEN
        self.logger.debug(f"Account {self._id} opened with balance {self._balance}")
        self._events.emit(AccountEvent.OPENED, self._opened_message(), self._balance)

    def close(self) -> None:
        """Mark the account closed and fire the closed notification with the final balance"""
        self._require_state(AccountState.OPEN, "close")
        self._state = AccountState.CLOSED
        self.logger.debug(f"Account {self._id} closed with balance {self._balance}")
        self._events.emit(
            AccountEvent.CLOSED,
            f"Account {self._id} closed. Final sum: {self._balance}",
            self._balance
        )

    def deposit(self, amount) -> None:
        """
        Add ``amount`` to the balance.

        The amount is not validated; a negative amount lowers the balance.
        When the account does not accept transactions today the balance is
        left as is and a deposited notification with amount 0 is fired.
        """
        self._require_state(AccountState.OPEN, "deposit to")
        amount = to_decimal(amount)

        if not self.transactions_allowed():
            self._events.emit(AccountEvent.DEPOSITED, self._deposit_rejected_message(), ZERO)
            return

        self._balance += amount
        self._events.emit(AccountEvent.DEPOSITED, f"Account {self._id} received {amount}", amount)

    def withdraw(self, amount) -> Decimal:
        """
        Take ``amount`` from the balance.

        Returns:
            The withdrawn amount, or 0 when the withdrawal was rejected
            because of insufficient funds or a closed transaction window.
            Rejections fire a withdrawn notification with amount 0.
        """
        self._require_state(AccountState.OPEN, "withdraw from")
        amount = to_decimal(amount)

        if not self.transactions_allowed():
            self._events.emit(AccountEvent.WITHDRAWN, self._withdraw_rejected_message(), ZERO)
            return ZERO

        if amount > self._balance:
            self._events.emit(AccountEvent.WITHDRAWN, f"Insufficient funds in account {self._id}", ZERO)
            return ZERO

        self._balance -= amount
        self._events.emit(AccountEvent.WITHDRAWN, f"Amount {amount} withdrawn from account {self._id}", amount)
        return amount

    def increment_day(self) -> None:
        """Advance the account's day counter by one"""
        self._require_state(AccountState.OPEN, "advance the day of")
        self._elapsed_days += 1

    def accrue_interest(self) -> Decimal:
        """
        Add ``balance * interest_rate / 100`` to the balance.

        Returns the accrued increment. When interest is not due nothing
        changes, nothing is fired and 0 is returned.
        """
        self._require_state(AccountState.OPEN, "accrue interest on")

        if not self.interest_due():
            return ZERO

        increment = self._balance * self._interest_rate / 100
        self._balance += increment
        self.logger.debug(f"Account {self._id} accrued {increment} at {self._interest_rate}% on day {self._elapsed_days}")
        self._events.emit(AccountEvent.INTEREST_CALCULATED, f"Interest accrued: {increment}", increment)
        return increment


class DemandAccount(Account):
    """Demand account: deposits, withdrawals and interest always run"""

    account_type = AccountType.ORDINARY

    def _opened_message(self) -> str:
        return f"New demand account opened! Account id: {self._id}"


class DepositAccount(Account):
    """
    Deposit account gated on a fixed period of days.

    Deposits, withdrawals and interest run only when the elapsed day
    count is an exact multiple of the period, day 0 included. A gated
    deposit or withdrawal fires a zero-amount rejection; gated interest
    accrual fires nothing at all.
    """

    account_type = AccountType.DEPOSIT

    def __init__(self, account_id: int, initial_sum, interest_rate: int,
                 period_days: int = DEFAULT_PERIOD_DAYS):
        if period_days < 1:
            raise ValueError("Deposit period must be at least one day")
        super().__init__(account_id, initial_sum, interest_rate)
        self._period_days = period_days

    @property
    def period_days(self) -> int:
        return self._period_days

    def _period_reached(self) -> bool:
        return self._elapsed_days % self._period_days == 0

    def transactions_allowed(self) -> bool:
        return self._period_reached()

    def interest_due(self) -> bool:
        return self._period_reached()

    def _opened_message(self) -> str:
        return f"New deposit account opened! Account id: {self._id}"

    def _deposit_rejected_message(self) -> str:
        return f"Deposits are accepted only after a {self._period_days}-day period"

    def _withdraw_rejected_message(self) -> str:
        return f"Funds can be withdrawn only after a {self._period_days}-day period"


ACCOUNT_CLASSES: Dict[AccountType, Type[Account]] = {
    AccountType.ORDINARY: DemandAccount,
    AccountType.DEPOSIT: DepositAccount,
}
