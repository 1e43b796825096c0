"""
Bank Module

The bank owns an insertion-ordered collection of accounts of one declared
variant. It allocates account ids, wires caller-supplied observers to each
new account, and drives collection-wide operations: lookup, close and
batch interest accrual.
"""

from decimal import Decimal
from typing import Dict, Generic, Iterator, Optional, Tuple, Type, TypeVar

from .accounts import ACCOUNT_CLASSES, ZERO, Account, AccountIdAllocator, AccountType, DepositAccount
from .config import BankLibraryConfig, get_config
from .errors import AccountCreationError, AccountNotFoundError
from .events import AccountEvent, ObserverSpec, as_observer_list
from .logging_config import get_logger, log_action


T = TypeVar("T", bound=Account)


class Bank(Generic[T]):
    """
    Container and orchestrator for accounts of one variant.

    ``account_class`` restricts what the bank may open: a
    ``Bank(name, DepositAccount)`` refuses ordinary accounts. The default,
    ``Account``, accepts both variants.
    """

    def __init__(
        self,
        name: str,
        account_class: Type[T] = Account,
        config: Optional[BankLibraryConfig] = None,
        id_allocator: Optional[AccountIdAllocator] = None
    ):
        if not (isinstance(account_class, type) and issubclass(account_class, Account)):
            raise TypeError("account_class must be Account or one of its subclasses")

        self._name = name
        self._account_class = account_class
        self._config = config or get_config()
        self._id_allocator = id_allocator or AccountIdAllocator()
        self._accounts: Dict[int, T] = {}
        self.logger = get_logger("bank_library.bank")

    def __repr__(self) -> str:
        return f"Bank({self._name!r}, {self._account_class.__name__}, accounts={len(self._accounts)})"

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._accounts.values()))

    def __contains__(self, account_id) -> bool:
        return account_id in self._accounts

    @property
    def name(self) -> str:
        return self._name

    @property
    def account_class(self) -> Type[T]:
        return self._account_class

    @property
    def accounts(self) -> Tuple[T, ...]:
        """Live accounts in the order they were opened"""
        return tuple(self._accounts.values())

    def total_balance(self) -> Decimal:
        """Sum of balances over all live accounts"""
        return sum((account.balance for account in self._accounts.values()), ZERO)

    def _interest_rate_for(self, account_type: AccountType) -> int:
        if account_type == AccountType.DEPOSIT:
            return self._config.deposit_interest_rate
        return self._config.demand_interest_rate

    def _resolve_account_class(self, account_type) -> Tuple[AccountType, Type[Account]]:
        try:
            resolved = AccountType(account_type)
        except ValueError as e:
            log_action(self.logger, "warning", f"Unknown account type {account_type!r}",
                       action="account.open_failed", resource=self._name)
            raise AccountCreationError(f"Unknown account type: {account_type!r}", account_type) from e

        variant = ACCOUNT_CLASSES[resolved]
        if not issubclass(variant, self._account_class):
            log_action(self.logger, "warning",
                       f"Bank {self._name} holds {self._account_class.__name__} and cannot open {variant.__name__}",
                       action="account.open_failed", resource=self._name)
            raise AccountCreationError(
                f"Bank '{self._name}' cannot open {resolved.value} accounts", account_type
            )
        return resolved, variant

    def open(
        self,
        account_type,
        initial_sum,
        on_deposited: ObserverSpec = None,
        on_withdrawn: ObserverSpec = None,
        on_interest: ObserverSpec = None,
        on_closed: ObserverSpec = None,
        on_opened: ObserverSpec = None
    ) -> T:
        """
        Open a new account and add it to the bank.

        Args:
            account_type: AccountType.ORDINARY for a demand account,
                AccountType.DEPOSIT for a deposit account (or their values)
            initial_sum: Opening balance
            on_deposited, on_withdrawn, on_interest, on_closed, on_opened:
                Observers for each event kind; None, one callable or an
                iterable of callables called as ``observer(account, args)``

        Returns:
            The opened account

        Raises:
            AccountCreationError: If the type is unknown or not allowed in
                this bank. Nothing is added and no id is used up.
        """
        resolved, variant = self._resolve_account_class(account_type)

        wiring = [
            (AccountEvent.DEPOSITED, as_observer_list(on_deposited)),
            (AccountEvent.WITHDRAWN, as_observer_list(on_withdrawn)),
            (AccountEvent.INTEREST_CALCULATED, as_observer_list(on_interest)),
            (AccountEvent.CLOSED, as_observer_list(on_closed)),
            (AccountEvent.OPENED, as_observer_list(on_opened)),
        ]

        account_id = self._id_allocator.next_id()
        rate = self._interest_rate_for(resolved)
        if variant is DepositAccount:
            account = variant(account_id, initial_sum, rate, period_days=self._config.deposit_period_days)
        else:
            account = variant(account_id, initial_sum, rate)

        self._accounts[account_id] = account

        for kind, observers in wiring:
            account.events.subscribe_many(kind, observers)

        log_action(self.logger, "info", f"Opened {resolved.value} account {account_id}",
                   action="account.open", resource=self._name, account_id=account_id,
                   extra={"initial_sum": str(account.balance), "interest_rate": rate})

        account.open()
        return account

    def find_account(self, account_id: int) -> Optional[T]:
        """Return the live account with ``account_id``, or None"""
        return self._accounts.get(account_id)

    def get_account(self, account_id: int) -> T:
        """Return the live account with ``account_id`` or raise AccountNotFoundError"""
        account = self._accounts.get(account_id)
        if account is None:
            log_action(self.logger, "warning", f"Account {account_id} not found in bank {self._name}",
                       action="account.lookup_failed", resource=self._name, account_id=account_id)
            raise AccountNotFoundError(account_id)
        return account

    def deposit(self, amount, account_id: int) -> None:
        """Deposit into a live account; the account's own rules decide acceptance"""
        self.get_account(account_id).deposit(amount)

    def withdraw(self, amount, account_id: int) -> Decimal:
        """Withdraw from a live account; returns the amount withdrawn (0 if rejected)"""
        return self.get_account(account_id).withdraw(amount)

    def close(self, account_id: int) -> None:
        """Close a live account and remove it from the bank"""
        account = self.get_account(account_id)
        try:
            account.close()
        finally:
            # The account is CLOSED even if a closed observer raised
            del self._accounts[account_id]

        log_action(self.logger, "info", f"Closed account {account_id}",
                   action="account.close", resource=self._name, account_id=account_id,
                   extra={"final_sum": str(account.balance)})

    def accrue_periodic_interest(self) -> Decimal:
        """
        Run one day of the portfolio.

        For every live account, in opening order, advance its day counter
        and then accrue interest. Returns the total interest added.
        """
        total = ZERO
        for account in list(self._accounts.values()):
            # An observer may have closed it earlier in this pass
            if account.id not in self._accounts:
                continue
            account.increment_day()
            total += account.accrue_interest()

        log_action(self.logger, "info", f"Accrued interest across {len(self._accounts)} accounts",
                   action="interest.accrue", resource=self._name,
                   extra={"total_interest": str(total)})
        return total
