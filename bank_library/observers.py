"""
Ready-made Observers Module

Observers that callers can pass to ``Bank.open``: one that writes every
notification to the structured log, and an in-memory journal that keeps
an audit trail of notifications for later inspection.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from .events import AccountEvent, AccountEventArgs, Observer
from .logging_config import get_logger, log_action


@dataclass(frozen=True)
class JournalEntry:
    """One recorded notification"""
    kind: AccountEvent
    account_id: Optional[int]
    message: str
    amount: Decimal

    @property
    def is_rejection(self) -> bool:
        """Deposits and withdrawals that were refused carry a zero amount"""
        return self.kind in (AccountEvent.DEPOSITED, AccountEvent.WITHDRAWN) and self.amount == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'kind': self.kind.value,
            'account_id': self.account_id,
            'message': self.message,
            'amount': str(self.amount)
        }


class EventJournal:
    """In-memory audit trail of account notifications"""

    def __init__(self):
        self._entries: List[JournalEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def observer(self, kind: AccountEvent) -> Observer:
        """Return an observer that records notifications as ``kind``"""
        def record(sender, args: AccountEventArgs) -> None:
            self._entries.append(JournalEntry(
                kind=kind,
                account_id=getattr(sender, "id", None),
                message=args.message,
                amount=args.amount
            ))
        record.__name__ = f"journal_{kind.name.lower()}"
        return record

    def observers(self) -> Dict[str, Observer]:
        """Keyword arguments wiring this journal to every kind in ``Bank.open``"""
        return {
            "on_deposited": self.observer(AccountEvent.DEPOSITED),
            "on_withdrawn": self.observer(AccountEvent.WITHDRAWN),
            "on_interest": self.observer(AccountEvent.INTEREST_CALCULATED),
            "on_closed": self.observer(AccountEvent.CLOSED),
            "on_opened": self.observer(AccountEvent.OPENED),
        }

    @property
    def entries(self) -> List[JournalEntry]:
        return list(self._entries)

    def for_account(self, account_id: int) -> List[JournalEntry]:
        return [entry for entry in self._entries if entry.account_id == account_id]

    def of_kind(self, kind: AccountEvent) -> List[JournalEntry]:
        return [entry for entry in self._entries if entry.kind == kind]

    def clear(self) -> None:
        self._entries.clear()


class LoggingObserver:
    """
    Observer that writes notifications to the structured log.

    The optional ``kind`` becomes the record's action so log lines stay
    filterable; without it the action is a generic notification tag.
    """

    def __init__(self, kind: Optional[AccountEvent] = None,
                 logger: Optional[logging.Logger] = None, level: str = "info"):
        self.kind = kind
        self.logger = logger or get_logger("bank_library.notifications")
        self.level = level

    def __call__(self, sender, args: AccountEventArgs) -> None:
        action = self.kind.value if self.kind else "account.notification"
        log_action(self.logger, self.level, args.message,
                   action=action, resource=type(sender).__name__,
                   account_id=getattr(sender, "id", None),
                   extra={"amount": str(args.amount)})

    @classmethod
    def for_all_kinds(cls, logger: Optional[logging.Logger] = None, level: str = "info") -> Dict[str, "LoggingObserver"]:
        """Keyword arguments wiring logging observers to every kind in ``Bank.open``"""
        return {
            "on_deposited": cls(AccountEvent.DEPOSITED, logger, level),
            "on_withdrawn": cls(AccountEvent.WITHDRAWN, logger, level),
            "on_interest": cls(AccountEvent.INTEREST_CALCULATED, logger, level),
            "on_closed": cls(AccountEvent.CLOSED, logger, level),
            "on_opened": cls(AccountEvent.OPENED, logger, level),
        }
