"""
Event System Module

Per-account notification channel using the Observer pattern. Every state
change on an account fires one of five event kinds; observers attached to
that kind are called synchronously, in attachment order, before the
account operation returns.
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
from dataclasses import dataclass
from decimal import Decimal

from .logging_config import get_logger


class AccountEvent(Enum):
    """Kinds of account state changes"""
    OPENED = "account.opened"
    DEPOSITED = "account.deposited"
    WITHDRAWN = "account.withdrawn"
    INTEREST_CALCULATED = "account.interest_calculated"
    CLOSED = "account.closed"


@dataclass(frozen=True)
class AccountEventArgs:
    """Payload delivered with every notification"""
    message: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'message': self.message,
            'amount': str(self.amount)
        }


# Observers are called as observer(sender, args)
Observer = Callable[[Any, AccountEventArgs], None]
ObserverSpec = Union[None, Observer, Iterable[Observer]]


def as_observer_list(observers: ObserverSpec) -> List[Observer]:
    """Normalize None, a single observer or an iterable of observers into a list"""
    if observers is None:
        return []
    if callable(observers):
        return [observers]
    result = list(observers)
    for observer in result:
        if not callable(observer):
            raise TypeError(f"Observer {observer!r} is not callable")
    return result


class EventChannel:
    """
    Typed notification channel owned by a single account.

    Each event kind keeps its own ordered list of observers. Emission is
    synchronous and does not catch observer exceptions: a failing observer
    aborts the emission and the exception reaches the caller of the
    account operation.
    """

    def __init__(self, sender: Any = None):
        self._sender = sender
        self._observers: Dict[AccountEvent, List[Observer]] = {kind: [] for kind in AccountEvent}
        self.logger = get_logger("bank_library.events")

    def subscribe(self, kind: AccountEvent, observer: Observer) -> None:
        """Attach an observer to one event kind"""
        if not callable(observer):
            raise TypeError(f"Observer {observer!r} is not callable")
        self._observers[kind].append(observer)
        self.logger.debug(f"Subscribed observer {getattr(observer, '__name__', repr(observer))} to {kind.value}")

    def subscribe_many(self, kind: AccountEvent, observers: ObserverSpec) -> None:
        """Attach every observer in ``observers`` to one event kind, keeping their order"""
        for observer in as_observer_list(observers):
            self.subscribe(kind, observer)

    def unsubscribe(self, kind: AccountEvent, observer: Observer) -> None:
        """Detach the first attachment of an observer from one event kind"""
        try:
            self._observers[kind].remove(observer)
            self.logger.debug(f"Unsubscribed observer {getattr(observer, '__name__', repr(observer))} from {kind.value}")
        except ValueError:
            self.logger.warning(f"Observer {getattr(observer, '__name__', repr(observer))} was not subscribed to {kind.value}")

    def emit(self, kind: AccountEvent, message: str, amount: Decimal) -> None:
        """Build a fresh payload and deliver it to every observer of ``kind``"""
        observers = self._observers[kind]
        if not observers:
            return

        args = AccountEventArgs(message=message, amount=amount)
        # Copy so an observer that detaches itself does not skip the next one
        for observer in list(observers):
            observer(self._sender, args)

    def clear(self) -> None:
        """Detach all observers"""
        for observers in self._observers.values():
            observers.clear()

    def get_observer_count(self, kind: Optional[AccountEvent] = None) -> int:
        """Get count of observers for a specific event kind or all"""
        if kind:
            return len(self._observers[kind])
        return sum(len(observers) for observers in self._observers.values())

    def get_subscribed_events(self) -> List[AccountEvent]:
        """Get list of event kinds that have observers"""
        return [kind for kind, observers in self._observers.items() if observers]
