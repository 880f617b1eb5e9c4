"""In-process change channels.

A ``Channel`` pushes the full current record set of a collection to every
subscriber after each change. Subscribers get back a ``Subscription`` handle
that disposes the registration.
"""

import logging
from typing import Callable, Generic, Protocol, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Callback = Callable[[Sequence[T]], None]


class Subscription:
    """Disposable handle for a channel registration."""

    def __init__(self, channel: "Channel", callback: Callable):
        self._channel = channel
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Stop receiving pushes. Safe to call more than once."""
        if self._active:
            self._channel._remove(self)
            self._active = False

    def deliver(self, records: Sequence) -> None:
        if self._active:
            self._callback(records)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


class Channel(Generic[T]):
    """Publish full record sets of one collection to its subscribers."""

    def __init__(self, name: str):
        self.name = name
        self._subscriptions: list[Subscription] = []

    def subscribe(self, callback: Callback) -> Subscription:
        """Register a callback. Returns its disposable handle."""
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, records: Sequence[T]) -> None:
        """Push a record set to every active subscriber.

        A failing subscriber is logged and does not stop delivery to the
        others.
        """
        snapshot = tuple(records)
        for subscription in list(self._subscriptions):
            try:
                subscription.deliver(snapshot)
            except Exception:
                logger.exception("Subscriber of channel '%s' failed", self.name)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)


class Subscribable(Protocol):
    """Anything that hands out subscriptions to record-set pushes."""

    def subscribe(self, callback: Callable) -> Subscription: ...
