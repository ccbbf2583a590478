"""
Payment outcome channel.

The hosted checkout reports its outcome through callbacks that fire outside
the flow that opened it. Those callbacks publish a signal here, keyed by the
checkout session id, and the waiting session receives it from its
subscription.
"""

import logging
from dataclasses import dataclass
from typing import Union

from anyio import ClosedResourceError, EndOfStream, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentSucceeded:
    """The buyer completed payment; evidence still needs verification."""

    payment_id: str
    order_id: str
    signature: str


@dataclass(frozen=True)
class PaymentFailed:
    """The gateway reported the payment as failed."""

    reason: str


@dataclass(frozen=True)
class PaymentDismissed:
    """The buyer closed the hosted checkout."""


PaymentSignal = Union[PaymentSucceeded, PaymentFailed, PaymentDismissed]


class Subscription:
    """
    One listener for one checkout attempt.

    Delivers at most one signal. Once a signal has been delivered, or the
    subscription has been closed, later publishes are not seen.
    """

    def __init__(self, channel: "PaymentChannel", session_id: str):
        self.channel = channel
        self.session_id = session_id
        self._send: MemoryObjectSendStream[PaymentSignal]
        self._receive: MemoryObjectReceiveStream[PaymentSignal]
        self._send, self._receive = create_memory_object_stream[PaymentSignal](
            max_buffer_size=1
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _deliver(self, signal: PaymentSignal) -> bool:
        if self._closed:
            return False
        try:
            self._send.send_nowait(signal)
        except (WouldBlock, ClosedResourceError):
            return False
        # Terminal: nothing after the first signal gets through
        self._send.close()
        return True

    async def receive(self) -> PaymentSignal:
        """
        Wait for the outcome of the attempt.

        A subscription closed before any signal arrived resolves as
        ``PaymentDismissed``.
        """
        try:
            signal = await self._receive.receive()
        except (EndOfStream, ClosedResourceError):
            signal = PaymentDismissed()
        self.close()
        return signal

    def close(self) -> None:
        """Stop listening. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        # Closing the send side first wakes a pending receive()
        self._send.close()
        self._receive.close()
        self.channel.unsubscribe(self)


class PaymentChannel:
    """In-process pub/sub of payment signals keyed by checkout session id."""

    def __init__(self):
        self._subscribers: dict[str, list[Subscription]] = {}

    def subscribe(self, session_id: str) -> Subscription:
        subscription = Subscription(self, session_id)
        self._subscribers.setdefault(session_id, []).append(subscription)
        logger.debug(
            f"Subscribed to checkout {session_id} "
            f"(total subscribers: {len(self._subscribers[session_id])})"
        )
        return subscription

    def publish(self, session_id: str, signal: PaymentSignal) -> int:
        """
        Deliver ``signal`` to every open subscription of ``session_id``.

        Returns:
            Number of subscriptions that received the signal
        """
        subscribers = list(self._subscribers.get(session_id, ()))
        delivered = 0
        for subscription in subscribers:
            if subscription._deliver(signal):
                delivered += 1
            self._discard(subscription)

        if not delivered:
            logger.debug(f"No listener for {type(signal).__name__} on checkout {session_id}")
        else:
            logger.info(f"{type(signal).__name__} delivered on checkout {session_id}")
        return delivered

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unknown or already removed ones are ignored."""
        if not subscription.closed:
            subscription.close()
            return
        self._discard(subscription)

    def subscriber_count(self, session_id: str) -> int:
        return len(self._subscribers.get(session_id, ()))

    def _discard(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.session_id)
        if not subscribers:
            return
        if subscription in subscribers:
            subscribers.remove(subscription)
        if not subscribers:
            del self._subscribers[subscription.session_id]
