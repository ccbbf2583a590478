"""Hosted checkout stand-in for development and tests."""

import asyncio
from typing import Callable

from ulid import ULID

from boxoffice.schemas.checkout import CheckoutOptions
from boxoffice.services.payment_verification import compute_signature


class SimulatedHostedCheckout:
    """
    Plays the part of the vendor's popup.

    Successes are signed with ``secret`` exactly as the gateway would sign
    them, so they pass server-side verification configured with the same
    secret. Pass ``outcome`` to resolve every opened checkout automatically.
    """

    def __init__(
        self,
        secret: str,
        outcome: str | None = None,
        load_delay: float = 0,
        fail_load: bool = False,
    ):
        if outcome not in (None, "success", "failure", "dismiss"):
            raise ValueError(f"Unknown outcome: {outcome}")
        self.secret = secret
        self.outcome = outcome
        self.load_delay = load_delay
        self.fail_load = fail_load
        self.load_count = 0
        self.opened: list[CheckoutOptions] = []
        self._options: CheckoutOptions | None = None
        self._on_success: Callable[[str, str, str], None] | None = None
        self._on_failure: Callable[[str], None] | None = None
        self._on_dismiss: Callable[[], None] | None = None

    @property
    def is_open(self) -> bool:
        return self._options is not None

    async def load_script(self, url: str) -> None:
        self.load_count += 1
        if self.load_delay:
            await asyncio.sleep(self.load_delay)
        if self.fail_load:
            raise ConnectionError(f"Could not load {url}")

    async def open(
        self,
        options: CheckoutOptions,
        on_success: Callable[[str, str, str], None],
        on_failure: Callable[[str], None],
        on_dismiss: Callable[[], None],
    ) -> None:
        self._options = options
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_dismiss = on_dismiss
        self.opened.append(options)

        if self.outcome == "success":
            asyncio.get_running_loop().call_soon(self.complete)
        elif self.outcome == "failure":
            asyncio.get_running_loop().call_soon(self.fail)
        elif self.outcome == "dismiss":
            asyncio.get_running_loop().call_soon(self.dismiss)

    async def close(self) -> None:
        self._reset()

    def complete(self, payment_id: str | None = None, signature: str | None = None) -> None:
        """Finish the payment successfully. ``signature`` overrides the real one."""
        if self._options is None:
            return
        callback = self._on_success
        order_id = self._options.order_id
        payment_id = payment_id or f"pay_{ULID()}"
        signature = signature or compute_signature(order_id, payment_id, self.secret)
        self._reset()
        callback(payment_id, order_id, signature)

    def fail(self, reason: str = "Payment declined by bank") -> None:
        if self._options is None:
            return
        callback = self._on_failure
        self._reset()
        callback(reason)

    def dismiss(self) -> None:
        if self._options is None:
            return
        callback = self._on_dismiss
        self._reset()
        callback()

    def _reset(self) -> None:
        self._options = None
        self._on_success = None
        self._on_failure = None
        self._on_dismiss = None
