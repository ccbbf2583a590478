"""Per-payment lock held in Redis while a booking is written."""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import redis.asyncio as redis

from boxoffice.config import get_settings
from boxoffice.exceptions import PaymentInProgress

logger = logging.getLogger(__name__)

# Delete the key only while it still holds our token
RELEASE_IF_OWNER = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class PaymentLocker:
    """
    Serialises booking writes for the same gateway payment.

    The lock is taken with a single ``SET NX EX``; a second request for the
    same payment fails immediately instead of waiting. The expiry frees the
    key if the holder dies mid-write.
    """

    def __init__(self, redis_client: redis.Redis, timeout_seconds: int | None = None):
        self.redis = redis_client
        self.timeout_seconds = timeout_seconds or get_settings().PAYMENT_LOCK_TIMEOUT_SECONDS
        self._release = self.redis.register_script(RELEASE_IF_OWNER)

    @staticmethod
    def lock_key(payment_id: str) -> str:
        return f"lock:payment:{payment_id}"

    @asynccontextmanager
    async def hold(self, payment_id: str) -> AsyncGenerator[str, None]:
        """
        Hold the lock for ``payment_id`` for the duration of the block.

        Usage:
            async with locker.hold(payment_id):
                # Write the booking
                ...

        Raises:
            PaymentInProgress: If another request holds the lock
        """
        key = self.lock_key(payment_id)
        owner = uuid.uuid4().hex
        if not await self.redis.set(key, owner, nx=True, ex=self.timeout_seconds):
            logger.warning(f"Payment {payment_id} is already being booked")
            raise PaymentInProgress()

        try:
            yield owner
        finally:
            if not await self._release(keys=[key], args=[owner]):
                logger.warning(f"Lock for payment {payment_id} expired before release")
