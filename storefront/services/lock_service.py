# storefront/services/lock_service.py
from contextlib import contextmanager
import uuid

import redis

from storefront.domain.errors import ConcurrencyConflictError
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#compare-and-delete in one atomic Lua call, so a lock is only released by its owner
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Short-lived Redis locks:
    - payment:<reference>:lock around reconciliation of one gateway reference
    - cart:<user>:<product>:<size>:<color>:lock around add-to-cart check-then-write
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire(self, key: str, token: str, ttl: int) -> bool:
        logger.info(f"Acquire lock {key}")
        #SET key token NX EX ttl
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def hold(self, key: str, ttl: int, conflict_message: str = "Resource is locked"):
        token = uuid.uuid4().hex
        if not self.acquire(key, token, ttl):
            raise ConcurrencyConflictError(conflict_message)
        try:
            yield
        finally:
            try:
                self.release(key, token)
            except redis.RedisError as e:
                #the lock still expires after ttl
                logger.error(f"Failed to release lock {key}: {e}")

    @staticmethod
    def payment_key(reference: str) -> str:
        return f"payment:{reference}:lock"

    @staticmethod
    def cart_line_key(user_id: int, product_id: int, size: str | None, color: str | None) -> str:
        return f"cart:{user_id}:{product_id}:{size or '-'}:{color or '-'}:lock"
