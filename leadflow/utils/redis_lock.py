import logging
from contextlib import contextmanager

from redis.exceptions import LockError

logger = logging.getLogger(__name__)


class LockNotAcquired(Exception):
    pass


@contextmanager
def redis_lock(client, key: str, ttl: int = 300):
    """Hold a non-blocking Redis lock for the duration of the block."""
    lock = client.lock(key, timeout=ttl)
    acquired = lock.acquire(blocking=False)
    if not acquired:
        raise LockNotAcquired(f"Lock {key} is held by another worker")

    try:
        yield lock
    finally:
        try:
            lock.release()
        except LockError:
            logger.warning(f"Lock {key} expired before release")
