# storefront/services/lock_service.py
from typing import Iterable, List

import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomowo - nie zwolnimy cudzego locka
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


def _key(variant_id: int) -> str:
    return f"variant:{variant_id}:checkout-lock"


class LockService:
    """
    Krotkie locki na warianty na czas checkoutu.
    -SET NX EX (wygasa sam, nie trzeba sprzatac)
    -zwalnianie przez lua compare-and-delete
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(url or REDIS_URL, decode_responses=True)

    @redis_retry()
    def acquire_variant_lock(self, variant_id: int, owner: str, ttl: int = CHECKOUT_LOCK_TTL_SECONDS) -> bool:
        key = _key(variant_id)
        logger.info(f"Acquire lock {key} for {owner}")
        return bool(self.redis.set(name=key, value=owner, nx=True, ex=ttl))

    @redis_retry()
    def release_variant_lock(self, variant_id: int, owner: str) -> bool:
        key = _key(variant_id)
        logger.info(f"Release lock {key} for {owner}")
        return bool(self.redis.eval(_RELEASE_LUA, 1, key, owner))

    def acquire_many(self, variant_ids: Iterable[int], owner: str) -> List[int]:
        """
        Bierze locki w rosnacej kolejnosci id (brak deadlockow miedzy checkoutami).
        Jesli ktorys jest zajety - zwalnia to co wzial i zwraca [].
        """
        taken: List[int] = []
        for variant_id in sorted(set(variant_ids)):
            if not self.acquire_variant_lock(variant_id, owner):
                logger.warning(f"Variant {variant_id} is locked by another checkout")
                self.release_many(taken, owner)
                return []
            taken.append(variant_id)
        return taken

    def release_many(self, variant_ids: Iterable[int], owner: str) -> None:
        for variant_id in variant_ids:
            try:
                self.release_variant_lock(variant_id, owner)
            except redis.RedisError as e:
                # lock i tak wygasnie po TTL
                logger.warning(f"Failed to release lock for variant {variant_id}: {e}")

    @redis_retry()
    def ping(self) -> bool:
        return bool(self.redis.ping())
