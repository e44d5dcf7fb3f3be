# storefront/services/rate_limiter.py
import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """Fixed window: INCR klucza, EXPIRE przy pierwszym trafieniu."""

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(url or REDIS_URL, decode_responses=True)

    @redis_retry()
    def hit(self, bucket: str, identity: str, window_seconds: int) -> int:
        key = f"ratelimit:{bucket}:{identity}"
        pipe = self.redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, window_seconds, nx=True)
        count, _ = pipe.execute()
        return int(count)

    def allow(self, bucket: str, identity: str, limit: int, window_seconds: int) -> bool:
        count = self.hit(bucket, identity, window_seconds)
        if count > limit:
            logger.warning(f"Rate limit {bucket} exceeded for {identity} ({count}/{limit})")
            return False
        return True
