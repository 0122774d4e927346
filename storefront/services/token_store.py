import redis

from storefront.utils.settings import REDIS_URL
from storefront.utils.logging import get_logger
from storefront.utils.retry import redis_retry

logger = get_logger(__name__)


class TokenStore:
    """
    -uniewaznianie tokenow po stronie serwera (logout)
    -klucz token:{jti}:revoked wygasa razem z tokenem, nie trzeba recznie czyscic
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(jti: str) -> str:
        return f"token:{jti}:revoked"

    @redis_retry()
    def revoke(self, jti: str, ttl: int) -> None:
        logger.info(f"Revoke token {jti} for {ttl}s")
        #SET token:abc:revoked "1" EX 3600
        self.redis.set(name=self._key(jti), value="1", ex=max(int(ttl), 1))

    @redis_retry()
    def is_revoked(self, jti: str) -> bool:
        return bool(self.redis.exists(self._key(jti)))
