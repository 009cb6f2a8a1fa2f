import redis
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porównaj i usuń, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nie można wcisnąć się między GET a DEL
#lock zwalnia tylko ten, kto go założył (token)


class LockService:
    """
    -blokada checkoutu użytkownika (jedno składanie zamówienia naraz)
    -zwalnianie locka
    -atomowość przy pomocy lua
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def checkout_key(user_id: int) -> str:
        return f"checkout:{user_id}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = self.checkout_key(user_id)
        logger.info(f"Acquire lock {key}")
        #SET checkout:1:lock "<token>" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True, #tylko jeśli klucz nie istnieje
                ex=ttl, #wygasa sam, nawet jak proces padnie w trakcie
            )
        )

    @redis_retry()
    def release_checkout_lock(self, user_id: int, token: str) -> bool:
        key = self.checkout_key(user_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
