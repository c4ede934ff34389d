import json
import redis.asyncio as redis
from medilink.core.config import settings

class RedisClient:
    """Token store backing issued sessions. Keys expire with the token."""

    def __init__(self, url: str | None = None):
        self.redis = redis.from_url(url or settings.REDIS_URL, encoding="utf-8", decode_responses=True)

    async def set_session(self, token: str, value: dict, expire: int):
        await self.redis.set(f"session:{token}", json.dumps(value), ex=expire)

    async def get_session(self, token: str) -> dict | None:
        raw = await self.redis.get(f"session:{token}")
        if raw is None:
            return None
        return json.loads(raw)

    async def delete_session(self, token: str) -> bool:
        deleted = await self.redis.delete(f"session:{token}")
        return bool(deleted)

    async def close(self):
        await self.redis.aclose()

redis_client = RedisClient()
