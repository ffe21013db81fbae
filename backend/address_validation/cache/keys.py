"""Cache port for validation responses.

Keys are derived from the normalised request only (address text, region
code and the USPS flag), so the same address typed with different spacing
or case shares one entry. All keys live under :data:`NAMESPACE` so the
whole validation cache can be dropped at once.
"""

import hashlib
import json
import logging
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from address_validation.cache import redis as redis_cache
from address_validation.config import settings

logger = logging.getLogger(__name__)

NAMESPACE = "address_validation:"


def normalize_address(address: str | list[str]) -> str:
    lines = address.splitlines() if isinstance(address, str) else address
    cleaned = [" ".join(line.split()).casefold() for line in lines]
    return "\n".join(line for line in cleaned if line)


class ValidationCacheKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    region_code: str | None = None
    enable_usps: bool = False

    @classmethod
    def for_request(
        cls,
        address: str | list[str],
        region_code: str | None = None,
        enable_usps: bool = False,
    ) -> "ValidationCacheKey":
        return cls(
            address=normalize_address(address),
            region_code=region_code.strip().upper() if region_code else None,
            enable_usps=enable_usps,
        )

    def render(self) -> str:
        payload = json.dumps(
            [self.address, self.region_code, self.enable_usps], separators=(",", ":")
        )
        digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
        return f"{NAMESPACE}{digest}"


class ValidationCache(Protocol):
    async def get(self, key: ValidationCacheKey) -> dict | None: ...

    async def set(self, key: ValidationCacheKey, payload: dict) -> None: ...

    async def invalidate(self, key: ValidationCacheKey) -> int: ...

    async def invalidate_all(self) -> int: ...


class RedisValidationCache:
    """ValidationCache backed by the shared Redis helpers."""

    def __init__(self, ttl: int | None = None, enabled: bool | None = None) -> None:
        self.ttl = settings.cache_ttl_validation if ttl is None else ttl
        self.enabled = settings.cache_enabled if enabled is None else enabled
        if self.ttl < 0:
            raise ValueError("Cache expiration time cannot be negative")

    async def get(self, key: ValidationCacheKey) -> dict | None:
        if not self.enabled:
            return None
        cached = await redis_cache.cache_get(key.render())
        return cached if isinstance(cached, dict) else None

    async def set(self, key: ValidationCacheKey, payload: dict) -> None:
        if not self.enabled:
            return
        await redis_cache.cache_set(key.render(), payload, ttl=self.ttl or None)

    async def invalidate(self, key: ValidationCacheKey) -> int:
        deleted = await redis_cache.cache_delete(key.render())
        logger.info("validation cache invalidated key=%s deleted=%d", key.render(), deleted)
        return deleted

    async def invalidate_all(self) -> int:
        deleted = await redis_cache.cache_delete_prefix(NAMESPACE)
        logger.info("validation cache cleared deleted=%d", deleted)
        return deleted
