"""Redis infrastructure for flowdesk."""

from flowdesk.infra.redis.client import RedisKeyValueStore

__all__ = ["RedisKeyValueStore"]
