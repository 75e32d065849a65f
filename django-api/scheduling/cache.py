"""Cache keys for latest-snapshot responses."""

from django.conf import settings
from django.core.cache import cache


def schedule_key(event_id: str, schedule_id: str) -> str:
    return f"scheduler:{event_id}:{schedule_id}"


def event_key(event_id: str) -> str:
    return f"scheduler:event:{event_id}"


def cache_timeout() -> int:
    return settings.SCHEDULER.get("CACHE_TIMEOUT_SECONDS", 60)


def invalidate(event_id: str, schedule_id: str) -> None:
    cache.delete_many([schedule_key(event_id, schedule_id), event_key(event_id)])
