"""Django signals for schedule change notification and cache invalidation."""

import logging

from django.db.models.signals import post_save
from django.dispatch import Signal, receiver

from scheduling import cache
from scheduling.models import ScheduleVersion

logger = logging.getLogger(__name__)

# Sent after every successful commit with ``change`` (a ScheduleChange).
schedule_committed = Signal()


@receiver(schedule_committed)
def invalidate_on_commit(sender, change, **kwargs):
    """Invalidate cached responses when any store commits a version."""
    cache.invalidate(change.event_id, change.schedule_id)


@receiver(post_save, sender=ScheduleVersion)
def invalidate_on_version_saved(sender, instance, created, **kwargs):
    """Invalidate cached responses when a snapshot row is written."""
    if created:
        cache.invalidate(instance.schedule.event_id, str(instance.schedule_id))
        logger.debug("Invalidated cache for schedule %s v%d", instance.schedule_id, instance.version)
