from django.apps import AppConfig
from django.conf import settings


class SchedulingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "scheduling"
    verbose_name = "Competition scheduling"

    def ready(self) -> None:
        from scheduling import signals  # noqa: F401
        from scheduling.services import ScheduleService
        from scheduling.services.publisher import SignalPublisher
        from scheduling.stores import InMemoryRoster, InMemoryScheduleStore
        from scheduling.stores.django_store import DjangoRosterLookup, DjangoScheduleStore

        config = settings.SCHEDULER
        if config.get("STORE", "django") == "memory":
            store = InMemoryScheduleStore(timeout=config.get("STORE_TIMEOUT_SECONDS", 5))
            roster = InMemoryRoster()
        else:
            store = DjangoScheduleStore()
            roster = DjangoRosterLookup()

        # One engine per process, shared by every request.
        self.service = ScheduleService(
            store,
            roster,
            SignalPublisher(),
            lock_timeout=config.get("LOCK_TIMEOUT_SECONDS", 5),
        )
