"""Best-effort notification of committed schedule changes."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleChange:
    event_id: str
    schedule_id: str
    change_type: str
    version: int


class SchedulePublisher(ABC):
    """Interface for announcing committed changes. Must never raise."""

    @abstractmethod
    def publish(self, change: ScheduleChange) -> None:
        ...


class NullPublisher(SchedulePublisher):
    def publish(self, change: ScheduleChange) -> None:
        pass


class RecordingPublisher(SchedulePublisher):
    """Keeps published changes in memory."""

    def __init__(self) -> None:
        self.changes: list[ScheduleChange] = []

    def publish(self, change: ScheduleChange) -> None:
        self.changes.append(change)


class SignalPublisher(SchedulePublisher):
    """Sends the ``schedule_committed`` Django signal.

    Receivers run through ``send_robust``; their failures are logged and do
    not affect the already committed version.
    """

    def publish(self, change: ScheduleChange) -> None:
        from scheduling.signals import schedule_committed

        for receiver, response in schedule_committed.send_robust(sender=self.__class__, change=change):
            if isinstance(response, Exception):
                logger.error(
                    "Receiver %r failed for schedule %s v%d: %s",
                    receiver,
                    change.schedule_id,
                    change.version,
                    response,
                )
