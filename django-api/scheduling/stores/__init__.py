from scheduling.stores.interfaces import RosterLookup, ScheduleStore
from scheduling.stores.memory_store import InMemoryRoster, InMemoryScheduleStore

__all__ = [
    "ScheduleStore",
    "RosterLookup",
    "InMemoryScheduleStore",
    "InMemoryRoster",
]
