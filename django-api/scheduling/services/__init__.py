from scheduling.services.schedule_service import ScheduleService

__all__ = ["ScheduleService"]
