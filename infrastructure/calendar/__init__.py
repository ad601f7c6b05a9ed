from .system_calendar import SystemBusinessDayCalendar

__all__ = ["SystemBusinessDayCalendar"]
