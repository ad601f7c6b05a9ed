"""
Wall-clock business-day calendar.

Dates are taken in the business timezone, not the server's, so a payment
marked at 00:30 in Lisbon is dated on the Lisbon day.
"""
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from domain.config import get_calendar_config
from domain.interfaces import BusinessDayCalendar
from domain.services.business_days import current_or_last_business_day


class SystemBusinessDayCalendar(BusinessDayCalendar):

    def __init__(self, timezone: Optional[str] = None):
        self.timezone = ZoneInfo(timezone or get_calendar_config().timezone)

    def today(self) -> date:
        return datetime.now(self.timezone).date()

    def current_or_last_business_day(self) -> date:
        return current_or_last_business_day(self.today())
