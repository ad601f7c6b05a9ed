from datetime import date

from typing_extensions import Protocol


class BusinessDayCalendar(Protocol):
    """Protocol for the clock used to date payments."""

    def today(self) -> date:
        """Current date in the business timezone."""
        ...

    def current_or_last_business_day(self) -> date:
        """Today if it is a business day, otherwise the previous business day."""
        ...
