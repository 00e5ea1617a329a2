"""Business-hours check exposed to the voice agent as a function.

Pure functions; ``now`` is injectable for tests. Uses zoneinfo (stdlib) and
holidays (pip).
"""

from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

import holidays

from app.schemas.responses import BusinessHoursResponse

DEFAULT_TIMEZONE = "America/Los_Angeles"
DEFAULT_OPEN = time(8, 0)
DEFAULT_CLOSE = time(20, 0)  # end-exclusive
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
DEFAULT_DAYS = WEEKDAY_NAMES[:6]


def parse_business_days(raw: str) -> tuple[str, ...]:
    """Parse "Mon,Tue,..." into canonical weekday names, ignoring unknowns."""
    by_key = {name.lower(): name for name in WEEKDAY_NAMES}
    days = (by_key.get(part.strip().lower()[:3]) for part in raw.split(","))
    return tuple(day for day in days if day)


def get_business_hours(
    now: datetime | None = None,
    *,
    timezone_name: str = DEFAULT_TIMEZONE,
    open_at: time = DEFAULT_OPEN,
    close_at: time = DEFAULT_CLOSE,
    days: tuple[str, ...] = DEFAULT_DAYS,
    holiday_country: str | None = None,
) -> BusinessHoursResponse:
    tz = ZoneInfo(timezone_name)
    if now is None:
        now = datetime.now(timezone.utc)
    local_now = now.astimezone(tz)
    weekday = WEEKDAY_NAMES[local_now.weekday()]

    is_open = weekday in days and open_at <= local_now.time() < close_at

    if is_open and holiday_country:
        local_date = local_now.date()
        if local_date in holidays.country_holidays(holiday_country, years=local_date.year):
            is_open = False

    return BusinessHoursResponse(
        business_hours=is_open,
        weekday=weekday,
        time_hhmm=local_now.strftime("%H:%M"),
        timezone=timezone_name,
    )


def closed_fallback(timezone_name: str, error: str) -> BusinessHoursResponse:
    """Safest answer when the check itself fails: outside business hours."""
    return BusinessHoursResponse(
        business_hours=False,
        weekday="Unknown",
        time_hhmm="00:00",
        timezone=timezone_name,
        error=error,
    )
