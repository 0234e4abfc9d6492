from datetime import date, timedelta

from shiftplan.core.exceptions import ValidationError

# Fixed policy: weeks run Sunday..Saturday, days numbered 0=Sun ... 6=Sat.
WEEK_START_DAY = 0
DAYS_PER_WEEK = 7

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def day_of_week(d: date) -> int:
    # date.weekday() is 0=Mon ... 6=Sun
    return (d.weekday() + 1) % DAYS_PER_WEEK


def week_start_for(d: date) -> date:
    return d - timedelta(days=(day_of_week(d) - WEEK_START_DAY) % DAYS_PER_WEEK)


def week_bounds(week_start: date) -> tuple[date, date]:
    return week_start, week_start + timedelta(days=DAYS_PER_WEEK - 1)


def require_week_start(d: date) -> None:
    if day_of_week(d) != WEEK_START_DAY:
        raise ValidationError(
            f"week_start must be a {DAY_NAMES[WEEK_START_DAY]}, got {d.isoformat()} ({DAY_NAMES[day_of_week(d)]})"
        )


def date_for_day(week_start: date, dow: int) -> date:
    """The single date inside the week starting at ``week_start`` that falls on ``dow``."""
    return week_start + timedelta(days=(dow - WEEK_START_DAY) % DAYS_PER_WEEK)


def daterange(start: date, end: date):
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)
