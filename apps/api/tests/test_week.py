from datetime import date

import pytest

from shiftplan.core.exceptions import ValidationError
from shiftplan.scheduling.week import (
    date_for_day,
    day_of_week,
    daterange,
    require_week_start,
    week_bounds,
    week_start_for,
)

SUNDAY = date(2025, 1, 19)


def test_day_of_week_counts_from_sunday():
    assert day_of_week(SUNDAY) == 0
    assert day_of_week(date(2025, 1, 20)) == 1
    assert day_of_week(date(2025, 1, 25)) == 6


def test_week_bounds_cover_sunday_to_saturday():
    assert week_bounds(SUNDAY) == (SUNDAY, date(2025, 1, 25))


@pytest.mark.parametrize("d", [date(2025, 1, 19), date(2025, 1, 22), date(2025, 1, 25)])
def test_week_start_for_any_day_in_week(d):
    assert week_start_for(d) == SUNDAY


def test_require_week_start_rejects_other_days():
    require_week_start(SUNDAY)
    with pytest.raises(ValidationError) as exc:
        require_week_start(date(2025, 1, 20))
    assert "Sunday" in exc.value.message


def test_date_for_day_stays_inside_week():
    assert date_for_day(SUNDAY, 0) == SUNDAY
    assert date_for_day(SUNDAY, 1) == date(2025, 1, 20)
    assert date_for_day(SUNDAY, 6) == date(2025, 1, 25)


def test_daterange_is_inclusive():
    days = list(daterange(SUNDAY, date(2025, 1, 21)))
    assert days == [date(2025, 1, 19), date(2025, 1, 20), date(2025, 1, 21)]
    assert list(daterange(date(2025, 1, 21), SUNDAY)) == []
