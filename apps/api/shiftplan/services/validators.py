from datetime import date, time

from shiftplan.core.exceptions import ValidationError


def validate_time_range(start: time, end: time) -> None:
    # No overnight shifts: a shift ends on the day it starts
    if end <= start:
        raise ValidationError("end_time must be after start_time")


def validate_date_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationError("end_date must be on or after start_date")


def validate_date_within(d: date, start: date, end: date) -> None:
    if not start <= d <= end:
        raise ValidationError(
            f"shift_date {d.isoformat()} is outside the schedule ({start.isoformat()} to {end.isoformat()})"
        )


def validate_day_of_week(dow: int) -> None:
    if not 0 <= dow <= 6:
        raise ValidationError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")


def clean_name(value: str | None, field: str = "name") -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValidationError(f"{field} cannot be empty or whitespace only")
    return value
