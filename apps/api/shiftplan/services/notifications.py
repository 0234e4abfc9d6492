from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date, time
from typing import Protocol, Sequence

import requests

from shiftplan.core.config import settings
from shiftplan.core.exceptions import NotificationDispatchError
from shiftplan.models.employee import Employee
from shiftplan.models.restaurant import Restaurant
from shiftplan.models.schedule import Schedule
from shiftplan.models.scheduled_shifts import ScheduledShift

logger = logging.getLogger(__name__)


# ---------- digest ----------
def format_date(d: date) -> str:
    # e.g. "Sun, Jan 19, 2025"
    return f"{d.strftime('%a, %b')} {d.day}, {d.year}"


def format_shift_date(d: date) -> str:
    # e.g. "Sunday, Jan 19"
    return f"{d.strftime('%A, %b')} {d.day}"


def format_time(t: time) -> str:
    # e.g. "9:00 AM"
    hour = t.hour % 12 or 12
    return f"{hour}:{t.minute:02d} {'AM' if t.hour < 12 else 'PM'}"


@dataclass
class DigestShift:
    date: str
    start_time: str
    end_time: str
    role_name: str
    role_color: str
    notes: str


@dataclass
class ScheduleDigest:
    """Everything one employee's schedule message needs."""

    employee_id: int
    employee_name: str
    email: str
    restaurant_name: str
    schedule_id: int
    schedule_start: str
    schedule_end: str
    shifts: list[DigestShift] = field(default_factory=list)

    @property
    def has_shifts(self) -> bool:
        return bool(self.shifts)


def build_digest(
    employee: Employee,
    restaurant: Restaurant,
    schedule: Schedule,
    shifts: Sequence[ScheduledShift],
) -> ScheduleDigest:
    own = [s for s in shifts if s.employee_id == employee.employee_id]
    own.sort(key=lambda s: (s.shift_date, s.start_time))
    return ScheduleDigest(
        employee_id=employee.employee_id,
        employee_name=employee.full_name,
        email=employee.email,
        restaurant_name=restaurant.name,
        schedule_id=schedule.schedule_id,
        schedule_start=format_date(schedule.start_date),
        schedule_end=format_date(schedule.end_date),
        shifts=[
            DigestShift(
                date=format_shift_date(s.shift_date),
                start_time=format_time(s.start_time),
                end_time=format_time(s.end_time),
                role_name=s.role_name,
                role_color=s.role_color,
                notes=s.notes or "",
            )
            for s in own
        ],
    )


def render_text(digest: ScheduleDigest) -> str:
    lines = [
        f"Hi {digest.employee_name},",
        "",
        f"Your schedule at {digest.restaurant_name} for {digest.schedule_start} - {digest.schedule_end}:",
        "",
    ]
    if not digest.has_shifts:
        lines.append("You have no shifts this period.")
    for s in digest.shifts:
        line = f"  {s.date}: {s.start_time} - {s.end_time} ({s.role_name})"
        if s.notes:
            line += f" - {s.notes}"
        lines.append(line)
    return "\n".join(lines)


# ---------- senders ----------
class ScheduleNotifier(Protocol):
    def notify_employee_of_schedule(self, digest: ScheduleDigest) -> None:
        """Hand one employee's schedule to the delivery channel; raise NotificationDispatchError on failure."""
        ...


class LoggingNotifier:
    """Used when no mail relay is configured."""

    def notify_employee_of_schedule(self, digest: ScheduleDigest) -> None:
        logger.info(
            "schedule %s for employee %s <%s>: %s shift(s) (no mail relay configured)",
            digest.schedule_id,
            digest.employee_id,
            digest.email,
            len(digest.shifts),
        )


class MailRelayNotifier:
    def __init__(self, relay_url: str, sender: str, timeout: float = 10.0):
        self.relay_url = relay_url
        self.sender = sender
        self.timeout = timeout

    def notify_employee_of_schedule(self, digest: ScheduleDigest) -> None:
        if not digest.email:
            raise NotificationDispatchError("no email address")

        payload = {
            "from": self.sender,
            "to": {"name": digest.employee_name, "email": digest.email},
            "subject": f"Your schedule at {digest.restaurant_name} ({digest.schedule_start} - {digest.schedule_end})",
            "text": render_text(digest),
            "data": asdict(digest),
        }
        try:
            resp = requests.post(self.relay_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationDispatchError(f"mail relay unreachable: {e}") from e

        if not resp.ok:
            raise NotificationDispatchError(f"mail relay returned {resp.status_code}")


def get_notifier() -> ScheduleNotifier:
    if settings.mail_relay_url:
        return MailRelayNotifier(
            settings.mail_relay_url,
            settings.mail_from,
            timeout=settings.mail_relay_timeout_seconds,
        )
    return LoggingNotifier()
