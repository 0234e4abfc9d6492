from datetime import date, time
from types import SimpleNamespace

import pytest
import requests

from shiftplan.core.exceptions import NotificationDispatchError
from shiftplan.services import notifications
from shiftplan.services.notifications import (
    LoggingNotifier,
    MailRelayNotifier,
    ScheduleDigest,
    build_digest,
    format_date,
    format_shift_date,
    format_time,
    render_text,
)


def _shift(employee_id, shift_date, start, end, role="Server", notes=""):
    return SimpleNamespace(
        employee_id=employee_id,
        shift_date=shift_date,
        start_time=start,
        end_time=end,
        role_name=role,
        role_color="#2563EB",
        notes=notes,
    )


@pytest.fixture()
def digest():
    employee = SimpleNamespace(employee_id=42, full_name="Alice Martin", email="alice@cornerbistro.com")
    restaurant = SimpleNamespace(name="Corner Bistro")
    schedule = SimpleNamespace(schedule_id=7, start_date=date(2025, 1, 19), end_date=date(2025, 1, 25))
    shifts = [
        _shift(42, date(2025, 1, 21), time(17, 0), time(22, 30), notes="close"),
        _shift(43, date(2025, 1, 19), time(9, 0), time(13, 0)),
        _shift(42, date(2025, 1, 19), time(9, 0), time(13, 0)),
    ]
    return build_digest(employee, restaurant, schedule, shifts)


def test_formatting():
    assert format_date(date(2025, 1, 19)) == "Sun, Jan 19, 2025"
    assert format_shift_date(date(2025, 1, 2)) == "Thursday, Jan 2"
    assert format_time(time(9, 0)) == "9:00 AM"
    assert format_time(time(0, 30)) == "12:30 AM"
    assert format_time(time(12, 0)) == "12:00 PM"
    assert format_time(time(22, 45)) == "10:45 PM"


def test_digest_holds_only_own_shifts_in_order(digest):
    assert digest.schedule_start == "Sun, Jan 19, 2025"
    assert digest.schedule_end == "Sat, Jan 25, 2025"
    assert [(s.date, s.start_time, s.end_time) for s in digest.shifts] == [
        ("Sunday, Jan 19", "9:00 AM", "1:00 PM"),
        ("Tuesday, Jan 21", "5:00 PM", "10:30 PM"),
    ]


def test_render_text(digest):
    text = render_text(digest)

    assert text.startswith("Hi Alice Martin,")
    assert "Sunday, Jan 19: 9:00 AM - 1:00 PM (Server)" in text
    assert "Tuesday, Jan 21: 5:00 PM - 10:30 PM (Server) - close" in text


def test_render_text_without_shifts():
    empty = ScheduleDigest(
        employee_id=1,
        employee_name="Ivy Idle",
        email="ivy@cornerbistro.com",
        restaurant_name="Corner Bistro",
        schedule_id=7,
        schedule_start="Sun, Jan 19, 2025",
        schedule_end="Sat, Jan 25, 2025",
    )
    assert "You have no shifts this period." in render_text(empty)


class _Response:
    def __init__(self, status_code):
        self.status_code = status_code
        self.ok = status_code < 400


def test_mail_relay_posts_digest(digest, monkeypatch):
    calls = []

    def fake_post(url, json, timeout):
        calls.append((url, json, timeout))
        return _Response(202)

    monkeypatch.setattr(notifications.requests, "post", fake_post)

    MailRelayNotifier("http://relay.local/send", "schedules@cornerbistro.com", timeout=3).notify_employee_of_schedule(digest)

    url, payload, timeout = calls[0]
    assert url == "http://relay.local/send"
    assert timeout == 3
    assert payload["to"] == {"name": "Alice Martin", "email": "alice@cornerbistro.com"}
    assert payload["data"]["employee_id"] == 42
    assert "Corner Bistro" in payload["subject"]


def test_mail_relay_errors_become_dispatch_errors(digest, monkeypatch):
    relay = MailRelayNotifier("http://relay.local/send", "schedules@cornerbistro.com")

    monkeypatch.setattr(notifications.requests, "post", lambda *a, **kw: _Response(503))
    with pytest.raises(NotificationDispatchError, match="503"):
        relay.notify_employee_of_schedule(digest)

    def unreachable(*a, **kw):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(notifications.requests, "post", unreachable)
    with pytest.raises(NotificationDispatchError, match="unreachable"):
        relay.notify_employee_of_schedule(digest)


def test_mail_relay_needs_an_address(digest):
    digest.email = ""
    with pytest.raises(NotificationDispatchError, match="no email address"):
        MailRelayNotifier("http://relay.local/send", "x@cornerbistro.com").notify_employee_of_schedule(digest)


def test_logging_notifier(digest, caplog):
    with caplog.at_level("INFO", logger="shiftplan.services.notifications"):
        LoggingNotifier().notify_employee_of_schedule(digest)
    assert "employee 42" in caplog.text
