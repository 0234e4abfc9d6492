"""Draft -> published transition for schedules, and the notifications it sends."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shiftplan.core.exceptions import ConflictError, NotificationDispatchError, PersistenceError, ValidationError
from shiftplan.models.employee import Employee
from shiftplan.models.schedule import Schedule
from shiftplan.services.notifications import ScheduleNotifier, build_digest
from shiftplan.services.records import get_restaurant, get_schedule, list_schedule_shifts

logger = logging.getLogger(__name__)


@dataclass
class DispatchFailure:
    employee_id: int
    employee_name: str
    email: str
    error: str


@dataclass
class DispatchReport:
    total_recipients: int = 0
    successful: int = 0
    failed: int = 0
    failures: list[DispatchFailure] = field(default_factory=list)


@dataclass
class PublishResult:
    schedule: Schedule
    notifications: DispatchReport

    @property
    def warnings(self) -> list[str]:
        return [f"notification to employee {f.employee_id} failed: {f.error}" for f in self.notifications.failures]


def dispatch_schedule(
    db: Session,
    schedule: Schedule,
    notifier: ScheduleNotifier,
    recipients: Optional[Sequence[Employee]] = None,
) -> DispatchReport:
    """
    Send one message per recipient. By default the recipients are the employees
    holding at least one shift in the schedule. A failed send is recorded and
    the loop moves on.
    """
    restaurant = get_restaurant(db, schedule.restaurant_id)
    shifts = list_schedule_shifts(db, schedule.schedule_id)

    if recipients is None:
        assigned_ids = sorted({s.employee_id for s in shifts if s.employee_id is not None})
        recipients = (
            db.execute(select(Employee).where(Employee.employee_id.in_(assigned_ids)).order_by(Employee.employee_id))
            .scalars()
            .all()
            if assigned_ids
            else []
        )

    report = DispatchReport(total_recipients=len(recipients))
    for employee in recipients:
        digest = build_digest(employee, restaurant, schedule, shifts)
        try:
            notifier.notify_employee_of_schedule(digest)
        except NotificationDispatchError as e:
            logger.warning(
                "failed to send schedule %s to employee %s <%s>: %s",
                schedule.schedule_id,
                employee.employee_id,
                employee.email,
                e.message,
            )
            _record_failure(report, employee, e.message)
            continue
        except Exception as e:
            # The schedule is already committed; one broken send must not stop the rest
            logger.exception(
                "unexpected error sending schedule %s to employee %s <%s>",
                schedule.schedule_id,
                employee.employee_id,
                employee.email,
            )
            _record_failure(report, employee, f"{type(e).__name__}: {e}")
            continue
        report.successful += 1
    return report


def _record_failure(report: DispatchReport, employee: Employee, error: str) -> None:
    report.failed += 1
    report.failures.append(
        DispatchFailure(
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            email=employee.email,
            error=error,
        )
    )


def publish_schedule(
    db: Session,
    schedule_id: int,
    notifier: ScheduleNotifier,
    restaurant_id: Optional[int] = None,
) -> PublishResult:
    """
    Stamp ``published_at`` and notify every assigned employee once.

    Not idempotent: a schedule that is already published raises ConflictError
    and nothing is sent again. Notification failures never undo the publish.
    """
    schedule = get_schedule(db, schedule_id, restaurant_id)
    if schedule.published_at is not None:
        raise ConflictError("schedule is already published", code="schedule_already_published")

    # Conditional write so two concurrent publishes cannot both win
    try:
        result = db.execute(
            update(Schedule)
            .where(Schedule.schedule_id == schedule_id, Schedule.published_at.is_(None))
            .values(published_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.rollback()
            raise ConflictError("schedule is already published", code="schedule_already_published")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"publishing schedule {schedule_id} failed: {e}") from e

    db.refresh(schedule)
    logger.info("published schedule %s at %s", schedule_id, schedule.published_at.isoformat())

    report = dispatch_schedule(db, schedule, notifier)
    logger.info(
        "schedule %s notifications: %s sent, %s failed",
        schedule_id,
        report.successful,
        report.failed,
    )
    return PublishResult(schedule=schedule, notifications=report)


def send_schedule_emails(
    db: Session,
    schedule_id: int,
    notifier: ScheduleNotifier,
    restaurant_id: Optional[int] = None,
) -> DispatchReport:
    """Manually (re)send the schedule to every employee of the restaurant, with or without shifts."""
    schedule = get_schedule(db, schedule_id, restaurant_id)
    employees = db.execute(
        select(Employee).where(Employee.restaurant_id == schedule.restaurant_id).order_by(Employee.employee_id)
    ).scalars().all()
    if not employees:
        raise ValidationError("no employees to send schedule to")
    return dispatch_schedule(db, schedule, notifier, recipients=employees)
