from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, time
from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shiftplan.core.exceptions import PersistenceError
from shiftplan.models.role import Role
from shiftplan.models.schedule import Schedule
from shiftplan.models.scheduled_shifts import ScheduledShift
from shiftplan.models.shift_template import ShiftTemplate
from shiftplan.scheduling.week import daterange, day_of_week, require_week_start, week_bounds
from shiftplan.services.records import get_restaurant, get_schedule, template_role_ids

logger = logging.getLogger(__name__)

# (shift_template_id, role_id, shift_date) identifies a template-made shift inside one schedule
ShiftKey = tuple[int, int, date]

# A second unique-constraint conflict in a row is reported instead of retried
MAX_ATTEMPTS = 2


@dataclass(frozen=True)
class PlannedShift:
    shift_template_id: int
    role_id: int
    shift_date: date
    start_time: time
    end_time: time

    @property
    def key(self) -> ShiftKey:
        return (self.shift_template_id, self.role_id, self.shift_date)


@dataclass
class MaterializeResult:
    schedule: Schedule
    created_ids: list[int] = field(default_factory=list)
    schedule_created: bool = False

    @property
    def created_count(self) -> int:
        return len(self.created_ids)


# ---------- locking ----------
# Striped so the table stays bounded; one key always maps to the same lock.
_LOCK_STRIPES = [threading.Lock() for _ in range(64)]


def week_lock(restaurant_id: int, start_date: date) -> threading.Lock:
    return _LOCK_STRIPES[hash((restaurant_id, start_date)) % len(_LOCK_STRIPES)]


# ---------- planning ----------
def plan_template_shifts(
    templates: Sequence[ShiftTemplate],
    role_ids_by_template: dict[int, list[int]],
    dates: Iterable[date],
    existing_keys: set[ShiftKey],
) -> list[PlannedShift]:
    """Expand templates over ``dates``: one shift per (template, role, matching date), minus existing keys."""
    by_day: dict[int, list[ShiftTemplate]] = {}
    for t in templates:
        by_day.setdefault(t.day_of_week, []).append(t)

    seen = set(existing_keys)
    planned: list[PlannedShift] = []
    for d in dates:
        for t in by_day.get(day_of_week(d), []):
            for role_id in role_ids_by_template.get(t.shift_template_id, []):
                p = PlannedShift(
                    shift_template_id=t.shift_template_id,
                    role_id=role_id,
                    shift_date=d,
                    start_time=t.start_time,
                    end_time=t.end_time,
                )
                if p.key in seen:
                    continue
                seen.add(p.key)
                planned.append(p)
    return planned


def _existing_keys(db: Session, schedule_id: int) -> set[ShiftKey]:
    rows = db.execute(
        select(ScheduledShift.shift_template_id, ScheduledShift.role_id, ScheduledShift.shift_date).where(
            ScheduledShift.schedule_id == schedule_id,
            ScheduledShift.shift_template_id.is_not(None),
        )
    ).all()
    return {(r.shift_template_id, r.role_id, r.shift_date) for r in rows}


def _expand_into(db: Session, schedule: Schedule) -> list[int]:
    templates = db.execute(
        select(ShiftTemplate)
        .where(ShiftTemplate.restaurant_id == schedule.restaurant_id)
        .order_by(ShiftTemplate.day_of_week, ShiftTemplate.start_time, ShiftTemplate.shift_template_id)
    ).scalars().all()

    roles_by_template = template_role_ids(db, [t.shift_template_id for t in templates])
    planned = plan_template_shifts(
        templates,
        roles_by_template,
        daterange(schedule.start_date, schedule.end_date),
        _existing_keys(db, schedule.schedule_id),
    )
    if not planned:
        return []

    roles = {
        r.role_id: r
        for r in db.execute(select(Role).where(Role.role_id.in_({p.role_id for p in planned}))).scalars()
    }

    shifts = [
        ScheduledShift(
            schedule_id=schedule.schedule_id,
            shift_template_id=p.shift_template_id,
            role_id=p.role_id,
            employee_id=None,
            shift_date=p.shift_date,
            start_time=p.start_time,
            end_time=p.end_time,
            notes="",
            employee_name=None,
            role_name=roles[p.role_id].name,
            role_color=roles[p.role_id].color,
        )
        for p in planned
    ]
    db.add_all(shifts)
    db.flush()
    return [s.scheduled_shift_id for s in shifts]


def _get_or_create_schedule(db: Session, restaurant_id: int, start: date, end: date) -> tuple[Schedule, bool]:
    schedule = db.execute(
        select(Schedule)
        .where(
            Schedule.restaurant_id == restaurant_id,
            Schedule.start_date == start,
            Schedule.end_date == end,
        )
        .order_by(Schedule.schedule_id)
        .limit(1)
    ).scalars().first()
    if schedule:
        return schedule, False

    schedule = Schedule(restaurant_id=restaurant_id, start_date=start, end_date=end, published_at=None)
    db.add(schedule)
    db.flush()
    return schedule, True


def _run_atomically(db: Session, step, what: str):
    """Run ``step`` in one transaction; a unique-key race is retried once from a fresh read."""
    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            result = step()
            db.commit()
            return result
        except IntegrityError as e:
            db.rollback()
            if attempt == MAX_ATTEMPTS:
                raise PersistenceError(f"{what} kept conflicting with concurrent writes") from e
            logger.warning("%s hit a duplicate shift (attempt %s); re-reading and retrying", what, attempt)
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"{what} failed: {e}") from e


# ---------- core ----------
def materialize_week(db: Session, restaurant_id: int, week_start: date) -> MaterializeResult:
    """
    Make sure the restaurant has a schedule for the week starting ``week_start``
    and that every template x role has its shift in it.

    Safe to call on every week-view load: shifts that already exist (by
    template, role and date) are left alone, so a second call creates nothing.
    """
    require_week_start(week_start)
    get_restaurant(db, restaurant_id)
    start, end = week_bounds(week_start)

    def step() -> MaterializeResult:
        schedule, created = _get_or_create_schedule(db, restaurant_id, start, end)
        ids = _expand_into(db, schedule)
        return MaterializeResult(schedule=schedule, created_ids=ids, schedule_created=created)

    with week_lock(restaurant_id, start):
        result = _run_atomically(db, step, f"materializing week {start} for restaurant {restaurant_id}")

    logger.info(
        "materialized schedule %s (%s..%s): %s shift(s) created%s",
        result.schedule.schedule_id,
        start,
        end,
        result.created_count,
        ", schedule created" if result.schedule_created else "",
    )
    return result


def populate_schedule(db: Session, schedule_id: int, restaurant_id: Optional[int] = None) -> MaterializeResult:
    """Template expansion over an existing schedule's whole date range."""
    schedule = get_schedule(db, schedule_id, restaurant_id)
    key = (schedule.restaurant_id, schedule.start_date)

    def step() -> MaterializeResult:
        current = get_schedule(db, schedule_id)
        return MaterializeResult(schedule=current, created_ids=_expand_into(db, current))

    with week_lock(*key):
        result = _run_atomically(db, step, f"populating schedule {schedule_id}")

    logger.info("auto-populated schedule %s: %s shift(s) created", schedule_id, result.created_count)
    return result
