"""Keyed lookups that raise NotFoundError instead of returning None.

Every helper takes an optional owning id so routes can scope records to the
restaurant in the URL; a record that exists under another owner is reported as
missing rather than forbidden.
"""
from collections import defaultdict
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shiftplan.core.exceptions import NotFoundError
from shiftplan.models.employee import Employee
from shiftplan.models.employee_role import EmployeeRole
from shiftplan.models.restaurant import Restaurant
from shiftplan.models.role import Role
from shiftplan.models.schedule import Schedule
from shiftplan.models.scheduled_shifts import ScheduledShift
from shiftplan.models.shift_template import ShiftTemplate, ShiftTemplateRole


def get_restaurant(db: Session, restaurant_id: int, manager_id: Optional[int] = None) -> Restaurant:
    restaurant = db.get(Restaurant, restaurant_id)
    if not restaurant or (manager_id is not None and restaurant.manager_id != manager_id):
        raise NotFoundError("Restaurant not found")
    return restaurant


def get_schedule(db: Session, schedule_id: int, restaurant_id: Optional[int] = None) -> Schedule:
    schedule = db.get(Schedule, schedule_id)
    if not schedule or (restaurant_id is not None and schedule.restaurant_id != restaurant_id):
        raise NotFoundError("Schedule not found")
    return schedule


def get_shift(
    db: Session,
    shift_id: int,
    schedule_id: Optional[int] = None,
) -> ScheduledShift:
    shift = db.get(ScheduledShift, shift_id)
    if not shift or (schedule_id is not None and shift.schedule_id != schedule_id):
        raise NotFoundError("Scheduled shift not found")
    return shift


def get_employee(db: Session, employee_id: int, restaurant_id: Optional[int] = None) -> Employee:
    employee = db.get(Employee, employee_id)
    if not employee or (restaurant_id is not None and employee.restaurant_id != restaurant_id):
        raise NotFoundError("Employee not found")
    return employee


def get_role(db: Session, role_id: int, restaurant_id: Optional[int] = None) -> Role:
    role = db.get(Role, role_id)
    if not role or (restaurant_id is not None and role.restaurant_id != restaurant_id):
        raise NotFoundError("Role not found")
    return role


def get_shift_template(db: Session, template_id: int, restaurant_id: Optional[int] = None) -> ShiftTemplate:
    template = db.get(ShiftTemplate, template_id)
    if not template or (restaurant_id is not None and template.restaurant_id != restaurant_id):
        raise NotFoundError("Shift template not found")
    return template


def require_roles(db: Session, restaurant_id: int, role_ids: Iterable[int]) -> list[Role]:
    """All ``role_ids`` must be roles of the restaurant; duplicates collapse."""
    wanted = list(dict.fromkeys(role_ids))
    if not wanted:
        return []
    roles = db.execute(
        select(Role).where(Role.role_id.in_(wanted), Role.restaurant_id == restaurant_id)
    ).scalars().all()
    found = {r.role_id for r in roles}
    missing = [rid for rid in wanted if rid not in found]
    if missing:
        raise NotFoundError(f"Role(s) not found: {', '.join(str(m) for m in missing)}")
    by_id = {r.role_id: r for r in roles}
    return [by_id[rid] for rid in wanted]


def template_role_ids(db: Session, template_ids: Iterable[int]) -> dict[int, list[int]]:
    ids = list(template_ids)
    out: dict[int, list[int]] = defaultdict(list)
    if not ids:
        return out
    rows = db.execute(
        select(ShiftTemplateRole.shift_template_id, ShiftTemplateRole.role_id)
        .where(ShiftTemplateRole.shift_template_id.in_(ids))
        .order_by(ShiftTemplateRole.shift_template_id, ShiftTemplateRole.role_id)
    ).all()
    for template_id, role_id in rows:
        out[template_id].append(role_id)
    return out


def employee_role_ids(db: Session, employee_id: int) -> set[int]:
    return set(
        db.execute(select(EmployeeRole.role_id).where(EmployeeRole.employee_id == employee_id)).scalars().all()
    )


def list_schedule_shifts(db: Session, schedule_id: int) -> list[ScheduledShift]:
    return list(
        db.execute(
            select(ScheduledShift)
            .where(ScheduledShift.schedule_id == schedule_id)
            .order_by(ScheduledShift.shift_date, ScheduledShift.start_time, ScheduledShift.scheduled_shift_id)
        ).scalars().all()
    )
