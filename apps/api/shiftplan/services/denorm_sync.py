"""Keeps the display copies on scheduled_shifts in step with employees and roles.

These run inside the caller's transaction, right after the triggering change is
staged and before the caller commits, so a shift never shows a name that the
source record no longer has.
"""
from __future__ import annotations

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from shiftplan.core.exceptions import ConflictError
from shiftplan.models.employee import Employee
from shiftplan.models.employee_role import EmployeeRole
from shiftplan.models.role import Role
from shiftplan.models.scheduled_shifts import ScheduledShift
from shiftplan.models.shift_template import ShiftTemplateRole

logger = logging.getLogger(__name__)


def sync_employee_name(db: Session, employee: Employee) -> int:
    result = db.execute(
        update(ScheduledShift)
        .where(ScheduledShift.employee_id == employee.employee_id)
        .values(employee_name=employee.full_name)
        .execution_options(synchronize_session="fetch")
    )
    logger.debug("employee %s renamed; %s shift(s) updated", employee.employee_id, result.rowcount)
    return result.rowcount


def clear_deleted_employee(db: Session, employee_id: int) -> int:
    """Unassign every shift of an employee that is about to be deleted."""
    result = db.execute(
        update(ScheduledShift)
        .where(ScheduledShift.employee_id == employee_id)
        .values(employee_id=None, employee_name=None)
        .execution_options(synchronize_session="fetch")
    )
    logger.debug("employee %s deleted; %s shift(s) unassigned", employee_id, result.rowcount)
    return result.rowcount


def sync_role_display(db: Session, role: Role) -> int:
    result = db.execute(
        update(ScheduledShift)
        .where(ScheduledShift.role_id == role.role_id)
        .values(role_name=role.name, role_color=role.color)
        .execution_options(synchronize_session="fetch")
    )
    logger.debug("role %s changed; %s shift(s) updated", role.role_id, result.rowcount)
    return result.rowcount


def detach_deleted_role(db: Session, role_id: int) -> None:
    """Drop a role from template and employee role sets ahead of its deletion.

    Shifts are not touched: a role still referenced by any scheduled shift
    cannot be deleted at all.
    """
    in_use = db.execute(
        select(func.count()).select_from(ScheduledShift).where(ScheduledShift.role_id == role_id)
    ).scalar_one()
    if in_use:
        raise ConflictError(
            f"Role is used by {in_use} scheduled shift(s); reassign or delete those shifts first",
            code="role_in_use",
        )

    db.execute(delete(ShiftTemplateRole).where(ShiftTemplateRole.role_id == role_id))
    db.execute(delete(EmployeeRole).where(EmployeeRole.role_id == role_id))


def detach_deleted_template(db: Session, template_id: int) -> int:
    """Derived shifts outlive their template; only the back-reference is cleared."""
    result = db.execute(
        update(ScheduledShift)
        .where(ScheduledShift.shift_template_id == template_id)
        .values(shift_template_id=None)
        .execution_options(synchronize_session="fetch")
    )
    db.execute(delete(ShiftTemplateRole).where(ShiftTemplateRole.shift_template_id == template_id))
    return result.rowcount
