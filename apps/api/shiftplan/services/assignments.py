from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shiftplan.core.config import settings
from shiftplan.core.exceptions import PersistenceError, ValidationError
from shiftplan.models.scheduled_shifts import ScheduledShift
from shiftplan.services.records import employee_role_ids, get_employee, get_schedule, get_shift

logger = logging.getLogger(__name__)

ROLE_MISMATCH = "role_mismatch"


@dataclass
class AssignmentResult:
    shift: ScheduledShift
    warnings: list[str] = field(default_factory=list)


def assign_employee(
    db: Session,
    shift_id: int,
    employee_id: Optional[int],
    schedule_id: Optional[int] = None,
    strict_roles: Optional[bool] = None,
) -> AssignmentResult:
    """
    Put ``employee_id`` on the shift, or clear it when ``employee_id`` is None.

    Role compatibility is advisory: an employee without the shift's role is
    still assigned and a ``role_mismatch`` warning comes back, unless strict
    role assignment is switched on. Concurrent assignments are last-write-wins.
    """
    shift = get_shift(db, shift_id, schedule_id)
    if employee_id is None:
        return AssignmentResult(shift=_write(db, shift, None, None))

    schedule = get_schedule(db, shift.schedule_id)
    employee = get_employee(db, employee_id)
    if employee.restaurant_id != schedule.restaurant_id:
        raise ValidationError("Employee does not belong to this restaurant")

    warnings: list[str] = []
    if shift.role_id not in employee_role_ids(db, employee.employee_id):
        strict = settings.strict_role_assignment if strict_roles is None else strict_roles
        if strict:
            raise ValidationError("Employee does not have the required role for this shift")
        warnings.append(ROLE_MISMATCH)

    shift = _write(db, shift, employee.employee_id, employee.full_name)
    return AssignmentResult(shift=shift, warnings=warnings)


def unassign_employee(db: Session, shift_id: int, schedule_id: Optional[int] = None) -> ScheduledShift:
    return assign_employee(db, shift_id, None, schedule_id=schedule_id).shift


def _write(db: Session, shift: ScheduledShift, employee_id: Optional[int], employee_name: Optional[str]) -> ScheduledShift:
    shift.employee_id = employee_id
    shift.employee_name = employee_name
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"updating shift {shift.scheduled_shift_id} failed: {e}") from e
    db.refresh(shift)
    logger.debug("shift %s assigned to %s", shift.scheduled_shift_id, employee_id)
    return shift
