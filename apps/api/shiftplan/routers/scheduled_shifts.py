from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.core.exceptions import ConflictError, ValidationError
from shiftplan.models.restaurant import Restaurant
from shiftplan.models.scheduled_shifts import ScheduledShift
from shiftplan.routers.auth import get_owned_restaurant
from shiftplan.schemas.scheduled_shifts import (
    AssignEmployeeRequest,
    AssignmentOut,
    ScheduledShiftOut,
    ShiftCreateRequest,
    ShiftUpdateRequest,
)
from shiftplan.services.assignments import assign_employee, unassign_employee
from shiftplan.services.records import (
    get_employee,
    get_role,
    get_schedule,
    get_shift,
    get_shift_template,
    list_schedule_shifts,
)
from shiftplan.services.validators import validate_date_within, validate_time_range

router = APIRouter()


def _commit_shift(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(
            "This schedule already has a shift from that template for the same role and date",
            code="shift_already_exists",
        )


@router.get("", response_model=list[ScheduledShiftOut])
def list_shifts(
    schedule_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    schedule = get_schedule(db, schedule_id, restaurant.restaurant_id)
    return list_schedule_shifts(db, schedule.schedule_id)


@router.post("", response_model=ScheduledShiftOut, status_code=201)
def create_shift(
    schedule_id: int,
    req: ShiftCreateRequest,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Create a shift by hand (not from a template run)."""
    schedule = get_schedule(db, schedule_id, restaurant.restaurant_id)
    validate_time_range(req.start_time, req.end_time)
    validate_date_within(req.shift_date, schedule.start_date, schedule.end_date)

    role = get_role(db, req.role_id, restaurant.restaurant_id)
    if req.shift_template_id is not None:
        get_shift_template(db, req.shift_template_id, restaurant.restaurant_id)

    employee_name = None
    if req.employee_id is not None:
        employee_name = get_employee(db, req.employee_id, restaurant.restaurant_id).full_name

    shift = ScheduledShift(
        schedule_id=schedule.schedule_id,
        shift_template_id=req.shift_template_id,
        role_id=role.role_id,
        employee_id=req.employee_id,
        shift_date=req.shift_date,
        start_time=req.start_time,
        end_time=req.end_time,
        notes=req.notes,
        employee_name=employee_name,
        role_name=role.name,
        role_color=role.color,
    )
    db.add(shift)
    _commit_shift(db)
    db.refresh(shift)
    return shift


@router.get("/{shift_id}", response_model=ScheduledShiftOut)
def get_shift_detail(
    schedule_id: int,
    shift_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    get_schedule(db, schedule_id, restaurant.restaurant_id)
    return get_shift(db, shift_id, schedule_id)


@router.patch("/{shift_id}", response_model=ScheduledShiftOut)
def update_shift(
    schedule_id: int,
    shift_id: int,
    req: ShiftUpdateRequest,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Edit date, times, notes or role. Allowed on published schedules too."""
    schedule = get_schedule(db, schedule_id, restaurant.restaurant_id)
    shift = get_shift(db, shift_id, schedule_id)

    start = req.start_time if req.start_time is not None else shift.start_time
    end = req.end_time if req.end_time is not None else shift.end_time
    validate_time_range(start, end)
    shift.start_time, shift.end_time = start, end

    if req.shift_date is not None:
        validate_date_within(req.shift_date, schedule.start_date, schedule.end_date)
        shift.shift_date = req.shift_date
    if req.notes is not None:
        shift.notes = req.notes
    if req.role_id is not None and req.role_id != shift.role_id:
        role = get_role(db, req.role_id, restaurant.restaurant_id)
        shift.role_id = role.role_id
        shift.role_name = role.name
        shift.role_color = role.color

    _commit_shift(db)
    db.refresh(shift)
    return shift


@router.delete("/{shift_id}", status_code=204)
def delete_shift(
    schedule_id: int,
    shift_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    get_schedule(db, schedule_id, restaurant.restaurant_id)
    shift = get_shift(db, shift_id, schedule_id)
    db.delete(shift)
    db.commit()


@router.patch("/{shift_id}/assign", response_model=AssignmentOut)
def assign(
    schedule_id: int,
    shift_id: int,
    req: AssignEmployeeRequest,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Assign an employee (or ``null`` to unassign). A missing shift role only produces a warning."""
    get_schedule(db, schedule_id, restaurant.restaurant_id)
    if req.employee_id is not None and req.employee_id <= 0:
        raise ValidationError("employee_id must be a positive integer")
    result = assign_employee(db, shift_id, req.employee_id, schedule_id=schedule_id)
    return {"shift": result.shift, "warnings": result.warnings}


@router.delete("/{shift_id}/assign", response_model=ScheduledShiftOut)
def unassign(
    schedule_id: int,
    shift_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    get_schedule(db, schedule_id, restaurant.restaurant_id)
    return unassign_employee(db, shift_id, schedule_id=schedule_id)
