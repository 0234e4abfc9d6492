from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.models.employee import Employee
from shiftplan.models.employee_role import EmployeeRole
from shiftplan.models.restaurant import Restaurant
from shiftplan.routers.auth import get_owned_restaurant
from shiftplan.schemas.employees import EmployeeCreate, EmployeeOut, EmployeeRoleAssign, EmployeeUpdate
from shiftplan.services import denorm_sync
from shiftplan.services.records import employee_role_ids, get_employee, require_roles
from shiftplan.services.validators import clean_name

router = APIRouter()


def _out(db: Session, e: Employee) -> EmployeeOut:
    return EmployeeOut(
        employee_id=e.employee_id,
        restaurant_id=e.restaurant_id,
        full_name=e.full_name,
        email=e.email,
        role_ids=sorted(employee_role_ids(db, e.employee_id)),
        created_at=e.created_at,
        updated_at=e.updated_at,
    )


def _replace_roles(db: Session, employee: Employee, role_ids: list[int]) -> None:
    roles = require_roles(db, employee.restaurant_id, role_ids)
    db.execute(delete(EmployeeRole).where(EmployeeRole.employee_id == employee.employee_id))
    db.add_all(EmployeeRole(employee_id=employee.employee_id, role_id=r.role_id) for r in roles)


@router.get("", response_model=list[EmployeeOut])
def list_employees(
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    employees = db.execute(
        select(Employee).where(Employee.restaurant_id == restaurant.restaurant_id).order_by(Employee.full_name.asc())
    ).scalars().all()
    return [_out(db, e) for e in employees]


@router.post("", response_model=EmployeeOut, status_code=201)
def create_employee(
    payload: EmployeeCreate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    e = Employee(
        restaurant_id=restaurant.restaurant_id,
        full_name=clean_name(payload.full_name, "full_name"),
        email=str(payload.email).lower(),
    )
    db.add(e)
    db.flush()
    _replace_roles(db, e, payload.role_ids)
    db.commit()
    db.refresh(e)
    return _out(db, e)


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee_detail(
    employee_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    return _out(db, get_employee(db, employee_id, restaurant.restaurant_id))


@router.patch("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Edit an employee; a rename is copied onto their shifts in the same commit."""
    e = get_employee(db, employee_id, restaurant.restaurant_id)

    if payload.email is not None:
        e.email = str(payload.email).lower()
    full_name = clean_name(payload.full_name, "full_name")
    if full_name is not None and full_name != e.full_name:
        e.full_name = full_name
        db.flush()
        denorm_sync.sync_employee_name(db, e)

    db.commit()
    db.refresh(e)
    return _out(db, e)


@router.put("/{employee_id}/roles", response_model=EmployeeOut)
def set_employee_roles(
    employee_id: int,
    payload: EmployeeRoleAssign,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    e = get_employee(db, employee_id, restaurant.restaurant_id)
    _replace_roles(db, e, payload.role_ids)
    db.commit()
    db.refresh(e)
    return _out(db, e)


@router.delete("/{employee_id}", status_code=204)
def delete_employee(
    employee_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Delete an employee. Their shifts stay, unassigned."""
    e = get_employee(db, employee_id, restaurant.restaurant_id)
    denorm_sync.clear_deleted_employee(db, e.employee_id)
    db.delete(e)
    db.commit()
