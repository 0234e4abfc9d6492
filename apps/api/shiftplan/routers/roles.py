from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.core.exceptions import ConflictError
from shiftplan.models.restaurant import Restaurant
from shiftplan.models.role import Role
from shiftplan.routers.auth import get_owned_restaurant
from shiftplan.schemas.roles import RoleCreate, RoleOut, RoleUpdate
from shiftplan.services import denorm_sync
from shiftplan.services.records import get_role
from shiftplan.services.validators import clean_name

router = APIRouter()


def _commit_role(db: Session, name: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"A role named '{name}' already exists", code="role_name_taken")


@router.get("", response_model=list[RoleOut])
def list_roles(
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    return db.execute(
        select(Role).where(Role.restaurant_id == restaurant.restaurant_id).order_by(Role.name.asc())
    ).scalars().all()


@router.post("", response_model=RoleOut, status_code=201)
def create_role(
    payload: RoleCreate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    name = clean_name(payload.name)
    r = Role(restaurant_id=restaurant.restaurant_id, name=name, color=payload.color.upper())
    db.add(r)
    _commit_role(db, name)
    db.refresh(r)
    return r


@router.patch("/{role_id}", response_model=RoleOut)
def update_role(
    role_id: int,
    payload: RoleUpdate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Rename / recolor a role; its scheduled shifts pick up the change in the same commit."""
    role = get_role(db, role_id, restaurant.restaurant_id)

    changed = False
    name = clean_name(payload.name)
    if name is not None and name != role.name:
        role.name = name
        changed = True
    if payload.color is not None and payload.color.upper() != role.color:
        role.color = payload.color.upper()
        changed = True

    try:
        if changed:
            db.flush()
            denorm_sync.sync_role_display(db, role)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"A role named '{name}' already exists", code="role_name_taken")
    db.refresh(role)
    return role


@router.delete("/{role_id}", status_code=204)
def delete_role(
    role_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    role = get_role(db, role_id, restaurant.restaurant_id)
    denorm_sync.detach_deleted_role(db, role.role_id)
    db.delete(role)
    db.commit()
