from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.models.restaurant import Restaurant
from shiftplan.models.shift_template import ShiftTemplate, ShiftTemplateRole
from shiftplan.routers.auth import get_owned_restaurant
from shiftplan.schemas.shift_templates import ShiftTemplateCreate, ShiftTemplateOut, ShiftTemplateUpdate
from shiftplan.services import denorm_sync
from shiftplan.services.records import get_shift_template, require_roles, template_role_ids
from shiftplan.services.validators import clean_name, validate_day_of_week, validate_time_range

router = APIRouter()


def _out(t: ShiftTemplate, role_ids: list[int]) -> ShiftTemplateOut:
    return ShiftTemplateOut(
        shift_template_id=t.shift_template_id,
        restaurant_id=t.restaurant_id,
        name=t.name,
        day_of_week=t.day_of_week,
        start_time=t.start_time,
        end_time=t.end_time,
        role_ids=role_ids,
        created_at=t.created_at,
        updated_at=t.updated_at,
    )


def _replace_roles(db: Session, t: ShiftTemplate, role_ids: list[int]) -> None:
    roles = require_roles(db, t.restaurant_id, role_ids)
    db.execute(delete(ShiftTemplateRole).where(ShiftTemplateRole.shift_template_id == t.shift_template_id))
    db.add_all(ShiftTemplateRole(shift_template_id=t.shift_template_id, role_id=r.role_id) for r in roles)


@router.get("", response_model=list[ShiftTemplateOut])
def list_shift_templates(
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    templates = db.execute(
        select(ShiftTemplate)
        .where(ShiftTemplate.restaurant_id == restaurant.restaurant_id)
        .order_by(ShiftTemplate.day_of_week, ShiftTemplate.start_time)
    ).scalars().all()
    roles = template_role_ids(db, [t.shift_template_id for t in templates])
    return [_out(t, roles.get(t.shift_template_id, [])) for t in templates]


@router.post("", response_model=ShiftTemplateOut, status_code=201)
def create_shift_template(
    payload: ShiftTemplateCreate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    validate_day_of_week(payload.day_of_week)
    validate_time_range(payload.start_time, payload.end_time)

    t = ShiftTemplate(
        restaurant_id=restaurant.restaurant_id,
        name=clean_name(payload.name),
        day_of_week=payload.day_of_week,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )
    db.add(t)
    db.flush()
    _replace_roles(db, t, payload.role_ids)
    db.commit()
    db.refresh(t)
    return _out(t, template_role_ids(db, [t.shift_template_id]).get(t.shift_template_id, []))


@router.get("/{template_id}", response_model=ShiftTemplateOut)
def get_shift_template_detail(
    template_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    t = get_shift_template(db, template_id, restaurant.restaurant_id)
    return _out(t, template_role_ids(db, [t.shift_template_id]).get(t.shift_template_id, []))


@router.patch("/{template_id}", response_model=ShiftTemplateOut)
def update_shift_template(
    template_id: int,
    payload: ShiftTemplateUpdate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """
    Edit a template. Shifts already made from it keep their own times; the
    change applies to shifts materialized from now on.
    """
    t = get_shift_template(db, template_id, restaurant.restaurant_id)

    if payload.name is not None:
        t.name = clean_name(payload.name)
    if payload.day_of_week is not None:
        validate_day_of_week(payload.day_of_week)
        t.day_of_week = payload.day_of_week

    start = payload.start_time if payload.start_time is not None else t.start_time
    end = payload.end_time if payload.end_time is not None else t.end_time
    validate_time_range(start, end)
    t.start_time, t.end_time = start, end

    if payload.role_ids is not None:
        _replace_roles(db, t, payload.role_ids)

    db.commit()
    db.refresh(t)
    return _out(t, template_role_ids(db, [t.shift_template_id]).get(t.shift_template_id, []))


@router.delete("/{template_id}", status_code=204)
def delete_shift_template(
    template_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Delete a template; shifts made from it remain, with shift_template_id cleared."""
    t = get_shift_template(db, template_id, restaurant.restaurant_id)
    denorm_sync.detach_deleted_template(db, t.shift_template_id)
    db.delete(t)
    db.commit()
