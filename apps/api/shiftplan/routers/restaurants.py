from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.models.manager import Manager
from shiftplan.models.restaurant import Restaurant
from shiftplan.models.schedule import Schedule
from shiftplan.routers.auth import get_current_manager, get_owned_restaurant
from shiftplan.schemas.restaurants import RestaurantCreate, RestaurantOut, RestaurantUpdate
from shiftplan.services.validators import clean_name

router = APIRouter()


@router.get("", response_model=list[RestaurantOut])
def list_restaurants(
    db: Session = Depends(get_db),
    manager: Manager = Depends(get_current_manager),
):
    return db.execute(
        select(Restaurant).where(Restaurant.manager_id == manager.manager_id).order_by(Restaurant.name.asc())
    ).scalars().all()


@router.post("", response_model=RestaurantOut, status_code=201)
def create_restaurant(
    payload: RestaurantCreate,
    db: Session = Depends(get_db),
    manager: Manager = Depends(get_current_manager),
):
    r = Restaurant(manager_id=manager.manager_id, name=clean_name(payload.name), address=payload.address)
    db.add(r)
    db.commit()
    db.refresh(r)
    return r


@router.get("/{restaurant_id}", response_model=RestaurantOut)
def get_restaurant(restaurant: Restaurant = Depends(get_owned_restaurant)):
    return restaurant


@router.patch("/{restaurant_id}", response_model=RestaurantOut)
def update_restaurant(
    payload: RestaurantUpdate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    if payload.name is not None:
        restaurant.name = clean_name(payload.name)
    if payload.address is not None:
        restaurant.address = payload.address
    db.commit()
    db.refresh(restaurant)
    return restaurant


@router.delete("/{restaurant_id}", status_code=204)
def delete_restaurant(
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    # Schedules (and their shifts) go first so no shift still pins a role when roles cascade
    db.execute(delete(Schedule).where(Schedule.restaurant_id == restaurant.restaurant_id))
    db.delete(restaurant)
    db.commit()
