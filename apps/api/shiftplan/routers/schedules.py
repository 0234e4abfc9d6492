from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.models.restaurant import Restaurant
from shiftplan.models.schedule import Schedule
from shiftplan.routers.auth import get_owned_restaurant
from shiftplan.schemas.schedules import (
    AutoPopulateOut,
    DispatchReportOut,
    PublishOut,
    ScheduleCreate,
    ScheduleOut,
    ScheduleUpdate,
    WeekOut,
)
from shiftplan.scheduling.week import week_start_for
from shiftplan.services.lifecycle import publish_schedule, send_schedule_emails
from shiftplan.services.materializer import materialize_week, populate_schedule
from shiftplan.services.notifications import ScheduleNotifier, get_notifier
from shiftplan.services.records import get_schedule, list_schedule_shifts
from shiftplan.services.validators import validate_date_range

router = APIRouter()


@router.get("", response_model=list[ScheduleOut])
def list_schedules(
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    return db.execute(
        select(Schedule)
        .where(Schedule.restaurant_id == restaurant.restaurant_id)
        .order_by(Schedule.start_date.desc(), Schedule.schedule_id.desc())
    ).scalars().all()


@router.get("/week", response_model=WeekOut)
def get_week(
    week_start: Optional[date] = Query(None, description="Sunday that starts the week; defaults to this week"),
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """
    Week view: makes sure the week's schedule and template shifts exist, then
    returns them. Called on every calendar load; repeated calls create nothing new.
    """
    if week_start is None:
        week_start = week_start_for(date.today())

    result = materialize_week(db, restaurant.restaurant_id, week_start)
    schedule = get_schedule(db, result.schedule.schedule_id)
    return {
        "schedule": schedule,
        "created_count": result.created_count,
        "shifts": list_schedule_shifts(db, schedule.schedule_id),
    }


@router.post("", response_model=ScheduleOut, status_code=201)
def create_schedule(
    payload: ScheduleCreate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    validate_date_range(payload.start_date, payload.end_date)

    s = Schedule(
        restaurant_id=restaurant.restaurant_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        published_at=None,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


@router.get("/{schedule_id}", response_model=ScheduleOut)
def get_schedule_detail(
    schedule_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    return get_schedule(db, schedule_id, restaurant.restaurant_id)


@router.patch("/{schedule_id}", response_model=ScheduleOut)
def update_schedule(
    schedule_id: int,
    payload: ScheduleUpdate,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Move a schedule's date range. Publication state is not editable here."""
    s = get_schedule(db, schedule_id, restaurant.restaurant_id)

    start = payload.start_date if payload.start_date is not None else s.start_date
    end = payload.end_date if payload.end_date is not None else s.end_date
    validate_date_range(start, end)
    s.start_date, s.end_date = start, end

    db.commit()
    db.refresh(s)
    return s


@router.delete("/{schedule_id}", status_code=204)
def delete_schedule(
    schedule_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Delete a schedule together with all of its shifts."""
    s = get_schedule(db, schedule_id, restaurant.restaurant_id)
    db.delete(s)
    db.commit()


@router.post("/{schedule_id}/auto-populate", response_model=AutoPopulateOut)
def auto_populate_schedule(
    schedule_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
):
    """Create the template shifts this schedule is missing; existing ones are left as they are."""
    result = populate_schedule(db, schedule_id, restaurant.restaurant_id)
    return {"created_count": result.created_count, "created_ids": result.created_ids}


@router.post("/{schedule_id}/publish", response_model=PublishOut)
def publish(
    schedule_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
    notifier: ScheduleNotifier = Depends(get_notifier),
):
    """
    Publish a draft schedule and email each assigned employee their shifts.
    A second publish is rejected with code ``schedule_already_published``.
    """
    result = publish_schedule(db, schedule_id, notifier, restaurant.restaurant_id)
    return {
        "schedule": result.schedule,
        "notifications": result.notifications,
        "warnings": result.warnings,
    }


@router.post("/{schedule_id}/send-email", response_model=DispatchReportOut)
def send_email(
    schedule_id: int,
    restaurant: Restaurant = Depends(get_owned_restaurant),
    db: Session = Depends(get_db),
    notifier: ScheduleNotifier = Depends(get_notifier),
):
    """Send the schedule to every employee of the restaurant, on demand."""
    return send_schedule_emails(db, schedule_id, notifier, restaurant.restaurant_id)
