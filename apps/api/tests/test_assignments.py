from datetime import date

import pytest

from factories import add_employee, add_role, add_template
from shiftplan.core.exceptions import NotFoundError, ValidationError
from shiftplan.models.restaurant import Restaurant
from shiftplan.models.scheduled_shifts import ScheduledShift
from shiftplan.services.assignments import ROLE_MISMATCH, assign_employee, unassign_employee
from shiftplan.services.lifecycle import publish_schedule
from shiftplan.services.materializer import materialize_week

SUNDAY = date(2025, 1, 19)


@pytest.fixture()
def server(db, restaurant):
    return add_role(db, restaurant, "Server")


@pytest.fixture()
def shift(db, restaurant, server):
    add_template(db, restaurant, 0, "09:00", "13:00", [server])
    result = materialize_week(db, restaurant.restaurant_id, SUNDAY)
    return db.get(ScheduledShift, result.created_ids[0])


def test_assign_qualified_employee(db, restaurant, server, shift):
    alice = add_employee(db, restaurant, "Alice Martin", roles=[server])

    result = assign_employee(db, shift.scheduled_shift_id, alice.employee_id)

    assert result.warnings == []
    assert result.shift.employee_id == alice.employee_id
    assert result.shift.employee_name == "Alice Martin"


def test_missing_role_is_only_a_warning(db, restaurant, shift):
    cook = add_role(db, restaurant, "Cook")
    carl = add_employee(db, restaurant, "Carl Cook", roles=[cook])

    result = assign_employee(db, shift.scheduled_shift_id, carl.employee_id, strict_roles=False)

    assert result.warnings == [ROLE_MISMATCH]
    assert result.shift.employee_id == carl.employee_id


def test_strict_mode_rejects_missing_role(db, restaurant, shift):
    carl = add_employee(db, restaurant, "Carl Cook")

    with pytest.raises(ValidationError):
        assign_employee(db, shift.scheduled_shift_id, carl.employee_id, strict_roles=True)

    db.refresh(shift)
    assert shift.employee_id is None


def test_employee_from_another_restaurant(db, manager, shift):
    other = Restaurant(manager_id=manager.manager_id, name="Harbor Grill")
    db.add(other)
    db.commit()
    stranger = add_employee(db, other, "Sam Other")

    with pytest.raises(ValidationError):
        assign_employee(db, shift.scheduled_shift_id, stranger.employee_id)


def test_unknown_employee_or_shift(db, shift):
    with pytest.raises(NotFoundError):
        assign_employee(db, shift.scheduled_shift_id, 9999)
    with pytest.raises(NotFoundError):
        assign_employee(db, 9999, None)


def test_shift_must_belong_to_given_schedule(db, shift):
    with pytest.raises(NotFoundError):
        unassign_employee(db, shift.scheduled_shift_id, schedule_id=shift.schedule_id + 1)


def test_unassign_always_succeeds(db, restaurant, shift):
    alice = add_employee(db, restaurant, "Alice Martin")
    assign_employee(db, shift.scheduled_shift_id, alice.employee_id)

    first = unassign_employee(db, shift.scheduled_shift_id)
    second = unassign_employee(db, shift.scheduled_shift_id)

    for s in (first, second):
        assert s.employee_id is None
        assert s.employee_name is None


def test_published_schedule_stays_editable(db, restaurant, shift, notifier):
    publish_schedule(db, shift.schedule_id, notifier)
    alice = add_employee(db, restaurant, "Alice Martin")

    result = assign_employee(db, shift.scheduled_shift_id, alice.employee_id)

    assert result.shift.employee_id == alice.employee_id
    # Publication does not re-notify on later edits
    assert notifier.sent == []
