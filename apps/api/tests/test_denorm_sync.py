from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from factories import add_employee, add_role, add_template
from shiftplan.core.exceptions import ConflictError
from shiftplan.models.employee_role import EmployeeRole
from shiftplan.models.scheduled_shifts import ScheduledShift
from shiftplan.models.shift_template import ShiftTemplate, ShiftTemplateRole
from shiftplan.services import denorm_sync
from shiftplan.services.assignments import assign_employee
from shiftplan.services.materializer import materialize_week

SUNDAY = date(2025, 1, 19)


@pytest.fixture()
def week(db, restaurant):
    server = add_role(db, restaurant, "Server")
    template = add_template(db, restaurant, 1, "09:00", "17:00", [server])
    add_template(db, restaurant, 2, "09:00", "17:00", [server])
    alice = add_employee(db, restaurant, "Alice Martin", roles=[server])
    bob = add_employee(db, restaurant, "Bob Stone", roles=[server])

    result = materialize_week(db, restaurant.restaurant_id, SUNDAY)
    monday, tuesday = sorted(
        (db.get(ScheduledShift, i) for i in result.created_ids), key=lambda s: s.shift_date
    )
    assign_employee(db, monday.scheduled_shift_id, alice.employee_id)
    assign_employee(db, tuesday.scheduled_shift_id, bob.employee_id)
    return {
        "server": server,
        "template": template,
        "alice": alice,
        "bob": bob,
        "monday": monday,
        "tuesday": tuesday,
    }


def test_employee_rename_updates_assigned_shifts(db, week):
    alice = week["alice"]
    alice.full_name = "Alicia Martin"
    db.flush()
    updated = denorm_sync.sync_employee_name(db, alice)
    db.commit()

    assert updated == 1
    db.refresh(week["monday"])
    db.refresh(week["tuesday"])
    assert week["monday"].employee_name == "Alicia Martin"
    assert week["tuesday"].employee_name == "Bob Stone"


def test_employee_delete_unassigns_but_keeps_shifts(db, week):
    alice = week["alice"]
    alice_id = alice.employee_id
    denorm_sync.clear_deleted_employee(db, alice_id)
    db.delete(alice)
    db.commit()

    shift = db.get(ScheduledShift, week["monday"].scheduled_shift_id)
    assert shift is not None
    assert shift.employee_id is None
    assert shift.employee_name is None
    assert db.execute(select(EmployeeRole).where(EmployeeRole.employee_id == alice_id)).first() is None


def test_role_rename_and_recolor_reach_shifts(db, week):
    server = week["server"]
    server.name = "Waiter"
    server.color = "#10B981"
    db.flush()
    denorm_sync.sync_role_display(db, server)
    db.commit()

    for key in ("monday", "tuesday"):
        db.refresh(week[key])
        assert week[key].role_name == "Waiter"
        assert week[key].role_color == "#10B981"


def test_role_in_use_cannot_be_deleted(db, week):
    with pytest.raises(ConflictError) as exc:
        denorm_sync.detach_deleted_role(db, week["server"].role_id)
    assert exc.value.code == "role_in_use"


def test_role_restrict_is_enforced_by_the_database(db, week):
    db.delete(week["server"])
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_unused_role_is_detached_then_deleted(db, restaurant, week):
    bartender = add_role(db, restaurant, "Bartender")
    add_template(db, restaurant, 5, "18:00", "23:00", [bartender])
    add_employee(db, restaurant, "Cara Lee", roles=[bartender])
    role_id = bartender.role_id

    denorm_sync.detach_deleted_role(db, role_id)
    db.delete(bartender)
    db.commit()

    assert db.execute(select(ShiftTemplateRole).where(ShiftTemplateRole.role_id == role_id)).first() is None
    assert db.execute(select(EmployeeRole).where(EmployeeRole.role_id == role_id)).first() is None


def test_template_delete_leaves_shifts_intact(db, restaurant, week):
    template = week["template"]
    shift_id = week["monday"].scheduled_shift_id
    detached = denorm_sync.detach_deleted_template(db, template.shift_template_id)
    db.delete(template)
    db.commit()

    assert detached == 1
    shift = db.get(ScheduledShift, shift_id)
    db.refresh(shift)
    assert shift.shift_template_id is None
    assert shift.employee_name == "Alice Martin"
    assert shift.shift_date == date(2025, 1, 20)

    # The orphaned shift is no longer a template shift, so nothing is recreated
    assert materialize_week(db, restaurant.restaurant_id, SUNDAY).created_count == 0


def test_template_delete_sets_null_at_database_level(db, week):
    shift_id = week["tuesday"].scheduled_shift_id
    tuesday_template_id = week["tuesday"].shift_template_id
    template = db.get(ShiftTemplate, tuesday_template_id)
    db.delete(template)
    db.commit()

    db.expire_all()
    assert db.get(ScheduledShift, shift_id).shift_template_id is None
