"""initial schema: restaurants, roles, employees, shift templates, schedules

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'managers',
        sa.Column('manager_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('manager_id'),
    )
    op.create_index(op.f('ix_managers_email'), 'managers', ['email'], unique=True)

    op.create_table(
        'restaurants',
        sa.Column('restaurant_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('manager_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['manager_id'], ['managers.manager_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('restaurant_id'),
    )
    op.create_index(op.f('ix_restaurants_manager_id'), 'restaurants', ['manager_id'], unique=False)

    op.create_table(
        'roles',
        sa.Column('role_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('color', sa.String(length=7), nullable=False, server_default='#6B7280'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.restaurant_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('role_id'),
        sa.UniqueConstraint('restaurant_id', 'name', name='uq_roles_restaurant_name'),
    )
    op.create_index(op.f('ix_roles_restaurant_id'), 'roles', ['restaurant_id'], unique=False)

    op.create_table(
        'employees',
        sa.Column('employee_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.restaurant_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('employee_id'),
    )
    op.create_index(op.f('ix_employees_restaurant_id'), 'employees', ['restaurant_id'], unique=False)

    op.create_table(
        'employee_roles',
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.employee_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['roles.role_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('employee_id', 'role_id'),
    )

    op.create_table(
        'shift_templates',
        sa.Column('shift_template_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('day_of_week', sa.SmallInteger(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='ck_shift_templates_day_of_week'),
        sa.CheckConstraint('end_time > start_time', name='ck_shift_templates_times'),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.restaurant_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('shift_template_id'),
    )
    op.create_index(op.f('ix_shift_templates_restaurant_id'), 'shift_templates', ['restaurant_id'], unique=False)

    op.create_table(
        'shift_template_roles',
        sa.Column('shift_template_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['shift_template_id'], ['shift_templates.shift_template_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['roles.role_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('shift_template_id', 'role_id'),
    )
    op.create_index(op.f('ix_shift_template_roles_role_id'), 'shift_template_roles', ['role_id'], unique=False)

    op.create_table(
        'schedules',
        sa.Column('schedule_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('start_date <= end_date', name='ck_schedules_date_range'),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.restaurant_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('schedule_id'),
    )
    op.create_index(op.f('ix_schedules_restaurant_id'), 'schedules', ['restaurant_id'], unique=False)

    op.create_table(
        'scheduled_shifts',
        sa.Column('scheduled_shift_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('schedule_id', sa.Integer(), nullable=False),
        sa.Column('shift_template_id', sa.Integer(), nullable=True),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=True),
        sa.Column('shift_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('employee_name', sa.String(length=255), nullable=True),
        sa.Column('role_name', sa.String(length=100), nullable=False),
        sa.Column('role_color', sa.String(length=7), nullable=False, server_default='#6B7280'),
        *_timestamps(),
        sa.CheckConstraint('end_time > start_time', name='scheduled_shifts_times_check'),
        sa.ForeignKeyConstraint(['schedule_id'], ['schedules.schedule_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['shift_template_id'], ['shift_templates.shift_template_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['role_id'], ['roles.role_id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.employee_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('scheduled_shift_id'),
        sa.UniqueConstraint(
            'schedule_id', 'shift_template_id', 'role_id', 'shift_date',
            name='uq_scheduled_shifts_template_origin',
        ),
    )
    op.create_index(op.f('ix_scheduled_shifts_schedule_id'), 'scheduled_shifts', ['schedule_id'], unique=False)
    op.create_index(op.f('ix_scheduled_shifts_employee_id'), 'scheduled_shifts', ['employee_id'], unique=False)
    op.create_index(op.f('ix_scheduled_shifts_shift_date'), 'scheduled_shifts', ['shift_date'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('scheduled_shifts')
    op.drop_table('schedules')
    op.drop_table('shift_template_roles')
    op.drop_table('shift_templates')
    op.drop_table('employee_roles')
    op.drop_table('employees')
    op.drop_table('roles')
    op.drop_table('restaurants')
    op.drop_index(op.f('ix_managers_email'), table_name='managers')
    op.drop_table('managers')
