from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, String, Text, Time, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.sql.sqltypes import DateTime

from shiftplan.core.database import Base

from shiftplan.models.schedule import Schedule  # noqa: F401
from shiftplan.models.employee import Employee  # noqa: F401
from shiftplan.models.role import DEFAULT_ROLE_COLOR, Role  # noqa: F401
from shiftplan.models.shift_template import ShiftTemplate  # noqa: F401


class ScheduledShift(Base):
    __tablename__ = "scheduled_shifts"

    scheduled_shift_id = Column(Integer, primary_key=True, autoincrement=True)

    schedule_id = Column(Integer, ForeignKey("schedules.schedule_id", ondelete="CASCADE"), nullable=False, index=True)
    shift_template_id = Column(Integer, ForeignKey("shift_templates.shift_template_id", ondelete="SET NULL"), nullable=True)
    role_id = Column(Integer, ForeignKey("roles.role_id", ondelete="RESTRICT"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.employee_id", ondelete="SET NULL"), nullable=True, index=True)

    shift_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    notes = Column(Text, nullable=False, default="")

    # Display copies, kept current by services.denorm_sync
    employee_name = Column(String(255), nullable=True)
    role_name = Column(String(100), nullable=False)
    role_color = Column(String(7), nullable=False, default=DEFAULT_ROLE_COLOR)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="scheduled_shifts_times_check"),
        # NULL template ids never collide, so hand-made shifts stay unconstrained
        UniqueConstraint(
            "schedule_id",
            "shift_template_id",
            "role_id",
            "shift_date",
            name="uq_scheduled_shifts_template_origin",
        ),
    )
