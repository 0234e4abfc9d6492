from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, SmallInteger, String, Time
from sqlalchemy.sql import func

from shiftplan.core.database import Base

from shiftplan.models.restaurant import Restaurant  # noqa: F401


class ShiftTemplate(Base):
    __tablename__ = "shift_templates"

    shift_template_id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(
        Integer,
        ForeignKey("restaurants.restaurant_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(255), nullable=True)
    day_of_week = Column(SmallInteger, nullable=False)  # 0=Sun ... 6=Sat
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_shift_templates_day_of_week"),
        CheckConstraint("end_time > start_time", name="ck_shift_templates_times"),
    )


class ShiftTemplateRole(Base):
    """Junction row: a template produces one shift per attached role."""

    __tablename__ = "shift_template_roles"

    shift_template_id = Column(
        Integer,
        ForeignKey("shift_templates.shift_template_id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id = Column(
        Integer,
        ForeignKey("roles.role_id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
