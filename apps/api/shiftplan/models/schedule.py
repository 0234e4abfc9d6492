from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer
from sqlalchemy.sql import func

from shiftplan.core.database import Base

# IMPORTANT: forces restaurants table to be registered in SQLAlchemy metadata
from shiftplan.models.restaurant import Restaurant  # noqa: F401


class Schedule(Base):
    __tablename__ = "schedules"

    schedule_id = Column(Integer, primary_key=True, autoincrement=True)

    restaurant_id = Column(
        Integer,
        ForeignKey("restaurants.restaurant_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    # NULL while draft; set once on publish and never cleared
    published_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_schedules_date_range"),
    )

    @property
    def status(self) -> str:
        return "draft" if self.published_at is None else "published"
