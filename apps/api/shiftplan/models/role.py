from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from shiftplan.core.database import Base

DEFAULT_ROLE_COLOR = "#6B7280"


class Role(Base):
    __tablename__ = "roles"

    role_id = Column(Integer, primary_key=True, autoincrement=True)

    restaurant_id = Column(
        Integer,
        ForeignKey("restaurants.restaurant_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(100), nullable=False)
    color = Column(String(7), nullable=False, default=DEFAULT_ROLE_COLOR)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_roles_restaurant_name"),
    )
