from sqlalchemy import Column, ForeignKey, Integer

from shiftplan.core.database import Base

class EmployeeRole(Base):
    __tablename__ = "employee_roles"

    employee_id = Column(
        Integer,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        primary_key=True,
    )

    role_id = Column(
        Integer,
        ForeignKey("roles.role_id", ondelete="CASCADE"),
        primary_key=True,
    )
