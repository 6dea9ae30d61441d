from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func

from app.database import Base


class RoleGrant(Base):
    """A scope that is granted to an email address when it registers."""
    __tablename__ = "role_grants"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    scope = Column(String(50), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("email", "scope", name="uq_role_grant_email_scope"),
    )
