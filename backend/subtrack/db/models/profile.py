"""Profile model: one row per account, carrying the lifetime access flag."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String

from subtrack.db.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Opaque account id, bound to checkout sessions as client_reference_id
    id = Column(String(255), primary_key=True)
    email = Column(String(255), nullable=True, index=True)

    # Monotonic: only ever flipped false -> true by the entitlement grant
    has_lifetime_access = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
