from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Boolean
from sqlalchemy.orm import declared_attr, declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Mixin ---
class TimestampMixin:
    """Adds created_date and updated_date columns."""

    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class SoftDeleteMixin:
    """Adds the is_deleted flag used for soft delete."""

    is_deleted = Column(Boolean, default=False, nullable=False)


# --- Base class for all models ---
class BaseMixin(TimestampMixin):
    """Integer primary key plus timestamps."""

    id = Column(Integer, primary_key=True, index=True)

    # User -> users
    @declared_attr
    def __tablename__(cls):
        return cls.__name__.lower() + "s"

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id})>"
