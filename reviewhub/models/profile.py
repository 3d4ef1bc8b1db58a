"""Profile model.

One row per identity-provider user; the id is the provider's user id.
Role and ban flag drive authorization.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from reviewhub.stores.postgres import Base


def generate_id() -> str:
    """Generate a new string primary key."""
    return str(uuid4())


class Profile(Base):
    """Directory user with role and ban flag."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)

    name: Mapped[str | None] = mapped_column(String(200))
    email: Mapped[str | None] = mapped_column(String(320), index=True)

    # "user", "business" or "admin"
    role: Mapped[str] = mapped_column(String(20), default="user", index=True)
    is_banned: Mapped[bool] = mapped_column(default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Profile {self.id} ({self.role})>"
