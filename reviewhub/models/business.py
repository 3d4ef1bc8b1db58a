"""Business model.

Represents a directory listing that can receive reviews, plus its images.
Banned businesses are hidden from every public listing.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from reviewhub.models.profile import generate_id
from reviewhub.stores.postgres import Base


class Business(Base):
    """Directory listing."""

    __tablename__ = "businesses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)

    business_name: Mapped[str] = mapped_column(String(200), index=True)
    business_owner_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"), index=True)

    # Location
    location: Mapped[str | None] = mapped_column(String(200))
    address: Mapped[str | None] = mapped_column(String(500))

    # Display
    description: Mapped[str | None] = mapped_column(Text)
    website: Mapped[str | None] = mapped_column(String(500))

    # Moderation
    is_banned: Mapped[bool] = mapped_column(default=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Business {self.business_name}>"


class BusinessImage(Base):
    """Picture attached to a business; at most one is expected to be primary."""

    __tablename__ = "business_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    business_id: Mapped[str] = mapped_column(
        ForeignKey("businesses.id", ondelete="CASCADE"),
        index=True,
    )
    image_url: Mapped[str] = mapped_column(Text)
    is_primary: Mapped[bool] = mapped_column(default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
