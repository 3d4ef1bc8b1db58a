"""Featured subcategory model.

Admin-curated "best in category" sections shown on the landing page.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from reviewhub.models.profile import generate_id
from reviewhub.stores.postgres import Base


class FeaturedSubcategory(Base):
    """Subcategory highlighted on the landing page."""

    __tablename__ = "featured_subcategories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    subcategory_id: Mapped[str] = mapped_column(
        ForeignKey("subcategories.id", ondelete="CASCADE"),
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<FeaturedSubcategory {self.subcategory_id} active={self.is_active}>"
