"""SavedItem ORM model — a user's bookmarked dishes."""

import uuid

from sqlalchemy import Column, TIMESTAMP, Uuid, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship

from safebyte.database import Base


class SavedItem(Base):
    """One bookmark row per (user, dish) pair."""

    __tablename__ = "saved_items"
    __table_args__ = (UniqueConstraint("user_id", "dish_id"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    dish_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("dishes.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    dish = relationship("Dish")
