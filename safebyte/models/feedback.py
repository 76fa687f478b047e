"""Feedback ORM model — community safety reports for a dish."""

import uuid

from sqlalchemy import Column, String, TIMESTAMP, Uuid, ForeignKey, func

from safebyte.database import Base


class Feedback(Base):
    """
    A single 'safe' or 'issue' report. Each row also bumps the matching
    community counter on the dish.
    """

    __tablename__ = "feedback"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False)
    dish_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("dishes.id", ondelete="CASCADE"),
        nullable=False,
    )
    type = Column(String(10), nullable=False)   # 'safe' | 'issue'

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
