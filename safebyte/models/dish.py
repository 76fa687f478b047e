"""Dish ORM model with allergen metadata and community tallies."""

import uuid

from sqlalchemy import (
    Column, Integer, Text, JSON, Double, TIMESTAMP, Uuid, ForeignKey, func,
)
from sqlalchemy.orm import relationship

from safebyte.database import Base


class Dish(Base):
    """
    A single menu item. allergens / free_of / ingredients are stored as JSON
    arrays; the allergen exclusion is evaluated by the dish query assembler.
    safety_score may be NULL, in which case readers treat it as 90.
    """

    __tablename__ = "dishes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
    )

    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Double, nullable=True)
    calories = Column(Integer, nullable=True)

    # Allergen metadata
    allergens = Column(JSON, nullable=False, default=list)
    free_of = Column(JSON, nullable=False, default=list)
    ingredients = Column(JSON, nullable=False, default=list)

    # Community / derived
    trending_score = Column(Double, nullable=False, default=0)
    community_safe_count = Column(Integer, nullable=False, default=0)
    community_issue_count = Column(Integer, nullable=False, default=0)
    safety_score = Column(Integer, nullable=True)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    restaurant = relationship("Restaurant", back_populates="dishes")
