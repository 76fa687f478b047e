"""Restaurant ORM model."""

import uuid

from sqlalchemy import Column, Text, String, Date, Double, TIMESTAMP, Uuid, func
from sqlalchemy.orm import relationship

from safebyte.database import Base


class Restaurant(Base):
    """
    A restaurant uploaded through menu ingestion.
    The name is the ingestion upsert key, so it is unique.
    """

    __tablename__ = "restaurants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    cuisine = Column(Text, nullable=True)
    price_range = Column(String(10), nullable=True)   # '$' | '$$' | '$$$' | '$$$$'
    address = Column(Text, nullable=True)

    latitude = Column(Double, nullable=True)
    longitude = Column(Double, nullable=True)

    safety_rating = Column(Double, nullable=True)
    last_updated = Column(Date, nullable=True)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    dishes = relationship(
        "Dish", back_populates="restaurant", cascade="all, delete-orphan"
    )
