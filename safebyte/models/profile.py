"""Profile ORM model — remote mirror of the user's dietary profile."""

from sqlalchemy import Column, Text, JSON, TIMESTAMP, Uuid, func

from safebyte.database import Base


class Profile(Base):
    """
    Remote copy of a UserProfile keyed by the authenticated user's id.
    Written by upsert whenever the user saves their profile.
    """

    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    email = Column(Text, nullable=True)

    allergies = Column(JSON, nullable=False, default=list)
    severity_levels = Column(JSON, nullable=False, default=dict)
    diet_tags = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=False, default="")

    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
