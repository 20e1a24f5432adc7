"""
SQLAlchemy ORM models.

Tables
------
* ``autism_centers`` -- support center listings shown by the locator

Indexes
-------
* **B-Tree** on ``type`` and ``verified`` for the filtered listing and the
  stats endpoint, and on ``(latitude, longitude)`` for bounding-box scans.

List-valued fields (services, age groups, insurance) are stored as JSON so
the same model runs on PostgreSQL and on SQLite in tests.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
)

from .database import Base
from src.domain.entities import AutismCenter
from src.domain.enums import LocationType


class AutismCenterModel(Base):
    __tablename__ = "autism_centers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    type = Column(
        Enum(
            LocationType,
            name="locationtype",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    address = Column(String(500), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    phone = Column(String(40), nullable=True)
    website = Column(String(300), nullable=True)
    email = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    services = Column(JSON, nullable=False, default=list)
    age_groups = Column(JSON, nullable=False, default=list)
    insurance_accepted = Column(JSON, nullable=False, default=list)
    rating = Column(Float, nullable=True)
    verified = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_autism_centers_type", "type"),
        Index("idx_autism_centers_verified", "verified"),
        Index("idx_autism_centers_lat_lng", "latitude", "longitude"),
    )

    def to_entity(self) -> AutismCenter:
        return AutismCenter(
            id=self.id,
            name=self.name,
            type=LocationType(self.type),
            address=self.address,
            latitude=self.latitude,
            longitude=self.longitude,
            phone=self.phone,
            website=self.website,
            email=self.email,
            description=self.description,
            services=list(self.services or []),
            age_groups=list(self.age_groups or []),
            insurance_accepted=list(self.insurance_accepted or []),
            rating=self.rating,
            verified=self.verified,
            created_at=self.created_at,
        )
