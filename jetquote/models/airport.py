from sqlalchemy import Column, String, Float, Index
from jetquote.models.base import BaseModel


class Airport(BaseModel):
    """Airport reference data, OurAirports column naming"""
    __tablename__ = "airports"

    ident = Column(String(16), unique=True, nullable=False, index=True)
    type = Column(String(32), nullable=False)
    name = Column(String(255), nullable=False)
    municipality = Column(String(255), nullable=True)
    iso_region = Column(String(16), nullable=True)
    iso_country = Column(String(8), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    __table_args__ = (
        Index("ix_airports_type", "type"),
        Index("ix_airports_municipality", "municipality"),
    )
