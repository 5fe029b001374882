from sqlalchemy import Column, String, Float, Integer
from jetquote.models.base import BaseModel


class Jet(BaseModel):
    __tablename__ = "jets"

    name = Column(String(120), nullable=False)
    category = Column(String(60))
    seats = Column(Integer)
    operator = Column(String(120))
    logo_url = Column(String(500))
    image_url = Column(String(500))
    homebase = Column(String(16), index=True)
    speed_knots = Column(Float)
    speed = Column(Float)  # legacy column, knots
    hourly_rate = Column(Float)
    range_km = Column(Float)
    parking_cost_per_day = Column(Float)
