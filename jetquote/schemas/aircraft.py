from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional

DEFAULT_RANGE_KM = 3000.0
DEFAULT_PARKING_COST_PER_DAY = 500.0


class Aircraft(BaseModel):
    """
    One fleet entry as the pricing core sees it.

    ``speed_knots`` is preferred over the legacy ``speed`` column; when both
    are missing or zero the aircraft is listed but cannot be priced.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: Optional[str] = None
    category: Optional[str] = None
    seats: Optional[int] = None
    operator: Optional[str] = None
    logo_url: Optional[str] = None
    image_url: Optional[str] = None
    homebase: Optional[str] = None
    speed_knots: Optional[float] = None
    speed: Optional[float] = None
    hourly_rate: Optional[float] = None
    range_km: float = DEFAULT_RANGE_KM
    parking_cost_per_day: float = DEFAULT_PARKING_COST_PER_DAY

    @field_validator("range_km", mode="before")
    @classmethod
    def _default_range(cls, v):
        return DEFAULT_RANGE_KM if v is None else v

    @field_validator("parking_cost_per_day", mode="before")
    @classmethod
    def _default_parking(cls, v):
        return DEFAULT_PARKING_COST_PER_DAY if v is None else v

    @property
    def cruise_speed_knots(self) -> Optional[float]:
        return self.speed_knots or self.speed or None

    @property
    def home_base_code(self) -> Optional[str]:
        if not self.homebase:
            return None
        return self.homebase.strip().upper() or None
