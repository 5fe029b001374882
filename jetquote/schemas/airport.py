from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from jetquote.core.enums import MatchSource


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class AirportRecord(BaseModel):
    """Read-only view of one airport directory row"""
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    municipality: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    classification: Optional[str] = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.latitude, lon=self.longitude)


class ResolvedLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: Optional[str] = None
    confidence: int = Field(ge=0, le=100)
    score: int
    matched_by: MatchSource
    municipality: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
