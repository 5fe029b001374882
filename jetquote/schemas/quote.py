from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class LegIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None


class QuoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    departure: Optional[str] = None
    arrival: Optional[str] = None
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    pax: Optional[int] = None
    date: Optional[str] = None
    time: Optional[str] = None
    trip_type: Optional[str] = Field(None, alias="tripType")
    return_date: Optional[str] = Field(None, alias="returnDate")
    return_time: Optional[str] = Field(None, alias="returnTime")
    departure_country: Optional[str] = Field(None, alias="departureCountry")
    arrival_country: Optional[str] = Field(None, alias="arrivalCountry")
    legs: Optional[List[LegIn]] = None

    @property
    def departure_input(self) -> str:
        return (self.departure or self.from_ or "").strip()

    @property
    def arrival_input(self) -> str:
        return (self.arrival or self.to or "").strip()


class LegQuote(BaseModel):
    model_config = ConfigDict(frozen=True)

    sequence: int
    from_icao: str
    to_icao: str
    distance_km: int
    flight_time_h: Optional[float] = None
    flight_time_pretty: Optional[str] = None
    date: Optional[str] = None
    departure_time: Optional[str] = None
    arrival_time: Optional[str] = None
    price: Optional[int] = None
    waiting_cost: Optional[int] = None


class QuoteOut(BaseModel):
    """One priced (or unpriceable) aircraft offer"""
    model_config = ConfigDict(frozen=True)

    jet_id: int
    model: Optional[str] = None
    category: Optional[str] = None
    seats: Optional[int] = None
    operator: Optional[str] = None
    logo: Optional[str] = None
    image: Optional[str] = None
    home_base: Optional[str] = None
    trip_type: str
    distance_km: int
    flight_time_h: Optional[float] = None
    flight_time_pretty: Optional[str] = None
    outbound_price: Optional[int] = None
    return_price: Optional[int] = None
    repositioning_cost: Optional[int] = None
    waiting_cost: Optional[int] = None
    total_price: Optional[int] = None
    price_breakdown: dict = Field(default_factory=dict)
    days_between: Optional[int] = None
    departure_time: Optional[str] = None
    arrival_time: Optional[str] = None
    return_departure_time: Optional[str] = None
    return_arrival_time: Optional[str] = None
    legs: Optional[List[LegQuote]] = None
    can_complete_tour: Optional[bool] = None
    warning: Optional[str] = None


class LegEcho(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sequence: int
    from_: str = Field(alias="from")
    to: str
    from_icao: str
    from_name: Optional[str] = None
    to_icao: str
    to_name: Optional[str] = None
    distance_km: int
    date: Optional[str] = None
    time: Optional[str] = None


class QuoteInput(BaseModel):
    """Normalized echo of the request with resolved airports"""
    departure: str
    arrival: str
    departure_icao: str
    departure_name: Optional[str] = None
    departure_confidence: int
    arrival_icao: str
    arrival_name: Optional[str] = None
    arrival_confidence: int
    date: Optional[str] = None
    return_date: Optional[str] = None
    trip_type: str
    time: Optional[str] = None
    return_time: Optional[str] = None
    pax: int
    legs: Optional[List[LegEcho]] = None


class QuoteResponse(BaseModel):
    input: QuoteInput
    jets: List[QuoteOut]
