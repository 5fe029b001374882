"""Quote request validation. Runs before any store is queried."""
from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional

from jetquote.core.enums import TripType
from jetquote.core.exceptions import RequestValidationFailed
from jetquote.schemas.quote import QuoteRequest
from jetquote.utils.dates import DateFormatError, parse_date, parse_time

MIN_PAX = 1
MAX_PAX = 50
MIN_LEGS = 2
MAX_LEGS = 10


@dataclass(frozen=True)
class LegInput:
    sequence: int
    origin: str
    destination: str
    leg_date: Optional[date] = None
    leg_time: Optional[time] = None


@dataclass(frozen=True)
class ValidatedRequest:
    departure: str
    arrival: str
    trip_type: TripType
    pax: int
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    return_date: Optional[date] = None
    return_time: Optional[time] = None
    departure_country: Optional[str] = None
    arrival_country: Optional[str] = None
    legs: List[LegInput] = field(default_factory=list)


def _date(value: Optional[str], label: str, today: date, errors: List[str]) -> Optional[date]:
    if value is None or not value.strip():
        return None
    try:
        return parse_date(value, today)
    except DateFormatError:
        errors.append(f"{label}: unrecognised date {value!r}")
        return None


def _time(value: Optional[str], label: str, errors: List[str]) -> Optional[time]:
    if value is None or not value.strip():
        return None
    try:
        return parse_time(value)
    except DateFormatError:
        errors.append(f"{label}: invalid time {value!r}, expected HH:MM")
        return None


def _legs(req: QuoteRequest, today: date, errors: List[str]) -> List[LegInput]:
    raw_legs = req.legs or []
    if not MIN_LEGS <= len(raw_legs) <= MAX_LEGS:
        errors.append(f"legs: a multileg trip needs between {MIN_LEGS} and {MAX_LEGS} legs")
        return []

    legs = []
    previous_date: Optional[date] = None
    for i, leg in enumerate(raw_legs, start=1):
        label = f"legs[{i}]"
        origin = (leg.from_ or "").strip()
        destination = (leg.to or "").strip()
        if not origin:
            errors.append(f"{label}.from is required")
        if not destination:
            errors.append(f"{label}.to is required")

        leg_date = _date(leg.date, f"{label}.date", today, errors)
        if leg_date is not None:
            if leg_date < today:
                errors.append(f"{label}.date {leg_date.isoformat()} is in the past")
            if previous_date is not None and leg_date <= previous_date:
                errors.append(f"{label}.date must be later than the previous leg's date")
            previous_date = leg_date

        legs.append(LegInput(
            sequence=i,
            origin=origin,
            destination=destination,
            leg_date=leg_date,
            leg_time=_time(leg.time, f"{label}.time", errors),
        ))
    return legs


def validate_request(req: QuoteRequest, today: Optional[date] = None, default_pax: int = 4) -> ValidatedRequest:
    """Check a request and return its normalized form.

    Raises RequestValidationFailed listing every problem found.
    """
    today = today or date.today()
    errors: List[str] = []

    raw_type = (req.trip_type or TripType.ONEWAY.value).strip().lower()
    try:
        trip_type = TripType(raw_type)
    except ValueError:
        errors.append(f"tripType must be one of: {', '.join(t.value for t in TripType)}")
        trip_type = TripType.ONEWAY

    pax = default_pax if req.pax is None else req.pax
    if not MIN_PAX <= pax <= MAX_PAX:
        errors.append(f"pax must be between {MIN_PAX} and {MAX_PAX}")

    departure = req.departure_input
    arrival = req.arrival_input
    legs: List[LegInput] = []

    if trip_type == TripType.MULTILEG:
        legs = _legs(req, today, errors)
        if legs:
            departure = departure or legs[0].origin
            arrival = arrival or legs[-1].destination
    else:
        if not departure:
            errors.append("departure (or from) is required")
        if not arrival:
            errors.append("arrival (or to) is required")

    departure_date = _date(req.date, "date", today, errors)
    departure_time = _time(req.time, "time", errors)
    return_date = None
    return_time = None

    if trip_type == TripType.ROUNDTRIP:
        if not req.return_date or not req.return_date.strip():
            errors.append("returnDate is required for roundtrip trips")
        else:
            return_date = _date(req.return_date, "returnDate", today, errors)
            if return_date is not None and return_date < (departure_date or today):
                errors.append("returnDate must not precede the departure date")
        return_time = _time(req.return_time, "returnTime", errors)
        if departure_date is None:
            departure_date = today

    if errors:
        raise RequestValidationFailed(errors)

    return ValidatedRequest(
        departure=departure,
        arrival=arrival,
        trip_type=trip_type,
        pax=pax,
        departure_date=departure_date,
        departure_time=departure_time,
        return_date=return_date,
        return_time=return_time,
        departure_country=req.departure_country,
        arrival_country=req.arrival_country,
        legs=legs,
    )
