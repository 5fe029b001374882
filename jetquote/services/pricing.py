"""
Flight time, schedule and price for one aircraft.

Costs are computed from unrounded values; only the fields of the returned
quote are rounded (prices to whole units, flight time to 2 decimals).

Trip models
-----------
oneway
    hourly_rate * flight_time * 2. The aircraft flies back to its home base
    empty, so the customer pays both legs.
roundtrip, same day
    outbound (as oneway) plus a premium for keeping the aircraft on the
    ground at destination.
roundtrip, next day
    same-day price plus an overnight fee.
roundtrip, two days or more
    two independent oneway trips plus parking and repositioning.
multileg
    hourly_rate * leg flight time per leg, waiting time between legs and a
    final repositioning flight back to the home base.
"""
import math
from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import List, Optional, Sequence

from jetquote.core.config import settings
from jetquote.core.enums import TripType
from jetquote.schemas.aircraft import Aircraft
from jetquote.schemas.quote import LegQuote, QuoteOut
from jetquote.utils.dates import add_hours, combine, format_clock, hours_between


KNOTS_TO_KMH = 1.852

MISSING_SPEED = "Missing or invalid cruise speed"
MISSING_RATE = "Missing or invalid hourly rate"


@dataclass(frozen=True)
class PricingConfig:
    same_day_premium: float = 0.20
    overnight_fee: float = 1000.0
    repositioning_hours: float = 0.5
    charge_parking: bool = True
    waiting_threshold_hours: float = 2.0
    waiting_rate_factor: float = 0.3
    return_buffer_hours: float = 1.0

    @classmethod
    def from_settings(cls) -> "PricingConfig":
        return cls(
            same_day_premium=settings.SAME_DAY_PREMIUM,
            overnight_fee=settings.OVERNIGHT_FEE,
            repositioning_hours=settings.REPOSITIONING_HOURS,
            charge_parking=settings.CHARGE_PARKING,
            waiting_threshold_hours=settings.WAITING_THRESHOLD_HOURS,
            waiting_rate_factor=settings.WAITING_RATE_FACTOR,
            return_buffer_hours=settings.RETURN_BUFFER_HOURS,
        )


@dataclass(frozen=True)
class Schedule:
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    return_date: Optional[date] = None
    return_time: Optional[time] = None

    @property
    def days_between(self) -> Optional[int]:
        if self.departure_date is None or self.return_date is None:
            return None
        return (self.return_date - self.departure_date).days


@dataclass(frozen=True)
class LegPlan:
    sequence: int
    from_code: str
    to_code: str
    distance_km: float
    leg_date: Optional[date] = None
    leg_time: Optional[time] = None


def speed_kmh(aircraft: Aircraft) -> Optional[float]:
    knots = aircraft.cruise_speed_knots
    if not knots or knots <= 0:
        return None
    return knots * KNOTS_TO_KMH


def unpriceable_reason(aircraft: Aircraft) -> Optional[str]:
    if speed_kmh(aircraft) is None:
        return MISSING_SPEED
    if not aircraft.hourly_rate or aircraft.hourly_rate <= 0:
        return MISSING_RATE
    return None


def flight_time_hours(distance_km: float, kmh: float) -> float:
    return max(distance_km, 0.0) / kmh


def format_flight_time(hours: float) -> str:
    total_minutes = int(round(hours * 60))
    h, m = divmod(total_minutes, 60)
    if h:
        return f"{h}h {m:02d}min"
    return f"{m}min"


def round_price(value: float) -> int:
    return int(math.floor(value + 0.5))


def can_complete_tour(aircraft: Aircraft, legs: Sequence[LegPlan]) -> bool:
    return all(leg.distance_km <= aircraft.range_km for leg in legs)


def _aircraft_fields(aircraft: Aircraft) -> dict:
    return {
        "jet_id": aircraft.id,
        "model": aircraft.name,
        "category": aircraft.category,
        "seats": aircraft.seats,
        "operator": aircraft.operator,
        "logo": aircraft.logo_url,
        "image": aircraft.image_url,
        "home_base": aircraft.homebase,
    }


def unpriced_quote(
    aircraft: Aircraft,
    distance_km: float,
    trip_type: TripType,
    warning: str,
    days_between: Optional[int] = None,
) -> QuoteOut:
    return QuoteOut(
        **_aircraft_fields(aircraft),
        trip_type=trip_type.value,
        distance_km=round_price(distance_km),
        days_between=days_between if trip_type == TripType.ROUNDTRIP else None,
        warning=warning,
    )


def _rounded(breakdown: dict) -> dict:
    return {k: round_price(v) for k, v in breakdown.items()}


def price_one_way(aircraft: Aircraft, distance_km: float, schedule: Optional[Schedule] = None) -> QuoteOut:
    reason = unpriceable_reason(aircraft)
    if reason:
        return unpriced_quote(aircraft, distance_km, TripType.ONEWAY, reason)

    hours = flight_time_hours(distance_km, speed_kmh(aircraft))
    outbound = aircraft.hourly_rate * hours * 2
    breakdown = {"outbound": outbound}

    departure_time = schedule.departure_time if schedule else None
    return QuoteOut(
        **_aircraft_fields(aircraft),
        trip_type=TripType.ONEWAY.value,
        distance_km=round_price(distance_km),
        flight_time_h=round(hours, 2),
        flight_time_pretty=format_flight_time(hours),
        outbound_price=round_price(outbound),
        total_price=round_price(sum(breakdown.values())),
        price_breakdown=_rounded(breakdown),
        departure_time=format_clock(departure_time) if departure_time else None,
        arrival_time=format_clock(add_hours(departure_time, hours)) if departure_time else None,
    )


def price_round_trip(
    aircraft: Aircraft,
    distance_km: float,
    schedule: Schedule,
    config: Optional[PricingConfig] = None,
) -> QuoteOut:
    config = config or PricingConfig()
    days = schedule.days_between or 0

    reason = unpriceable_reason(aircraft)
    if reason:
        return unpriced_quote(aircraft, distance_km, TripType.ROUNDTRIP, reason, days)

    hours = flight_time_hours(distance_km, speed_kmh(aircraft))
    outbound = aircraft.hourly_rate * hours * 2

    if days <= 1:
        breakdown = {
            "outbound": outbound,
            "same_day_premium": outbound * config.same_day_premium,
        }
        if days == 1:
            breakdown["overnight_fee"] = config.overnight_fee
        return_cost = breakdown["same_day_premium"]
        repositioning = breakdown.get("overnight_fee", 0.0)
    else:
        repositioning = _repositioning_surcharge(aircraft, hours, schedule, config)
        breakdown = {
            "outbound": outbound,
            "return": outbound,
            "repositioning": repositioning,
        }
        return_cost = outbound

    departure_time = schedule.departure_time
    arrival_time = add_hours(departure_time, hours) if departure_time else None
    return_departure = schedule.return_time
    if return_departure is None and days == 0 and arrival_time is not None:
        return_departure = add_hours(arrival_time, config.return_buffer_hours)
    return_arrival = add_hours(return_departure, hours) if return_departure else None

    return QuoteOut(
        **_aircraft_fields(aircraft),
        trip_type=TripType.ROUNDTRIP.value,
        distance_km=round_price(distance_km),
        flight_time_h=round(hours, 2),
        flight_time_pretty=format_flight_time(hours),
        outbound_price=round_price(outbound),
        return_price=round_price(return_cost),
        repositioning_cost=round_price(repositioning),
        total_price=round_price(sum(breakdown.values())),
        price_breakdown=_rounded(breakdown),
        days_between=days,
        departure_time=format_clock(departure_time) if departure_time else None,
        arrival_time=format_clock(arrival_time) if arrival_time else None,
        return_departure_time=format_clock(return_departure) if return_departure else None,
        return_arrival_time=format_clock(return_arrival) if return_arrival else None,
    )


def _repositioning_surcharge(
    aircraft: Aircraft,
    hours: float,
    schedule: Schedule,
    config: PricingConfig,
) -> float:
    surcharge = aircraft.hourly_rate * config.repositioning_hours
    if not config.charge_parking:
        return surcharge
    start = combine(schedule.departure_date, schedule.departure_time)
    end = combine(schedule.return_date, schedule.return_time)
    if start is None or end is None:
        return surcharge
    wait_hours = max(hours_between(start + timedelta(hours=hours), end), 0.0)
    return surcharge + aircraft.parking_cost_per_day * math.ceil(wait_hours / 24)


def waiting_cost(aircraft: Aircraft, gap_hours: float, config: PricingConfig) -> float:
    """Crew stand-by between two legs, free up to the threshold"""
    if gap_hours <= config.waiting_threshold_hours:
        return 0.0
    return aircraft.hourly_rate * config.waiting_rate_factor * gap_hours


def _gap_hours(previous: LegPlan, previous_hours: float, current: LegPlan) -> Optional[float]:
    if previous.leg_date is not None and current.leg_date is not None:
        start = combine(previous.leg_date, previous.leg_time) + timedelta(hours=previous_hours)
        return hours_between(start, combine(current.leg_date, current.leg_time))
    if previous.leg_date is None and current.leg_date is None and previous.leg_time and current.leg_time:
        # undated legs with times are taken to fly the same day
        reference = date(2000, 1, 1)
        start = combine(reference, previous.leg_time) + timedelta(hours=previous_hours)
        return hours_between(start, combine(reference, current.leg_time))
    return None


def price_multi_leg(
    aircraft: Aircraft,
    legs: Sequence[LegPlan],
    return_to_base_km: float,
    config: Optional[PricingConfig] = None,
) -> QuoteOut:
    config = config or PricingConfig()
    total_km = sum(leg.distance_km for leg in legs)

    reason = unpriceable_reason(aircraft)
    if reason:
        quote = unpriced_quote(aircraft, total_km, TripType.MULTILEG, reason)
        return quote.model_copy(update={"can_complete_tour": True})

    kmh = speed_kmh(aircraft)
    leg_quotes: List[LegQuote] = []
    legs_cost = 0.0
    waiting_total = 0.0
    total_hours = 0.0
    previous: Optional[LegPlan] = None
    previous_hours = 0.0

    for leg in legs:
        hours = flight_time_hours(leg.distance_km, kmh)
        cost = aircraft.hourly_rate * hours

        wait = 0.0
        if previous is not None:
            gap = _gap_hours(previous, previous_hours, leg)
            if gap is not None:
                wait = waiting_cost(aircraft, gap, config)

        leg_quotes.append(LegQuote(
            sequence=leg.sequence,
            from_icao=leg.from_code,
            to_icao=leg.to_code,
            distance_km=round_price(leg.distance_km),
            flight_time_h=round(hours, 2),
            flight_time_pretty=format_flight_time(hours),
            date=leg.leg_date.isoformat() if leg.leg_date else None,
            departure_time=format_clock(leg.leg_time) if leg.leg_time else None,
            arrival_time=format_clock(add_hours(leg.leg_time, hours)) if leg.leg_time else None,
            price=round_price(cost),
            waiting_cost=round_price(wait),
        ))
        legs_cost += cost
        waiting_total += wait
        total_hours += hours
        previous, previous_hours = leg, hours

    repositioning = aircraft.hourly_rate * flight_time_hours(return_to_base_km, kmh)
    breakdown = {
        "legs": legs_cost,
        "waiting": waiting_total,
        "repositioning": repositioning,
    }

    return QuoteOut(
        **_aircraft_fields(aircraft),
        trip_type=TripType.MULTILEG.value,
        distance_km=round_price(total_km),
        flight_time_h=round(total_hours, 2),
        flight_time_pretty=format_flight_time(total_hours),
        repositioning_cost=round_price(repositioning),
        waiting_cost=round_price(waiting_total),
        total_price=round_price(sum(breakdown.values())),
        price_breakdown=_rounded(breakdown),
        legs=leg_quotes,
        can_complete_tour=True,
    )


def price(
    aircraft: Aircraft,
    distance_km: float,
    trip_type: TripType,
    schedule: Optional[Schedule] = None,
    config: Optional[PricingConfig] = None,
) -> QuoteOut:
    """Price a point-to-point trip. Multi-leg tours go through price_multi_leg."""
    if trip_type == TripType.ROUNDTRIP:
        return price_round_trip(aircraft, distance_km, schedule or Schedule(), config)
    if trip_type == TripType.ONEWAY:
        return price_one_way(aircraft, distance_km, schedule)
    raise ValueError(f"Use price_multi_leg for {trip_type} trips")
