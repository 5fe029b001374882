"""Quote orchestration: validate, resolve, hydrate, filter, price, rank."""
import asyncio
import logging
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from jetquote.core.config import settings
from jetquote.core.enums import TripType
from jetquote.core.exceptions import ResolutionFailure
from jetquote.core.metrics import quotes_generated, unpriceable_aircraft
from jetquote.schemas.aircraft import Aircraft
from jetquote.schemas.airport import AirportRecord, GeoPoint, ResolvedLocation
from jetquote.schemas.quote import LegEcho, QuoteInput, QuoteOut, QuoteRequest, QuoteResponse
from jetquote.services.fleet import nearby
from jetquote.services.geo import distance_km
from jetquote.services.pricing import (
    LegPlan,
    PricingConfig,
    Schedule,
    can_complete_tour,
    price,
    price_multi_leg,
    round_price,
    unpriced_quote,
)
from jetquote.services.ranking import rank
from jetquote.services.resolver import LocationResolver
from jetquote.services.stores import AirportDirectory, FleetStore
from jetquote.services.validation import ValidatedRequest, validate_request
from jetquote.utils.dates import format_clock

logger = logging.getLogger(__name__)


def _distance(a: AirportRecord, b: AirportRecord) -> float:
    return distance_km(a.latitude, a.longitude, b.latitude, b.longitude)


def legs_summary(legs: Sequence[LegPlan]) -> str:
    return " -> ".join([legs[0].from_code] + [leg.to_code for leg in legs]) if legs else ""


class QuoteService:
    def __init__(
        self,
        directory: AirportDirectory,
        fleet: FleetStore,
        resolver: LocationResolver,
        config: Optional[PricingConfig] = None,
        radius_km: Optional[float] = None,
        today: Optional[Callable[[], date]] = None,
        default_pax: Optional[int] = None,
    ):
        self.directory = directory
        self.fleet = fleet
        self.resolver = resolver
        self.config = config or PricingConfig.from_settings()
        self.radius_km = settings.FLEET_RADIUS_KM if radius_km is None else radius_km
        self._today = today or date.today
        self.default_pax = settings.DEFAULT_PAX if default_pax is None else default_pax

    async def quote(self, req: QuoteRequest) -> QuoteResponse:
        checked = validate_request(req, self._today(), self.default_pax)
        if checked.trip_type == TripType.MULTILEG:
            response = await self._quote_multi_leg(checked)
        else:
            response = await self._quote_point_to_point(checked)

        quotes_generated.labels(trip_type=checked.trip_type.value).inc(len(response.jets))
        for q in response.jets:
            if q.total_price is None:
                unpriceable_aircraft.labels(reason=q.warning or "unknown").inc()
        return response

    async def _quote_point_to_point(self, checked: ValidatedRequest) -> QuoteResponse:
        logger.info(f"Resolving airports: {checked.departure}, {checked.arrival}")
        dep_loc, arr_loc = await asyncio.gather(
            self.resolver.resolve(checked.departure, checked.departure_country),
            self.resolver.resolve(checked.arrival, checked.arrival_country),
        )
        if dep_loc is None or arr_loc is None:
            raise ResolutionFailure({
                "departure": checked.departure,
                "arrival": checked.arrival,
                "departure_code": dep_loc.code if dep_loc else None,
                "arrival_code": arr_loc.code if arr_loc else None,
            })
        logger.info(f"Resolved {checked.departure} -> {dep_loc.code}, {checked.arrival} -> {arr_loc.code}")

        airports = await self.directory.get_many([dep_loc.code, arr_loc.code])
        dep = airports.get(dep_loc.code)
        arr = airports.get(arr_loc.code)
        if dep is None or arr is None:
            raise ResolutionFailure({
                "departure": checked.departure,
                "arrival": checked.arrival,
                "departure_code": dep_loc.code,
                "arrival_code": arr_loc.code,
                "found": sorted(airports),
            })

        candidates = await self._nearby_fleet(dep, airports)
        distance = _distance(dep, arr)
        schedule = Schedule(
            departure_date=checked.departure_date,
            departure_time=checked.departure_time,
            return_date=checked.return_date,
            return_time=checked.return_time,
        )

        quotes = []
        for jet in candidates:
            quotes.append(self._isolated(
                jet, distance, checked.trip_type,
                lambda jet=jet: price(jet, distance, checked.trip_type, schedule, self.config),
            ))

        return QuoteResponse(
            input=QuoteInput(
                departure=checked.departure,
                arrival=checked.arrival,
                departure_icao=dep.code,
                departure_name=dep.name,
                departure_confidence=dep_loc.confidence,
                arrival_icao=arr.code,
                arrival_name=arr.name,
                arrival_confidence=arr_loc.confidence,
                date=checked.departure_date.isoformat() if checked.departure_date else None,
                return_date=checked.return_date.isoformat() if checked.return_date else None,
                trip_type=checked.trip_type.value,
                time=format_clock(checked.departure_time) if checked.departure_time else None,
                return_time=format_clock(checked.return_time) if checked.return_time else None,
                pax=checked.pax,
            ),
            jets=rank(quotes),
        )

    async def _quote_multi_leg(self, checked: ValidatedRequest) -> QuoteResponse:
        endpoints: List[Tuple[str, str]] = []
        for leg in checked.legs:
            endpoints.append((f"legs[{leg.sequence}].from", leg.origin))
            endpoints.append((f"legs[{leg.sequence}].to", leg.destination))

        texts = list(dict.fromkeys(text for _, text in endpoints))
        logger.info(f"Resolving {len(texts)} multileg endpoints")
        resolved = await asyncio.gather(*(self.resolver.resolve(text) for text in texts))
        by_text: Dict[str, Optional[ResolvedLocation]] = dict(zip(texts, resolved))

        missing = {label: text for label, text in endpoints if by_text[text] is None}
        if missing:
            raise ResolutionFailure(missing)

        airports = await self.directory.get_many({loc.code for loc in by_text.values()})
        unknown = {
            label: by_text[text].code
            for label, text in endpoints
            if by_text[text].code not in airports
        }
        if unknown:
            raise ResolutionFailure(unknown)

        plans: List[LegPlan] = []
        echoes: List[LegEcho] = []
        for leg in checked.legs:
            origin = airports[by_text[leg.origin].code]
            destination = airports[by_text[leg.destination].code]
            leg_km = _distance(origin, destination)
            plans.append(LegPlan(
                sequence=leg.sequence,
                from_code=origin.code,
                to_code=destination.code,
                distance_km=leg_km,
                leg_date=leg.leg_date,
                leg_time=leg.leg_time,
            ))
            echoes.append(LegEcho(
                sequence=leg.sequence,
                from_=leg.origin,
                to=leg.destination,
                from_icao=origin.code,
                from_name=origin.name,
                to_icao=destination.code,
                to_name=destination.name,
                distance_km=round_price(leg_km),
                date=leg.leg_date.isoformat() if leg.leg_date else None,
                time=format_clock(leg.leg_time) if leg.leg_time else None,
            ))

        logger.info(f"Pricing tour {legs_summary(plans)}")
        first = airports[plans[0].from_code]
        last = airports[plans[-1].to_code]
        candidates = await self._nearby_fleet(first, airports)
        total_km = sum(p.distance_km for p in plans)

        quotes = []
        for jet in candidates:
            if not can_complete_tour(jet, plans):
                logger.info(f"Jet {jet.id} excluded: range {jet.range_km} km too short for the tour")
                continue
            home = airports[jet.home_base_code]
            quotes.append(self._isolated(
                jet, total_km, TripType.MULTILEG,
                lambda jet=jet, home=home: price_multi_leg(jet, plans, _distance(last, home), self.config),
            ))

        first_loc = by_text[checked.legs[0].origin]
        last_loc = by_text[checked.legs[-1].destination]
        return QuoteResponse(
            input=QuoteInput(
                departure=checked.departure,
                arrival=checked.arrival,
                departure_icao=first.code,
                departure_name=first.name,
                departure_confidence=first_loc.confidence,
                arrival_icao=last.code,
                arrival_name=last.name,
                arrival_confidence=last_loc.confidence,
                date=plans[0].leg_date.isoformat() if plans[0].leg_date else None,
                trip_type=checked.trip_type.value,
                time=format_clock(plans[0].leg_time) if plans[0].leg_time else None,
                pax=checked.pax,
                legs=echoes,
            ),
            jets=rank(quotes),
        )

    async def _nearby_fleet(
        self,
        departure: AirportRecord,
        airports: Dict[str, AirportRecord],
    ) -> List[Aircraft]:
        """Fetch the fleet and keep aircraft based near ``departure``.

        Home bases are hydrated in one batch lookup and added to ``airports``.
        """
        fleet = await self.fleet.list_aircraft()
        home_codes = {jet.home_base_code for jet in fleet if jet.home_base_code}
        to_fetch = home_codes - set(airports)
        if to_fetch:
            airports.update(await self.directory.get_many(to_fetch))

        index = {code: record.point for code, record in airports.items()}
        selected = nearby(fleet, GeoPoint(lat=departure.latitude, lon=departure.longitude), index, self.radius_km)
        logger.info(f"{len(selected)} of {len(fleet)} jets based within {self.radius_km} km of {departure.code}")
        return selected

    def _isolated(
        self,
        jet: Aircraft,
        distance: float,
        trip_type: TripType,
        compute: Callable[[], QuoteOut],
    ) -> QuoteOut:
        try:
            return compute()
        except Exception as e:
            logger.exception(f"Pricing failed for jet {jet.id}: {e}")
            return unpriced_quote(jet, distance, trip_type, f"Pricing failed: {e}")
