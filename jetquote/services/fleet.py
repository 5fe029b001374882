import logging
from typing import Callable, Iterable, List, Mapping

from jetquote.schemas.aircraft import Aircraft
from jetquote.schemas.airport import GeoPoint
from jetquote.services.geo import distance_km

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = 500.0


def nearby(
    aircraft: Iterable[Aircraft],
    departure: GeoPoint,
    airport_index: Mapping[str, GeoPoint],
    radius_km: float = DEFAULT_RADIUS_KM,
    distance: Callable[[float, float, float, float], float] = distance_km,
) -> List[Aircraft]:
    """Aircraft whose home base lies within ``radius_km`` of the departure.

    Aircraft with a missing or unknown home base are dropped.
    """
    selected = []
    for jet in aircraft:
        code = jet.home_base_code
        base = airport_index.get(code) if code else None
        if base is None:
            logger.debug(f"Skipping jet {jet.id}: home base {jet.homebase!r} not in directory")
            continue
        if distance(departure.lat, departure.lon, base.lat, base.lon) <= radius_km:
            selected.append(jet)
    return selected
