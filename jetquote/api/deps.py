from fastapi import Depends

from jetquote.core.cache import TTLCache
from jetquote.core.config import settings
from jetquote.db.session import AsyncSessionLocal
from jetquote.services.quoting import QuoteService
from jetquote.services.resolver import LocationResolver
from jetquote.services.stores import AirportDirectory, FleetStore, SqlAirportDirectory, SqlFleetStore

# Shared by every request for the lifetime of the process
resolution_cache = TTLCache(settings.RESOLUTION_CACHE_TTL, maxsize=settings.RESOLUTION_CACHE_MAXSIZE)


def get_resolution_cache() -> TTLCache:
    return resolution_cache


def get_airport_directory() -> AirportDirectory:
    return SqlAirportDirectory(AsyncSessionLocal)


def get_fleet_store() -> FleetStore:
    return SqlFleetStore(AsyncSessionLocal)


def get_resolver(
    directory: AirportDirectory = Depends(get_airport_directory),
    cache: TTLCache = Depends(get_resolution_cache),
) -> LocationResolver:
    return LocationResolver(
        directory,
        cache,
        candidate_limit=settings.RESOLUTION_CANDIDATE_LIMIT,
        max_concurrent_queries=settings.RESOLUTION_MAX_CONCURRENCY,
    )


def get_quote_service(
    directory: AirportDirectory = Depends(get_airport_directory),
    fleet: FleetStore = Depends(get_fleet_store),
    resolver: LocationResolver = Depends(get_resolver),
) -> QuoteService:
    return QuoteService(directory, fleet, resolver)
