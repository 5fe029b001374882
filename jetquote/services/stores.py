"""Airport directory and fleet store access.

Every query opens its own session, runs under a timeout and is attempted a
bounded number of times before ``DataUnavailable`` is raised.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Protocol, TypeVar

from sqlalchemy import case, or_, select
from sqlalchemy.ext.asyncio import async_sessionmaker

from jetquote.core.config import settings
from jetquote.core.enums import AirportClass
from jetquote.core.exceptions import DataUnavailable
from jetquote.core.metrics import track_db_operation
from jetquote.models.airport import Airport
from jetquote.models.jet import Jet
from jetquote.schemas.aircraft import Aircraft
from jetquote.schemas.airport import AirportRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AirportDirectory(Protocol):
    async def search(self, term: str, classification: AirportClass, limit: int) -> List[AirportRecord]:
        """Substring match on municipality or name within one classification."""
        ...

    async def search_any(self, term: str, limit: int) -> List[AirportRecord]:
        """Substring match on any text field, larger airports first."""
        ...

    async def get_many(self, codes: Iterable[str]) -> Dict[str, AirportRecord]:
        ...


class FleetStore(Protocol):
    async def list_aircraft(self) -> List[Aircraft]:
        ...


async def run_bounded(
    query: Callable[[], Awaitable[T]],
    store: str,
    operation: str,
    timeout: Optional[float] = None,
    attempts: Optional[int] = None,
) -> T:
    if timeout is None:
        timeout = settings.STORE_TIMEOUT
    if attempts is None:
        attempts = settings.STORE_QUERY_ATTEMPTS

    last_error: Optional[BaseException] = None
    for attempt in range(1, attempts + 1):
        try:
            return await asyncio.wait_for(query(), timeout=timeout)
        except asyncio.TimeoutError as e:
            last_error = e
            logger.warning(f"{store} {operation} timed out after {timeout}s (attempt {attempt}/{attempts})")
        except Exception as e:
            last_error = e
            logger.warning(f"{store} {operation} failed (attempt {attempt}/{attempts}): {e}")

    logger.error(f"{store} {operation} failed after {attempts} attempts")
    raise DataUnavailable(store, operation, last_error)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _size_order():
    return case(
        (Airport.type == AirportClass.LARGE.value, 0),
        (Airport.type == AirportClass.MEDIUM.value, 1),
        (Airport.type == AirportClass.SMALL.value, 2),
        else_=3,
    )


def to_record(row: Airport) -> AirportRecord:
    return AirportRecord(
        code=row.ident.strip().upper(),
        name=row.name,
        municipality=row.municipality,
        region=row.iso_region,
        country=row.iso_country,
        classification=row.type,
        latitude=float(row.latitude),
        longitude=float(row.longitude),
    )


class SqlAirportDirectory:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def search(self, term: str, classification: AirportClass, limit: int) -> List[AirportRecord]:
        pattern = _like_pattern(term)
        stmt = (
            select(Airport)
            .where(
                Airport.type == AirportClass(classification).value,
                or_(
                    Airport.municipality.ilike(pattern, escape="\\"),
                    Airport.name.ilike(pattern, escape="\\"),
                ),
            )
            .order_by(Airport.name)
            .limit(limit)
        )
        return await run_bounded(lambda: self._fetch(stmt), "airport directory", "search")

    async def search_any(self, term: str, limit: int) -> List[AirportRecord]:
        pattern = _like_pattern(term)
        stmt = (
            select(Airport)
            .where(
                or_(
                    Airport.name.ilike(pattern, escape="\\"),
                    Airport.municipality.ilike(pattern, escape="\\"),
                    Airport.ident.ilike(pattern, escape="\\"),
                    Airport.iso_region.ilike(pattern, escape="\\"),
                    Airport.iso_country.ilike(pattern, escape="\\"),
                )
            )
            .order_by(_size_order(), Airport.name)
            .limit(limit)
        )
        return await run_bounded(lambda: self._fetch(stmt), "airport directory", "search_any")

    async def get_many(self, codes: Iterable[str]) -> Dict[str, AirportRecord]:
        wanted = sorted({c.strip().upper() for c in codes if c and c.strip()})
        if not wanted:
            return {}
        stmt = select(Airport).where(Airport.ident.in_(wanted))
        records = await run_bounded(lambda: self._fetch(stmt), "airport directory", "get_many")
        return {r.code: r for r in records}

    @track_db_operation("select", "airports")
    async def _fetch(self, stmt) -> List[AirportRecord]:
        async with self._session_factory() as session:
            res = await session.execute(stmt)
            return [to_record(row) for row in res.scalars().all()]


class SqlFleetStore:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def list_aircraft(self) -> List[Aircraft]:
        return await run_bounded(self._fetch_all, "fleet store", "list_aircraft")

    @track_db_operation("select", "jets")
    async def _fetch_all(self) -> List[Aircraft]:
        async with self._session_factory() as session:
            res = await session.execute(select(Jet).order_by(Jet.id))
            return [Aircraft.model_validate(jet) for jet in res.scalars().all()]
