import pytest
import asyncio
from datetime import date
from httpx import AsyncClient, ASGITransport

from jetquote.main import app
from jetquote.api.deps import get_airport_directory, get_fleet_store, get_resolution_cache
from jetquote.core.cache import TTLCache
from jetquote.core.enums import AirportClass
from jetquote.core.exceptions import DataUnavailable
from jetquote.schemas.aircraft import Aircraft
from jetquote.schemas.airport import AirportRecord

FIXED_TODAY = date(2026, 10, 18)


class InMemoryAirportDirectory:
    """AirportDirectory over a list of records. Counts every query it serves."""

    def __init__(self, airports, fail=False):
        self.airports = {a.code: a for a in airports}
        self.fail = fail
        self.search_calls = []
        self.search_any_calls = []
        self.get_many_calls = []

    @property
    def query_count(self):
        return len(self.search_calls) + len(self.search_any_calls) + len(self.get_many_calls)

    def _check(self, operation):
        if self.fail:
            raise DataUnavailable("airport directory", operation, ConnectionError("connection refused"))

    async def search(self, term, classification, limit):
        self.search_calls.append((term, AirportClass(classification)))
        self._check("search")
        needle = term.casefold()
        found = [
            a for a in sorted(self.airports.values(), key=lambda a: a.name)
            if a.classification == AirportClass(classification).value
            and (needle in (a.municipality or "").casefold() or needle in a.name.casefold())
        ]
        return found[:limit]

    async def search_any(self, term, limit):
        self.search_any_calls.append(term)
        self._check("search_any")
        needle = term.casefold()
        order = {c.value: i for i, c in enumerate(AirportClass)}
        found = [
            a for a in self.airports.values()
            if any(needle in (field or "").casefold()
                   for field in (a.name, a.municipality, a.code, a.region, a.country))
        ]
        found.sort(key=lambda a: (order.get(a.classification, 3), a.name))
        return found[:limit]

    async def get_many(self, codes):
        codes = [c.strip().upper() for c in codes if c and c.strip()]
        self.get_many_calls.append(sorted(codes))
        self._check("get_many")
        return {c: self.airports[c] for c in codes if c in self.airports}


class InMemoryFleetStore:
    def __init__(self, aircraft, fail=False):
        self.aircraft = list(aircraft)
        self.fail = fail
        self.calls = 0

    async def list_aircraft(self):
        self.calls += 1
        if self.fail:
            raise DataUnavailable("fleet store", "list_aircraft", TimeoutError())
        return list(self.aircraft)


def _airport(code, name, municipality, classification, lat, lon, country, region=None):
    return AirportRecord(
        code=code,
        name=name,
        municipality=municipality,
        region=region,
        country=country,
        classification=classification.value,
        latitude=lat,
        longitude=lon,
    )


@pytest.fixture
def airports():
    return [
        _airport("LIML", "Linate Airport", "Milano", AirportClass.LARGE, 45.4451, 9.2767, "IT", "IT-25"),
        _airport("LIMC", "Milano Malpensa Airport", "Ferno", AirportClass.LARGE, 45.6306, 8.7281, "IT", "IT-25"),
        _airport("LIME", "Orio al Serio International Airport", "Bergamo", AirportClass.LARGE, 45.6739, 9.7042, "IT", "IT-25"),
        _airport("LIRA", "Ciampino G. B. Pastine International Airport", "Roma", AirportClass.MEDIUM, 41.7994, 12.5949, "IT", "IT-62"),
        _airport("LFPB", "Paris-Le Bourget Airport", "Paris", AirportClass.MEDIUM, 48.9694, 2.4414, "FR", "FR-IDF"),
        _airport("LFMN", "Nice Côte d'Azur Airport", "Nice", AirportClass.LARGE, 43.6584, 7.2159, "FR", "FR-PAC"),
        _airport("LSZH", "Zürich Airport", "Zürich", AirportClass.LARGE, 47.4647, 8.5492, "CH", "CH-ZH"),
        _airport("EGLF", "Farnborough Airport", "Farnborough", AirportClass.MEDIUM, 51.2758, -0.7763, "GB", "GB-ENG"),
    ]


@pytest.fixture
def fleet():
    return [
        Aircraft(id=1, name="Citation XLS+", category="Midsize", seats=9, operator="Alpha Air",
                 homebase="LIML", speed_knots=450, hourly_rate=3000),
        Aircraft(id=2, name="Phenom 300", category="Light", seats=7, operator="Orobica Jet",
                 homebase="lime", speed=420, hourly_rate=2500),
        Aircraft(id=3, name="Legacy 600", category="Heavy", seats=13, operator="Helvetic Charter",
                 homebase="LSZH", hourly_rate=5200),
        Aircraft(id=4, name="Global 6000", category="Ultra Long Range", seats=14, operator="Thames Aviation",
                 homebase="EGLF", speed_knots=488, hourly_rate=8000),
        Aircraft(id=5, name="Learjet 45", category="Midsize", seats=8, operator="Ghost Air",
                 homebase="ZZZZ", speed_knots=440, hourly_rate=2800),
        Aircraft(id=6, name="Citation Mustang", category="Very Light", seats=4, operator="Alpha Air",
                 homebase="LIML", speed_knots=340, hourly_rate=1800, range_km=600),
    ]


@pytest.fixture
def today():
    return FIXED_TODAY


@pytest.fixture
def directory(airports):
    return InMemoryAirportDirectory(airports)


@pytest.fixture
def fleet_store(fleet):
    return InMemoryFleetStore(fleet)


@pytest.fixture
def resolution_cache():
    return TTLCache(3600)


@pytest.fixture
async def test_client(directory, fleet_store, resolution_cache):
    app.dependency_overrides[get_airport_directory] = lambda: directory
    app.dependency_overrides[get_fleet_store] = lambda: fleet_store
    app.dependency_overrides[get_resolution_cache] = lambda: resolution_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "resolver: marks tests related to airport resolution"
    )
    config.addinivalue_line(
        "markers", "validation: marks tests related to request validation"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to handle asyncio tests
    """
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)
