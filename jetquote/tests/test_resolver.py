import asyncio
import pytest
from jetquote.core.enums import AirportClass, MatchSource
from jetquote.services.resolver import LocationResolver, score_candidate


@pytest.fixture
def resolver(directory, resolution_cache):
    return LocationResolver(directory, resolution_cache, candidate_limit=5)


@pytest.mark.resolver
class TestCodeInput:

    @pytest.mark.asyncio
    async def test_icao_code_needs_no_query(self, resolver, directory):
        loc = await resolver.resolve("LIML")
        assert loc.code == "LIML"
        assert loc.confidence == 100
        assert loc.matched_by == MatchSource.CODE
        assert directory.query_count == 0

    @pytest.mark.asyncio
    async def test_surrounding_whitespace_is_ignored(self, resolver, directory):
        loc = await resolver.resolve("  LFPB ")
        assert loc.code == "LFPB"
        assert directory.query_count == 0

    @pytest.mark.asyncio
    async def test_lowercase_code_is_searched(self, resolver, directory):
        loc = await resolver.resolve("lira")
        assert loc.code == "LIRA"
        assert loc.matched_by == MatchSource.FALLBACK
        assert directory.query_count > 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   "])
    async def test_blank_input(self, resolver, directory, text):
        assert await resolver.resolve(text) is None
        assert directory.query_count == 0


@pytest.mark.resolver
class TestDirectorySearch:

    @pytest.mark.asyncio
    async def test_municipality_match_on_large_airport(self, resolver):
        loc = await resolver.resolve("Milano")
        assert loc.code == "LIML"
        assert loc.score == 120
        assert loc.confidence == 100
        assert loc.matched_by == MatchSource.DIRECTORY
        assert loc.name == "Linate Airport"

    @pytest.mark.asyncio
    async def test_queries_each_class(self, resolver, directory):
        await resolver.resolve("Milano")
        assert {cls for _, cls in directory.search_calls} == set(AirportClass)
        assert directory.search_any_calls == []

    @pytest.mark.asyncio
    async def test_medium_airport_with_name_bonus(self, resolver):
        loc = await resolver.resolve("Paris")
        assert loc.code == "LFPB"
        # medium 80 + municipality 20 + name 15
        assert loc.score == 115

    @pytest.mark.asyncio
    async def test_country_hint_bonus(self, resolver):
        loc = await resolver.resolve("Paris", country_hint="fr")
        assert loc.code == "LFPB"
        assert loc.score == 125

    @pytest.mark.asyncio
    async def test_accented_input(self, resolver, directory):
        loc = await resolver.resolve("Zürich")
        assert loc.code == "LSZH"
        assert loc.score == 135
        # folded term first, original spelling as a retry
        assert {term for term, _ in directory.search_calls} == {"zurich", "Zürich"}

    @pytest.mark.asyncio
    async def test_case_insensitive(self, resolver):
        loc = await resolver.resolve("nice")
        assert loc.code == "LFMN"


@pytest.mark.resolver
class TestFallbacks:

    @pytest.mark.asyncio
    async def test_extended_search(self, resolver, directory):
        loc = await resolver.resolve("FR-IDF")
        assert loc.code == "LFPB"
        assert loc.confidence == 40
        assert loc.matched_by == MatchSource.FALLBACK
        assert directory.search_any_calls

    @pytest.mark.asyncio
    async def test_alias_table(self, resolver):
        loc = await resolver.resolve("Courchevel")
        assert loc.code == "LFLJ"
        assert loc.confidence == 30
        assert loc.matched_by == MatchSource.ALIAS

    @pytest.mark.asyncio
    async def test_no_match(self, resolver):
        assert await resolver.resolve("Atlantis") is None

    @pytest.mark.asyncio
    async def test_unavailable_directory_falls_through_to_aliases(self, resolver, directory):
        directory.fail = True
        loc = await resolver.resolve("Milano")
        assert loc.code == "LIML"
        assert loc.matched_by == MatchSource.ALIAS

    @pytest.mark.asyncio
    async def test_outage_answer_is_not_cached(self, resolver, directory, resolution_cache):
        directory.fail = True
        during = await resolver.resolve("Milano")
        assert during.matched_by == MatchSource.ALIAS
        assert len(resolution_cache) == 0

        directory.fail = False
        after = await resolver.resolve("Milano")
        assert after.matched_by == MatchSource.DIRECTORY
        assert after.score == 120
        assert len(resolution_cache) == 1


@pytest.mark.resolver
class TestResolutionCache:

    @pytest.mark.asyncio
    async def test_second_lookup_hits_cache(self, resolver, directory):
        first = await resolver.resolve("Milano")
        queries = directory.query_count
        second = await resolver.resolve("  milano ")
        assert second == first
        assert directory.query_count == queries

    @pytest.mark.asyncio
    async def test_country_hint_is_part_of_key(self, resolver, directory):
        await resolver.resolve("Paris")
        queries = directory.query_count
        loc = await resolver.resolve("Paris", country_hint="FR")
        assert loc.score == 125
        assert directory.query_count > queries

    @pytest.mark.asyncio
    async def test_misses_are_not_cached(self, resolver, resolution_cache):
        await resolver.resolve("Atlantis")
        assert len(resolution_cache) == 0


@pytest.mark.resolver
class TestScoring:

    def test_exact_municipality(self, airports):
        linate = next(a for a in airports if a.code == "LIML")
        assert score_candidate(linate, "milano") == 120

    def test_name_only(self, airports):
        malpensa = next(a for a in airports if a.code == "LIMC")
        assert score_candidate(malpensa, "milano") == 115

    def test_country_hint_mismatch(self, airports):
        linate = next(a for a in airports if a.code == "LIML")
        assert score_candidate(linate, "milano", "FR") == 120


class SlowDirectory:
    """Wraps a directory and records how many searches run at once"""

    def __init__(self, inner):
        self.inner = inner
        self.in_flight = 0
        self.peak = 0

    async def _tracked(self, call):
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            return await call
        finally:
            self.in_flight -= 1

    async def search(self, term, classification, limit):
        return await self._tracked(self.inner.search(term, classification, limit))

    async def search_any(self, term, limit):
        return await self._tracked(self.inner.search_any(term, limit))

    async def get_many(self, codes):
        return await self.inner.get_many(codes)


@pytest.mark.resolver
class TestQueryConcurrency:

    @pytest.mark.asyncio
    async def test_searches_share_a_bounded_pool(self, directory, resolution_cache):
        slow = SlowDirectory(directory)
        resolver = LocationResolver(slow, resolution_cache, max_concurrent_queries=2)

        dep, arr = await asyncio.gather(resolver.resolve("Zürich"), resolver.resolve("Paris"))

        assert (dep.code, arr.code) == ("LSZH", "LFPB")
        # 6 tier queries for Zürich plus 3 for Paris
        assert len(directory.search_calls) == 9
        assert slow.peak == 2
