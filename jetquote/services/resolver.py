"""
Free-text location to airport resolution.

Tiers are tried in order and the first one that yields a match wins:

1. a 4-letter uppercase ICAO code is taken as-is (confidence 100)
2. cached result for the normalized text
3. directory search per airport class (large, medium, small), scored
4. unrestricted search over every text field (confidence 40)
5. static alias table (confidence 30)
"""
import asyncio
import logging
import re
from typing import List, Optional, Tuple

from jetquote.core.cache import TTLCache
from jetquote.core.enums import AirportClass, CLASS_WEIGHT, MatchSource
from jetquote.core.exceptions import DataUnavailable
from jetquote.core.metrics import airport_resolutions, cache_hits, cache_misses
from jetquote.schemas.airport import AirportRecord, ResolvedLocation
from jetquote.services.aliases import lookup_alias
from jetquote.services.stores import AirportDirectory
from jetquote.utils.text import normalize_text

logger = logging.getLogger(__name__)

ICAO_PATTERN = re.compile(r"^[A-Z]{4}$")

EXACT_MUNICIPALITY_BONUS = 20
NAME_CONTAINS_BONUS = 15
COUNTRY_HINT_BONUS = 10
FALLBACK_CONFIDENCE = 40
ALIAS_CONFIDENCE = 30

CACHE_NAME = "airport_resolution"


def score_candidate(
    airport: AirportRecord,
    normalized: str,
    country_hint: Optional[str] = None,
) -> int:
    try:
        score = CLASS_WEIGHT[AirportClass(airport.classification)]
    except ValueError:
        score = 0
    if airport.municipality and normalize_text(airport.municipality) == normalized:
        score += EXACT_MUNICIPALITY_BONUS
    if normalized in normalize_text(airport.name):
        score += NAME_CONTAINS_BONUS
    if country_hint and airport.country and airport.country.upper() == country_hint.upper():
        score += COUNTRY_HINT_BONUS
    return score


def _resolved(airport: AirportRecord, score: int, matched_by: MatchSource) -> ResolvedLocation:
    return ResolvedLocation(
        code=airport.code,
        name=airport.name,
        confidence=max(0, min(score, 100)),
        score=score,
        matched_by=matched_by,
        municipality=airport.municipality,
        country=airport.country,
        latitude=airport.latitude,
        longitude=airport.longitude,
    )


class LocationResolver:
    """
    Resolves free text to an airport through the ordered tiers.

    Results are cached only when every directory query behind them
    succeeded; an answer produced while the directory is failing is served
    once and recomputed on the next request. Directory queries for one
    resolver share a semaphore, so a request never holds more than
    ``max_concurrent_queries`` sessions at once.
    """

    def __init__(
        self,
        directory: AirportDirectory,
        cache: TTLCache,
        candidate_limit: int = 5,
        max_concurrent_queries: int = 3,
    ):
        self.directory = directory
        self.cache = cache
        self.candidate_limit = candidate_limit
        self._query_slots = asyncio.Semaphore(max_concurrent_queries)

    async def resolve(self, text: str, country_hint: Optional[str] = None) -> Optional[ResolvedLocation]:
        """Best airport for ``text``, or None when nothing matches"""
        if not text or not text.strip():
            return None

        raw = text.strip()
        if ICAO_PATTERN.match(raw):
            airport_resolutions.labels(matched_by=MatchSource.CODE.value).inc()
            return ResolvedLocation(code=raw, confidence=100, score=100, matched_by=MatchSource.CODE)

        normalized = normalize_text(raw)
        if not normalized:
            return None
        hint = country_hint.strip().upper() if country_hint and country_hint.strip() else None
        key = (normalized, hint)

        cached = self.cache.get(key)
        if cached is not None:
            cache_hits.labels(cache_key=CACHE_NAME).inc()
            logger.info(f"Cache hit for: {normalized}")
            return cached
        cache_misses.labels(cache_key=CACHE_NAME).inc()

        terms = [normalized]
        if raw.casefold() != normalized and raw not in terms:
            terms.append(raw)

        result, degraded = await self._search_tiers(terms, normalized, hint)
        if result is None:
            result, fallback_degraded = await self._search_fallback(terms)
            degraded = degraded or fallback_degraded
        if result is None:
            code = lookup_alias(normalized)
            if code:
                logger.info(f"Resolved {normalized} through alias table: {code}")
                result = ResolvedLocation(
                    code=code,
                    confidence=ALIAS_CONFIDENCE,
                    score=ALIAS_CONFIDENCE,
                    matched_by=MatchSource.ALIAS,
                )

        if result is None:
            logger.info(f"No airport found for: {normalized}")
            return None

        airport_resolutions.labels(matched_by=result.matched_by.value).inc()
        if degraded:
            logger.warning(f"Not caching {normalized} -> {result.code}: directory queries failed")
        else:
            self.cache.put(key, result)
        return result

    async def _search_tiers(
        self,
        terms: List[str],
        normalized: str,
        hint: Optional[str],
    ) -> Tuple[Optional[ResolvedLocation], bool]:
        """Best scored directory match, and whether any tier query failed"""
        tiers = [(cls, term) for cls in CLASS_WEIGHT for term in terms]
        batches = await asyncio.gather(
            *(self._query_tier(cls, term) for cls, term in tiers)
        )
        degraded = any(batch is None for batch in batches)

        best: Optional[Tuple[int, AirportRecord]] = None
        seen = set()
        for batch in batches:
            for airport in batch or []:
                if airport.code in seen:
                    continue
                seen.add(airport.code)
                score = score_candidate(airport, normalized, hint)
                if best is None or score > best[0]:
                    best = (score, airport)

        if best is None:
            return None, degraded
        score, airport = best
        logger.info(f"Found {airport.code} ({airport.name}) for {normalized}, score {score}")
        return _resolved(airport, score, MatchSource.DIRECTORY), degraded

    async def _query_tier(self, classification: AirportClass, term: str) -> Optional[List[AirportRecord]]:
        """Rows for one tier, or None when the directory failed"""
        try:
            async with self._query_slots:
                return await self.directory.search(term, classification, self.candidate_limit)
        except DataUnavailable as e:
            logger.warning(f"Skipping {classification} tier for {term!r}: {e}")
            return None

    async def _search_fallback(self, terms: List[str]) -> Tuple[Optional[ResolvedLocation], bool]:
        degraded = False
        for term in terms:
            try:
                async with self._query_slots:
                    rows = await self.directory.search_any(term, 1)
            except DataUnavailable as e:
                logger.warning(f"Skipping extended search for {term!r}: {e}")
                degraded = True
                continue
            if rows:
                airport = rows[0]
                logger.info(f"Found {airport.code} ({airport.name}) in extended search for {term}")
                return _resolved(airport, FALLBACK_CONFIDENCE, MatchSource.FALLBACK), degraded
        return None, degraded
