"""Charter quote endpoint with Redis caching"""
import json
import logging
from fastapi import APIRouter, Depends, HTTPException

from jetquote.api.deps import get_quote_service
from jetquote.schemas.quote import QuoteRequest, QuoteResponse
from jetquote.services.quoting import QuoteService
from jetquote.core.exceptions import DataUnavailable, RequestValidationFailed, ResolutionFailure
from jetquote.core.metrics import cache_hits, cache_misses
from jetquote.core.redis import get_redis
from jetquote.core.config import settings
from jetquote.core.response_builders import (
    build_resolution_error,
    build_unavailable_error,
    build_validation_error,
)
from jetquote.utils.hashing import cache_key

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("/calc", response_model=QuoteResponse)
async def calc_quote(req: QuoteRequest, service: QuoteService = Depends(get_quote_service)):
    logger.info(f"Quote request received: {req.model_dump(by_alias=True, exclude_none=True)}")

    key = cache_key("quote", req.model_dump(by_alias=True))
    redis = get_redis()

    if redis is not None:
        try:
            cached = await redis.get(key)
            if cached:
                cache_hits.labels(cache_key="quote").inc()
                return QuoteResponse.model_validate(json.loads(cached))
            cache_misses.labels(cache_key="quote").inc()
        except Exception as e:
            logger.warning(f"Cache retrieval failed: {e}")

    try:
        result = await service.quote(req)
    except RequestValidationFailed as e:
        logger.info(f"Rejected quote request: {e.errors}")
        raise HTTPException(status_code=400, detail=build_validation_error(e))
    except ResolutionFailure as e:
        logger.info(f"Unknown airport: {e.missing}")
        raise HTTPException(status_code=400, detail=build_resolution_error(e))
    except DataUnavailable as e:
        logger.error(f"Quote failed: {e}")
        raise HTTPException(status_code=500, detail=build_unavailable_error(e))

    if redis is not None:
        try:
            await redis.set(
                key,
                json.dumps(result.model_dump(mode="json", by_alias=True), default=str),
                ex=settings.QUOTE_CACHE_TTL
            )
        except Exception as e:
            logger.warning(f"Cache write failed: {e}")

    return result
