"""Airport resolution endpoint"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from jetquote.api.deps import get_resolver
from jetquote.schemas.airport import ResolvedLocation
from jetquote.services.resolver import LocationResolver

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/airports", tags=["airports"])


@router.get("/resolve", response_model=ResolvedLocation)
async def resolve_airport(
    q: str = Query(..., min_length=1, max_length=100),
    country: Optional[str] = Query(None, min_length=2, max_length=2),
    resolver: LocationResolver = Depends(get_resolver),
):
    location = await resolver.resolve(q, country)
    if location is None:
        raise HTTPException(status_code=404, detail=f"No airport found for '{q}'")
    return location
