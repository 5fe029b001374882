from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from jetquote.api import airports, quotes
from jetquote.core.config import settings
from jetquote.core.redis import init_redis, close_redis, get_redis
from jetquote.core.metrics import request_count, request_duration, db_connected, redis_connected, get_metrics_text
from jetquote.db.session import engine
import time
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _endpoint_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            endpoint = _endpoint_label(request)
            request_count.labels(method=request.method, endpoint=endpoint, status=status).inc()
            request_duration.labels(method=request.method, endpoint=endpoint).observe(time.time() - start_time)


async def _database_reachable() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Database check failed: {e}")
        return False
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} starting")

    redis_connected.set(1 if await init_redis() is not None else 0)

    if await _database_reachable():
        db_connected.set(1)
        logger.info("Database connected")
    else:
        db_connected.set(0)

    yield

    logger.info("Application shutting down...")
    await close_redis()
    redis_connected.set(0)
    await engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(quotes.router)
app.include_router(airports.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and query strings get the same 400 shape as rejected quotes"""
    details = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"detail": {"error": "Invalid request", "details": details}},
    )


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@app.get("/health", tags=["monitoring"])
async def health_check():
    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "dependencies": {
            "redis": "connected" if get_redis() is not None else "disconnected",
        }
    }


@app.get("/readiness", tags=["monitoring"])
async def readiness_check():
    if not await _database_reachable():
        db_connected.set(0)
        return JSONResponse(
            status_code=503,
            content={"ready": False, "reason": "Database not available"},
        )

    db_connected.set(1)
    return {
        "ready": True,
        "service": settings.API_TITLE
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "endpoints": {
            "quote": "POST /quotes/calc",
            "resolve": "GET /airports/resolve?q=",
        },
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }
