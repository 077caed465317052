import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from speedtype.api import auth, health, leaderboard, results, users
from speedtype.core.config import CORS_ORIGINS, LOG_LEVEL
from speedtype.core.database import create_db_and_tables
from speedtype.core.errors import InvalidInput, ServiceUnavailable, SpeedTypeError

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The engine is process-wide; only the schema is prepared here
    try:
        create_db_and_tables()
    except OperationalError as e:
        logger.error("Database unreachable at startup, serving degraded: %s", e)
    yield


app = FastAPI(
    title="SpeedType Trainer API",
    description="API for typing-test accounts, attempt results, and the leaderboard.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(results.router)
app.include_router(users.router)
app.include_router(leaderboard.router)
app.include_router(health.router)


def _error_response(exc: SpeedTypeError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": jsonable_encoder(exc.detail)},
        headers=exc.headers,
    )


@app.exception_handler(SpeedTypeError)
async def speedtype_error_handler(request: Request, exc: SpeedTypeError):
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error_response(InvalidInput(exc.errors()))


@app.exception_handler(OperationalError)
async def store_error_handler(request: Request, exc: OperationalError):
    logger.error(
        "Database unavailable on %s %s: %s", request.method, request.url.path, exc
    )
    return _error_response(ServiceUnavailable())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/")
def read_root() -> Dict[str, str]:
    """Root endpoint to check API status.

    Returns:
        Dict[str, str]: Status message and link to docs.
    """
    return {"status": "API is ready", "docs": "/docs"}
