import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cinema_booking.api.v1 import routes_booking, routes_catalog, routes_health
from cinema_booking.core.config import settings
from cinema_booking.core.exceptions import BookingError, ValidationFailedError
from cinema_booking.db import session
from cinema_booking.redis import close_redis
from cinema_booking.scripts import seed_data


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.info("Starting up...")
    await session.init_db()
    if settings.SEED_ON_STARTUP:
        await seed_data.seed()
    yield
    logging.info("Shutting down...")
    await close_redis()
    await session.close_db()


def _first_validation_message(ex: RequestValidationError) -> str:
    errors = ex.errors()
    if not errors:
        return "Invalid request"
    message = errors[0].get("msg", "Invalid request")
    # pydantic prefixes messages raised from validators
    return message.removeprefix("Value error, ")


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s"
    )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description=settings.PROJECT_DESCRIPTION,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        routes_health.router,
        prefix=settings.API_PREFIX
    )

    app.include_router(
        routes_catalog.router,
        prefix=settings.API_PREFIX
    )

    app.include_router(
        routes_booking.router,
        prefix=settings.API_PREFIX
    )

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, ex: BookingError):
        return JSONResponse(status_code=ex.status_code, content={"error": ex.message, "code": ex.code})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, ex: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": _first_validation_message(ex), "code": ValidationFailedError.code})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, ex: StarletteHTTPException):
        return JSONResponse(status_code=ex.status_code, content={"error": ex.detail}, headers=getattr(ex, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, ex: Exception):
        logging.error(f"Unhandled error on {request.method} {request.url.path}: {ex}", exc_info=ex)
        return JSONResponse(status_code=500, content={"error": "Something went wrong!"})

    @app.get("/")
    async def root():
        return {"message": "Cinema booking backend is running"}

    return app


app = create_app()
