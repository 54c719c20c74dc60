import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.router import api_router
from app.core.config import settings
from app.db.init_db import create_tables, seed_demo_data
from app.services import errors

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    errors.PassengerValidationError: 422,
    errors.IncompleteTicketInfo: 422,
    errors.NoPassengerSelected: 422,
    errors.PassengerNotFound: 404,
    errors.TrainNotFound: 404,
    errors.NotSelected: 409,
    errors.NoActiveDraft: 409,
    errors.SubmissionInProgress: 409,
    errors.SubmissionFailed: 502,
}

app = FastAPI(title=settings.app_name, version=settings.app_version)

# Configurable CORS origins (CORS_ORIGINS env). If empty -> dev defaults.
origins = settings.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_prefix)

@app.get("/")
def root():
    return {"message": f"{settings.app_name} service", "version": settings.app_version, "status": "running"}

@app.get("/health")
def health():
    return {"status": "OK", "timestamp": datetime.now(tz=timezone.utc).isoformat()}

@app.exception_handler(errors.BookingError)
async def booking_error_handler(request: Request, exc: errors.BookingError):
    body = {"error": exc.code, "message": exc.message}
    if exc.fields:
        body["fields"] = exc.fields
    return JSONResponse(status_code=ERROR_STATUS.get(type(exc), 400), content=body)

@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    # No route matched (routes raising 404 themselves keep the regular detail body)
    if exc.status_code == 404 and "endpoint" not in request.scope:
        return JSONResponse(status_code=404, content={"error": "API endpoint not found", "path": request.url.path})
    return await http_exception_handler(request, exc)

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    message = str(exc) if settings.is_development else "Something went wrong"
    return JSONResponse(status_code=500, content={"error": "Internal Server Error", "message": message})

@app.on_event("startup")
def startup():
    create_tables()
    logger.info("Environment: %s, API prefix: %s", settings.env, settings.api_prefix)
    if settings.is_development:
        seeded = seed_demo_data()
        if seeded:
            logger.info("Seeded %d demo trains", seeded)
