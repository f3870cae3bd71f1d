import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS, SECURITY_HEADERS_ENABLED, STORE_BACKEND
from .database import Base, engine
from .domain.accounts.router import router as auth_router
from .domain.bookings.router import router as bookings_router
from .domain.providers.router import router as providers_router
from .domain.services.router import router as services_router
from .domain.uploads.router import router as upload_router
from .domain.users.router import router as users_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("botocore").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    if STORE_BACKEND == "sql":
        try:
            Base.metadata.create_all(bind=engine, checkfirst=True)
            logger.info("Database tables created successfully")
        except Exception as e:
            # Ignore "already exists" errors from race conditions between workers
            error_msg = str(e)
            if "already exists" in error_msg or "duplicate key" in error_msg:
                logger.info("Database tables already exist (created by another worker)")
            else:
                logger.error(f"Failed to create database tables: {e}")
    else:
        logger.info(f"Using {STORE_BACKEND} document store")
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Moment API", version="1.0.0", lifespan=lifespan)


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.status_code}: {exc.detail}")
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Authorization header problems are authentication failures (401);
    everything else is a 400 with the first offending field.
    """
    errors = exc.errors()
    for error in errors:
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(f"Authentication failed for {request.url.path}: invalid Authorization header")
            return error_response(401, "Unauthorized - No token provided")

    logger.warning(f"Validation error for {request.url.path}: {errors}")
    if not errors:
        return error_response(400, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid value")
    return error_response(400, f"{field}: {message}" if field else message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} - Unhandled error: {exc}")
    return error_response(500, "Internal server error")


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(providers_router)
app.include_router(services_router)
app.include_router(bookings_router)
app.include_router(upload_router)


@app.get("/")
def root():
    return {"message": "Moment API is running"}


@app.get("/health")
def health():
    return {"status": "ok", "message": "Server is running"}


def run():
    import os

    import uvicorn

    port = int(os.getenv("PORT", 5000))
    uvicorn.run("moment.main:app", host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
