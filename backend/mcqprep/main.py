from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from .core.config import settings
from .core.database import create_db_and_tables
from .core.cache import cache
from .core.exceptions import AppError
from .api.v1.api import api_router
from .api.v1.endpoints import health


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="MCQ practice, mock tests and subscriptions for surgical super-speciality exams",
    version="1.0.0",
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url="/redoc" if settings.environment == "development" else None
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" marker from the location
        loc = [str(part) for part in err.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        errors.append({"field": field, "message": err.get("msg", "Invalid value")})
    return JSONResponse(
        status_code=400,
        content={"status": "error", "message": "Validation failed", "code": "VALIDATION_ERROR", "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": "An unexpected error occurred. Please try again later."},
    )


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.app_name}...")
    create_db_and_tables()

    if cache.enabled:
        if cache.health_check():
            logger.info("Cache connection established")
        else:
            logger.warning("Cache connection failed - running without cache")


@app.on_event("shutdown")
async def shutdown_event():
    cache.close()
    logger.info(f"{settings.app_name} shutdown completed")


app.include_router(api_router, prefix="/api/v1")
app.include_router(health.router, prefix="/health", tags=["health"])


@app.get("/")
async def read_root():
    return {"message": f"Welcome to the {settings.app_name}!", "version": "1.0.0"}
