import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from alias_app.config import settings
from alias_app.database.connection import engine, Base
from alias_app.api.v1 import aliases, redirect
from alias_app.dependencies import get_visit_recorder
from alias_app.exceptions import AliasError

# Import models to ensure they're registered with Base
from alias_app.models import Alias, CanonicalURL

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let in-flight background visit increments finish
    recorder_provider = app.dependency_overrides.get(get_visit_recorder, get_visit_recorder)
    await recorder_provider().drain()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Alias generation and resolution service built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan
)


@app.exception_handler(AliasError)
async def alias_error_handler(request: Request, exc: AliasError):
    """Render domain errors as {"detail": ...} with their status code"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(aliases.router, prefix="/api/v1")
app.include_router(redirect.router)
