"""Main FastAPI application for osproxy."""

import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .common.config import settings
from .common.errors import register_exception_handlers
from .services.compute.router import router as compute_router
from .services.identity.router import router as identity_router
from .services.image.router import router as image_router
from .services.network.router import router as network_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("osproxy")

app = FastAPI(
    title="osproxy",
    description="Server-side proxy between a browser dashboard and OpenStack APIs",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.monotonic()
    response = await call_next(request)
    logger.info(
        "%s %s -> %d (%.0f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.monotonic() - started) * 1000,
    )
    return response


# Include service routers
app.include_router(identity_router, prefix="/api", tags=["identity"])
app.include_router(compute_router, prefix="/api", tags=["compute"])
app.include_router(network_router, prefix="/api", tags=["network"])
app.include_router(image_router, prefix="/api", tags=["image"])


@app.get("/")
async def root():
    """Root endpoint returning service information."""
    return {
        "name": "osproxy",
        "version": __version__,
        "description": "Server-side proxy between a browser dashboard and OpenStack APIs",
        "identity": settings.openstack_auth_url,
        "region": settings.openstack_region,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


def main():
    """Main entry point for the application."""
    logger.info("OpenStack auth URL: %s (region %s)", settings.openstack_auth_url, settings.openstack_region)
    uvicorn.run(
        "osproxy.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
