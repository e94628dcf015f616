"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gatekeeper import __version__
from gatekeeper.api.v1.api import api_router
from gatekeeper.config import get_proxy_config, settings
from gatekeeper.database import Base, engine
from gatekeeper.errors import GatekeeperError
from gatekeeper.logging_setup import configure_logging
from gatekeeper.middleware import ClientIPMiddleware

# Configure root logger early
configure_logging(settings.log_level)

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    proxy_config = get_proxy_config()
    log.info(
        f"Trusting {len(proxy_config.trusted_proxies)} proxy range(s), "
        f"header override: {proxy_config.peer_ip_header_name or 'off'}, "
        f"proxy mode: {'on' if proxy_config.proxy_mode else 'off'}"
    )
    yield


app = FastAPI(
    title="Gatekeeper",
    description="Trusted-proxy client IP resolution and unverified token inspection",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ClientIPMiddleware, config=get_proxy_config())


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__
    }


@app.get("/")
async def root():
    """Root endpoint - redirect to docs."""
    return {
        "message": "Gatekeeper API",
        "version": __version__,
        "docs": "/docs"
    }


app.include_router(api_router, prefix=settings.api_v1_str)


@app.exception_handler(GatekeeperError)
async def gatekeeper_exception_handler(request: Request, exc: GatekeeperError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.kind}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# uvicorn must hand over the raw socket peer, ClientIPMiddleware owns proxy headers
SERVER_OPTIONS = {
    "host": "0.0.0.0",
    "port": 8000,
    "proxy_headers": False,
}


def run():
    """
    Serve the app with uvicorn.

    uvicorn's own proxy header handling is switched off: with it on, uvicorn rewrites
    the connection peer from X-Forwarded-For (for 127.0.0.1 by default) before
    ClientIPMiddleware checks that peer against TRUSTED_PROXIES. When running
    uvicorn from the command line, pass ``--no-proxy-headers`` for the same reason.
    """
    uvicorn.run(app, log_level=settings.log_level.lower(), **SERVER_OPTIONS)


if __name__ == "__main__":
    run()
