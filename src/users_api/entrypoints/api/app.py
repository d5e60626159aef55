"""FastAPI application definition."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from users_api import __version__

from .deps import lifespan, settings
from .routes import api_router

app = FastAPI(
    title="users-api",
    description="User account management keyed by Keycloak subject",
    version=__version__,
    lifespan=lifespan,
    redirect_slashes=False,  # Prevent 307 redirects that lose auth headers
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


@app.get("/status")
async def status() -> dict[str, str]:
    """Report the service version and the identity provider it trusts."""
    return {"version": __version__, "keycloak": settings.keycloak_url}


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
