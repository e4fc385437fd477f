"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import table
from config import config, setup_logging

setup_logging()

app = FastAPI(
    title="Blackjack Table",
    description="Single-table blackjack rounds against an automated dealer",
    version="0.1.0",
    debug=config.debug,
)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(table.router, prefix="/api/table", tags=["table"])

