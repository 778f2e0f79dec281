"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import debug, location
from domain.errors import ConfigurationError
from settings import LocationSettings, settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create app
app = FastAPI(
    title="AllerQ Location API",
    description="Address verification and place lookup for restaurant locations",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same `{error}` shape as every other client error."""
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


# Include routers
app.include_router(location.router, prefix="/api/location", tags=["location"])
if settings.LOCATION_DEBUG_ROUTES_ENABLED:
    app.include_router(debug.router, prefix="/api", tags=["debug"])


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "AllerQ Location API"}


@app.get("/health")
async def health():
    """Health check endpoint; also reports whether provider keys are present."""
    try:
        LocationSettings.from_settings().require_keys()
        configured = True
    except ConfigurationError:
        configured = False
    return {"status": "healthy", "locationVerificationConfigured": configured}
