"""
FastAPI app entrypoint.

Community happenings: browse, submit, moderate and map local events; URL -> event extraction.
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from app.api.routes import flags, happenings, instructions, scrape, scrape_logs, users
from app.config import settings
from app.core.errors import ApiError, api_error_handler

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# pydantic-ai's Gemini providers read the key from the environment
if settings.gemini_api_key:
    os.environ.setdefault("GEMINI_API_KEY", settings.gemini_api_key)
    os.environ.setdefault("GOOGLE_API_KEY", settings.gemini_api_key)

app = FastAPI(title="Community Happenings", version="0.1.0")

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for the production frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.cors_origins:
    _cors_origins.extend(o.strip() for o in settings.cors_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ApiError, api_error_handler)

app.include_router(happenings.router, prefix="/happenings", tags=["happenings"])
app.include_router(flags.router, prefix="/flags", tags=["flags"])
app.include_router(scrape.router, prefix="/scrape", tags=["scrape"])
app.include_router(scrape_logs.router, prefix="/scrape-logs", tags=["scrape-logs"])
app.include_router(instructions.router, prefix="/instructions", tags=["instructions"])
app.include_router(users.router, tags=["users"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Community Happenings API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
