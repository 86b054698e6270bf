"""
FastAPI backend: WhatsApp profile photo lookup proxy.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from profilescan.application import LookupRejected, PhotoLookupService
from profilescan.domain import LookupResult
from profilescan.infrastructure import (
    DEFAULT_TIMEOUT_SECONDS,
    RequestsContactLookupClient,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

DEFAULT_LOOKUP_BASE_URL = "https://us.api-wa.me/instance"

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# Path the original web client posts to; served as an alias of /lookup.
LEGACY_LOOKUP_PATH = "/api/whatsapp-photo"


def _lookup_timeout() -> float:
    raw = os.environ.get("PHOTO_LOOKUP_TIMEOUT_SECONDS", "").strip()
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid PHOTO_LOOKUP_TIMEOUT_SECONDS=%r", raw)
        return DEFAULT_TIMEOUT_SECONDS


def _get_lookup_client() -> RequestsContactLookupClient:
    base_url = os.environ.get("PHOTO_LOOKUP_BASE_URL", DEFAULT_LOOKUP_BASE_URL).strip()
    return RequestsContactLookupClient(base_url, timeout=_lookup_timeout())


def _get_lookup_service() -> PhotoLookupService:
    return PhotoLookupService(_get_lookup_client())


def get_service(app: FastAPI) -> PhotoLookupService:
    if getattr(app.state, "lookup_service", None) is None:
        app.state.lookup_service = _get_lookup_service()
    return app.state.lookup_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = _get_lookup_client()
    app.state.lookup_service = PhotoLookupService(client)
    logger.info("Photo lookup: POST /lookup (alias %s)", LEGACY_LOOKUP_PATH)
    yield
    client.close()
    app.state.lookup_service = None


app = FastAPI(title="Profilescan API", lifespan=lifespan)


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- REST: photo lookup ---


class LookupBody(BaseModel):
    # Any JSON value; the service decides between 400 and fallback.
    phone: Any = None


class LookupResponse(BaseModel):
    success: bool
    result: str
    is_photo_private: bool


class LookupErrorResponse(BaseModel):
    success: bool
    error: str


def _fallback_response() -> JSONResponse:
    body = LookupResponse(**LookupResult.fallback().to_dict())
    return JSONResponse(content=body.model_dump(), status_code=200, headers=CORS_HEADERS)


@app.post("/lookup", response_model=LookupResponse)
@app.post(LEGACY_LOOKUP_PATH, response_model=LookupResponse, include_in_schema=False)
async def lookup_photo(request: Request):
    """Return the WhatsApp profile photo for {"phone": "..."}.

    400 only for a missing or too-short phone. Every other outcome is a 200
    with a renderable image URL. A JSON body that is not an object has no
    phone, so it gets the 400; unparseable JSON and null get the fallback.
    The upstream call blocks, so it runs in the threadpool.
    """
    try:
        raw = await request.json()
    except ValueError as e:
        logger.warning("Lookup body error, using fallback: %s", e)
        return _fallback_response()
    if raw is None:
        logger.warning("Lookup body is null, using fallback")
        return _fallback_response()
    body = LookupBody.model_validate(raw) if isinstance(raw, dict) else LookupBody()
    try:
        outcome = await run_in_threadpool(get_service(request.app).lookup, body.phone)
    except Exception:
        logger.exception("Unexpected lookup failure, using fallback")
        return _fallback_response()
    if isinstance(outcome, LookupRejected):
        error = LookupErrorResponse(**outcome.to_dict())
        return JSONResponse(
            content=error.model_dump(), status_code=400, headers=CORS_HEADERS
        )
    result = LookupResponse(**outcome.to_dict())
    return JSONResponse(content=result.model_dump(), status_code=200, headers=CORS_HEADERS)


@app.options("/lookup")
@app.options(LEGACY_LOOKUP_PATH, include_in_schema=False)
def lookup_preflight():
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)
