import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.services.summary_sessions import SummarySessionService

ROOT_ENDPOINTS = [
    "GET /api/health",
    "POST /api/start-session",
    "POST /api/summarize",
    "GET /api/test-gemini",
]

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /api/health",
    "POST /api/start-session",
    "POST /api/summarize",
    "GET /api/test-gemini",
    "GET /api/sessions",
    "POST /api/cleanup-sessions",
]


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision and a trailing Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_status_router(service: SummarySessionService) -> APIRouter:
    router = APIRouter()
    logger = logging.getLogger("summarizer.api.status")

    @router.get("/")
    def root() -> dict:
        return {
            "message": "Meeting Transcript Summarizer API",
            "status": "OK",
            "timestamp": utc_timestamp(),
            "endpoints": ROOT_ENDPOINTS,
        }

    @router.get("/api/health")
    def health() -> dict:
        return {
            "status": "OK",
            "timestamp": utc_timestamp(),
            "env": {"gemini_key_set": service.gemini_key_set},
        }

    @router.get("/api/test-gemini")
    def test_gemini():
        if not service.gemini_key_set:
            return JSONResponse(status_code=500, content={"error": "GEMINI_API_KEY not set"})
        try:
            text = service.test_connection()
        except Exception as exc:
            logger.warning("Gemini test error: %s", exc)
            return JSONResponse(
                status_code=500,
                content={"error": "Gemini API test failed", "details": str(exc)},
            )
        return {
            "success": True,
            "response": text,
            "message": "Gemini API is working correctly",
        }

    return router
