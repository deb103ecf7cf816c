import logging
from typing import Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.services.llm import LLMProviderError
from app.services.summary_sessions import SessionValidationError, SummarySessionService


class StartSessionRequest(BaseModel):
    transcript: Optional[str] = Field(None, description="Meeting transcript text")
    userInstruction: Optional[str] = Field(None, description="How the summary should be shaped")


class RefineRequest(BaseModel):
    sessionId: Optional[Union[str, int]] = Field(None, description="Id returned by start-session")
    prompt: Optional[str] = Field(None, description="Refinement instruction")


def create_sessions_router(service: SummarySessionService) -> APIRouter:
    router = APIRouter()
    logger = logging.getLogger("summarizer.api.sessions")

    @router.post("/api/start-session")
    def start_session(payload: Optional[StartSessionRequest] = None) -> dict:
        payload = payload or StartSessionRequest()
        try:
            return service.start_session(payload.transcript, payload.userInstruction)
        except SessionValidationError as exc:
            logger.info("start-session rejected: %s", exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except LLMProviderError as exc:
            logger.warning("start-session upstream failure: %s", exc)
            raise HTTPException(status_code=500, detail=f"Error starting session: {exc}") from exc
        except Exception as exc:
            logger.exception("Error in start-session: %s", exc)
            raise HTTPException(status_code=500, detail=f"Error starting session: {exc}") from exc

    @router.post("/api/summarize")
    def summarize(payload: Optional[RefineRequest] = None) -> dict:
        payload = payload or RefineRequest()
        try:
            return service.refine(payload.sessionId, payload.prompt)
        except SessionValidationError as exc:
            logger.info("summarize rejected: %s", exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except LLMProviderError as exc:
            logger.warning("summarize upstream failure: %s", exc)
            raise HTTPException(status_code=500, detail=f"Error generating summary: {exc}") from exc
        except Exception as exc:
            logger.exception("Error in summarize: %s", exc)
            raise HTTPException(status_code=500, detail=f"Error generating summary: {exc}") from exc

    @router.get("/api/sessions")
    def list_sessions() -> dict:
        return service.list_sessions()

    @router.post("/api/cleanup-sessions")
    def cleanup_sessions() -> dict:
        result = service.cleanup()
        logger.info(
            "Manual cleanup before=%d after=%d",
            result["sessions_before"],
            result["sessions_after"],
        )
        return result

    return router
