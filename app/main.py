from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from chatbot.agent import RecipeChatClient, build_client
from chatbot.core.memory import (
    Exchange,
    SessionStore,
    generate_session_id,
    utc_now_iso,
)
from chatbot.core.prompt import SYSTEM_PROMPT
from chatbot.core.trace import TraceLogger, TraceRecord
from chatbot.errors import ConfigError, ValidationError
from config.settings import REQUIRED_ENV_VARS, Settings, get_settings


logger = logging.getLogger("recipebot")

GENERIC_ERROR = (
    "Sorry, I encountered an error while processing your request. Please try again."
)
INVALID_MESSAGE = "Message is required and must be a string"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format="[%(asctime)s] %(levelname)s - %(message)s")


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: StrictStr = Field(..., min_length=1, description="User's latest message")
    session_id: Optional[str] = Field(
        default=None,
        alias="sessionId",
        description="Existing session to continue; a new one is created if omitted",
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    for error in exc.errors():
        loc = tuple(error.get("loc") or ())
        if "sessionId" in loc:
            return "sessionId must be a string"
    # Missing body, malformed JSON and bad message all map to the same text.
    return INVALID_MESSAGE


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[SessionStore] = None,
    tracer: Optional[TraceLogger] = None,
    client: Optional[RecipeChatClient] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if store is None:
        store = SessionStore()
    if tracer is None:
        tracer = TraceLogger(settings.logs_dir)
    if client is None:
        client = build_client(settings)
    tracer.ensure_directory()

    app = FastAPI(title="Recipe AI Chatbot", version="1.0.0")
    app.state.settings = settings
    app.state.store = store
    app.state.tracer = tracer
    app.state.client = client

    # CORS: allow the browser UI from other origins during development
    if settings.app_env.lower() in {"dev", "development", "local"}:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    public_dir = Path(settings.public_dir)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return await validation_error_handler(
            request, ValidationError(_describe_validation_error(exc))
        )

    @app.get("/")
    async def index():
        index_path = public_dir / "index.html"
        if not index_path.is_file():
            return JSONResponse(status_code=404, content={"error": "Chat UI not found"})
        return FileResponse(str(index_path))

    @app.post("/api/chat")
    async def chat(req: ChatRequest):
        started = time.perf_counter()
        session_id = req.session_id or generate_session_id()
        logger.info(
            "Incoming chat: session=%s known=%s message_len=%s",
            session_id,
            session_id in store,
            len(req.message),
        )

        try:
            ai_response = await client.complete(SYSTEM_PROMPT, req.message)
        except Exception as e:
            # Full detail stays in the server log; the caller gets a generic message.
            logger.exception("Chat processing failed for session %s: %s", session_id, e)
            return JSONResponse(status_code=500, content={"error": GENERIC_ERROR})

        processing_time = int((time.perf_counter() - started) * 1000)

        exchange = Exchange(
            user_message=req.message,
            bot_response=ai_response,
            session_id=session_id,
        )
        store.append(session_id, exchange)

        await tracer.record(
            TraceRecord(
                timestamp=utc_now_iso(),
                session_id=session_id,
                user_input=req.message,
                ai_response=ai_response,
                processing_time=processing_time,
                model=client.model_label,
            )
        )
        logger.info(
            "Model responded: session=%s chars=%s elapsed_ms=%s",
            session_id,
            len(ai_response),
            processing_time,
        )

        return {
            "response": ai_response,
            "sessionId": session_id,
            "timestamp": exchange.timestamp,
        }

    @app.get("/api/history/{session_id}")
    async def history(session_id: str) -> Dict[str, Any]:
        return {"history": [exchange.to_dict() for exchange in store.get(session_id)]}

    @app.get("/api/health")
    async def health() -> Dict[str, Any]:
        return {
            "status": "healthy",
            "timestamp": utc_now_iso(),
            "activeSessions": len(store),
        }

    # Registered last so the API routes above take precedence.
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(public_dir)), name="public")
    else:
        logger.warning("Public directory %s not found; chat UI disabled", public_dir)

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    try:
        app = create_app(settings)
    except ConfigError as exc:
        logger.error("%s", exc)
        raise SystemExit(str(exc)) from exc

    logger.info("Recipe AI Chatbot server running on http://localhost:%s", settings.port)
    logger.info("Make sure to set your Azure OpenAI environment variables:")
    for name in REQUIRED_ENV_VARS:
        logger.info("- %s", name)
    logger.info("- AZURE_OPENAI_API_VERSION (optional)")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
