"""
Voice Agent Brain Server
Handles: status, health, rule-based chat, voice stub, mock auth tokens
Port: $PORT (default 3000)

Nothing is persisted. Start time, clocks and the chat template selector live in
one AppContext on app.state; handlers get it through get_context().

Bodies are parsed the way express.json() does: a non-object or non-JSON body
reads as {}. Unparseable JSON gets 400 "Invalid JSON" and an oversized body 413,
where Express would fall through to its generic 500.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from voice_agent.config import (
    ALLOWED_METHODS,
    ALLOWED_ORIGINS,
    CSRF_TOKEN_PREFIX,
    GZIP_MINIMUM_SIZE,
    HOST,
    MAX_BODY_BYTES,
    PORT,
    SERVICE_VERSION,
    SESSION_TOKEN_PREFIX,
    TOKEN_TTL_MS,
    WEBSITE,
)
from voice_agent.context import AppContext
from voice_agent.dependencies import get_context
from voice_agent.exceptions import (
    ChatProcessingException,
    InvalidBodyException,
    InvalidJSONException,
    MessageRequiredException,
    VoiceProcessingException,
)
from voice_agent.middleware import (
    BodySizeLimitMiddleware,
    CatchAllMiddleware,
    SecurityHeadersMiddleware,
    origin_regex,
)
from voice_agent.models import (
    AuthConfigureResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    StatusResponse,
    VoiceRequest,
    VoiceResponse,
)
from voice_agent.responder import reply_to

logger = logging.getLogger(__name__)

DEFAULT_VOICE_TEXT = "Hello! I am your AI workflow advisor, ready to help optimize your n8n automations!"
DEFAULT_VOICE_ID = "default"
ANONYMOUS_USER = "anonymous"

router = APIRouter()


def is_falsy(value: Any) -> bool:
    """JavaScript falsiness for JSON values: null, false, 0 and ""."""
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def body_object(body: Any) -> dict:
    return body if isinstance(body, dict) else {}


# ── Endpoints ─────────────────────────────────────────────────────────────────

@router.get("/", response_model=StatusResponse)
async def root(context: AppContext = Depends(get_context)):
    return {
        "status": "🎤 Voice Agent Brain Server Running",
        "website": WEBSITE,
        "version": SERVICE_VERSION,
        "timestamp": context.timestamp(),
        "endpoints": {
            "chat": "/api/proxy/chat",
            "voice": "/api/proxy/voice",
            "health": "/health",
        },
    }


@router.get("/health", response_model=HealthResponse)
async def health(context: AppContext = Depends(get_context)):
    return {"status": "healthy", "uptime": context.uptime(), "timestamp": context.timestamp()}


@router.post(
    "/api/proxy/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(body: Any = Body(None), context: AppContext = Depends(get_context)):
    payload = ChatRequest.model_validate(body_object(body))
    if is_falsy(payload.message):
        raise MessageRequiredException()

    try:
        response = reply_to(payload.message, context.selector)
        return ChatResponse(
            response=response,
            timestamp=context.timestamp(),
            userId=ANONYMOUS_USER if is_falsy(payload.userId) else payload.userId,
            status="success",
        )
    except Exception:
        logger.exception("Chat error")
        raise ChatProcessingException()


@router.post("/api/proxy/voice", response_model=VoiceResponse, responses={500: {"model": ErrorResponse}})
async def voice(body: Any = Body(None), context: AppContext = Depends(get_context)):
    payload = VoiceRequest.model_validate(body_object(body))
    try:
        return VoiceResponse(
            message="Voice processing complete",
            text=DEFAULT_VOICE_TEXT if is_falsy(payload.text) else payload.text,
            voiceId=DEFAULT_VOICE_ID if is_falsy(payload.voiceId) else payload.voiceId,
            audioUrl=None,  # no speech synthesis yet
            timestamp=context.timestamp(),
            status="success",
        )
    except Exception:
        logger.exception("Voice error")
        raise VoiceProcessingException()


@router.post("/api/auth/configure", response_model=AuthConfigureResponse)
async def configure_auth(context: AppContext = Depends(get_context)):
    """
    Issues demo tokens. They are never stored and never checked on later
    requests, so they must not be treated as credentials.
    """
    issued = context.millis()
    return {
        "message": "Configuration received",
        "sessionToken": f"{SESSION_TOKEN_PREFIX}{issued}",
        "csrfToken": f"{CSRF_TOKEN_PREFIX}{issued}",
        "expires": issued + TOKEN_TTL_MS,
        "status": "success",
    }


# ── Error handlers ────────────────────────────────────────────────────────────

async def http_error(request: Request, exc: StarletteHTTPException):
    # FastAPI wraps body decode failures other than JSONDecodeError in a generic 400.
    if exc.status_code == 400 and isinstance(exc.__cause__, ValueError):
        exc = InvalidJSONException()
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def validation_error(request: Request, exc: RequestValidationError):
    if any(err.get("type") in ("json_invalid", "value_error.jsondecode") for err in exc.errors()):
        return await http_error(request, InvalidJSONException())
    return await http_error(request, InvalidBodyException())


async def server_error(request: Request, exc: Exception):
    logger.exception("Server error", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Server error"})


# ── App ───────────────────────────────────────────────────────────────────────

def create_app(context: Optional[AppContext] = None) -> FastAPI:
    context = context or AppContext()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("[voice-agent] Server started on http://localhost:%s", PORT)
        logger.info("[voice-agent] Ready for: %s", WEBSITE)
        logger.info("[voice-agent] Started: %s", context.timestamp())
        yield

    app = FastAPI(title="Voice Agent Brain Server", version=SERVICE_VERSION, lifespan=lifespan)
    app.state.context = context

    # Last added runs first: headers, compression, CORS, size limit, then the
    # catch-all so unhandled faults still get the outer headers.
    app.add_middleware(CatchAllMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=MAX_BODY_BYTES)
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=origin_regex(ALLOWED_ORIGINS),
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(RequestValidationError, validation_error)
    app.add_exception_handler(Exception, server_error)

    app.include_router(router)
    return app


app = create_app()


def run():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("voice_agent.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    run()
