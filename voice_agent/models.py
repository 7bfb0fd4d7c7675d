"""Voice Agent: request/response models."""

from typing import Any, Optional, Dict

from pydantic import BaseModel


# Echo fields take any JSON value; they are returned as received.
class ChatRequest(BaseModel):
    message: Any = None
    userId: Any = None


class ChatResponse(BaseModel):
    response: str
    timestamp: str
    userId: Any
    status: str


class VoiceRequest(BaseModel):
    text: Any = None
    voiceId: Any = None


class VoiceResponse(BaseModel):
    message: str
    text: Any
    voiceId: Any
    audioUrl: Optional[str] = None
    timestamp: str
    status: str


class AuthConfigureResponse(BaseModel):
    message: str
    sessionToken: str
    csrfToken: str
    expires: int
    status: str


class StatusResponse(BaseModel):
    status: str
    website: str
    version: str
    timestamp: str
    endpoints: Dict[str, str]


class HealthResponse(BaseModel):
    status: str
    uptime: int
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
