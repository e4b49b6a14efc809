"""
AI dependencies and error translation shared by the AI-backed routers.
"""
from fastapi import HTTPException, status

from escriba.services.ai_gateway import (
    AIConfigurationError,
    AIInsufficientCreditsError,
    AIRateLimitError,
    AIServiceError,
)
from escriba.services.writing_assistant import WritingAssistant


def get_writing_assistant() -> WritingAssistant:
    """Writing assistant wired to the configured gateways (overridden in tests)."""
    return WritingAssistant()


def ai_http_error(exc: AIServiceError) -> HTTPException:
    """Map a gateway failure onto the status the client should see."""
    if isinstance(exc, AIRateLimitError):
        code = status.HTTP_429_TOO_MANY_REQUESTS
    elif isinstance(exc, AIInsufficientCreditsError):
        code = status.HTTP_402_PAYMENT_REQUIRED
    elif isinstance(exc, AIConfigurationError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=code, detail=exc.message)
