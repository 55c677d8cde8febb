"""HTTP clients for the generation endpoint and the user center."""

from .gemini_client import GeminiClient, GeminiRequestError, GeminiTransportError
from .user_center import UserCenterClient, UserCenterError, UserCenterResponse

__all__ = [
    "GeminiClient",
    "GeminiRequestError",
    "GeminiTransportError",
    "UserCenterClient",
    "UserCenterError",
    "UserCenterResponse",
]
