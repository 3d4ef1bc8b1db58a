"""Common schemas used across the API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": str }
    """

    error: str


class SuccessResponse(BaseModel):
    success: bool = True
