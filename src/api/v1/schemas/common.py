"""Response schemas shared across the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Body of every error response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "USER_NOT_FOUND",
                "message": "User not found: todd",
                "details": {"username": "todd"},
            }
        }
    )

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement for operations with nothing else to return."""

    model_config = ConfigDict(json_schema_extra={"example": {"message": "Photo deleted"}})

    message: str
