"""HTTP adapter schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ApiResponse(BaseModel):
    """Envelope wrapping every API response."""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": {"suggestions": ["SUV under 15 lakhs with sunroof"]},
            }
        }
    )


def ok(data: Any) -> dict[str, Any]:
    """Successful envelope as a JSON-ready dict."""
    return ApiResponse(success=True, data=data).model_dump(mode="json", exclude_none=True)


def failure(error: str) -> dict[str, Any]:
    """Failed envelope as a JSON-ready dict."""
    return ApiResponse(success=False, error=error).model_dump(mode="json", exclude_none=True)
