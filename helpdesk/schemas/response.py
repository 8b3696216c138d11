from typing import Any, Optional

from fastapi import status
from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Uniform envelope returned as the body of every API response."""

    success: bool
    statusCode: int
    message: str
    data: Optional[Any] = None
    errors: Optional[str] = None

    @classmethod
    def success_response(
        cls,
        data: Any,
        message: str = "Operation successful",
        statusCode: int = status.HTTP_200_OK,
    ) -> "ApiResponse":
        return cls(success=True, statusCode=statusCode, message=message, data=data)

    @classmethod
    def error_response(
        cls,
        message: str,
        errors: Optional[str] = None,
        statusCode: int = status.HTTP_400_BAD_REQUEST,
    ) -> "ApiResponse":
        return cls(
            success=False,
            statusCode=statusCode,
            message=message,
            data=None,
            errors=errors,
        )
