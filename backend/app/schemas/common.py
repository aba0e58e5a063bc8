"""Common schemas used across the application."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class ApiResponse(BaseModel, Generic[T]):
    """Standard response envelope.

    Usage:
        response_model=ApiResponse[list[FreteOut]]

    Returns:
        {
            "success": true,
            "message": "Fretes listados com sucesso",
            "data": [...],
            "meta": {"page": 1, "limit": 10, "total": 42, "totalPages": 5}
        }
    """
    success: bool = True
    message: str
    data: T | None = None
    meta: PageMeta | None = None
