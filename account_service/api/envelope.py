"""
Uniform response envelope: ``{success, payload, message}``.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool
    payload: Optional[T] = None
    message: str = ""


def fail(message: str) -> dict:
    return {"success": False, "payload": None, "message": message}
