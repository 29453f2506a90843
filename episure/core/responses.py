from typing import Any, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T | None = None
    message: str | None = None

def ok(data: Any = None, message: str | None = None) -> dict:
    return {"success": True, "data": data, "message": message}

def error_body(message: str, error: str | None = None, details: Any = None) -> dict:
    body = {"success": False, "message": message, "error": error}
    if details is not None:
        body["details"] = details
    return body
