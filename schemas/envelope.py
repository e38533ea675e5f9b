# Response envelopes shared by every router
# Success: {"success": true, "data": ...}; errors: {"success": false, "error": ...}

import math
from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[Any] = None


def success(data: Any = None) -> dict:
    return {"success": True, "data": data}


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


def error(message: str, details: Any = None) -> dict:
    return ErrorResponse(error=message, details=details).model_dump(exclude_none=True)
