from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    *,
    data: Optional[Any] = None,
    message: str = "Operation successful",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    `{status_code, status, message, data}` envelope returned by /health and
    the lead-capture contact form. The /api/check family answers with bare
    `{"message": ...}` bodies instead; see message_response.
    """
    status_str = "success" if status_code < 400 else "error"
    data = jsonable_encoder(data) if data is not None else {}

    return JSONResponse(
        status_code=status_code,
        content={
            "status_code": status_code,
            "status": status_str,
            "message": message,
            "data": data,
        },
    )


def message_response(message: str, status_code: int, **extra: Any) -> JSONResponse:
    """Bare `{"message": ...}` body used by the /api/check family."""
    content = {"message": message}
    content.update(jsonable_encoder(extra))
    return JSONResponse(status_code=status_code, content=content)
