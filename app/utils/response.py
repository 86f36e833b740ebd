from typing import Any

from fastapi.responses import JSONResponse


def success_response(data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=data)


def error_response(message: str, status_code: int = 400, key: str = "error", **extra: Any) -> JSONResponse:
    """Build an error body keyed the way the calling endpoint reports failures.

    Endpoints differ: some answer ``{"error": ...}``, some ``{"message": ...}``
    and validation failures ``{"errors": [...]}``. Extra keyword arguments
    (``details`` for instance) are merged into the body.
    """
    return JSONResponse(status_code=status_code, content={key: message, **extra})


def validation_error_response(errors: list[str]) -> JSONResponse:
    return JSONResponse(status_code=400, content={"errors": errors})
