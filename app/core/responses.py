"""Response envelope shared by every endpoint: {statusCode, data, message, success}."""
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def respond(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {
                "statusCode": status_code,
                "data": data,
                "message": message,
                "success": status_code < 400,
            }
        ),
    )


def respond_error(status_code: int, message: str, errors: list | None = None, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {
                "statusCode": status_code,
                "data": None,
                "message": message,
                "success": False,
                "errors": errors or [],
            }
        ),
        headers=headers,
    )
