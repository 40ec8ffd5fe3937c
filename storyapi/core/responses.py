"""JSON envelope shared by every endpoint: {success, message, data}."""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

SUCCESS_MESSAGE = "Operation successful."


def success_body(data: Any = None) -> dict:
    return {"success": True, "message": SUCCESS_MESSAGE, "data": jsonable_encoder(data)}


def error_body(message: str) -> dict:
    return {"success": False, "message": message, "data": None}


def success_response(data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(success_body(data), status_code=status_code)


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(error_body(message), status_code=status_code)
