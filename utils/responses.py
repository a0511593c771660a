from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse


def error_response(status_code: int, message: str) -> JSONResponse:
    """{"success": False, "error": {...}} with the HTTP status set to match"""
    body = ErrorResponse(error=ErrorDetail(code=status_code, message=message))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
