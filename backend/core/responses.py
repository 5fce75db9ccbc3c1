from datetime import datetime, timezone
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def response_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def create_api_response(result: Any, status_code: int, message: str) -> dict:
    return {
        'statusCode': status_code,
        'message': message,
        'result': jsonable_encoder(result),
        'time': response_timestamp(),
    }


def api_response(
    result: Any,
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=create_api_response(result, status_code, message),
        headers=headers,
    )
