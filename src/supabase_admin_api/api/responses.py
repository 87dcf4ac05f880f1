from datetime import datetime, timezone
from typing import Any

import sentry_sdk
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from supabase_admin_api.errors import describe_error
from supabase_admin_api.logging import get_logger


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a `Z` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ok_response(payload: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=200, content=jsonable_encoder(payload))


def failure_response(message: str, error: Exception) -> JSONResponse:
    """500 with `{error, details}`; details are passed through unsanitized."""
    get_logger().log_error(message, error)
    sentry_sdk.capture_exception(error)
    return JSONResponse(
        status_code=500,
        content=jsonable_encoder({"error": message, "details": describe_error(error)}),
    )
