# src/supabase_admin_api/api/routes/supabase.py
"""Service-role diagnostics against the Supabase auth-admin API."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from supabase_admin_api.api.dependencies import get_supabase
from supabase_admin_api.api.responses import failure_response, ok_response, utc_timestamp
from supabase_admin_api.api.schemas import ErrorEnvelope
from supabase_admin_api.result import capture
from supabase_admin_api.supabase_client import SupabaseAdmin

router = APIRouter()

TEST_PAGE_SIZE = 5


@router.get("/test-supabase", responses={500: {"model": ErrorEnvelope}})
async def check_supabase(supabase: Annotated[SupabaseAdmin, Depends(get_supabase)]) -> JSONResponse:
    """List one small page of users; only a service-role key may do this."""
    result = await capture(supabase.list_users(page=1, per_page=TEST_PAGE_SIZE))
    if not result.ok:
        return failure_response("Supabase connection failed", result.error)

    page = result.value
    return ok_response(
        {
            "message": "Supabase service role working!",
            "userCount": len(page.users),
            "totalUsers": page.total,
            "timestamp": utc_timestamp(),
        }
    )
