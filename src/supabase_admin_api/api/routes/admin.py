# src/supabase_admin_api/api/routes/admin.py
"""
User administration through the Supabase auth-admin API.

Every route here requires admin credentials (see `require_admin`).
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from supabase_admin_api.api.dependencies import get_supabase, require_admin
from supabase_admin_api.api.responses import failure_response, ok_response
from supabase_admin_api.api.schemas import CreateUserRequest, ErrorEnvelope
from supabase_admin_api.result import capture
from supabase_admin_api.supabase_client import SupabaseAdmin

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/create-user", responses={500: {"model": ErrorEnvelope}})
async def create_user(
    supabase: Annotated[SupabaseAdmin, Depends(get_supabase)],
    req: Annotated[CreateUserRequest, Body()] = CreateUserRequest(),
) -> JSONResponse:
    """
    Create a user with the email already confirmed.

    A missing body counts as an empty one; Supabase reports what is absent.
    """
    result = await capture(
        supabase.create_user(
            email=req.email,
            password=req.password,
            user_metadata=req.user_metadata,
            email_confirm=True,
        )
    )
    if not result.ok:
        return failure_response("Failed to create user", result.error)
    return ok_response({"message": "User created successfully", "user": result.value})


@router.get("/users", responses={500: {"model": ErrorEnvelope}})
async def list_users(supabase: Annotated[SupabaseAdmin, Depends(get_supabase)]) -> JSONResponse:
    result = await capture(supabase.list_users())
    if not result.ok:
        return failure_response("Failed to retrieve users", result.error)

    users = result.value.users
    return ok_response({"message": "Users retrieved successfully", "users": users, "total": len(users)})
