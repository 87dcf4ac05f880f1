"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from supabase_admin_api.auth import AuthResult
from supabase_admin_api.container import ServiceContainer
from supabase_admin_api.db import DirectDB
from supabase_admin_api.supabase_client import SupabaseAdmin


async def get_services(request: Request) -> ServiceContainer:
    """Get the service container from app state."""
    return request.app.state.services


async def get_supabase(
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> SupabaseAdmin:
    return services.supabase


async def get_db(
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> DirectDB:
    return services.db


async def require_admin(request: Request) -> AuthResult:
    """Reject the request unless the configured auth adapter admits it."""
    services: ServiceContainer = request.app.state.services
    result = await services.auth.authenticate(request=request)
    if not result.ok:
        raise HTTPException(status_code=result.status_code, detail=result.reason or "unauthorized")
    return result
