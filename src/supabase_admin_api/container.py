from __future__ import annotations

from dataclasses import dataclass

from .auth import AuthAdapter, build_auth_adapter
from .db import DirectDB, PoolConfig, create_pool
from .settings import Settings
from .supabase_client import SupabaseAdmin


@dataclass(frozen=True)
class ServiceContainer:
    """One shared instance per external dependency, built once per process."""

    settings: Settings
    supabase: SupabaseAdmin
    db: DirectDB
    auth: AuthAdapter

    async def close(self) -> None:
        try:
            await self.db.close()
        finally:
            await self.supabase.close()


async def build_services(settings: Settings) -> ServiceContainer:
    supabase = SupabaseAdmin(
        url=settings.require("supabase_url"),
        service_role_key=settings.require("supabase_service_role_key"),
        timeout=settings.supabase_http_timeout,
    )
    pool = await create_pool(settings.require("database_url"), PoolConfig.from_settings(settings))
    return ServiceContainer(
        settings=settings,
        supabase=supabase,
        db=DirectDB(pool=pool),
        auth=build_auth_adapter(settings),
    )
