"""
Startup connectivity probes.

Both collaborators are checked once at startup as background tasks. The
outcome is only ever logged; a failed probe never stops the listener.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from .errors import describe_error
from .logging import StructuredLogger, timed
from .result import capture

if TYPE_CHECKING:
    from .container import ServiceContainer
    from .db import DirectDB
    from .supabase_client import SupabaseAdmin


@dataclass(frozen=True)
class ProbeResult:
    name: str
    ok: bool
    via: str | None = None
    detail: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None


async def verify_direct_connection(db: DirectDB) -> ProbeResult:
    result = await capture(db.server_time())
    if result.ok:
        return ProbeResult(name="database", ok=True, via="query", detail={"current_time": result.value})
    return ProbeResult(name="database", ok=False, error=result.error)


async def verify_service_connection(supabase: SupabaseAdmin, *, rpc_name: str = "version") -> ProbeResult:
    """
    Probe the managed service, falling back to the auth-admin API.

    A missing or renamed RPC should not read as an outage, so an RPC failure
    is cross-checked once with a one-user listing before reporting failure.
    """
    primary = await capture(supabase.rpc(rpc_name))
    if primary.ok:
        return ProbeResult(name="supabase", ok=True, via="rpc", detail={"rpc": rpc_name})

    fallback = await capture(supabase.list_users(page=1, per_page=1))
    if fallback.ok:
        return ProbeResult(
            name="supabase",
            ok=True,
            via="auth_admin",
            detail={"rpc": rpc_name, "rpc_error": describe_error(primary.error)},
        )
    return ProbeResult(
        name="supabase",
        ok=False,
        detail={"rpc": rpc_name, "rpc_error": describe_error(primary.error)},
        error=fallback.error,
    )


async def _run_probe(
    name: str,
    probe: Callable[[], Awaitable[ProbeResult]],
    logger: StructuredLogger,
) -> ProbeResult:
    with logger.bind(probe=name), timed() as timer:
        outcome = await probe()
        if outcome.ok:
            logger.info(
                f"{name} connected successfully",
                via=outcome.via,
                duration_ms=round(timer.elapsed_ms, 1),
                **outcome.detail,
            )
        elif outcome.error is not None:
            logger.log_error(
                f"{name} connection failed",
                outcome.error,
                duration_ms=round(timer.elapsed_ms, 1),
                **outcome.detail,
            )
        else:
            logger.error(
                f"{name} connection failed",
                duration_ms=round(timer.elapsed_ms, 1),
                **outcome.detail,
            )
    return outcome


def start_probes(services: ServiceContainer, logger: StructuredLogger) -> list[asyncio.Task[ProbeResult]]:
    """Schedule both probes without waiting for them."""
    rpc_name = services.settings.supabase_probe_rpc
    return [
        asyncio.create_task(
            _run_probe("database", lambda: verify_direct_connection(services.db), logger),
            name="probe:database",
        ),
        asyncio.create_task(
            _run_probe("supabase", lambda: verify_service_connection(services.supabase, rpc_name=rpc_name), logger),
            name="probe:supabase",
        ),
    ]
