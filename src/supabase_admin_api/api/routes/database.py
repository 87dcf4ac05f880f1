from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from supabase_admin_api.api.dependencies import get_db
from supabase_admin_api.api.responses import failure_response, ok_response
from supabase_admin_api.api.schemas import ErrorEnvelope
from supabase_admin_api.db import DirectDB
from supabase_admin_api.result import capture

router = APIRouter()


@router.get("/test-db", responses={500: {"model": ErrorEnvelope}})
async def check_database(db: Annotated[DirectDB, Depends(get_db)]) -> JSONResponse:
    result = await capture(db.database_info())
    if not result.ok:
        return failure_response("Database connection failed", result.error)
    return ok_response({"message": "Direct database connection working!", "data": result.value})
