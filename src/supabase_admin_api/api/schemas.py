from typing import Any

from pydantic import BaseModel, Field


class CreateUserRequest(BaseModel):
    # Shape and presence are left to Supabase to enforce
    email: Any = Field(None, examples=["jane@example.com"])
    password: Any = Field(None, examples=["correct horse battery staple"])
    user_metadata: Any = Field(None, examples=[{"full_name": "Jane Doe"}])

    model_config = {"extra": "ignore"}


class ErrorEnvelope(BaseModel):
    error: str = Field(..., description="Fixed human-readable message for the failed route.")
    details: Any = Field(None, description="Raw description of the underlying error.")
