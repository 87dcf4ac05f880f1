from __future__ import annotations

import json

import pytest

from supabase_admin_api.api.routes import admin, database, root, supabase
from supabase_admin_api.api.schemas import CreateUserRequest
from supabase_admin_api.errors import (
    DatabaseError,
    ServiceAuthError,
    ServiceConflictError,
)
from tests.supabase_admin_api._fakes import FakeDB, FakeSupabase, make_user, unreachable


def _body(response) -> dict:
    return json.loads(response.body)


@pytest.mark.asyncio
async def test_root_returns_plain_greeting() -> None:
    text = await root.root()
    assert isinstance(text, str)
    assert text.startswith("Hello")


@pytest.mark.asyncio
async def test_check_supabase_reports_page_and_total_separately() -> None:
    fake = FakeSupabase(users=[make_user(i) for i in range(1, 13)], total=120)

    response = await supabase.check_supabase(supabase=fake)

    assert response.status_code == 200
    body = _body(response)
    assert body["message"] == "Supabase service role working!"
    assert body["userCount"] == 5
    assert body["totalUsers"] == 120
    assert body["timestamp"].endswith("Z")
    assert fake.calls_to("list_users") == [{"page": 1, "per_page": 5}]


@pytest.mark.asyncio
async def test_check_supabase_small_project_counts_what_it_got() -> None:
    fake = FakeSupabase(users=[make_user(1), make_user(2)])

    body = _body(await supabase.check_supabase(supabase=fake))

    assert body["userCount"] == 2
    assert body["totalUsers"] == 2


@pytest.mark.asyncio
async def test_create_user_returns_service_user_unmodified() -> None:
    fake = FakeSupabase()
    req = CreateUserRequest(
        email="jane@example.com",
        password="s3cret-pass",
        user_metadata={"full_name": "Jane Doe", "plan": "pro"},
    )
    expected = await FakeSupabase().create_user(
        email=req.email, password=req.password, user_metadata=req.user_metadata
    )

    response = await admin.create_user(req=req, supabase=fake)

    assert response.status_code == 200
    body = _body(response)
    assert body["message"] == "User created successfully"
    assert body["user"] == expected
    assert fake.calls_to("create_user") == [
        {
            "email": "jane@example.com",
            "password": "s3cret-pass",
            "user_metadata": {"full_name": "Jane Doe", "plan": "pro"},
            "email_confirm": True,
        }
    ]


@pytest.mark.asyncio
async def test_create_user_forwards_missing_fields_without_local_validation() -> None:
    fake = FakeSupabase(create_error=ServiceConflictError("Password should be at least 6 characters", http_status=422))

    response = await admin.create_user(req=CreateUserRequest(email="x@example.com"), supabase=fake)

    assert fake.calls_to("create_user")[0]["password"] is None
    assert response.status_code == 500
    body = _body(response)
    assert body["error"] == "Failed to create user"
    assert body["details"]["status"] == 422
    assert "at least 6 characters" in body["details"]["message"]


@pytest.mark.asyncio
async def test_list_users_total_matches_users_length() -> None:
    fake = FakeSupabase(users=[make_user(i) for i in range(1, 8)], total=500)

    response = await admin.list_users(supabase=fake)

    body = _body(response)
    assert response.status_code == 200
    assert body["message"] == "Users retrieved successfully"
    assert body["total"] == len(body["users"]) == 7
    assert fake.calls_to("list_users") == [{"page": None, "per_page": None}]


@pytest.mark.asyncio
async def test_check_database_returns_introspection_row() -> None:
    response = await database.check_database(db=FakeDB())

    assert response.status_code == 200
    body = _body(response)
    assert body["message"] == "Direct database connection working!"
    assert body["data"]["database"] == "postgres"
    assert body["data"]["user"] == "postgres"
    assert body["data"]["timestamp"].startswith("2024-05-01T12:00:00")


@pytest.mark.parametrize(
    "call, message",
    [
        (lambda: supabase.check_supabase(supabase=FakeSupabase(list_error=unreachable())), "Supabase connection failed"),
        (
            lambda: admin.create_user(
                req=CreateUserRequest(email="a@b.c", password="pw123456"),
                supabase=FakeSupabase(create_error=ServiceAuthError("Invalid API key", http_status=401)),
            ),
            "Failed to create user",
        ),
        (lambda: admin.list_users(supabase=FakeSupabase(list_error=unreachable())), "Failed to retrieve users"),
        (
            lambda: database.check_database(db=FakeDB(error=DatabaseError("relation does not exist", sqlstate="42P01"))),
            "Database connection failed",
        ),
    ],
    ids=["test-supabase", "create-user", "users", "test-db"],
)
@pytest.mark.asyncio
async def test_every_route_maps_external_failure_to_500_envelope(call, message) -> None:
    response = await call()

    assert response.status_code == 500
    body = _body(response)
    assert body["error"] == message
    assert body["details"]["message"]


@pytest.mark.asyncio
async def test_unexpected_exception_still_becomes_envelope() -> None:
    fake = FakeSupabase(list_error=RuntimeError("socket exploded"))

    response = await admin.list_users(supabase=fake)

    assert response.status_code == 500
    assert _body(response)["details"] == {"error_type": "RuntimeError", "message": "socket exploded"}
