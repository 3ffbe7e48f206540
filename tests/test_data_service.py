import pytest

from zippyboards.config import Settings
from zippyboards.data_service import MemoryCookies, create_admin_client, create_client
from zippyboards.data_service.cookies import COOKIE_PATH
from zippyboards.errors import (
    INSUFFICIENT_PRIVILEGE,
    NO_SINGLE_ROW,
    UNDEFINED_COLUMN,
    UNDEFINED_FUNCTION,
    UNDEFINED_TABLE,
    UNIQUE_VIOLATION,
    AuthApiError,
    DataServiceError,
)
from zippyboards.models import MemberRole


def test_admin_client_requires_service_role_key(session_factory):
    with pytest.raises(DataServiceError) as exc:
        create_admin_client(session_factory, settings=Settings(SERVICE_ROLE_KEY=None))
    assert exc.value.message == "Missing SERVICE_ROLE_KEY"


def test_admin_api_is_unavailable_to_regular_clients(anon):
    with pytest.raises(DataServiceError) as exc:
        anon.auth.admin.get_user_by_email("owner@example.com")
    assert exc.value.code == INSUFFICIENT_PRIVILEGE


def test_email_lookup_is_case_insensitive(admin):
    created = admin.auth.admin.create_user("Dana@Example.com", "secret123", email_confirm=True)

    found = admin.auth.admin.get_user_by_email("  DANA@example.COM ")

    assert created.email == "dana@example.com"
    assert found is not None and found.id == created.id


def test_sign_in_sets_root_scoped_cookie(session_factory, settings, admin):
    admin.auth.admin.create_user("erin@example.com", "secret123", email_confirm=True)
    cookies = MemoryCookies()
    client = create_client(session_factory, settings=settings, cookies=cookies)

    session = client.auth.sign_in_with_password("erin@example.com", "secret123")

    assert cookies.values[settings.SESSION_COOKIE_NAME] == session.access_token
    assert cookies.paths[settings.SESSION_COOKIE_NAME] == COOKIE_PATH
    # a later request carrying only the cookie is authenticated
    follow_up = create_client(session_factory, settings=settings, cookies=MemoryCookies(dict(cookies.values)))
    assert follow_up.auth.get_user().email == "erin@example.com"


def test_bad_credentials_and_unconfirmed_email(anon, admin):
    admin.auth.admin.create_user("fay@example.com", "secret123")

    with pytest.raises(AuthApiError) as unconfirmed:
        anon.auth.sign_in_with_password("fay@example.com", "secret123")
    with pytest.raises(AuthApiError) as wrong:
        anon.auth.sign_in_with_password("fay@example.com", "wrong-password")

    assert unconfirmed.value.message == "Email not confirmed"
    assert wrong.value.message == "Invalid login credentials"


def test_sign_out_revokes_the_token(session_factory, settings, owner):
    token = owner.auth.get_session().access_token

    owner.auth.sign_out()

    assert owner.auth.get_user() is None
    replay = create_client(session_factory, settings=settings, access_token=token)
    assert replay.auth.get_session() is None


def test_sign_up_code_confirms_email(anon):
    result = anon.auth.sign_up("gus@example.com", "secret123")

    session = anon.auth.exchange_code_for_session(result.confirmation_code)

    assert session.user.email == "gus@example.com"
    assert session.user.email_confirmed_at is not None
    with pytest.raises(AuthApiError):
        anon.auth.exchange_code_for_session(result.confirmation_code)


def test_duplicate_sign_up_is_rejected(anon):
    anon.auth.sign_up("hal@example.com", "secret123")

    with pytest.raises(AuthApiError) as exc:
        anon.auth.sign_up("HAL@example.com", "secret123")
    assert exc.value.message == "User already registered"


def test_short_password_is_rejected(anon):
    with pytest.raises(AuthApiError) as exc:
        anon.auth.sign_up("ivy@example.com", "123")
    assert exc.value.code == "weak_password"


def test_projects_are_visible_to_members_only(owner, project, sign_in, anon):
    outsider = sign_in("outsider@example.com")

    assert owner.table("projects").eq("id", project.id).single()["name"] == "Launch Plan"
    assert outsider.table("projects").eq("id", project.id).maybe_single() is None
    assert anon.table("projects").select() == []
    with pytest.raises(DataServiceError) as exc:
        outsider.table("projects").eq("id", project.id).single()
    assert exc.value.code == NO_SINGLE_ROW


def test_users_cannot_insert_memberships_for_others(owner, project, sign_in):
    outsider = sign_in("outsider@example.com")

    with pytest.raises(DataServiceError) as exc:
        outsider.table("project_members").insert(
            {"project_id": project.id, "user_id": outsider.current_user_id(), "role": "owner"}
        )
    assert exc.value.code == INSUFFICIENT_PRIVILEGE

    # members cannot delete memberships either; the filter simply matches nothing
    assert owner.table("project_members").eq("project_id", project.id).delete() == []


def test_duplicate_membership_is_a_unique_violation(admin, owner, project):
    with pytest.raises(DataServiceError) as exc:
        admin.table("project_members").insert(
            {"project_id": project.id, "user_id": owner.current_user_id(), "role": MemberRole.MEMBER.value}
        )
    assert exc.value.code == UNIQUE_VIOLATION


def test_password_hash_is_never_exposed(owner):
    row = owner.table("users").single()

    assert "password_hash" not in row
    with pytest.raises(DataServiceError) as exc:
        owner.table("users").eq("password_hash", "x").select()
    assert exc.value.code == UNDEFINED_COLUMN


def test_unknown_table_and_procedure(owner):
    with pytest.raises(DataServiceError) as table_error:
        owner.table("secrets")
    with pytest.raises(DataServiceError) as rpc_error:
        owner.rpc("drop_everything")
    with pytest.raises(DataServiceError) as params_error:
        owner.rpc("get_project_members_if_allowed", {"p_project": "x"})

    assert table_error.value.code == UNDEFINED_TABLE
    assert rpc_error.value.code == UNDEFINED_FUNCTION
    assert params_error.value.code == UNDEFINED_FUNCTION


def test_member_listing_requires_membership(owner, project, sign_in):
    outsider = sign_in("outsider@example.com")
    params = {"p_project_id": project.id, "p_user_id": owner.current_user_id()}

    assert len(owner.rpc("get_project_members_if_allowed", params)) == 1
    # asking on someone else's behalf returns nothing
    assert outsider.rpc("get_project_members_if_allowed", params) == []
    assert outsider.rpc(
        "get_project_members_if_allowed",
        {"p_project_id": project.id, "p_user_id": outsider.current_user_id()},
    ) == []


def test_project_creation_requires_a_session(anon):
    with pytest.raises(DataServiceError) as exc:
        anon.rpc("create_project_with_owner", {"p_name": "Orphan"})
    assert exc.value.code == INSUFFICIENT_PRIVILEGE


def test_invalid_enum_value_is_reported(owner, project):
    with pytest.raises(DataServiceError) as exc:
        owner.table("tasks").insert({"project_id": project.id, "title": "Bad lane", "lane": "archived"})
    assert exc.value.code == "22P02"
