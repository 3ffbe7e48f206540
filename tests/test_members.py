from zippyboards.actions.members import add_member, remove_member
import zippyboards.actions.projects as project_actions
from zippyboards.actions.projects import list_members, project_page
from zippyboards.cache import project_path
from zippyboards.errors import ActionErrorCode


def _membership_rows(admin, project_id, user_id=None):
    query = admin.table("project_members").eq("project_id", project_id)
    if user_id is not None:
        query = query.eq("user_id", user_id)
    return sorted(query.select(), key=lambda row: row["user_id"])


def test_owner_adds_member_by_email(owner, admin, project, sign_in, cache):
    member = sign_in("member@example.com")
    cache.set(project_path(project.id), {"stale": True})

    result = add_member(owner, admin, project.id, "Member@Example.com", cache)

    assert result.success
    assert result.data.user_id == member.current_user_id()
    assert result.data.role.value == "member"
    assert cache.get(project_path(project.id)) is None
    rows = _membership_rows(admin, project.id, member.current_user_id())
    assert [row["role"] for row in rows] == ["member"]


def test_adding_twice_reports_already_member(owner, admin, project, sign_in):
    member = sign_in("member@example.com")

    first = add_member(owner, admin, project.id, "member@example.com")
    second = add_member(owner, admin, project.id, "member@example.com")

    assert first.success
    assert not second.success
    assert second.code == ActionErrorCode.ALREADY_MEMBER
    assert second.error == "User is already a member of this project."
    assert len(_membership_rows(admin, project.id, member.current_user_id())) == 1


def test_unknown_email_is_not_found(owner, admin, project):
    result = add_member(owner, admin, project.id, "nobody@example.com")

    assert result.code == ActionErrorCode.NOT_FOUND
    assert len(_membership_rows(admin, project.id)) == 1


def test_malformed_email_is_rejected(owner, admin, project):
    result = add_member(owner, admin, project.id, "not-an-email")

    assert result.code == ActionErrorCode.VALIDATION_FAILURE


def test_non_owner_cannot_add_or_remove(owner, admin, project, sign_in):
    member = sign_in("member@example.com")
    sign_in("third@example.com")
    assert add_member(owner, admin, project.id, "member@example.com").success
    before = _membership_rows(admin, project.id)

    added = add_member(member, admin, project.id, "third@example.com")
    removed = remove_member(member, admin, project.id, owner.current_user_id())

    assert added.code == ActionErrorCode.PERMISSION_DENIED
    assert added.error == "Permission denied: Only project owners can add members."
    assert removed.code == ActionErrorCode.PERMISSION_DENIED
    assert _membership_rows(admin, project.id) == before


def test_outsider_gets_permission_denied(admin, project, sign_in):
    outsider = sign_in("outsider@example.com")

    result = add_member(outsider, admin, project.id, "outsider@example.com")

    assert result.code == ActionErrorCode.PERMISSION_DENIED
    assert len(_membership_rows(admin, project.id)) == 1


def test_anonymous_caller_must_authenticate(anon, admin, project):
    result = add_member(anon, admin, project.id, "owner@example.com")

    assert not result.success
    assert result.code == ActionErrorCode.UNAUTHENTICATED
    assert result.error == "Authentication required."


def test_owner_cannot_remove_themselves(owner, admin, project):
    result = remove_member(owner, admin, project.id, owner.current_user_id())

    assert result.code == ActionErrorCode.SELF_REMOVAL_FORBIDDEN
    assert result.error == "Project owners cannot remove themselves."
    assert len(_membership_rows(admin, project.id, owner.current_user_id())) == 1


def test_owner_removes_member(owner, admin, project, sign_in, cache):
    member = sign_in("member@example.com")
    assert add_member(owner, admin, project.id, "member@example.com").success
    cache.set(project_path(project.id), {"stale": True})

    result = remove_member(owner, admin, project.id, member.current_user_id(), cache)

    assert result.success
    assert _membership_rows(admin, project.id, member.current_user_id()) == []
    assert cache.get(project_path(project.id)) is None


def test_removing_a_non_member_succeeds(owner, admin, project):
    result = remove_member(owner, admin, project.id, "00000000-0000-0000-0000-000000000000")

    assert result.success


def test_members_listing_puts_owner_first(owner, admin, project, sign_in):
    sign_in("aaron@example.com")
    assert add_member(owner, admin, project.id, "aaron@example.com").success

    result = list_members(owner, project.id)

    assert result.success
    assert [(m.email, m.role.value) for m in result.data] == [
        ("owner@example.com", "owner"),
        ("aaron@example.com", "member"),
    ]


def test_member_added_while_page_builds_is_not_lost(owner, admin, project, sign_in, cache, monkeypatch):
    member = sign_in("member@example.com")
    fetch_members = project_actions._fetch_members

    def fetch_then_add(client, project_id, user_id):
        members = fetch_members(client, project_id, user_id)
        assert add_member(owner, admin, project_id, "member@example.com", cache).success
        return members

    monkeypatch.setattr(project_actions, "_fetch_members", fetch_then_add)
    during = project_page(owner, project.id, cache).data
    monkeypatch.setattr(project_actions, "_fetch_members", fetch_members)

    after = project_page(owner, project.id, cache).data

    assert len(during.members) == 1
    assert cache.get(project_path(project.id)) is after
    assert member.current_user_id() in {m.user_id for m in after.members}
