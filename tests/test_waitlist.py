from zippyboards.actions.waitlist import join_waitlist
from zippyboards.errors import ActionErrorCode


def test_join_waitlist(anon, admin):
    result = join_waitlist(anon, "Early@Example.com")

    assert result.success
    assert result.data.email == "early@example.com"
    assert [row["email"] for row in admin.table("waitlist").select()] == ["early@example.com"]


def test_duplicate_email_is_friendly(anon):
    join_waitlist(anon, "early@example.com")

    result = join_waitlist(anon, "early@example.com")

    assert result.code == ActionErrorCode.VALIDATION_FAILURE
    assert result.error == "This email is already on our waitlist!"


def test_malformed_email(anon):
    result = join_waitlist(anon, "early-at-example")

    assert result.code == ActionErrorCode.VALIDATION_FAILURE
    assert result.error == "Please enter a valid email address."


def test_waitlist_is_write_only(anon, owner):
    join_waitlist(anon, "early@example.com")

    assert anon.table("waitlist").select() == []
    assert owner.table("waitlist").select() == []
