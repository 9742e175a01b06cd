import pytest

from taskberry.models.user import Role, UserStatus
from taskberry.utils.directory import Directory, normalize_role


def test_lookup_by_id_is_case_sensitive(directory):
    assert directory.get_user_by_id("m1").name == "Maya Manager"
    assert directory.get_user_by_id("M1") is None
    assert directory.get_user_by_id("nobody") is None
    assert directory.get_user_by_id(None) is None


def test_lookup_by_email_is_case_insensitive(directory):
    assert directory.get_user_by_email("S1@Example.COM").id == "s1"
    assert directory.get_user_by_email("missing@example.com") is None


def test_list_by_role_is_ordered_by_name(directory):
    members = directory.list_by_role(Role.member)
    assert [u.id for u in members] == ["x1", "x2", "x3", "x4", "x5", "x6"]
    # restartable
    assert directory.list_by_role(Role.member) == members
    assert [u.id for u in directory.list_by_role(Role.supervisor)] == ["s3", "s1", "s2"]


def test_list_active_skips_pending_and_suspended(directory):
    ids = {u.id for u in directory.list_active()}
    assert "p1" not in ids
    assert "x6" not in ids
    assert "a1" in ids
    assert len(directory) == 13


def test_records_with_mongo_ids_and_camel_case_are_normalised():
    directory = Directory.from_records([
        {"_id": "abc", "name": "Legacy", "email": "Legacy@Example.com", "role": "team_member",
         "status": "active", "supervisorId": "s9", "managerId": "m9"},
    ])
    user = directory.get_user_by_id("abc")
    assert user.role == Role.member
    assert user.role_label == "team_member"
    assert user.supervisor_id == "s9"
    assert user.manager_id == "m9"
    assert "abc" in directory


@pytest.mark.parametrize("label, expected", [
    ("member", Role.member),
    ("Super_admin", Role.super_admin),
    ("SUPERVISOR", Role.supervisor),
    ("team-member", Role.member),
    ("admin", None),
    ("", None),
    (None, None),
])
def test_normalize_role(label, expected):
    assert normalize_role(label) is expected


def test_unknown_role_is_not_defaulted():
    directory = Directory.from_records([{"id": "u1", "name": "U", "email": "u@example.com",
                                         "role": "ceo", "status": "active"}])
    user = directory.get_user_by_id("u1")
    assert user.role is None
    assert user.role_label == "ceo"


def test_missing_status_grants_nothing():
    directory = Directory.from_records([{"id": "u1", "name": "U", "email": "u@example.com", "role": "member"}])
    assert directory.get_user_by_id("u1").status == UserStatus.pending_approval
    assert directory.list_active() == []


def test_duplicate_ids_are_rejected():
    with pytest.raises(ValueError):
        Directory.from_records([
            {"id": "u1", "name": "A", "email": "a@example.com", "status": "active"},
            {"_id": "u1", "name": "B", "email": "b@example.com", "status": "active"},
        ])


def test_resolve_actor(directory, user):
    assert directory.resolve_actor(user("x1")).id == "x1"
    assert directory.resolve_actor(user("x6")) is None
    assert directory.resolve_actor(user("p1")) is None
    assert directory.resolve_actor(None) is None


def test_role_seniority_order():
    assert Role.member < Role.supervisor < Role.manager < Role.super_admin
    assert sorted([Role.super_admin, Role.member, Role.manager, Role.supervisor]) == [
        Role.member, Role.supervisor, Role.manager, Role.super_admin,
    ]
    assert Role.manager >= Role.supervisor
