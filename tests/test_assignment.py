from taskberry.utils.assignment import assignable_users, can_assign
from taskberry.utils.directory import Directory

from conftest import ORG, make_task, make_user


def ids(users):
    return [u.id for u in users]


def test_super_admin_can_assign_every_active_user_but_self(directory, user):
    result = ids(assignable_users(user("a1"), directory))
    assert set(result) == {"m1", "m2", "s1", "s2", "s3", "x1", "x2", "x3", "x4", "x5"}
    assert result == ids(directory.sort_by_name(directory.get_user_by_id(i) for i in result))


def test_manager_reaches_direct_reports_only(directory, user):
    assert ids(assignable_users(user("m1"), directory)) == ["x1", "x2", "x3", "s1", "s2"]
    # x5's supervisor reports to m1, but x5's manager is m2
    assert "x5" not in ids(assignable_users(user("m1"), directory))
    assert ids(assignable_users(user("m2"), directory)) == ["x4", "x5", "s3"]


def test_supervisor_includes_self(directory, user):
    assert ids(assignable_users(user("s1"), directory)) == ["x1", "x2", "x5", "s1"]
    assert ids(assignable_users(user("s3"), directory)) == ["x4", "s3"]


def test_member_only_self(directory, user):
    assert ids(assignable_users(user("x1"), directory)) == ["x1"]


def test_unknown_or_inactive_actor_gets_nothing(directory, user):
    assert assignable_users(user("x6"), directory) == []
    assert assignable_users(user("p1"), directory) == []
    assert assignable_users(None, directory) == []

    stranger = Directory.from_records([make_user("zz", "Zed", "member")]).get_user_by_id("zz")
    assert assignable_users(stranger, directory) == []


def test_unknown_role_fails_safe():
    directory = Directory.from_records(ORG + [make_user("c1", "Cleo Chief", "ceo")])
    assert assignable_users(directory.get_user_by_id("c1"), directory) == []


def test_reassignment_keeps_current_assignee(directory, user):
    task = make_task(created_by="s1", assignee_id="x2")
    assert ids(assignable_users(user("x1"), directory, task)) == ["x1", "x2"]

    task = make_task(created_by="a1", assignee_id="x5")
    assert "x5" in ids(assignable_users(user("m1"), directory, task))


def test_reassignment_has_no_duplicates(directory, user):
    task = make_task(created_by="s1", assignee_id="s1")
    assert ids(assignable_users(user("s1"), directory, task)) == ["x1", "x2", "x5", "s1"]


def test_can_assign(directory, user):
    assert can_assign(user("s1"), "x1", directory)
    assert not can_assign(user("s1"), "x3", directory)
    assert not can_assign(user("x1"), "x2", directory)
    assert can_assign(user("x1"), "x2", directory, make_task(assignee_id="x2"))
