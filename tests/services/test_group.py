"""GroupRegistry: membership rows and the single-owner rule.

Invariants:
    - Exactly one owner per group, and the owner always has a membership row
    - The owner cannot leave until ownership is transferred
    - Transfer only goes from the stored owner to another current member
    - Deleting a group removes every membership row with it
"""

import pytest

from geopost.core.config import settings
from geopost.core.errors import BadValuesError, NotAllowedError, NotFoundError
from geopost.modules.groups.models.group import Group, GroupMembership
from geopost.modules.groups.services import group as group_service
from geopost.modules.groups.services.group import (
    AlreadyInGroupError,
    GroupMemberNotFoundError,
    GroupNotFoundError,
    NotInGroupError,
    OwnerCannotLeaveError,
    add_member,
    create_group,
    delete_group,
    get_group_info,
    get_groups_of_user,
    is_member,
    remove_member,
    transfer_ownership,
    update_group_name,
)


@pytest.fixture
def carol(make_user):
    return make_user("carol")


@pytest.fixture
def dave(make_user):
    return make_user("dave")


@pytest.fixture
def hikers(db, carol):
    return create_group(db, carol.id, "Hikers")


def _owner_is_member(db, group_id):
    info = get_group_info(db, group_id)
    return info["owner_id"] in info["members"]


# -- create / info --

@pytest.mark.parametrize("name", ["", "   ", None])
def test_create_with_empty_name_is_bad_values(db, carol, name):
    with pytest.raises(BadValuesError):
        create_group(db, carol.id, name)
    assert db.query(Group).count() == 0


def test_create_with_overlong_name_is_bad_values(db, carol):
    with pytest.raises(BadValuesError):
        create_group(db, carol.id, "x" * (settings.GROUP_NAME_MAX_LENGTH + 1))


def test_create_makes_creator_owner_and_member(db, carol, hikers):
    info = get_group_info(db, hikers.id)

    assert info["name"] == "Hikers"
    assert info["owner_id"] == carol.id
    assert info["members"] == [carol.id]
    assert is_member(db, hikers.id, carol.id).id == hikers.id


def test_info_for_unknown_group_is_not_found(db):
    with pytest.raises(GroupNotFoundError):
        get_group_info(db, "missing")


# -- is_member guard --

def test_is_member_unknown_group_is_not_found(db, carol):
    with pytest.raises(NotFoundError):
        is_member(db, "missing", carol.id)


def test_is_member_for_outsider_is_not_allowed(db, dave, hikers):
    with pytest.raises(NotInGroupError):
        is_member(db, hikers.id, dave.id)


# -- add / remove --

def test_add_member(db, carol, dave, hikers):
    add_member(db, hikers.id, dave.id)
    assert set(get_group_info(db, hikers.id)["members"]) == {carol.id, dave.id}
    assert is_member(db, hikers.id, dave.id)


def test_add_existing_member_is_not_allowed(db, carol, hikers):
    with pytest.raises(AlreadyInGroupError):
        add_member(db, hikers.id, carol.id)
    assert db.query(GroupMembership).count() == 1


def test_racing_add_loses_on_membership_key(db, carol, hikers, monkeypatch):
    """Both adds pass the read check: the primary key keeps one row."""
    group_id, carol_id = hikers.id, carol.id
    db.expunge_all()
    monkeypatch.setattr(group_service, "_membership", lambda *args: None)

    with pytest.raises(AlreadyInGroupError, match="Hikers"):
        add_member(db, group_id, carol_id)
    assert db.query(GroupMembership).count() == 1


def test_add_to_unknown_group_is_not_found(db, dave):
    with pytest.raises(GroupNotFoundError):
        add_member(db, "missing", dave.id)


def test_owner_cannot_leave(db, carol, hikers):
    with pytest.raises(OwnerCannotLeaveError):
        remove_member(db, hikers.id, carol.id)
    assert _owner_is_member(db, hikers.id)


def test_remove_non_member_is_not_found(db, dave, hikers):
    with pytest.raises(GroupMemberNotFoundError):
        remove_member(db, hikers.id, dave.id)


def test_remove_member(db, carol, dave, hikers):
    add_member(db, hikers.id, dave.id)
    remove_member(db, hikers.id, dave.id)

    assert get_group_info(db, hikers.id)["members"] == [carol.id]
    with pytest.raises(NotInGroupError):
        is_member(db, hikers.id, dave.id)


# -- transfer --

def test_transfer_to_non_member_is_not_allowed(db, carol, dave, hikers):
    with pytest.raises(NotAllowedError):
        transfer_ownership(db, hikers.id, carol.id, dave.id)
    assert get_group_info(db, hikers.id)["owner_id"] == carol.id


def test_transfer_to_self_is_not_allowed(db, carol, hikers):
    with pytest.raises(NotAllowedError):
        transfer_ownership(db, hikers.id, carol.id, carol.id)


def test_transfer_by_non_owner_is_not_allowed(db, carol, dave, hikers):
    add_member(db, hikers.id, dave.id)
    with pytest.raises(NotAllowedError):
        transfer_ownership(db, hikers.id, dave.id, carol.id)
    assert get_group_info(db, hikers.id)["owner_id"] == carol.id


def test_transfer_unknown_group_is_not_found(db, carol, dave):
    with pytest.raises(GroupNotFoundError):
        transfer_ownership(db, "missing", carol.id, dave.id)


def test_transfer_swaps_who_may_leave(db, carol, dave, hikers):
    add_member(db, hikers.id, dave.id)
    transfer_ownership(db, hikers.id, carol.id, dave.id)

    info = get_group_info(db, hikers.id)
    assert info["owner_id"] == dave.id
    assert carol.id in info["members"]

    with pytest.raises(OwnerCannotLeaveError):
        remove_member(db, hikers.id, dave.id)
    remove_member(db, hikers.id, carol.id)

    assert get_group_info(db, hikers.id)["members"] == [dave.id]
    assert _owner_is_member(db, hikers.id)


# -- rename / delete / listing --

def test_update_group_name(db, hikers):
    update_group_name(db, hikers.id, "Trail Runners")
    assert get_group_info(db, hikers.id)["name"] == "Trail Runners"
    with pytest.raises(BadValuesError):
        update_group_name(db, hikers.id, " ")


def test_delete_requires_membership(db, dave, hikers):
    with pytest.raises(NotInGroupError):
        delete_group(db, hikers.id, dave.id)


def test_delete_by_plain_member_is_not_allowed(db, dave, hikers):
    add_member(db, hikers.id, dave.id)
    with pytest.raises(NotAllowedError):
        delete_group(db, hikers.id, dave.id)
    assert db.query(GroupMembership).count() == 2


def test_delete_removes_group_and_memberships(db, carol, dave, hikers):
    add_member(db, hikers.id, dave.id)
    group_id = hikers.id

    assert delete_group(db, group_id, carol.id) == "Hikers"
    assert db.query(Group).count() == 0
    assert db.query(GroupMembership).count() == 0
    with pytest.raises(GroupNotFoundError):
        get_group_info(db, group_id)


def test_groups_of_user(db, carol, dave, hikers):
    climbers = create_group(db, dave.id, "Climbers")
    add_member(db, climbers.id, carol.id)

    assert {g.name for g in get_groups_of_user(db, carol.id)} == {"Hikers", "Climbers"}
    assert [g.name for g in get_groups_of_user(db, dave.id)] == ["Climbers"]
