import pytest

from party_planner_api.app.core.errors import Forbidden
from party_planner_api.app.core.security import CurrentUser
from party_planner_api.app.schemas.user import Role
from party_planner_api.app.services.policy import (
    CREATE_ROLES,
    Entity,
    can_create,
    ensure_can_create,
    ensure_can_modify,
)


def _user(role: Role, user_id: str = "u1") -> CurrentUser:
    return CurrentUser(user_id=user_id, role=role)


@pytest.mark.parametrize(
    "entity,allowed",
    [
        (Entity.POST, {Role.BASE_USER}),
        (Entity.EVENT, {Role.ORGANIZER}),
        (Entity.PARTY, {Role.BASE_USER}),
        (Entity.CATEGORY, {Role.ADMINISTRATOR}),
        (Entity.COMMENT, set(Role)),
        (Entity.FAQ, {Role.BASE_USER}),
        (Entity.LIKE, set(Role)),
    ],
)
def test_create_rules(entity, allowed):
    for role in Role:
        assert can_create(entity, role) is (role in allowed)


def test_every_entity_has_a_create_rule():
    assert set(CREATE_ROLES) == set(Entity)


def test_event_and_party_creation_are_asymmetric():
    with pytest.raises(Forbidden):
        ensure_can_create(Entity.EVENT, _user(Role.BASE_USER))
    with pytest.raises(Forbidden):
        ensure_can_create(Entity.PARTY, _user(Role.ORGANIZER))
    ensure_can_create(Entity.EVENT, _user(Role.ORGANIZER))
    ensure_can_create(Entity.PARTY, _user(Role.BASE_USER))


@pytest.mark.parametrize("entity", [Entity.POST, Entity.EVENT, Entity.PARTY, Entity.COMMENT, Entity.FAQ, Entity.LIKE])
def test_owner_may_modify_others_may_not(entity):
    ensure_can_modify(entity, _user(Role.BASE_USER, "owner"), "owner")
    with pytest.raises(Forbidden):
        ensure_can_modify(entity, _user(Role.BASE_USER, "intruder"), "owner")
    # Administrators get no override on owned entities
    with pytest.raises(Forbidden):
        ensure_can_modify(entity, _user(Role.ADMINISTRATOR, "admin"), "owner")


def test_missing_owner_is_refused():
    with pytest.raises(Forbidden):
        ensure_can_modify(Entity.POST, _user(Role.BASE_USER), None)


def test_categories_are_managed_by_role():
    ensure_can_modify(Entity.CATEGORY, _user(Role.ADMINISTRATOR))
    with pytest.raises(Forbidden):
        ensure_can_modify(Entity.CATEGORY, _user(Role.ORGANIZER))


def test_forbidden_message_names_the_action():
    with pytest.raises(Forbidden) as info:
        ensure_can_modify(Entity.FAQ, _user(Role.ORGANIZER, "x"), "y", action="answer")
    assert info.value.message == "Not authorized to answer this faq"
