"""
Resource ownership policy.

One table says which role may create each kind of entity; ownership
checks compare the caller with the user recorded on the entity.
Callers must load the target entity first so that a missing entity
yields ``NotFoundError`` before any ownership check runs.

| Entity   | Create            | Delete / update                |
|----------|-------------------|--------------------------------|
| post     | base_user         | post owner                     |
| event    | organizer         | event organizer                |
| party    | base_user         | party organizer                |
| category | administrator     | administrator                  |
| comment  | any authenticated | comment owner                  |
| faq      | base_user         | answer: event organizer;       |
|          |                   | delete: the asking user        |
| like     | any authenticated | like owner                     |
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional

from ..core.errors import Forbidden
from ..core.security import CurrentUser
from ..schemas.user import Role

logger = logging.getLogger(__name__)


class Entity(str, Enum):
    POST = "post"
    EVENT = "event"
    PARTY = "party"
    CATEGORY = "category"
    COMMENT = "comment"
    FAQ = "faq"
    LIKE = "like"


ANY_ROLE: FrozenSet[Role] = frozenset(Role)

CREATE_ROLES: Dict[Entity, FrozenSet[Role]] = {
    Entity.POST: frozenset({Role.BASE_USER}),
    Entity.EVENT: frozenset({Role.ORGANIZER}),
    Entity.PARTY: frozenset({Role.BASE_USER}),
    Entity.CATEGORY: frozenset({Role.ADMINISTRATOR}),
    Entity.COMMENT: ANY_ROLE,
    Entity.FAQ: frozenset({Role.BASE_USER}),
    Entity.LIKE: ANY_ROLE,
}

# Entities whose deletion is decided by role instead of ownership
ROLE_MANAGED: Dict[Entity, FrozenSet[Role]] = {
    Entity.CATEGORY: frozenset({Role.ADMINISTRATOR}),
}


def can_create(entity: Entity, role: Role) -> bool:
    return role in CREATE_ROLES[entity]


def ensure_can_create(entity: Entity, user: CurrentUser) -> None:
    """Raise ``Forbidden`` unless the caller's role may create ``entity``."""
    if not can_create(entity, user.role):
        logger.info("User %s (%s) may not create a %s", user.user_id, user.role.value, entity.value)
        raise Forbidden(f"Not authorized to create this {entity.value}")


def ensure_can_modify(
    entity: Entity,
    user: CurrentUser,
    owner_id: Optional[str] = None,
    action: str = "delete",
) -> None:
    """Raise ``Forbidden`` unless the caller may delete or update the entity.

    Role-managed entities only look at the role; every other entity
    requires the caller to be the user recorded as ``owner_id``.
    """
    if entity in ROLE_MANAGED:
        if user.role not in ROLE_MANAGED[entity]:
            raise Forbidden(f"Not authorized to {action} this {entity.value}")
        return
    if owner_id is None or str(owner_id) != str(user.user_id):
        logger.info("User %s is not the owner of this %s (%s refused)", user.user_id, entity.value, action)
        raise Forbidden(f"Not authorized to {action} this {entity.value}")
