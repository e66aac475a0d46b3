from __future__ import annotations

from typing import Iterable, Optional

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import User

_MANAGEABLE_ROLES: dict[Role, tuple[Role, ...]] = {
    Role.CREATOR: (Role.ADMIN, Role.CONTRACTOR, Role.EMPLOYEE),
    Role.ADMIN: (Role.CONTRACTOR, Role.EMPLOYEE),
}


def manageable_roles(actor: Optional[User]) -> tuple[Role, ...]:
    """Roles the actor may create, edit or delete."""
    if actor is None:
        return ()
    return _MANAGEABLE_ROLES.get(actor.role, ())


def can_manage(actor: Optional[User], target: User) -> bool:
    if actor is None or target.id == actor.id:
        return False
    return target.role in manageable_roles(actor)


def manageable_users(actor: Optional[User], users: Iterable[User]) -> list[User]:
    return [u for u in users if can_manage(actor, u)]


def validate_user(user: User) -> User:
    require_non_empty(user.name, "Name")
    if not user.password:
        raise ValidationError("Password is required")
    if not isinstance(user.role, Role):
        raise ValidationError("Invalid role")
    return user
