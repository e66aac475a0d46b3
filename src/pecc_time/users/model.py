from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no storage access. ``id`` is None only for drafts
    that have not been persisted yet.
    """

    id: Optional[int]
    name: str
    role: Role
    password: str
    force_password_change: bool = False
