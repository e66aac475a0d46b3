from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note: controllers depend on this interface, not on a concrete database.
    """

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def find_by_credentials(self, name: str, password: str) -> Optional[User]:
        raise NotImplementedError

    def create(self, user: User) -> User:
        raise NotImplementedError

    def save(self, user: User) -> User:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
