import logging
from abc import ABC, abstractmethod
from typing import Optional

from tasknest.auth.models import User
from tasknest.storage import JsonDocument

logger = logging.getLogger(__name__)


class UsernameTakenError(Exception):
    """Raised when a username is already registered."""

    def __init__(self, username: str):
        super().__init__(f"username already exists: {username}")
        self.username = username


class UserRepositoryInterface(ABC):
    """Abstract interface for user repository."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user. Raises UsernameTakenError on a duplicate."""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass

    @abstractmethod
    async def exists_by_username(self, username: str) -> bool:
        """Check if username exists."""
        pass


class JsonUserRepository(UserRepositoryInterface):
    """JSON document implementation of the user repository.

    Usernames are compared case-sensitively.
    """

    def __init__(self, document: JsonDocument):
        self.document = document

    async def create(self, user: User) -> User:
        """Check for a duplicate and append within one serialized update."""

        def append(users: list[dict]) -> User:
            if any(doc.get("username") == user.username for doc in users):
                raise UsernameTakenError(user.username)
            users.append(user.to_dict())
            return user

        created = await self.document.update(append)
        logger.info(f"[JsonUserRepository] User created: username={user.username}")
        return created

    async def get_by_username(self, username: str) -> Optional[User]:
        for doc in await self.document.read_all():
            if doc.get("username") == username:
                return User.from_dict(doc)
        return None

    async def exists_by_username(self, username: str) -> bool:
        return await self.get_by_username(username) is not None
