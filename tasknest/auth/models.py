from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass
class User:
    """User entity for authentication. The username is the identity."""

    username: str
    password_hash: str
    created_at: Optional[datetime] = field(default_factory=_utcnow)

    @classmethod
    def create(cls, username: str, password_hash: str) -> "User":
        """Create a new user stamped with the current time."""
        return cls(
            username=username,
            password_hash=password_hash,
            created_at=_utcnow(),
        )

    def to_dict(self) -> dict:
        """Convert user to dictionary for JSON storage."""
        return {
            "username": self.username,
            "password_hash": self.password_hash,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Create user from a stored JSON record."""
        created_at = data.get("created_at")
        return cls(
            username=data["username"],
            password_hash=data["password_hash"],
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )
