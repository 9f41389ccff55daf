"""
TaskNest API - Task Models

Internal task model for JSON document storage.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import uuid

# Fields a caller may change after creation
MUTABLE_FIELDS = ("title", "description")

# Fields assigned by the system, never taken from a request
RESERVED_FIELDS = ("id", "owner")


@dataclass
class Task:
    """Task entity. ``extra`` holds any additional caller-supplied fields."""

    id: str
    owner: str
    title: str
    description: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        owner: str,
        title: str,
        description: str = "",
        extra: Optional[dict[str, Any]] = None,
    ) -> "Task":
        """Create a new task with generated ID, owned by ``owner``."""
        extra = {
            key: value
            for key, value in (extra or {}).items()
            if key not in RESERVED_FIELDS and key not in MUTABLE_FIELDS
        }
        return cls(
            id=str(uuid.uuid4()),
            owner=owner,
            title=title,
            description=description,
            extra=extra,
        )

    def to_dict(self) -> dict:
        """Convert task to a flat JSON record."""
        return {
            "id": self.id,
            "owner": self.owner,
            "title": self.title,
            "description": self.description,
            **self.extra,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create task from a stored JSON record."""
        known = RESERVED_FIELDS + MUTABLE_FIELDS
        description = data.get("description")
        return cls(
            id=data["id"],
            owner=data["owner"],
            title=data.get("title", ""),
            description=description if description is not None else "",
            extra={key: value for key, value in data.items() if key not in known},
        )
