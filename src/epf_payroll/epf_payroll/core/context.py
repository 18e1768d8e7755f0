from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .enums import Role


@dataclass(frozen=True)
class RequestContext:
    """Who is calling. Passed explicitly from controllers to services."""

    user_id: Optional[str] = None
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def can_access(self, owner_id: Optional[str]) -> bool:
        """Admins reach every company; users only the ones they own."""
        return self.is_admin or (self.user_id is not None and owner_id == self.user_id)

    @classmethod
    def from_session(cls, session: Mapping[str, Any]) -> "RequestContext":
        role = session.get("role") or Role.USER.value
        return cls(user_id=session.get("user_id"), role=Role(role))
