"""Authorization context and capability checks.

The caller's identity is resolved once per request into an
`AuthorizationContext`; handlers ask it for capabilities instead of
re-reading the caller's profile.

Role -> capabilities:
- anonymous: BROWSE
- user:      BROWSE, WRITE_REVIEW
- business:  BROWSE, MANAGE_OWN_BUSINESS
- admin:     everything

A banned profile keeps only BROWSE.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ANONYMOUS = "anonymous"
    USER = "user"
    BUSINESS = "business"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        """Map a stored profile role to a Role; unknown roles are treated as plain users."""
        if not value:
            return cls.USER
        try:
            role = cls(value.strip().lower())
        except ValueError:
            return cls.USER
        return cls.USER if role is cls.ANONYMOUS else role


class Capability(str, Enum):
    BROWSE = "browse"
    WRITE_REVIEW = "write_review"
    MANAGE_OWN_BUSINESS = "manage_own_business"
    MODERATE = "moderate"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.ANONYMOUS: frozenset({Capability.BROWSE}),
    Role.USER: frozenset({Capability.BROWSE, Capability.WRITE_REVIEW}),
    Role.BUSINESS: frozenset({Capability.BROWSE, Capability.MANAGE_OWN_BUSINESS}),
    Role.ADMIN: frozenset(Capability),
}

BANNED_CAPABILITIES: frozenset[Capability] = frozenset({Capability.BROWSE})


class AuthorizationError(Exception):
    """Base class for authorization failures."""

    status_code = 403
    message = "Forbidden"


class NotAuthenticated(AuthorizationError):
    status_code = 401
    message = "Unauthorized"


class PermissionDenied(AuthorizationError):
    status_code = 403
    message = "Forbidden"


@dataclass(frozen=True)
class AuthorizationContext:
    """Who is calling and what they may do, resolved once per request."""

    user_id: str | None = None
    role: Role = Role.ANONYMOUS
    is_banned: bool = False
    email: str | None = None

    @classmethod
    def anonymous(cls) -> "AuthorizationContext":
        return cls()

    @classmethod
    def from_profile(
        cls,
        user_id: str,
        role: str | None,
        is_banned: bool | None,
        email: str | None = None,
    ) -> "AuthorizationContext":
        return cls(user_id=user_id, role=Role.parse(role), is_banned=bool(is_banned), email=email)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None and self.role is not Role.ANONYMOUS

    @property
    def capabilities(self) -> frozenset[Capability]:
        if self.is_banned:
            return BANNED_CAPABILITIES
        return ROLE_CAPABILITIES[self.role]

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def require(self, capability: Capability) -> "AuthorizationContext":
        """Raise unless the caller holds `capability`.

        Raises:
            NotAuthenticated: Anonymous caller asking for anything beyond BROWSE.
            PermissionDenied: Authenticated caller lacking the capability.
        """
        if self.can(capability):
            return self
        if not self.is_authenticated:
            raise NotAuthenticated()
        raise PermissionDenied()
