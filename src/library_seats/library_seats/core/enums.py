from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for access control."""

    ADMIN = "admin"
    STAFF = "staff"


class MembershipStatus(str, Enum):
    """Membership state derived from membership_end."""

    ACTIVE = "active"
    EXPIRED = "expired"
