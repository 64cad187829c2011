"""
Ownership-based authorization policy.

A pure decision: no I/O, no clock. Callers must pass the owner id read
*before* issuing the mutating statement (repositories read it under a row
lock in the same transaction).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.errors import NotAuthorizedError


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Caller:
    user_id: int
    role: Role


def authorize(caller_role: Role | str, caller_id: int, resource_owner_id: int) -> bool:
    # Roles other than admin get only the owner check.
    if caller_role == Role.ADMIN:
        return True
    return int(caller_id) == int(resource_owner_id)


def ensure_authorized(caller_role: Role | str, caller_id: int, resource_owner_id: int) -> None:
    if not authorize(caller_role, caller_id, resource_owner_id):
        raise NotAuthorizedError("Not authorized")
