"""Authenticated caller variants.

Every service operation receives exactly one of these instead of a raw user row,
so role-dependent behaviour is a dispatch on the type rather than string checks.
"""

from dataclasses import dataclass
from typing import Optional, Union

from talentpool.models.user import User
from talentpool.utils.constants import Role


@dataclass(frozen=True)
class AdminCaller:
    user_id: int

    role = Role.ADMIN


@dataclass(frozen=True)
class RecruiterCaller:
    user_id: int

    role = Role.RECRUITER


@dataclass(frozen=True)
class CandidateCaller:
    user_id: int

    role = Role.CANDIDATE


Caller = Union[AdminCaller, RecruiterCaller, CandidateCaller]

_VARIANTS = {
    Role.ADMIN.value: AdminCaller,
    Role.RECRUITER.value: RecruiterCaller,
    Role.CANDIDATE.value: CandidateCaller,
}


def caller_for(user: Optional[User]) -> Optional[Caller]:
    """Map a user row to its caller variant, None for anonymous or unknown roles."""
    if user is None or user.id is None:
        return None
    variant = _VARIANTS.get(user.role)
    if variant is None:
        return None
    return variant(user_id=user.id)
