"""
Domain invariants module.

Every check here runs BEFORE any side effect (store write), so a rejected
request leaves all stores untouched.

INVARIANTS:
1. Rank ceiling - nobody assigns a Community Rank above their own, except
   Head Administration
2. Catalog membership - departments, ranks and statuses come from the policy
3. Mandatory remarks - a discharge always carries a non-empty detail
4. Credential quality - passwords have a minimum length, emails are normalized
"""

import logging
import math
from typing import TYPE_CHECKING

from ..errors import CeilingViolation, ValidationError
from .catalog import CommunityRank
from .policy import RosterPolicy

if TYPE_CHECKING:
    from ..auth.resolver import AccessContext

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8


def normalize_email(email: str) -> str:
    """
    Trim and lower-case an email address.

    Raises:
        ValidationError: If the address has no '@'
    """
    normalized = (email or "").strip().lower()
    if "@" not in normalized:
        raise ValidationError("Enter a valid email", details={"field": "email"})
    return normalized


def validate_password(password: str) -> None:
    if len(password or "") < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            details={"field": "password"},
        )


def validate_member_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Member name is required", details={"field": "name"})
    return cleaned


def validate_department(department: str, policy: RosterPolicy) -> str:
    cleaned = (department or "").strip()
    if not cleaned:
        raise ValidationError("Department is required", details={"field": "department"})
    if cleaned not in policy.departments:
        raise ValidationError(
            f"Unknown department: {cleaned}",
            details={"field": "department", "value": cleaned},
        )
    return cleaned


def validate_status(status: str, policy: RosterPolicy) -> str:
    cleaned = (status or "").strip()
    if cleaned not in policy.statuses:
        raise ValidationError(
            f"Unknown status: {cleaned}",
            details={"field": "status", "value": cleaned},
        )
    return cleaned


def validate_rank_ceiling(
    access: "AccessContext",
    community_rank: CommunityRank | str,
    policy: RosterPolicy,
) -> CommunityRank:
    """
    INVARIANT-1: Rank ceiling.

    Args:
        access: Resolved access of the acting principal
        community_rank: Rank the principal wants to assign
        policy: Current roster policy (rank catalog)

    Returns:
        The validated rank

    Raises:
        ValidationError: If the rank is not in the rank catalog
        CeilingViolation: If the rank is above the principal's ceiling
    """
    requested = policy.require_rank_index(community_rank)
    if not access.allows_rank_index(requested):
        logger.warning(
            "rank_ceiling_violation account_id=%s group=%s requested_index=%s ceiling=%s",
            access.account_id,
            access.group.value,
            requested,
            access.rank_ceiling,
        )
        raise CeilingViolation(
            details={
                "community_rank": CommunityRank(community_rank).value,
                "requested_index": requested,
                "rank_ceiling": access.rank_ceiling,
            },
        )
    return CommunityRank(community_rank)


def validate_discharge_detail(detail: str) -> str:
    cleaned = (detail or "").strip()
    if not cleaned:
        raise ValidationError(
            "Discharge remarks are required", details={"field": "detail"}
        )
    return cleaned


def validate_hours(community_number: str, hours: float) -> float:
    if not math.isfinite(hours) or hours < 0:
        raise ValidationError(
            f"Hours for #{community_number} must be a finite number >= 0",
            details={"community_number": community_number, "hours": str(hours)},
        )
    return float(hours)
