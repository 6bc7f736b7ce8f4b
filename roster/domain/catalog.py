"""
Roster catalogs - community ranks, permission groups and capabilities.

This module defines the fixed vocabularies the roster is built on:
- Community ranks (totally ordered, lowest first)
- Permission groups (coarse authorization tiers)
- Capabilities (boolean rights granted to a group)
- Discharge and transfer reason codes

Defaults here seed a fresh RosterPolicy. Runtime decisions always read the
policy, never these constants directly.
"""
from __future__ import annotations

from enum import Enum
from typing import Final


class CommunityRank(str, Enum):
    """Organization-wide seniority, declared lowest to highest."""

    RECRUIT = "Recruit"
    MEMBER = "Member"
    STAFF_IN_TRAINING = "Staff-In-Training"
    STAFF = "Staff"
    SENIOR_STAFF = "Senior Staff"
    JUNIOR_ADMINISTRATION = "Junior Administration"
    ADMINISTRATION = "Administration"
    SENIOR_ADMINISTRATION = "Senior Administration"
    HEAD_ADMIN = "Head Admin"


class PermissionGroup(str, Enum):
    """Authorization tiers, declared lowest to highest."""

    MEMBER = "Member"
    STAFF_IN_TRAINING = "StaffInTraining"
    STAFF = "Staff"
    ADMINISTRATION = "Administration"
    HEAD_ADMINISTRATION = "HeadAdministration"

    @property
    def tier(self) -> int:
        return PERMISSION_GROUPS.index(self)


class Capability(str, Enum):
    """Boolean rights held by a permission group."""

    # Roster operations
    ADD_MEMBERS = "can_add_members"
    EDIT_MEMBERS = "can_edit_members"
    REMOVE_MEMBERS = "can_remove_members"
    MOVE_WITHIN_DEPT = "can_move_within_dept"
    TRANSFER_DEPTS = "can_transfer_depts"

    # Governance
    MANAGE_RANKS = "can_manage_ranks"
    MANAGE_PERMISSIONS = "can_manage_permissions"
    MANAGE_USERS = "can_manage_users"
    ACCESS_ARCHIVE = "can_access_archive"
    MANAGE_SETTINGS = "can_manage_settings"


class RemovalReason(str, Enum):
    DISCIPLINE = "Discipline"
    PROPER_RESIGNATION = "Proper Resignation"
    IMPROPER_RESIGNATION = "Improper Resignation"
    RETIREMENT = "Retirement"
    INACTIVE_REMOVAL = "Inactive Removal"
    OTHER = "Other"


class TransferReason(str, Enum):
    CAREER_PROGRESSION = "Career Progression"
    DEPARTMENT_NEEDS = "Department Needs"
    PERFORMANCE_REVIEW = "Performance Review"
    DISCIPLINARY = "Disciplinary"
    PERSONAL = "Personal"
    OTHER = "Other"


COMMUNITY_RANKS: Final[tuple[CommunityRank, ...]] = tuple(CommunityRank)
PERMISSION_GROUPS: Final[tuple[PermissionGroup, ...]] = tuple(PermissionGroup)

DEFAULT_DEPARTMENTS: Final[tuple[str, ...]] = (
    "LSPD",
    "SAHP",
    "BCSO",
    "CIV",
    "Fire Rescue",
    "Communications",
    "Internal Affairs",
    "Media Division",
    "Development",
)

DEFAULT_STATUSES: Final[tuple[str, ...]] = (
    "Active",
    "Inactive",
    "LOA",
    "Reserve",
    "Training",
    "Suspended",
)

# Statuses left untouched by the monthly activity check.
ACTIVITY_EXEMPT_STATUSES: Final[frozenset[str]] = frozenset(
    {"LOA", "Reserve", "Suspended", "Training"}
)

DEFAULT_HOURS_REQUIREMENT: Final[float] = 4.0

DEFAULT_GROUP_CAPABILITIES: Final[dict[PermissionGroup, frozenset[Capability]]] = {
    PermissionGroup.MEMBER: frozenset(),

    PermissionGroup.STAFF_IN_TRAINING: frozenset({
        Capability.ADD_MEMBERS,
        Capability.EDIT_MEMBERS,
        Capability.MOVE_WITHIN_DEPT,
    }),

    PermissionGroup.STAFF: frozenset({
        Capability.ADD_MEMBERS,
        Capability.EDIT_MEMBERS,
        Capability.REMOVE_MEMBERS,
        Capability.MOVE_WITHIN_DEPT,
        Capability.TRANSFER_DEPTS,
        Capability.ACCESS_ARCHIVE,
    }),

    # Permission governance stays with Head Administration.
    PermissionGroup.ADMINISTRATION: frozenset({
        Capability.ADD_MEMBERS,
        Capability.EDIT_MEMBERS,
        Capability.REMOVE_MEMBERS,
        Capability.MOVE_WITHIN_DEPT,
        Capability.TRANSFER_DEPTS,
        Capability.MANAGE_RANKS,
        Capability.MANAGE_USERS,
        Capability.ACCESS_ARCHIVE,
    }),

    PermissionGroup.HEAD_ADMINISTRATION: frozenset(Capability),
}

DEFAULT_RANK_TO_GROUP: Final[dict[CommunityRank, PermissionGroup]] = {
    CommunityRank.RECRUIT: PermissionGroup.MEMBER,
    CommunityRank.MEMBER: PermissionGroup.MEMBER,
    CommunityRank.STAFF_IN_TRAINING: PermissionGroup.STAFF_IN_TRAINING,
    CommunityRank.STAFF: PermissionGroup.STAFF,
    CommunityRank.SENIOR_STAFF: PermissionGroup.STAFF,
    CommunityRank.JUNIOR_ADMINISTRATION: PermissionGroup.ADMINISTRATION,
    CommunityRank.ADMINISTRATION: PermissionGroup.ADMINISTRATION,
    CommunityRank.SENIOR_ADMINISTRATION: PermissionGroup.ADMINISTRATION,
    CommunityRank.HEAD_ADMIN: PermissionGroup.HEAD_ADMINISTRATION,
}
