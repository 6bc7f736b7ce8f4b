"""
Roster policy document.

The policy is the hot-reloadable configuration every operation reads fresh:
departments, the ordered rank catalog, the status catalog, hour requirements,
the permission matrix and the auth policy. It is passed explicitly into the
access resolver and the lifecycle use cases, never held as module state.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import ValidationError
from .catalog import (
    COMMUNITY_RANKS,
    DEFAULT_DEPARTMENTS,
    DEFAULT_GROUP_CAPABILITIES,
    DEFAULT_HOURS_REQUIREMENT,
    DEFAULT_RANK_TO_GROUP,
    DEFAULT_STATUSES,
    PERMISSION_GROUPS,
    Capability,
    CommunityRank,
    PermissionGroup,
)


class PermissionConfig(BaseModel):
    """Capability flags of one permission group."""

    model_config = ConfigDict(frozen=True)

    can_add_members: bool = False
    can_edit_members: bool = False
    can_remove_members: bool = False
    can_move_within_dept: bool = False
    can_transfer_depts: bool = False
    can_manage_ranks: bool = False
    can_manage_permissions: bool = False
    can_manage_users: bool = False
    can_access_archive: bool = False
    can_manage_settings: bool = False

    @classmethod
    def from_capabilities(cls, capabilities: frozenset[Capability]) -> "PermissionConfig":
        return cls(**{capability.value: True for capability in capabilities})

    def granted(self) -> frozenset[Capability]:
        return frozenset(
            capability for capability in Capability if getattr(self, capability.value)
        )


def _default_permissions() -> dict[PermissionGroup, PermissionConfig]:
    return {
        group: PermissionConfig.from_capabilities(capabilities)
        for group, capabilities in DEFAULT_GROUP_CAPABILITIES.items()
    }


class AuthPolicy(BaseModel):
    require_login_for_admin: bool = True
    allow_invite_signup: bool = False
    invite_code: str = ""
    disable_account_on_discharge: bool = True
    community_rank_to_group: dict[CommunityRank, PermissionGroup] = Field(
        default_factory=lambda: dict(DEFAULT_RANK_TO_GROUP)
    )


class RosterPolicy(BaseModel):
    departments: list[str] = Field(default_factory=lambda: list(DEFAULT_DEPARTMENTS))
    community_ranks: list[CommunityRank] = Field(
        default_factory=lambda: list(COMMUNITY_RANKS)
    )
    statuses: list[str] = Field(default_factory=lambda: list(DEFAULT_STATUSES))
    default_status: str = "Active"
    department_requirements: dict[str, float] = Field(
        default_factory=lambda: {
            department: DEFAULT_HOURS_REQUIREMENT for department in DEFAULT_DEPARTMENTS
        }
    )
    permissions: dict[PermissionGroup, PermissionConfig] = Field(
        default_factory=_default_permissions
    )
    auth: AuthPolicy = Field(default_factory=AuthPolicy)

    @model_validator(mode="after")
    def _check_catalogs(self) -> "RosterPolicy":
        if not self.departments or len(set(self.departments)) != len(self.departments):
            raise ValueError("departments must be a non-empty list of unique names")
        if not self.community_ranks or len(set(self.community_ranks)) != len(
            self.community_ranks
        ):
            raise ValueError("community_ranks must be a non-empty list of unique ranks")
        if self.default_status not in self.statuses:
            raise ValueError("default_status must be one of statuses")
        for department, hours in self.department_requirements.items():
            if hours < 0:
                raise ValueError(f"hour requirement for {department} must be >= 0")
        # Groups left out of the matrix hold no capabilities.
        for group in PERMISSION_GROUPS:
            self.permissions.setdefault(group, PermissionConfig())
        return self

    def rank_index(self, rank: CommunityRank | str) -> int | None:
        try:
            return self.community_ranks.index(CommunityRank(rank))
        except ValueError:
            return None

    def require_rank_index(self, rank: CommunityRank | str) -> int:
        index = self.rank_index(rank)
        if index is None:
            raise ValidationError(
                f"Unknown community rank: {rank}",
                details={"community_rank": str(rank)},
            )
        return index

    def group_for_rank(self, rank: CommunityRank | str) -> PermissionGroup:
        try:
            return self.auth.community_rank_to_group.get(
                CommunityRank(rank), PermissionGroup.MEMBER
            )
        except ValueError:
            return PermissionGroup.MEMBER

    def capabilities_for(self, group: PermissionGroup) -> frozenset[Capability]:
        config = self.permissions.get(group)
        return config.granted() if config is not None else frozenset()

    def requirement_for(self, department: str) -> float:
        return self.department_requirements.get(department, 0.0)
