from enum import Enum

from pydantic import BaseModel

from ..domain.catalog import CommunityRank

TAB_ALL = "All"
TAB_STAFF_PLUS = "Staff+"


class SortKey(str, Enum):
    COMMUNITY_NUMBER = "communityNumber"
    UNIT_NUMBER = "unitNumber"
    NAME = "name"
    DEPARTMENT = "department"
    RANK = "rank"
    COMMUNITY_RANK = "communityRank"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class MemberFilter(BaseModel):
    tab: str = TAB_ALL  # "All", "Staff+" or a department name
    search: str = ""
    community_number: str = ""
    unit_number: str = ""
    name: str = ""
    department: str = ""
    department_rank: str = ""
    community_rank: CommunityRank | None = None
    status: str = ""
    subdivisions: str = ""
    sort_key: SortKey | None = None
    sort_direction: SortDirection = SortDirection.ASC
