from .base import Base
from .member import ArchivedMember, Member, MEMBER_FIELDS, DISCHARGE_FIELDS
from .account import Account, AuthSession
from .logs import RemovalLog, TransferLog
from .setting import SettingEntry
from .audit_log import AuditLog

__all__ = [
    "Base",
    "Member",
    "ArchivedMember",
    "MEMBER_FIELDS",
    "DISCHARGE_FIELDS",
    "Account",
    "AuthSession",
    "RemovalLog",
    "TransferLog",
    "SettingEntry",
    "AuditLog",
]
