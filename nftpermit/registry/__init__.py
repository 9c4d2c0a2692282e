"""
nftpermit.registry — ownership records, operator approvals, nonces and events.
"""

from .events import APPROVAL, APPROVAL_FOR_ALL, TRANSFER, EventLog, RegistryEvent
from .journal import Journal
from .records import OwnershipRecord
from .registry import OwnershipRegistry

__all__ = [
    "APPROVAL",
    "APPROVAL_FOR_ALL",
    "TRANSFER",
    "EventLog",
    "Journal",
    "OwnershipRecord",
    "OwnershipRegistry",
    "RegistryEvent",
]
