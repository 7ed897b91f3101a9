"""Domain models for the networking dashboard sync.

This package contains the immutable records and configuration objects passed
between the sheet collaborators, the core services and the CLI.
"""

from .config_models import CredentialsConfig, SheetLocation, SyncConfig
from .error_record import ErrorRecord
from .person_record import MemberStatus, PersonRecord
from .sync_result import MergeResult, SyncResult, SyncStats

__all__ = [
    # Configuration models
    "CredentialsConfig",
    "SheetLocation",
    "SyncConfig",
    # Records
    "ErrorRecord",
    "MemberStatus",
    "PersonRecord",
    # Results
    "MergeResult",
    "SyncResult",
    "SyncStats",
]
