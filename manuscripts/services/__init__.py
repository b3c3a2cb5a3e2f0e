"""Services layer for the manuscripts module.

Session state and storage location management.
"""

from manuscripts.services.project_session import ProjectSession
from manuscripts.services.storage_location_service import StorageLocationService

__all__ = [
    "ProjectSession",
    "StorageLocationService",
]
