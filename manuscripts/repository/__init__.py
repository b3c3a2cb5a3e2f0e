"""Repository layer for manuscripts module.

Provides data access abstractions.
"""

from manuscripts.repository.project_repository import ProjectRepository
from manuscripts.repository.json_project_repository import JsonProjectRepository
from manuscripts.repository.repo_config import RepoConfig

__all__ = [
    "ProjectRepository",
    "JsonProjectRepository",
    "RepoConfig",
]
