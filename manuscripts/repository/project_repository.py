"""Project repository protocol (interface).

Defines the contract for persisting the project list without
implementation details.
"""

from __future__ import annotations
from typing import List, Optional, Protocol, Sequence

from manuscripts.models.project import Project


class ProjectRepository(Protocol):
    """Protocol for project list persistence."""

    def load(self) -> Optional[List[Project]]:
        """
        Load all projects, migrating legacy records.

        Returns:
            List of Project, or None if nothing was persisted yet
        """
        ...

    def persist(self, projects: Sequence[Project]) -> None:
        """
        Write the whole project list.

        Raises:
            PersistenceError: document could not be written
        """
        ...
