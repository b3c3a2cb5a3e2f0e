"""
ComparisonController - builds word diffs between versions of a branch.

Independent of the mutation engine: reads the session state only.
"""

from __future__ import annotations

import logging
from typing import Optional

from manuscripts.dto.comparison import Comparison
from manuscripts.exceptions.errors import VersionNotFoundError
from manuscripts.logic.version_engine import require_branch
from manuscripts.logic.word_diff import diff_words
from manuscripts.models.version import ManuscriptVersion
from manuscripts.services.project_session import ProjectSession

logger = logging.getLogger(__name__)


class ComparisonController:
    """Answers "what changed" questions for the active session."""

    def __init__(self, *, session: ProjectSession, tz_name: Optional[str] = None) -> None:
        """
        Args:
            session: Session whose projects are compared
            tz_name: IANA timezone for version timestamps in rendered headings
        """
        self._session = session
        self._tz_name = tz_name

    def compare_with_previous(self, project_id: str, branch_id: str, version_id: str) -> Optional[Comparison]:
        """
        Compare a version with its predecessor in the branch.

        Returns:
            Comparison, or None when the version is the oldest of the branch
        """
        branch = require_branch(self._session.get_project(project_id), branch_id)
        current = branch.find_version(version_id)
        if current is None:
            raise VersionNotFoundError(f"Branch {branch_id!r} has no version {version_id!r}")
        previous = branch.predecessor_of(version_id)
        if previous is None:
            return None
        return self._build(previous, current)

    def compare(self, project_id: str, branch_id: str, old_id: str, new_id: str) -> Comparison:
        old = self._session.get_version(project_id, branch_id, old_id)
        new = self._session.get_version(project_id, branch_id, new_id)
        comparison = self._build(old, new)
        logger.debug(f"Compared {old.version_label} with {new.version_label} on {branch_id}")
        return comparison

    def _build(self, old: ManuscriptVersion, new: ManuscriptVersion) -> Comparison:
        return Comparison(old=old, new=new, diff=diff_words(old.content, new.content), tz_name=self._tz_name)
