"""
Project domain model.

A project exclusively owns its branches; ``branches`` is never empty and
``default_branch_id`` is resolved with a fallback to the first branch.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from manuscripts.enum.project_type import ProjectType
from manuscripts.models.branch import Branch

MAIN_BRANCH_ID = "branch-main"
MAIN_BRANCH_NAME = "main"


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    type: ProjectType
    branches: Tuple[Branch, ...]
    default_branch_id: str
    last_modified: int

    def __post_init__(self) -> None:
        if not self.branches:
            raise ValueError(f"Project {self.id!r} must own at least one branch")

    def get_branch(self, branch_id: Optional[str]) -> Optional[Branch]:
        if branch_id is None:
            return None
        for branch in self.branches:
            if branch.id == branch_id:
                return branch
        return None

    def resolve_branch(self, branch_id: Optional[str] = None) -> Branch:
        """Resolve *branch_id*, falling back to the default and then the first branch."""
        return (
            self.get_branch(branch_id)
            or self.get_branch(self.default_branch_id)
            or self.branches[0]
        )

    @property
    def default_branch(self) -> Branch:
        return self.resolve_branch(None)

    def replace_branch(self, branch: Branch, *, last_modified: Optional[int] = None) -> "Project":
        branches = tuple(branch if b.id == branch.id else b for b in self.branches)
        return replace(
            self,
            branches=branches,
            last_modified=self.last_modified if last_modified is None else last_modified,
        )

    def add_branch(self, branch: Branch, *, last_modified: Optional[int] = None) -> "Project":
        return replace(
            self,
            branches=self.branches + (branch,),
            last_modified=self.last_modified if last_modified is None else last_modified,
        )
