"""Branch automation for Jira issues: local git working copy or GitHub."""

from .config import BranchConfig, parse_github_repo
from .naming import (
    BranchLocation,
    BranchSpec,
    derive_branch_spec,
    sanitize_branch_name,
    transliterate,
)
from .orchestrator import BranchOrchestrator
from .results import BranchReport, StepResult

__all__ = [
    "BranchConfig",
    "BranchLocation",
    "BranchOrchestrator",
    "BranchReport",
    "BranchSpec",
    "StepResult",
    "derive_branch_spec",
    "parse_github_repo",
    "sanitize_branch_name",
    "transliterate",
]
