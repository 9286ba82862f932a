"""Best-effort branch automation tied to a Jira issue."""

import logging
from collections.abc import Callable
from pathlib import Path

from .config import BranchConfig
from .github import GitHubRefsClient, run_remote_steps
from .local import GitRunner, is_working_copy, run_local_steps
from .naming import BranchLocation, derive_branch_spec
from .results import BranchReport, StepResult

logger = logging.getLogger("mcp-jira-branch.branching")


class BranchOrchestrator:
    """Creates or switches to an issue branch, locally or on GitHub.

    Neither entry point raises: every step is recorded in a
    ``BranchReport`` which is logged once when the run ends.
    """

    def __init__(
        self,
        config: BranchConfig,
        cwd: Path | None = None,
        runner_factory: Callable[[Path, float], GitRunner] | None = None,
        github_factory: Callable[[BranchConfig], GitHubRefsClient | None] | None = None,
    ) -> None:
        self.config = config
        self._cwd = cwd
        self._runner_factory = runner_factory or (
            lambda path, timeout: GitRunner(cwd=path, timeout=timeout)
        )
        self._github_factory = github_factory or GitHubRefsClient.from_config

    @property
    def cwd(self) -> Path:
        return self._cwd or Path.cwd()

    def select_location(self) -> BranchLocation:
        if is_working_copy(self.cwd):
            return BranchLocation.LOCAL
        if self.config.has_github:
            return BranchLocation.REMOTE
        return BranchLocation.NONE

    async def create_branch_for_issue(
        self, issue_key: str, custom_name: str | None = None
    ) -> BranchReport:
        """Create the issue branch wherever possible: local repo, else GitHub."""
        location = BranchLocation.NONE
        report = BranchReport(spec=None, location=location)
        try:
            location = self.select_location()
            report.location = location
            if location is BranchLocation.LOCAL:
                await self._run_local(report, issue_key, custom_name)
            elif location is BranchLocation.REMOTE:
                await self._run_remote(report, issue_key, custom_name)
        except Exception as e:  # noqa: BLE001
            report.add(StepResult.failure("unexpected", repr(e)))
        self._log(issue_key, report)
        return report

    async def run_local(
        self, issue_key: str, custom_name: str | None = None
    ) -> BranchReport:
        """Create or check out the issue branch in the local working copy only."""
        report = BranchReport(spec=None, location=BranchLocation.LOCAL)
        try:
            if is_working_copy(self.cwd):
                await self._run_local(report, issue_key, custom_name)
            else:
                report.location = BranchLocation.NONE
                report.add(
                    StepResult.failure("working-copy", f"{self.cwd} is not a git repository")
                )
        except Exception as e:  # noqa: BLE001
            report.add(StepResult.failure("unexpected", repr(e)))
        self._log(issue_key, report)
        return report

    async def _run_local(
        self, report: BranchReport, issue_key: str, custom_name: str | None
    ) -> None:
        spec = derive_branch_spec(
            issue_key,
            custom_name,
            source_branch=self.config.local_default_branch,
            location=BranchLocation.LOCAL,
        )
        report.spec = spec
        runner = self._runner_factory(self.cwd, self.config.git_timeout)
        for step in await run_local_steps(spec, self.config, runner):
            report.add(step)

    async def _run_remote(
        self, report: BranchReport, issue_key: str, custom_name: str | None
    ) -> None:
        spec = derive_branch_spec(
            issue_key,
            custom_name,
            source_branch=self.config.remote_default_branch,
            location=BranchLocation.REMOTE,
        )
        report.spec = spec
        client = self._github_factory(self.config)
        if client is None:
            report.add(StepResult.failure("github-config", "GITHUB_REPO is not usable"))
            return
        for step in await run_remote_steps(spec, client):
            report.add(step)

    @staticmethod
    def _log(issue_key: str, report: BranchReport) -> None:
        if report.location is BranchLocation.NONE and not report.steps:
            logger.debug(f"No branch automation for {issue_key}: no git repo or GitHub")
            return
        if report.ok:
            logger.info(f"Branch automation for {issue_key} succeeded: {report.summary()}")
            return
        failures = "; ".join(f"{step.name}: {step.detail}" for step in report.failed_steps)
        logger.warning(
            f"Branch automation for {issue_key} incomplete: {report.summary()} - {failures}"
        )
