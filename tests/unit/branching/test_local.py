"""Tests for the local git strategy."""

import subprocess
from unittest.mock import AsyncMock, patch

import pytest

from mcp_jira_branch.branching.config import BranchConfig
from mcp_jira_branch.branching.local import (
    GitRunner,
    branch_exists,
    is_working_copy,
    run_local_steps,
)
from mcp_jira_branch.branching.naming import BranchLocation, derive_branch_spec


def _done(args, returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(["git", *args], returncode, stdout, stderr)


class FakeGit:
    """Scripted git: maps an argument tuple to (returncode, stdout) or an exception."""

    def __init__(self, script=None):
        self.script = script or {}
        self.calls = []

    async def __call__(self, *args):
        self.calls.append(args)
        outcome = self.script.get(args, (0, b""))
        if isinstance(outcome, BaseException):
            raise outcome
        returncode, stdout = outcome
        return _done(args, returncode, stdout, b"error" if returncode else b"")


@pytest.fixture
def spec():
    return derive_branch_spec(
        "OPS-1", source_branch="master", location=BranchLocation.LOCAL
    )


@pytest.fixture
def runner():
    return GitRunner(timeout=5)


def test_is_working_copy(tmp_path):
    assert is_working_copy(tmp_path) is False
    (tmp_path / ".git").mkdir()
    assert is_working_copy(tmp_path) is True


def test_is_working_copy_with_git_file(tmp_path):
    (tmp_path / ".git").write_text("gitdir: ../main/.git/worktrees/x")
    assert is_working_copy(tmp_path) is True


@pytest.mark.anyio
async def test_runner_uses_argument_list(tmp_path):
    runner = GitRunner(cwd=tmp_path, timeout=5)
    with patch(
        "mcp_jira_branch.branching.local.anyio.run_process",
        AsyncMock(return_value=_done(["status"])),
    ) as mock_run:
        await runner.run("status")
    mock_run.assert_awaited_once_with(
        ["git", "status"], cwd=tmp_path, stdin=subprocess.DEVNULL, check=False
    )


@pytest.mark.anyio
async def test_happy_path_creates_new_branch(spec, runner):
    git = FakeGit()
    with patch.object(runner, "run", side_effect=git.__call__):
        steps = await run_local_steps(spec, BranchConfig(), runner)

    assert [step.name for step in steps] == [
        "fetch",
        "checkout-default",
        "pull",
        "checkout-branch",
    ]
    assert all(step.ok for step in steps)
    assert git.calls == [
        ("fetch", "origin"),
        ("checkout", "master"),
        ("pull", "origin", "master"),
        ("branch", "--list", "ops-1"),
        ("checkout", "-b", "ops-1"),
    ]


@pytest.mark.anyio
async def test_existing_branch_is_checked_out(spec, runner):
    git = FakeGit({("branch", "--list", "ops-1"): (0, b"  ops-1\n")})
    with patch.object(runner, "run", side_effect=git.__call__):
        steps = await run_local_steps(spec, BranchConfig(), runner)

    assert git.calls[-1] == ("checkout", "ops-1")
    assert steps[-1].ok


@pytest.mark.anyio
async def test_missing_default_branch_is_created_tracking_remote(spec, runner):
    git = FakeGit({("checkout", "master"): (1, b"")})
    with patch.object(runner, "run", side_effect=git.__call__):
        steps = await run_local_steps(spec, BranchConfig(git_remote="upstream"), runner)

    assert ("checkout", "-b", "master", "--track", "upstream/master") in git.calls
    assert steps[1].name == "checkout-default"
    assert steps[1].ok


@pytest.mark.anyio
async def test_every_step_runs_even_when_all_fail(spec, runner):
    failing = {
        ("fetch", "origin"): (128, b""),
        ("checkout", "master"): (1, b""),
        ("checkout", "-b", "master", "--track", "origin/master"): (1, b""),
        ("pull", "origin", "master"): (1, b""),
        ("branch", "--list", "ops-1"): OSError("git not installed"),
        ("checkout", "-b", "ops-1"): TimeoutError(),
    }
    git = FakeGit(failing)
    with patch.object(runner, "run", side_effect=git.__call__):
        steps = await run_local_steps(spec, BranchConfig(), runner)

    assert len(steps) == 4
    assert not any(step.ok for step in steps)
    assert "exited 128" in steps[0].detail
    assert ";" in steps[1].detail


@pytest.mark.anyio
async def test_branch_exists_treats_errors_as_missing(runner):
    git = FakeGit({("branch", "--list", "x"): (1, b"x")})
    with patch.object(runner, "run", side_effect=git.__call__):
        assert await branch_exists(runner, "x") is False
