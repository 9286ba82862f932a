"""Local git working copy strategy for issue branches."""

import logging
import subprocess
from pathlib import Path

import anyio

from .config import BranchConfig
from .naming import BranchSpec
from .results import StepResult

logger = logging.getLogger("mcp-jira-branch.branching.local")


def is_working_copy(path: Path | None = None) -> bool:
    """Whether ``path`` (default: the current directory) is a git working copy.

    Worktrees and submodules carry a ``.git`` file instead of a directory,
    both count.
    """
    base = path or Path.cwd()
    return (base / ".git").exists()


class GitRunner:
    """Runs git commands in one directory without a shell."""

    def __init__(self, cwd: Path | None = None, timeout: float = 60.0) -> None:
        self.cwd = cwd or Path.cwd()
        self.timeout = timeout

    async def run(self, *args: str) -> subprocess.CompletedProcess[bytes]:
        """Run ``git <args>`` and return the completed process, never checking status.

        Raises:
            OSError: If git cannot be started
            TimeoutError: If the command exceeds the timeout
        """
        logger.debug(f"Running git {' '.join(args)} in {self.cwd}")
        with anyio.fail_after(self.timeout):
            return await anyio.run_process(
                ["git", *args], cwd=self.cwd, stdin=subprocess.DEVNULL, check=False
            )


def _output(process: subprocess.CompletedProcess[bytes]) -> str:
    stream = process.stderr or process.stdout or b""
    return stream.decode("utf-8", errors="replace").strip()


async def _git_step(runner: GitRunner, name: str, *args: str) -> StepResult:
    try:
        process = await runner.run(*args)
    except (OSError, TimeoutError) as e:
        return StepResult.failure(name, f"git {' '.join(args)}: {e!r}")
    if process.returncode != 0:
        return StepResult.failure(
            name, f"git {' '.join(args)} exited {process.returncode}: {_output(process)}"
        )
    return StepResult.success(name, f"git {' '.join(args)}")


async def branch_exists(runner: GitRunner, branch: str) -> bool:
    """Whether ``branch`` exists locally. Errors count as "does not exist"."""
    try:
        process = await runner.run("branch", "--list", branch)
    except (OSError, TimeoutError):
        return False
    if process.returncode != 0:
        return False
    return bool((process.stdout or b"").strip())


async def run_local_steps(
    spec: BranchSpec, config: BranchConfig, runner: GitRunner
) -> list[StepResult]:
    """Fetch, update the default branch and switch to the issue branch.

    Every step is attempted once even if earlier steps failed.
    """
    remote = config.git_remote
    default = spec.source_branch
    steps: list[StepResult] = []

    steps.append(await _git_step(runner, "fetch", "fetch", remote))

    checkout_default = await _git_step(runner, "checkout-default", "checkout", default)
    if not checkout_default.ok:
        created = await _git_step(
            runner,
            "checkout-default",
            "checkout",
            "-b",
            default,
            "--track",
            f"{remote}/{default}",
        )
        if not created.ok:
            created = StepResult.failure(
                "checkout-default", f"{checkout_default.detail}; {created.detail}"
            )
        checkout_default = created
    steps.append(checkout_default)

    steps.append(await _git_step(runner, "pull", "pull", remote, default))

    branch = spec.sanitized_name
    if await branch_exists(runner, branch):
        steps.append(await _git_step(runner, "checkout-branch", "checkout", branch))
    else:
        steps.append(
            await _git_step(runner, "checkout-branch", "checkout", "-b", branch)
        )
    return steps
