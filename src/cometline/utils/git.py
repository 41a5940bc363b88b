"""Git command execution utilities."""

import re
import subprocess

from dataclasses import replace
from typing import Optional, Union

from ..types import DETACHED_HEAD, Failure, GitState, GitTreeStatus

GIT_TIMEOUT = 5  # seconds

# Unmerged XY codes from `git status --porcelain`
CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

_BRANCH_HEADER = re.compile(
    r"^## (?:No commits yet on |Initial commit on )?"
    r"(?P<branch>.+?)"
    r"(?:\.\.\.(?P<upstream>\S+))?"
    r"(?: \[(?P<tracking>[^\]]*)\])?$"
)
_AHEAD = re.compile(r"ahead (\d+)")
_BEHIND = re.compile(r"behind (\d+)")


def _run_git(args: list[str], cwd: Optional[str] = None) -> Union[str, Failure]:
    """Run a git command and return its stdout.

    Args:
        args: Git command arguments
        cwd: Working directory for git command

    Returns:
        Command stdout, or a Failure if git is missing, timed out or failed
    """
    try:
        result = subprocess.run(
            ["git", "--no-optional-locks"] + args,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        return Failure.timeout(f"git {args[0]} timed out")
    except (FileNotFoundError, OSError) as e:
        return Failure.unavailable(str(e))

    if result.returncode != 0:
        return Failure.unavailable(result.stderr.strip() or "not a git repository")
    return result.stdout


def parse_porcelain_status(output: str) -> GitState:
    """Classify `git status --porcelain=v1 --branch` output.

    Conflicted wins over Dirty: one unmerged path is enough, regardless of
    what else changed.
    """
    branch = DETACHED_HEAD
    has_remote = False
    ahead = 0
    behind = 0
    changed = 0
    conflicted = False

    for line in output.splitlines():
        if not line.strip():
            continue
        if line.startswith("## "):
            match = _BRANCH_HEADER.match(line)
            if match:
                name = match.group("branch")
                if not name.startswith("HEAD (no branch)"):
                    branch = name
                has_remote = match.group("upstream") is not None
                tracking = match.group("tracking") or ""
                if tracking == "gone":
                    has_remote = False
                ahead_match = _AHEAD.search(tracking)
                behind_match = _BEHIND.search(tracking)
                ahead = int(ahead_match.group(1)) if ahead_match else 0
                behind = int(behind_match.group(1)) if behind_match else 0
            continue

        changed += 1
        if line[:2] in CONFLICT_CODES:
            conflicted = True

    if conflicted:
        status = GitTreeStatus.CONFLICTED
    elif changed:
        status = GitTreeStatus.DIRTY
    else:
        status = GitTreeStatus.CLEAN

    return GitState(
        branch=branch,
        status=status,
        ahead=ahead,
        behind=behind,
        has_remote=has_remote,
        changed_paths=changed,
    )


def get_git_state(cwd: str, with_sha: bool = False) -> Union[GitState, Failure]:
    """Get repository state for a working directory.

    Never cached: it must reflect the working tree at this instant.

    Args:
        cwd: Working directory to inspect
        with_sha: Also resolve the abbreviated HEAD commit

    Returns:
        GitState, or Failure (unavailable outside a repository)
    """
    if not cwd:
        return Failure.unavailable("no working directory")

    output = _run_git(["status", "--porcelain=v1", "--branch"], cwd=cwd)
    if isinstance(output, Failure):
        return output

    state = parse_porcelain_status(output)

    if with_sha:
        sha = _run_git(["rev-parse", "--short=7", "HEAD"], cwd=cwd)
        if isinstance(sha, str) and sha.strip():
            state = replace(state, sha=sha.strip())

    return state
