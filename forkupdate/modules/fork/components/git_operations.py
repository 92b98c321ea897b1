"""
OpenClaw Fork Update Components
Copyright (C) 2024 HOMESERVER LLC

Git Operations Component

Handles all Git repository operations for the fork update system including:
- Remote URL parsing into owner/repo identifiers
- Locating the fork checkout on disk
- Upstream remote setup
- Clean-tree preflight, fetch, checkout, rebase and push
"""

import os
import re
from typing import List, Optional

from forkupdate.utils.index import log_message, path_exists

from ..config import ForkUpdateConfig
from ..errors import PreflightError
from .step_runner import StepRunner

# Examples:
# - git@github.com:Owner/Repo.git
# - https://github.com/Owner/Repo.git
# - ssh://git@github.com/Owner/Repo.git
_GITHUB_REMOTE_RE = re.compile(
    r"(?:^|[@/])github\.com[:/](?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?$",
    re.IGNORECASE,
)


def parse_github_repo(remote_url: Optional[str]) -> Optional[str]:
    """
    Extract ``owner/repo`` from a GitHub remote URL.

    Args:
        remote_url: Remote URL in ssh shorthand, https or ssh:// form

    Returns:
        Optional[str]: ``owner/repo`` with its original case, or None
    """
    trimmed = (remote_url or "").strip().rstrip("/")
    if not trimmed:
        return None

    match = _GITHUB_REMOTE_RE.search(trimmed)
    if not match:
        return None

    owner = match.group("owner").strip()
    repo = re.sub(r"\.git$", "", match.group("repo").strip(), flags=re.IGNORECASE)
    if not owner or not repo:
        return None
    return f"{owner}/{repo}"


def repo_ids_match(left: Optional[str], right: Optional[str]) -> bool:
    if not left or not right:
        return False
    return left.strip().lower() == right.strip().lower()


class GitOperations:
    """Handles Git repository operations for fork updates."""

    def __init__(self, config: ForkUpdateConfig, runner: StepRunner):
        self.config = config
        self.runner = runner

    def get_origin_repo(self, repo_path: str) -> Optional[str]:
        """Identifier of the repository a checkout's ``origin`` points at."""
        result = self.runner.probe(
            f"git remote get-url origin ({repo_path})",
            ["git", "-C", repo_path, "remote", "get-url", "origin"],
        )
        if result.code != 0:
            return None
        return parse_github_repo(result.stdout)

    def resolve_fork_root(self, fork_repo: str, candidates: Optional[List[str]] = None) -> Optional[str]:
        """
        Find the checkout of ``fork_repo`` among the candidate directories.

        Candidates are probed in order and the first whose ``origin`` remote
        names the fork repository wins.

        Args:
            fork_repo: ``owner/repo`` identifier of the fork
            candidates: Directories to probe (defaults to the configured list)

        Returns:
            Optional[str]: Path to the checkout, or None if no candidate matches
        """
        if candidates is None:
            candidates = self.config.candidate_roots()

        for candidate in candidates:
            if not path_exists(os.path.join(candidate, ".git")):
                log_message(f"[GIT] Skipping {candidate}: not a git checkout", "DEBUG")
                continue

            origin_repo = self.get_origin_repo(candidate)
            if repo_ids_match(origin_repo, fork_repo):
                log_message(f"[GIT] ✓ Found fork checkout: {candidate}")
                return candidate
            log_message(f"[GIT] Skipping {candidate}: origin is {origin_repo or 'unknown'}", "DEBUG")

        return None

    def assert_clean_tree(self, repo_path: str) -> None:
        """
        Refuse to continue when the working tree has uncommitted changes.

        Raises:
            StepError: git status itself failed
            PreflightError: git status reported changes
        """
        result = self.runner.run("git status", ["git", "-C", repo_path, "status", "--porcelain"])
        if result.stdout.strip():
            raise PreflightError(f"Fork repo has uncommitted changes. Commit/stash first: {repo_path}")
        log_message("[GIT] ✓ Working tree is clean")

    def ensure_upstream_remote(self, repo_path: str) -> None:
        """
        Make sure the upstream remote exists, adding it over HTTPS if missing.

        Raises:
            StepError: the remote was missing and could not be added
        """
        remote = self.config.upstream_remote
        existing = self.runner.probe(
            f"git remote get-url {remote}",
            ["git", "-C", repo_path, "remote", "get-url", remote],
        )
        if existing.code == 0:
            log_message(f"[GIT] Remote {remote} -> {existing.stdout.strip()}")
            return

        # HTTPS so the remote works without SSH keys
        log_message(f"[GIT] Adding remote {remote} -> {self.config.upstream_url}")
        self.runner.run(
            f"add upstream remote ({remote})",
            ["git", "-C", repo_path, "remote", "add", remote, self.config.upstream_url],
        )

    def fetch_upstream(self, repo_path: str) -> None:
        remote = self.config.upstream_remote
        self.runner.run(
            f"git fetch {remote}",
            ["git", "-C", repo_path, "fetch", remote, "--prune", "--tags"],
            cwd=repo_path,
        )

    def checkout_branch(self, repo_path: str) -> None:
        branch = self.config.branch
        self.runner.run(
            f"git checkout {branch}",
            ["git", "-C", repo_path, "checkout", branch],
            cwd=repo_path,
        )

    def rebase_onto_upstream(self, repo_path: str) -> None:
        upstream_ref = self.config.upstream_ref
        self.runner.run(
            f"git rebase {upstream_ref}",
            ["git", "-C", repo_path, "rebase", upstream_ref],
            cwd=repo_path,
        )

    def push_branch(self, repo_path: str) -> None:
        """Force-with-lease push so remote history we have not seen is never clobbered."""
        self.runner.run(
            "git push --force-with-lease",
            ["git", "-C", repo_path, "push", "--force-with-lease", "origin", self.config.branch],
            cwd=repo_path,
        )

    def get_head_commit(self, repo_path: str) -> Optional[str]:
        result = self.runner.probe("git rev-parse HEAD", ["git", "-C", repo_path, "rev-parse", "HEAD"])
        if result.code != 0:
            return None
        return result.stdout.strip() or None
