"""
OpenClaw Fork Update Components
Copyright (C) 2024 HOMESERVER LLC

Upstream Status Component

Read-only check of how far the fork branch has drifted from upstream, using the
GitHub compare API. Nothing on disk is touched, so it backs the --check-only mode.
"""

from dataclasses import dataclass
from typing import Optional

import requests

from forkupdate.utils.index import log_message

from ..config import GITHUB_API_URL, ForkUpdateConfig
from .git_operations import parse_github_repo


@dataclass(frozen=True)
class UpstreamStatus:
    upstream_repo: str
    base: str
    head: str
    status: str
    ahead_by: int
    behind_by: int

    @property
    def needs_update(self) -> bool:
        return self.behind_by > 0


class UpstreamStatusChecker:
    """Compares the fork branch against the upstream branch on GitHub."""

    def __init__(self, config: ForkUpdateConfig, api_url: str = GITHUB_API_URL, timeout: float = 30):
        self.config = config
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _headers(self):
        headers = {"Accept": "application/vnd.github+json"}
        if self.config.github_token:
            headers["Authorization"] = f"Bearer {self.config.github_token}"
        return headers

    def compare(self, fork_repo: str) -> Optional[UpstreamStatus]:
        """
        Ask GitHub how the fork branch compares to the upstream branch.

        Args:
            fork_repo: ``owner/repo`` identifier of the fork

        Returns:
            Optional[UpstreamStatus]: Comparison, or None if it could not be obtained
        """
        upstream_repo = parse_github_repo(self.config.upstream_url)
        if not upstream_repo:
            log_message(f"[UPSTREAM] Upstream URL is not a GitHub repository: {self.config.upstream_url}", "WARNING")
            return None

        fork_owner = fork_repo.split("/", 1)[0]
        base = self.config.upstream_branch
        head = f"{fork_owner}:{self.config.branch}"
        url = f"{self.api_url}/repos/{upstream_repo}/compare/{base}...{head}"

        log_message(f"[UPSTREAM] Comparing {upstream_repo}:{base} with {head}")
        try:
            r = requests.get(url, headers=self._headers(), timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            log_message(f"[UPSTREAM] Failed to compare with upstream: {e}", "ERROR")
            return None

        if not isinstance(data, dict):
            log_message("[UPSTREAM] Unexpected compare response: not a JSON object", "ERROR")
            return None

        ahead_by = data.get("ahead_by")
        behind_by = data.get("behind_by")
        # bool is an int subclass but never a valid count
        if not all(isinstance(n, int) and not isinstance(n, bool) for n in (ahead_by, behind_by)):
            log_message(
                f"[UPSTREAM] Unexpected compare counts: ahead_by={ahead_by!r} behind_by={behind_by!r}",
                "ERROR",
            )
            return None

        return UpstreamStatus(
            upstream_repo=upstream_repo,
            base=base,
            head=head,
            status=str(data.get("status", "unknown")),
            ahead_by=ahead_by,
            behind_by=behind_by,
        )
