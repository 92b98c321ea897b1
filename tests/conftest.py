from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from forkupdate.modules.fork.config import ForkUpdateConfig
from forkupdate.utils.index import CommandResult

FORK_REPO = "ThomasMarcelis/openclaw"
TARBALL = "openclaw-2026.2.21.tgz"
SEARCH_HIT = '[{"path": "memory/2026-02-01.md", "score": 0.42, "snippet": "..."}]'


class ScriptedRunner:
    """Stand-in for run_command_with_timeout that answers from a script.

    ``overrides`` maps a substring of the joined command line to the result
    to return; the first matching key wins. Anything unmatched falls back to
    a successful default that mimics a healthy fork checkout.
    """

    def __init__(
        self,
        overrides: Optional[Dict[str, CommandResult]] = None,
        origin_url: str = "git@github.com:ThomasMarcelis/openclaw.git",
        origins: Optional[Dict[str, str]] = None,
    ) -> None:
        self.overrides = overrides or {}
        self.origin_url = origin_url
        self.origins = origins or {}
        self.calls: List[Tuple[List[str], Optional[str]]] = []

    def __call__(self, argv, cwd=None, timeout=None, env=None) -> CommandResult:
        self.calls.append((list(argv), cwd))
        line = " ".join(argv)
        for key, result in self.overrides.items():
            if key in line:
                return result
        return self._default(argv, line)

    def _default(self, argv: List[str], line: str) -> CommandResult:
        if "remote get-url origin" in line:
            repo_path = argv[2]
            return CommandResult(0, self.origins.get(repo_path, self.origin_url) + "\n")
        if "remote get-url upstream" in line:
            return CommandResult(2, "", "error: No such remote 'upstream'")
        if "status --porcelain" in line:
            return CommandResult(0, "")
        if "rev-parse HEAD" in line:
            return CommandResult(0, "0123456789abcdef\n")
        if argv[:2] == ["npm", "pack"]:
            return CommandResult(0, f"npm notice packing\n{TARBALL}\n")
        if argv[:3] == ["openclaw", "memory", "search"]:
            return CommandResult(0, SEARCH_HIT)
        return CommandResult(0, "")

    def lines(self) -> List[str]:
        return [" ".join(argv) for argv, _ in self.calls]

    def ran(self, fragment: str) -> bool:
        return any(fragment in line for line in self.lines())


@pytest.fixture
def fork_checkout(tmp_path: Path) -> Path:
    root = tmp_path / "fork"
    (root / ".git").mkdir(parents=True)
    return root


@pytest.fixture
def config(fork_checkout: Path, tmp_path: Path) -> ForkUpdateConfig:
    return ForkUpdateConfig.from_env(
        {
            "OPENCLAW_FORK_REPO": FORK_REPO,
            "OPENCLAW_FORK_ROOT": str(fork_checkout),
            "OPENCLAW_PACK_DIR": str(tmp_path / "packbase"),
        },
        timeout=5,
    )


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture(autouse=True)
def _clean_fork_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "OPENCLAW_FORK_REPO",
        "OPENCLAW_FORK_ROOT",
        "OPENCLAW_FORK_UPSTREAM_REMOTE",
        "OPENCLAW_FORK_UPSTREAM_REF",
        "OPENCLAW_FORK_UPSTREAM_URL",
        "OPENCLAW_FORK_PUSH",
        "OPENCLAW_FORK_BRANCH",
        "OPENCLAW_PACK_DIR",
        "OPENCLAW_INSTALL_ROOT",
        "OPENCLAW_SOURCE_REPO",
        "GITHUB_REPOSITORY",
        "GITHUB_TOKEN",
        "GIT_COMMIT",
        "GIT_SHA",
    ):
        monkeypatch.delenv(key, raising=False)
