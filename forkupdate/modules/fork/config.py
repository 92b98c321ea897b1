"""
Configuration for the fork update module.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

# Canonical upstream project
CANONICAL_REPO = "openclaw/openclaw"
DEFAULT_UPSTREAM_URL = "https://github.com/openclaw/openclaw.git"
DEFAULT_UPSTREAM_REMOTE = "upstream"
DEFAULT_BRANCH = "jd-bot-effectiveness-fixes"

# Filesystem locations
BUILD_INFO_RELPATH = Path("dist") / "build-info.json"
DEFAULT_FORK_ROOT_RELPATH = Path("workspace") / "openclaw"
DEFAULT_PACK_BASE = "/tmp/openclaw"
PACK_SUBDIR = "packs"
FALLBACK_PACK_DIRNAME = "openclaw-packs"

# Every external command gets this long unless the caller says otherwise
DEFAULT_STEP_TIMEOUT = 1200

GITHUB_API_URL = "https://api.github.com"

# Environment variables
ENV_FORK_REPO = "OPENCLAW_FORK_REPO"
ENV_FORK_ROOT = "OPENCLAW_FORK_ROOT"
ENV_UPSTREAM_REMOTE = "OPENCLAW_FORK_UPSTREAM_REMOTE"
ENV_UPSTREAM_REF = "OPENCLAW_FORK_UPSTREAM_REF"
ENV_UPSTREAM_URL = "OPENCLAW_FORK_UPSTREAM_URL"
ENV_PUSH = "OPENCLAW_FORK_PUSH"
ENV_BRANCH = "OPENCLAW_FORK_BRANCH"
ENV_PACK_DIR = "OPENCLAW_PACK_DIR"
ENV_INSTALL_ROOT = "OPENCLAW_INSTALL_ROOT"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"


def _env_value(environ: Mapping[str, str], key: str) -> Optional[str]:
    value = (environ.get(key) or "").strip()
    return value or None


@dataclass(frozen=True)
class ForkUpdateConfig:
    """Settings for one fork update run, captured once from the environment."""

    fork_repo: Optional[str] = None
    fork_root: Optional[str] = None
    upstream_remote: str = DEFAULT_UPSTREAM_REMOTE
    upstream_ref: str = f"{DEFAULT_UPSTREAM_REMOTE}/main"
    upstream_url: str = DEFAULT_UPSTREAM_URL
    push: bool = True
    branch: str = DEFAULT_BRANCH
    pack_dir: str = DEFAULT_PACK_BASE
    install_root: Optional[str] = None
    github_token: Optional[str] = None
    timeout: float = DEFAULT_STEP_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, timeout: float = DEFAULT_STEP_TIMEOUT) -> "ForkUpdateConfig":
        """
        Build the configuration from an environment mapping.

        Blank values count as unset. The upstream ref defaults to
        ``<remote>/main`` for whichever remote name ends up configured.
        """
        if environ is None:
            environ = os.environ

        remote = _env_value(environ, ENV_UPSTREAM_REMOTE) or DEFAULT_UPSTREAM_REMOTE
        return cls(
            fork_repo=_env_value(environ, ENV_FORK_REPO),
            fork_root=_env_value(environ, ENV_FORK_ROOT),
            upstream_remote=remote,
            upstream_ref=_env_value(environ, ENV_UPSTREAM_REF) or f"{remote}/main",
            upstream_url=_env_value(environ, ENV_UPSTREAM_URL) or DEFAULT_UPSTREAM_URL,
            push=_env_value(environ, ENV_PUSH) != "0",
            branch=_env_value(environ, ENV_BRANCH) or DEFAULT_BRANCH,
            pack_dir=_env_value(environ, ENV_PACK_DIR) or DEFAULT_PACK_BASE,
            install_root=_env_value(environ, ENV_INSTALL_ROOT),
            github_token=_env_value(environ, ENV_GITHUB_TOKEN),
            timeout=timeout,
        )

    def candidate_roots(self, home: Optional[str] = None) -> List[str]:
        """Checkout locations to probe, in priority order."""
        if home is None:
            home = str(Path.home())
        candidates = []
        if self.fork_root:
            candidates.append(os.path.abspath(os.path.expanduser(self.fork_root)))
        candidates.append(os.path.join(home, str(DEFAULT_FORK_ROOT_RELPATH)))
        return candidates

    @property
    def upstream_branch(self) -> str:
        """Branch part of the upstream ref (``upstream/main`` -> ``main``)."""
        prefix = f"{self.upstream_remote}/"
        if self.upstream_ref.startswith(prefix):
            return self.upstream_ref[len(prefix):]
        return self.upstream_ref
