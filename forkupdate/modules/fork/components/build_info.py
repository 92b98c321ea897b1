"""
OpenClaw Fork Update Components
Copyright (C) 2024 HOMESERVER LLC

Build Info Component

Reads and writes dist/build-info.json, the metadata a build leaves behind so
an installed copy knows which repository and commit it came from.
"""

import json
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from forkupdate.utils import index as utils_index
from forkupdate.utils.index import log_message

from ..config import BUILD_INFO_RELPATH
from .git_operations import parse_github_repo


@dataclass(frozen=True)
class BuildInfo:
    version: Optional[str] = None
    commit: Optional[str] = None
    built_at: Optional[str] = None
    source_repo: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildInfo":
        def _str(key):
            value = data.get(key)
            return value if isinstance(value, str) else None

        return cls(
            version=_str("version"),
            commit=_str("commit"),
            built_at=_str("builtAt"),
            source_repo=_str("sourceRepo"),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "version": self.version,
            "commit": self.commit,
            "builtAt": self.built_at,
            "sourceRepo": self.source_repo,
        }


def build_info_path(root: str) -> Path:
    return Path(root) / BUILD_INFO_RELPATH


def read_build_info(install_root: str) -> BuildInfo:
    """
    Load build metadata from an install root.

    A missing or unreadable file, malformed JSON, or a JSON value that is not
    an object all yield an empty BuildInfo.

    Args:
        install_root: Root directory of the installed package

    Returns:
        BuildInfo: Parsed metadata (fields are None when absent)
    """
    path = build_info_path(install_root)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        log_message(f"No build info at {path}", "DEBUG")
        return BuildInfo()
    except (OSError, ValueError) as e:
        log_message(f"Ignoring unreadable build info at {path}: {e}", "WARNING")
        return BuildInfo()

    if not isinstance(data, dict):
        log_message(f"Ignoring build info at {path}: not a JSON object", "WARNING")
        return BuildInfo()
    return BuildInfo.from_dict(data)


def _read_package_version(root: str) -> Optional[str]:
    try:
        with open(os.path.join(root, "package.json"), 'r', encoding='utf-8') as f:
            version = json.load(f).get("version")
    except (OSError, ValueError, AttributeError):
        return None
    return version if isinstance(version, str) else None


def _git_output(root: str, *args: str) -> Optional[str]:
    result = utils_index.run_command_with_timeout(["git", *args], cwd=root, timeout=30)
    if result.code != 0:
        return None
    return result.stdout.strip() or None


def _env_first(environ: Mapping[str, str], *keys: str) -> Optional[str]:
    for key in keys:
        value = (environ.get(key) or "").strip()
        if value:
            return value
    return None


def write_build_info(root: str, environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Write dist/build-info.json for a freshly built checkout.

    Every field degrades to null when its source is unavailable.

    Args:
        root: Checkout root (where package.json lives)
        environ: Environment to read overrides from (defaults to os.environ)

    Returns:
        Path: The written file
    """
    if environ is None:
        environ = os.environ

    commit = _env_first(environ, "GIT_COMMIT", "GIT_SHA") or _git_output(root, "rev-parse", "HEAD")
    source_repo = _env_first(environ, "OPENCLAW_SOURCE_REPO", "GITHUB_REPOSITORY")
    if not source_repo:
        source_repo = parse_github_repo(_git_output(root, "remote", "get-url", "origin"))

    info = BuildInfo(
        version=_read_package_version(root),
        commit=commit,
        built_at=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        source_repo=source_repo,
    )

    path = build_info_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(json.dumps(info.to_dict(), indent=2) + "\n")

    log_message(f"Wrote build info to {path} (sourceRepo: {info.source_repo or 'unknown'})")
    return path
