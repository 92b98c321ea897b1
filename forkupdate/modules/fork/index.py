#!/usr/bin/env python3
"""
OpenClaw Fork Update System
Copyright (C) 2024 HOMESERVER LLC

OpenClaw Fork Update Module

Updates an OpenClaw install that was built from a fork instead of the canonical
repository. The fork checkout is rebased onto upstream, rebuilt, packed and
reinstalled globally, then validated with smoke tests.

Key Features:
- Fork detection from OPENCLAW_FORK_REPO or the installed build-info.json
- Checkout discovery by matching each candidate's origin remote
- Strict fail-fast step sequence with an inspectable step history
- No rollback: a failed step leaves the checkout and install where it stopped
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from forkupdate.utils import index as utils_index
from forkupdate.utils.index import log_message

from .config import CANONICAL_REPO, ENV_UPSTREAM_REF, ForkUpdateConfig
from .errors import ForkRootNotFoundError
from .components import (
    BuildManager,
    GitOperations,
    SmokeTester,
    StepRecord,
    StepRunner,
    UpstreamStatus,
    UpstreamStatusChecker,
    read_build_info,
    repo_ids_match,
)
from .components.step_runner import CommandRunner


@dataclass
class PipelineOptions:
    """Caller options; channel and tag are accepted but do not apply to forks."""

    restart: bool = True
    channel: Optional[str] = None
    tag: Optional[str] = None

    @property
    def ignored_flags(self) -> List[str]:
        flags = []
        if self.channel:
            flags.append("channel")
        if self.tag:
            flags.append("tag")
        return flags


@dataclass
class ForkUpdateResult:
    """Summary of a completed fork update, including every step that ran."""

    fork_repo: str
    fork_root: str
    branch: str
    upstream_ref: str
    pushed: bool = False
    restarted: bool = False
    tarball: Optional[str] = None
    commit: Optional[str] = None
    smoke_tests_passed: int = 0
    ignored_flags: List[str] = field(default_factory=list)
    steps: List[StepRecord] = field(default_factory=list)
    duration: float = 0.0


def resolve_fork_repo_id(install_root: Optional[str], config: ForkUpdateConfig) -> Optional[str]:
    """
    Work out which repository the running install was built from.

    Args:
        install_root: Root of the installed package (may be None if unknown)
        config: Run configuration

    Returns:
        Optional[str]: ``owner/repo`` identifier, or None if nothing says so
    """
    if config.fork_repo:
        return config.fork_repo
    if not install_root:
        return None
    build_repo = (read_build_info(install_root).source_repo or "").strip()
    return build_repo or None


def is_fork(fork_repo: Optional[str]) -> bool:
    """The canonical repository is never a fork."""
    if not fork_repo or not fork_repo.strip():
        return False
    return not repo_ids_match(fork_repo, CANONICAL_REPO)


def resolve_install_root(config: ForkUpdateConfig, command_runner: Optional[CommandRunner] = None) -> Optional[str]:
    """Globally installed openclaw package root (override, else ``npm root -g``)."""
    if config.install_root:
        return config.install_root

    runner = command_runner or utils_index.run_command_with_timeout
    result = runner(["npm", "root", "-g"], cwd=None, timeout=60)
    global_root = result.stdout.strip() if result.code == 0 else ""
    if not global_root:
        log_message(f"Could not determine global npm root: {result.stderr.strip()}", "WARNING")
        return None
    return f"{global_root.rstrip('/')}/openclaw"


class ForkUpdater:
    """Runs the fork update pipeline against one checkout."""

    def __init__(self, config: ForkUpdateConfig, options: Optional[PipelineOptions] = None,
                 command_runner: Optional[CommandRunner] = None):
        self.config = config
        self.options = options or PipelineOptions()
        self.runner = StepRunner(config.timeout, command_runner)
        self.git = GitOperations(config, self.runner)
        self.build = BuildManager(config, self.runner)
        self.smoke = SmokeTester(self.runner)

    def find_fork_root(self, fork_repo: str) -> str:
        fork_root = self.git.resolve_fork_root(fork_repo)
        if not fork_root:
            raise ForkRootNotFoundError(fork_repo)
        return fork_root

    def update(self, fork_root: str, fork_repo: str) -> ForkUpdateResult:
        """
        Run every pipeline step in order.

        The first failing step raises and nothing after it runs. Already
        applied git or install changes are left as they are.

        Args:
            fork_root: Path to the fork checkout
            fork_repo: ``owner/repo`` identifier of the fork

        Returns:
            ForkUpdateResult: Summary of the completed run

        Raises:
            PreflightError: the checkout has uncommitted changes
            StepError: an external command failed
            ArtifactError: npm pack did not name its tarball
        """
        start_time = time.time()
        config = self.config
        result = ForkUpdateResult(
            fork_repo=fork_repo,
            fork_root=fork_root,
            branch=config.branch,
            upstream_ref=config.upstream_ref,
            ignored_flags=self.options.ignored_flags,
            steps=self.runner.history,
        )

        log_message(f"Fork install detected ({fork_repo}). Using fork updater.")
        log_message(f"Repo: {fork_root}")
        log_message(f"Branch: {config.branch} → rebase onto {config.upstream_ref}")

        # Step 1: Preflight
        self.git.assert_clean_tree(fork_root)

        # Steps 2-6: Sync with upstream
        self.git.ensure_upstream_remote(fork_root)
        self.git.fetch_upstream(fork_root)
        self.git.checkout_branch(fork_root)
        self.git.rebase_onto_upstream(fork_root)
        if config.push:
            self.git.push_branch(fork_root)
            result.pushed = True
        else:
            log_message("[GIT] Push disabled, keeping rebased branch local")
        result.commit = self.git.get_head_commit(fork_root)

        # Steps 7-10: Build and reinstall
        self.build.install_dependencies(fork_root)
        self.build.build(fork_root)
        result.tarball = self.build.pack(fork_root)
        self.build.install_globally(fork_root, result.tarball)

        # Step 11: Restart or notify
        result.restarted = self.build.restart_gateway(fork_root, self.options.restart)

        # Step 12: Smoke tests
        result.smoke_tests_passed = self.smoke.run_all(fork_root)

        result.duration = time.time() - start_time
        log_message(f"✓ Fork update complete. ({result.duration:.1f}s)")
        return result


def run_fork_update(fork_root: str, fork_repo: str, config: ForkUpdateConfig,
                    options: Optional[PipelineOptions] = None,
                    command_runner: Optional[CommandRunner] = None) -> ForkUpdateResult:
    return ForkUpdater(config, options, command_runner).update(fork_root, fork_repo)


def maybe_run_fork_update(install_root: Optional[str], options: Optional[PipelineOptions] = None,
                          config: Optional[ForkUpdateConfig] = None,
                          command_runner: Optional[CommandRunner] = None) -> Optional[ForkUpdateResult]:
    """
    Run the fork update if the install is a fork.

    Args:
        install_root: Root of the installed package
        options: Caller options (restart toggle, ignored channel/tag)
        config: Run configuration (read from the environment when None)
        command_runner: Replacement for run_command_with_timeout

    Returns:
        Optional[ForkUpdateResult]: None when the install is not a fork

    Raises:
        ForkRootNotFoundError: the install is a fork but no checkout was found
        ForkUpdateError: any pipeline failure
    """
    if config is None:
        config = ForkUpdateConfig.from_env()
    options = options or PipelineOptions()

    fork_repo = resolve_fork_repo_id(install_root, config)
    if not is_fork(fork_repo):
        log_message("Not a fork install, skipping fork updater", "DEBUG")
        return None

    if options.ignored_flags:
        log_message(
            f"Note: --channel/--tag are ignored for fork installs. Use {ENV_UPSTREAM_REF} if you need to pin."
        )

    updater = ForkUpdater(config, options, command_runner)
    fork_root = updater.find_fork_root(fork_repo)
    return updater.update(fork_root, fork_repo)


def check_upstream(config: ForkUpdateConfig, fork_repo: str) -> Optional[UpstreamStatus]:
    """Report how far the fork branch is behind upstream without changing anything."""
    status = UpstreamStatusChecker(config).compare(fork_repo)
    if status is None:
        return None

    log_message(f"[UPSTREAM] {status.head} is {status.ahead_by} ahead / {status.behind_by} behind {status.base}")
    if status.needs_update:
        log_message("[UPSTREAM] Updates are available - run without --check-only to apply them")
    else:
        log_message("[UPSTREAM] Fork branch already contains upstream")
    return status
