"""
OpenClaw Fork Update System
Copyright (C) 2024 HOMESERVER LLC

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

"""
OpenClaw Fork Update Module

This module keeps a forked OpenClaw install current with upstream by rebasing
the fork checkout, rebuilding it and reinstalling it globally.

Components:
- GitOperations: fork checkout discovery, upstream remote, fetch/rebase/push
- BuildManager: pnpm install/build, npm pack, global install, gateway restart
- SmokeTester: post-install memory search checks
- StepRunner: uniform execution and error reporting for every command

Usage:
    from forkupdate.modules.fork import maybe_run_fork_update, PipelineOptions

    result = maybe_run_fork_update(install_root, PipelineOptions(restart=False))
    if result is None:
        print("Not a fork install")
"""

from .config import ForkUpdateConfig
from .errors import (
    ForkUpdateError,
    ResolutionError,
    ForkRootNotFoundError,
    PreflightError,
    StepError,
    ArtifactError,
)
from .index import (
    PipelineOptions,
    ForkUpdateResult,
    ForkUpdater,
    resolve_fork_repo_id,
    resolve_install_root,
    is_fork,
    run_fork_update,
    maybe_run_fork_update,
    check_upstream,
)

__all__ = [
    'ForkUpdateConfig',
    'ForkUpdateError',
    'ResolutionError',
    'ForkRootNotFoundError',
    'PreflightError',
    'StepError',
    'ArtifactError',
    'PipelineOptions',
    'ForkUpdateResult',
    'ForkUpdater',
    'resolve_fork_repo_id',
    'resolve_install_root',
    'is_fork',
    'run_fork_update',
    'maybe_run_fork_update',
    'check_upstream',
]
