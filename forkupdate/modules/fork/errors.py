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

from typing import Optional

from .config import DEFAULT_FORK_ROOT_RELPATH, ENV_FORK_ROOT


class ForkUpdateError(Exception):
    """Base exception for fork update failures."""
    pass


class ResolutionError(ForkUpdateError):
    """The fork or its checkout could not be resolved."""
    pass


class ForkRootNotFoundError(ResolutionError):
    """No candidate directory holds a checkout of the fork repository."""

    def __init__(self, fork_repo: str):
        self.fork_repo = fork_repo
        super().__init__(
            f"Fork updater could not find a checkout of {fork_repo}.\n"
            f"Clone it to ~/{DEFAULT_FORK_ROOT_RELPATH.as_posix()} or set {ENV_FORK_ROOT}."
        )


class PreflightError(ForkUpdateError):
    """The fork checkout is not in a state the pipeline can start from."""
    pass


class StepError(ForkUpdateError):
    """An external command in the pipeline exited non-zero."""

    def __init__(self, step: str, detail: str = "", code: Optional[int] = None):
        self.step = step
        self.detail = detail
        self.code = code
        message = f"{step} failed: {detail}" if detail else f"{step} failed"
        super().__init__(message)


class ArtifactError(ForkUpdateError):
    """The packer did not report the artifact it produced."""
    pass
