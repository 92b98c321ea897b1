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
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

__version__ = "1.0.0"

# Import shared utilities
from .utils.index import log_message, run_command_with_timeout, CommandResult
from .modules.fork import (
    ForkUpdateConfig,
    PipelineOptions,
    ForkUpdateResult,
    ForkUpdateError,
    maybe_run_fork_update,
    run_fork_update,
    check_upstream,
)

# Re-export utilities for easy access by callers
__all__ = [
    'log_message',
    'run_command_with_timeout',
    'CommandResult',
    'ForkUpdateConfig',
    'PipelineOptions',
    'ForkUpdateResult',
    'ForkUpdateError',
    'maybe_run_fork_update',
    'run_fork_update',
    'check_upstream',
]
