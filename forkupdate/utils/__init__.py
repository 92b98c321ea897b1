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
Utilities for the fork update system.

This module provides the logging and process helpers shared by every component.
"""

from .index import (
    log_message,
    CommandResult,
    run_command_with_timeout,
    path_exists,
    try_create_directory,
    TIMEOUT_EXIT_CODE,
    SPAWN_FAILURE_EXIT_CODE,
)

__all__ = [
    'log_message',
    'CommandResult',
    'run_command_with_timeout',
    'path_exists',
    'try_create_directory',
    'TIMEOUT_EXIT_CODE',
    'SPAWN_FAILURE_EXIT_CODE',
]
