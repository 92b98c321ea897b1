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

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional

logger = logging.getLogger("forkupdate")

# Exit codes reported for invocations that never produced one of their own
TIMEOUT_EXIT_CODE = 124
SPAWN_FAILURE_EXIT_CODE = 127


def log_message(message, level="INFO"):
    """
    Log a message through the shared update logger.
    Args:
        message (str): The message to log.
        level (str): Log level (e.g., 'INFO', 'ERROR').
    """
    if level == "ERROR":
        logger.error(message)
    elif level == "WARNING":
        logger.warning(message)
    elif level == "DEBUG":
        logger.debug(message)
    else:
        logger.info(message)


@dataclass
class CommandResult:
    """Outcome of one external command invocation."""

    code: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.code == 0


def run_command_with_timeout(
    argv: List[str],
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
    env: Optional[Dict[str, str]] = None,
) -> CommandResult:
    """
    Run an external command and capture its output.

    Process failures never raise: a timeout is reported with exit code 124
    and a missing executable (or any other spawn error) with exit code 127,
    so callers only ever have to look at ``CommandResult.code``.

    Args:
        argv: Command and arguments
        cwd: Working directory for the command
        timeout: Seconds to wait before giving up on the command
        env: Full environment for the child (inherits ours when None)

    Returns:
        CommandResult: exit code plus captured stdout/stderr
    """
    log_message(f"$ {' '.join(argv)}", "DEBUG")
    try:
        result = subprocess.run(
            argv,
            cwd=cwd,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            env=env,
        )
    except subprocess.TimeoutExpired as e:
        stdout = e.stdout.decode(errors="replace") if isinstance(e.stdout, bytes) else (e.stdout or "")
        return CommandResult(
            code=TIMEOUT_EXIT_CODE,
            stdout=stdout,
            stderr=f"{argv[0]} timed out after {timeout}s",
            timed_out=True,
        )
    except OSError as e:
        return CommandResult(code=SPAWN_FAILURE_EXIT_CODE, stderr=str(e))

    return CommandResult(
        code=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


def path_exists(path: str) -> bool:
    return os.path.exists(path)


def try_create_directory(path: str) -> bool:
    """
    Create a directory (and parents) without raising.

    Returns:
        bool: True if the directory exists afterwards, False otherwise
    """
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        log_message(f"Could not create directory {path}: {e}", "DEBUG")
        return False
    return os.path.isdir(path)
