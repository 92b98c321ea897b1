"""
OpenClaw Fork Update Components
Copyright (C) 2024 HOMESERVER LLC

Step Runner Component

Single chokepoint for every external command the fork updater executes:
- Bounded execution through run_command_with_timeout
- Uniform failure interpretation (non-zero exit is always failure)
- Uniform error text (stderr preferred, stdout as fallback)
- Inspectable history of every step that ran
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from forkupdate.utils import index as utils_index
from forkupdate.utils.index import CommandResult, log_message

from ..errors import StepError

CommandRunner = Callable[..., CommandResult]


def failure_detail(result: CommandResult) -> str:
    """Best available diagnostic text for a command result."""
    return (result.stderr.strip() or result.stdout.strip())


@dataclass
class StepRecord:
    """Tagged outcome of one pipeline step."""

    name: str
    argv: List[str]
    code: int
    detail: str = ""
    stdout: str = field(default="", repr=False)

    @property
    def ok(self) -> bool:
        return self.code == 0


class StepRunner:
    """Runs pipeline steps and remembers what happened to each of them."""

    def __init__(self, timeout: float, command_runner: Optional[CommandRunner] = None):
        self.timeout = timeout
        self._command_runner = command_runner
        self.history: List[StepRecord] = []

    def _execute(self, argv: List[str], cwd: Optional[str]) -> CommandResult:
        runner = self._command_runner or utils_index.run_command_with_timeout
        return runner(argv, cwd=cwd, timeout=self.timeout)

    def probe(self, name: str, argv: List[str], cwd: Optional[str] = None) -> CommandResult:
        """
        Run a read-only query and return its result without raising.

        The outcome is still recorded in the history.
        """
        result = self._execute(argv, cwd)
        self.history.append(StepRecord(
            name=name,
            argv=list(argv),
            code=result.code,
            detail=failure_detail(result) if result.code != 0 else "",
            stdout=result.stdout,
        ))
        return result

    def run(self, name: str, argv: List[str], cwd: Optional[str] = None) -> CommandResult:
        """
        Run a pipeline step, raising StepError on a non-zero exit.

        Args:
            name: Human-readable step label used in logs and errors
            argv: Command and arguments
            cwd: Working directory for the command

        Returns:
            CommandResult: the successful result, for steps that read output

        Raises:
            StepError: the command exited non-zero or could not be run
        """
        log_message(f"[STEP] {name}...")
        result = self.probe(name, argv, cwd)
        if result.code != 0:
            detail = failure_detail(result)
            log_message(f"[STEP] ✗ {name} failed (exit {result.code})", "ERROR")
            raise StepError(name, detail, result.code)
        log_message(f"[STEP] ✓ {name}")
        return result

    @property
    def step_names(self) -> List[str]:
        return [record.name for record in self.history]
