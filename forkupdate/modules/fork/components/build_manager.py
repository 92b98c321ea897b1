"""
OpenClaw Fork Update Components
Copyright (C) 2024 HOMESERVER LLC

Build Manager Component

Handles all build, packaging and service operations for the fork update system including:
- pnpm dependency installation and building
- npm packing into a writable destination directory
- Global installation of the packed tarball
- Gateway restart (or an operator tip when restarts are disabled)
"""

import os
import tempfile
from typing import Callable, List, Optional, Tuple

from forkupdate.utils.index import log_message, try_create_directory

from ..config import FALLBACK_PACK_DIRNAME, PACK_SUBDIR, ForkUpdateConfig
from ..errors import ArtifactError
from .step_runner import StepRunner

GATEWAY_RESTART_COMMAND = ["openclaw", "gateway", "restart"]


def parse_pack_output(stdout: str) -> Optional[str]:
    """Tarball filename reported by ``npm pack`` (its last non-empty line)."""
    lines = [line.strip() for line in (stdout or "").splitlines() if line.strip()]
    return lines[-1] if lines else None


class BuildManager:
    """Handles build, pack and install for fork updates."""

    def __init__(self, config: ForkUpdateConfig, runner: StepRunner):
        self.config = config
        self.runner = runner

    def install_dependencies(self, repo_path: str) -> None:
        log_message("[BUILD] Installing dependencies...")
        self.runner.run("pnpm install", ["pnpm", "install"], cwd=repo_path)

    def build(self, repo_path: str) -> None:
        log_message("[BUILD] Building fork checkout...")
        self.runner.run("pnpm build", ["pnpm", "build"], cwd=repo_path)

    def pack_destination_strategies(self) -> List[Tuple[str, Callable[[], str]]]:
        """Ordered candidate directories for the packed tarball."""
        return [
            ("configured pack directory", lambda: os.path.join(self.config.pack_dir, PACK_SUBDIR)),
            ("temp directory", lambda: os.path.join(tempfile.gettempdir(), FALLBACK_PACK_DIRNAME)),
        ]

    def resolve_pack_destination(self) -> str:
        """
        Pick a writable directory for ``npm pack`` output.

        Each strategy is tried in order; a directory is accepted once it
        exists and is writable. This never fails: if nothing qualifies the
        last candidate is returned and npm reports the real problem.

        Returns:
            str: Destination directory
        """
        dest = None
        for label, strategy in self.pack_destination_strategies():
            dest = strategy()
            created = try_create_directory(dest)
            if created and os.access(dest, os.W_OK):
                log_message(f"[BUILD] Pack destination ({label}): {dest}")
                return dest
            log_message(f"[BUILD] ⚠ Pack destination unusable ({label}): {dest}", "WARNING")
        return dest

    def pack(self, repo_path: str) -> str:
        """
        Pack the fork checkout into a tarball.

        Returns:
            str: Absolute path of the produced tarball

        Raises:
            StepError: npm pack exited non-zero
            ArtifactError: npm pack did not print a tarball filename
        """
        dest = self.resolve_pack_destination()
        result = self.runner.run(
            "npm pack",
            ["npm", "pack", "--pack-destination", dest],
            cwd=repo_path,
        )
        tarball = parse_pack_output(result.stdout)
        if not tarball:
            raise ArtifactError("npm pack did not return a tarball filename")

        tarball_path = os.path.join(dest, tarball)
        log_message(f"[BUILD] ✓ Packed {tarball_path}")
        return tarball_path

    def install_globally(self, repo_path: str, tarball_path: str) -> None:
        self.runner.run(
            "npm install -g (fork tarball)",
            ["npm", "install", "-g", "--force", tarball_path],
            cwd=repo_path,
        )

    def restart_gateway(self, repo_path: str, restart: bool) -> bool:
        """
        Restart the running gateway, or tell the operator how to.

        Returns:
            bool: True if a restart was performed
        """
        if not restart:
            log_message(
                f"Tip: Run `{' '.join(GATEWAY_RESTART_COMMAND)}` to apply updates to a running gateway."
            )
            return False

        self.runner.run("openclaw gateway restart", list(GATEWAY_RESTART_COMMAND), cwd=repo_path)
        return True
