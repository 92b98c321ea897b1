#!/usr/bin/env python3
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

import argparse
import logging
import os
import sys
import traceback

from .utils.index import log_message
from .modules.fork import (
    ForkUpdateConfig,
    ForkUpdateError,
    ForkRootNotFoundError,
    PipelineOptions,
    check_upstream,
    is_fork,
    maybe_run_fork_update,
    resolve_fork_repo_id,
    resolve_install_root,
)
from .modules.fork.config import DEFAULT_STEP_TIMEOUT
from .modules.fork.components import write_build_info


def setup_global_update_logging(level=logging.INFO):
    """
    Log to stdout only; the shell wrapper owns file truncation/redirection.
    """
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    unified_format = logging.Formatter('[%(asctime)s] [%(levelname)s] %(message)s',
                                       datefmt='%Y-%m-%d %H:%M:%S')
    console_handler.setFormatter(unified_format)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)
    root_logger.addHandler(console_handler)
    logging.info("="*80)
    logging.info("OPENCLAW FORK UPDATE SESSION STARTED")
    logging.info(f"Command: {' '.join(sys.argv)}")
    logging.info(f"Working Directory: {os.getcwd()}")
    logging.info("="*80)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="OpenClaw Fork Updater")
    parser.add_argument("--install-root", default=None,
                       help="Root of the installed openclaw package (default: OPENCLAW_INSTALL_ROOT or `npm root -g`)")
    parser.add_argument("--no-restart", dest="restart", action="store_false",
                       help="Do not restart the gateway after installing")
    parser.add_argument("--channel", default=None,
                       help="Release channel (ignored for fork installs)")
    parser.add_argument("--tag", default=None,
                       help="Release tag (ignored for fork installs)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_STEP_TIMEOUT,
                       help="Timeout in seconds for each external command")
    parser.add_argument("--check-only", action="store_true",
                       help="Only report how far the fork is behind upstream, don't update")
    parser.add_argument("--write-build-info", metavar="ROOT",
                       help="Write dist/build-info.json for the checkout at ROOT and exit")
    parser.add_argument("--debug", action="store_true",
                       help="Verbose logging")
    return parser


def run(args) -> int:
    """Execute the parsed command line and return the process exit code."""
    if args.write_build_info:
        write_build_info(args.write_build_info)
        return 0

    config = ForkUpdateConfig.from_env(timeout=args.timeout)
    install_root = args.install_root or resolve_install_root(config)

    if args.check_only:
        fork_repo = resolve_fork_repo_id(install_root, config)
        if not is_fork(fork_repo):
            log_message("No fork install detected - nothing to check")
            return 0
        status = check_upstream(config, fork_repo)
        return 0 if status is not None else 1

    options = PipelineOptions(restart=args.restart, channel=args.channel, tag=args.tag)
    try:
        result = maybe_run_fork_update(install_root, options, config)
    except ForkRootNotFoundError as e:
        log_message(str(e), "ERROR")
        return 1
    except ForkUpdateError as e:
        log_message(f"Fork update failed: {e}", "ERROR")
        return 1

    if result is None:
        log_message("No fork install detected - use the standard updater")
    return 0


def main(argv=None):
    """
    Main entry point for the fork updater.
    """
    args = build_parser().parse_args(argv)

    try:
        setup_global_update_logging(logging.DEBUG if args.debug else logging.INFO)
        sys.exit(run(args))
    except KeyboardInterrupt:
        log_message("Update process interrupted by user", "WARNING")
        sys.exit(130)
    except Exception as e:
        log_message(f"Unhandled error in update process: {e}", "ERROR")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
