"""
OpenClaw Fork Update Components
Copyright (C) 2024 HOMESERVER LLC

Component-based fork update system: one component per concern of the pipeline.
"""

from .build_info import BuildInfo, read_build_info, write_build_info
from .git_operations import GitOperations, parse_github_repo, repo_ids_match
from .step_runner import StepRunner, StepRecord
from .build_manager import BuildManager
from .smoke_tests import SmokeTest, SmokeTester, DEFAULT_SMOKE_TESTS
from .upstream_status import UpstreamStatus, UpstreamStatusChecker

__all__ = [
    'BuildInfo',
    'read_build_info',
    'write_build_info',
    'GitOperations',
    'parse_github_repo',
    'repo_ids_match',
    'StepRunner',
    'StepRecord',
    'BuildManager',
    'SmokeTest',
    'SmokeTester',
    'DEFAULT_SMOKE_TESTS',
    'UpstreamStatus',
    'UpstreamStatusChecker'
]
