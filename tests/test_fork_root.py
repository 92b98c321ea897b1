from __future__ import annotations

from pathlib import Path

import pytest

from conftest import FORK_REPO, ScriptedRunner
from forkupdate.modules.fork import ForkRootNotFoundError, ForkUpdateConfig, PipelineOptions, maybe_run_fork_update
from forkupdate.modules.fork.components import GitOperations, StepRunner


def _checkout(path: Path) -> str:
    (path / ".git").mkdir(parents=True)
    return str(path)


def _git(config: ForkUpdateConfig, runner: ScriptedRunner) -> GitOperations:
    return GitOperations(config, StepRunner(5, runner))


def test_override_wins_when_both_candidates_match(tmp_path: Path, home: Path) -> None:
    override = _checkout(tmp_path / "override")
    default = _checkout(home / "workspace" / "openclaw")
    config = ForkUpdateConfig.from_env({"OPENCLAW_FORK_ROOT": override})
    runner = ScriptedRunner()

    assert config.candidate_roots() == [override, default]
    assert _git(config, runner).resolve_fork_root(FORK_REPO) == override
    assert not any(default in line for line in runner.lines())


def test_falls_through_to_default_when_override_tracks_another_repo(tmp_path: Path, home: Path) -> None:
    override = _checkout(tmp_path / "override")
    default = _checkout(home / "workspace" / "openclaw")
    config = ForkUpdateConfig.from_env({"OPENCLAW_FORK_ROOT": override})
    runner = ScriptedRunner(origins={override: "https://github.com/someone-else/openclaw.git"})

    assert _git(config, runner).resolve_fork_root(FORK_REPO) == default


def test_skips_candidates_without_git_metadata(tmp_path: Path, home: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()
    default = _checkout(home / "workspace" / "openclaw")
    config = ForkUpdateConfig.from_env({"OPENCLAW_FORK_ROOT": str(plain)})
    runner = ScriptedRunner()

    assert _git(config, runner).resolve_fork_root(FORK_REPO) == default
    assert not any(str(plain) in line for line in runner.lines())


def test_origin_match_is_case_insensitive(tmp_path: Path, home: Path) -> None:
    override = _checkout(tmp_path / "override")
    config = ForkUpdateConfig.from_env({"OPENCLAW_FORK_ROOT": override})
    runner = ScriptedRunner(origin_url="https://github.com/thomasmarcelis/OpenClaw")

    assert _git(config, runner).resolve_fork_root(FORK_REPO) == override


def test_unreadable_origin_is_skipped(tmp_path: Path, home: Path) -> None:
    from forkupdate.utils.index import CommandResult

    override = _checkout(tmp_path / "override")
    config = ForkUpdateConfig.from_env({"OPENCLAW_FORK_ROOT": override})
    runner = ScriptedRunner(overrides={"remote get-url origin": CommandResult(2, "", "error: No such remote 'origin'")})

    assert _git(config, runner).resolve_fork_root(FORK_REPO) is None


def test_missing_checkout_is_fatal_with_guidance(home: Path) -> None:
    config = ForkUpdateConfig.from_env({"OPENCLAW_FORK_REPO": FORK_REPO}, timeout=5)
    runner = ScriptedRunner()

    with pytest.raises(ForkRootNotFoundError) as excinfo:
        maybe_run_fork_update(None, PipelineOptions(), config, runner)

    message = str(excinfo.value)
    assert FORK_REPO in message
    assert "~/workspace/openclaw" in message
    assert "OPENCLAW_FORK_ROOT" in message
    assert runner.calls == []
