from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import FORK_REPO, ScriptedRunner
from forkupdate import index
from forkupdate.utils import index as utils_index
from forkupdate.utils.index import CommandResult


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(index, "setup_global_update_logging", lambda *_args, **_kwargs: None)


def _exit_code(argv) -> int:
    with pytest.raises(SystemExit) as excinfo:
        index.main(argv)
    return excinfo.value.code


def test_not_a_fork_exits_cleanly(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    runner = ScriptedRunner()
    monkeypatch.setattr(utils_index, "run_command_with_timeout", runner)

    assert _exit_code(["--install-root", str(tmp_path)]) == 0
    assert runner.calls == []


def test_missing_fork_checkout_exits_non_zero(
    tmp_path: Path, home: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("OPENCLAW_FORK_REPO", FORK_REPO)
    monkeypatch.setattr(utils_index, "run_command_with_timeout", ScriptedRunner())

    assert _exit_code(["--install-root", str(tmp_path)]) == 1


def test_successful_fork_update_exits_zero(
    tmp_path: Path, fork_checkout: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("OPENCLAW_FORK_REPO", FORK_REPO)
    monkeypatch.setenv("OPENCLAW_FORK_ROOT", str(fork_checkout))
    monkeypatch.setenv("OPENCLAW_PACK_DIR", str(tmp_path / "packbase"))
    runner = ScriptedRunner()
    monkeypatch.setattr(utils_index, "run_command_with_timeout", runner)

    assert _exit_code(["--install-root", str(tmp_path), "--no-restart", "--channel", "beta"]) == 0
    assert not runner.ran("gateway restart")
    assert runner.ran("memory search IBKR")


def test_pipeline_failure_exits_non_zero(
    tmp_path: Path, fork_checkout: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("OPENCLAW_FORK_REPO", FORK_REPO)
    monkeypatch.setenv("OPENCLAW_FORK_ROOT", str(fork_checkout))
    runner = ScriptedRunner(overrides={" rebase ": CommandResult(1, "", "conflict")})
    monkeypatch.setattr(utils_index, "run_command_with_timeout", runner)

    assert _exit_code(["--install-root", str(tmp_path)]) == 1
    assert not runner.ran("pnpm")


def test_install_root_falls_back_to_npm_global_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    global_root = tmp_path / "lib" / "node_modules"
    (global_root / "openclaw" / "dist").mkdir(parents=True)
    (global_root / "openclaw" / "dist" / "build-info.json").write_text(
        json.dumps({"sourceRepo": "openclaw/openclaw"}), encoding="utf-8"
    )
    runner = ScriptedRunner(overrides={"npm root -g": CommandResult(0, f"{global_root}\n")})
    monkeypatch.setattr(utils_index, "run_command_with_timeout", runner)

    assert _exit_code([]) == 0
    assert runner.lines() == ["npm root -g"]


def test_write_build_info_command(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIT_COMMIT", "abc123")
    monkeypatch.setenv("OPENCLAW_SOURCE_REPO", FORK_REPO)

    assert _exit_code(["--write-build-info", str(tmp_path)]) == 0

    data = json.loads((tmp_path / "dist" / "build-info.json").read_text(encoding="utf-8"))
    assert data["commit"] == "abc123"
    assert data["sourceRepo"] == FORK_REPO


def test_check_only_never_touches_the_checkout(
    tmp_path: Path, fork_checkout: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    from forkupdate.modules.fork.components import upstream_status

    class _Response:
        def raise_for_status(self):
            return None

        def json(self):
            return {"status": "behind", "ahead_by": 0, "behind_by": 3}

    monkeypatch.setenv("OPENCLAW_FORK_REPO", FORK_REPO)
    monkeypatch.setattr(upstream_status.requests, "get", lambda *_a, **_k: _Response())
    runner = ScriptedRunner()
    monkeypatch.setattr(utils_index, "run_command_with_timeout", runner)

    assert _exit_code(["--install-root", str(tmp_path), "--check-only"]) == 0
    assert runner.calls == []
