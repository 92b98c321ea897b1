from __future__ import annotations

import pytest

from forkupdate.modules.fork.components.git_operations import parse_github_repo, repo_ids_match


@pytest.mark.parametrize(
    "url",
    [
        "git@github.com:ThomasMarcelis/openclaw.git",
        "git@github.com:ThomasMarcelis/openclaw",
        "https://github.com/ThomasMarcelis/openclaw.git",
        "https://github.com/ThomasMarcelis/openclaw",
        "ssh://git@github.com/ThomasMarcelis/openclaw.git",
        "ssh://git@github.com/ThomasMarcelis/openclaw",
    ],
)
def test_parse_github_repo_supported_forms(url: str) -> None:
    assert parse_github_repo(url) == "ThomasMarcelis/openclaw"


def test_parse_github_repo_tolerates_whitespace_trailing_slash_and_host_case() -> None:
    assert parse_github_repo("  https://GitHub.COM/Owner/Repo/\n") == "Owner/Repo"
    assert parse_github_repo("git@GITHUB.com:Owner/Repo.GIT") == "Owner/Repo"


@pytest.mark.parametrize(
    "url",
    [
        "",
        "   ",
        None,
        "https://gitlab.com/owner/repo.git",
        "git@bitbucket.org:owner/repo.git",
        "https://github.com/owner",
        "https://github.com//repo",
        "https://notgithub.com/owner/repo.git",
        "git@evilgithub.com:owner/repo.git",
        "https://github.com.example.org/owner/repo",
    ],
)
def test_parse_github_repo_rejects_other_hosts_and_incomplete_urls(url) -> None:
    assert parse_github_repo(url) is None


def test_repo_ids_compare_case_insensitively() -> None:
    assert repo_ids_match("Owner/Repo", "owner/repo")
    assert repo_ids_match(" OpenClaw/OpenClaw ", "openclaw/openclaw")
    assert not repo_ids_match("owner/repo", "owner/other")
    assert not repo_ids_match(None, "owner/repo")
