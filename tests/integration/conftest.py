"""
Fixtures building throwaway git repositories.
"""

import subprocess
from pathlib import Path

import pytest


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", str(repo), "-c", "user.name=test", "-c", "user.email=test@example.com", *args],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def write(repo: Path, path: str, content: str) -> None:
    target = repo / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)


def commit_all(repo: Path, message: str) -> str:
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", message)
    return git(repo, "rev-parse", "HEAD")


@pytest.fixture
def run_git():
    """Run git in a repository and return its stripped stdout."""
    return git


@pytest.fixture
def upstream(tmp_path):
    """
    Base repository with a master branch and three pull request heads:

    - refs/pull/7/head: edits the git plugin (adds an alias) and adds a theme
    - refs/pull/8/head: conflicts with master on conflict.txt
    - refs/pull/9/head: only touches docs
    """
    repo = tmp_path / "upstream"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/master")

    write(repo, "plugins/git/git.plugin.zsh", "# git plugin\nexport GIT_PLUGIN=1\n")
    write(repo, "lib/misc.zsh", "export A=1\n")
    write(repo, "themes/robbyrussell.zsh-theme", "PROMPT='%~ '\n")
    write(repo, "conflict.txt", "base\n")
    write(repo, "README.md", "# readme\n")
    base = commit_all(repo, "base")

    git(repo, "checkout", "-q", "-b", "feature")
    write(repo, "plugins/git/git.plugin.zsh", "# git plugin\nexport GIT_PLUGIN=1\nalias gst='git status'\n")
    write(repo, "themes/newtheme.zsh-theme", "PROMPT='> '\n")
    feature = commit_all(repo, "feature")

    git(repo, "checkout", "-q", "-b", "conflicting", base)
    write(repo, "conflict.txt", "theirs\n")
    conflicting = commit_all(repo, "conflicting")

    git(repo, "checkout", "-q", "-b", "docs", base)
    write(repo, "README.md", "# readme\n\nMore docs.\n")
    docs = commit_all(repo, "docs")

    git(repo, "checkout", "-q", "master")
    write(repo, "conflict.txt", "ours\n")
    commit_all(repo, "master moves on")

    git(repo, "update-ref", "refs/pull/7/head", feature)
    git(repo, "update-ref", "refs/pull/8/head", conflicting)
    git(repo, "update-ref", "refs/pull/9/head", docs)

    return {
        "path": repo,
        "feature": feature,
        "conflicting": conflicting,
        "docs": docs,
    }


@pytest.fixture
def workdir(tmp_path, upstream):
    """Clone of upstream's master branch only, like a CI checkout."""
    repo = tmp_path / "work"
    subprocess.run(
        ["git", "clone", "-q", "--single-branch", "--branch", "master", str(upstream["path"]), str(repo)],
        capture_output=True,
        check=True,
    )
    return repo
