import hashlib
import json
import re
import subprocess
from unittest import mock

import pytest

from dxforge.repository import (
    count_files,
    get_current_git_branch,
    initialize_context,
    initialize_logs,
    initialize_refs,
    initialize_repository,
    store_directory_blobs,
)


def _completed(returncode, stdout=""):
    return subprocess.CompletedProcess(["git"], returncode, stdout=stdout, stderr="")


@pytest.fixture
def project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.rs").write_text("fn main() {}")
    (tmp_path / "README.md").write_text("hello")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_text("ignored")
    (tmp_path / ".hidden").write_text("ignored")
    return tmp_path


def test_count_files_skips_hidden(project):
    assert count_files(project) == 2


def test_store_blobs_content_addressed(project, tmp_path):
    forge = tmp_path / ".dx" / "forge"
    stored = dict(store_directory_blobs(project, project, forge))
    digest = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
    assert stored["README.md"] == digest
    assert (forge / "objects" / digest[:2] / digest[2:]).read_bytes() == b"hello"
    main_hash = hashlib.sha256(b"fn main() {}").hexdigest()
    assert stored["src/main.rs"] == main_hash
    assert all(not path.startswith(".git") for path in stored)
    assert ".hidden" in stored


def test_store_blobs_deduplicates(project, tmp_path):
    forge = tmp_path / "store"
    first = store_directory_blobs(project, project, forge)
    second = store_directory_blobs(project, project, forge)
    assert len(first) == 3
    assert second == []


def test_git_branch_from_git(tmp_path):
    with mock.patch("subprocess.run", return_value=_completed(0, "develop\n")):
        assert get_current_git_branch(tmp_path) == "develop"


def test_git_branch_falls_back_to_head_file(tmp_path):
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "HEAD").write_text("ref: refs/heads/feature/x\n")
    with mock.patch("subprocess.run", return_value=_completed(128)):
        assert get_current_git_branch(tmp_path) == "feature/x"


def test_git_branch_missing_raises(tmp_path):
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("git")):
        with pytest.raises(LookupError, match="Not in a Git repository"):
            get_current_git_branch(tmp_path)


def test_initialize_refs_uses_git_branch(tmp_path):
    forge = tmp_path / ".dx" / "forge"
    forge.mkdir(parents=True)
    with mock.patch("subprocess.run", return_value=_completed(0, "develop\n")):
        assert initialize_refs(forge) == "develop"
    assert (forge / "HEAD").read_text() == "ref: refs/heads/develop"
    commit = (forge / "refs" / "heads" / "develop").read_text()
    assert re.fullmatch(r"\d{8}-\d{6}-init", commit)
    assert (forge / "refs" / "tags").is_dir()
    assert (forge / "refs" / "remotes").is_dir()


def test_initialize_refs_defaults_to_main(tmp_path):
    forge = tmp_path / "forge"
    forge.mkdir()
    with mock.patch("subprocess.run", return_value=_completed(128)):
        assert initialize_refs(forge) == "main"
    assert (forge / "HEAD").read_text() == "ref: refs/heads/main"


def test_initialize_logs(tmp_path, monkeypatch):
    monkeypatch.setenv("USER", "alice")
    log_file = initialize_logs(tmp_path)
    entry = json.loads(log_file.read_text())
    assert entry["action"] == "init"
    assert entry["message"] == "Repository initialized"
    assert entry["actor"] == "alice"
    assert (tmp_path / "logs" / "refs").is_dir()


def test_initialize_context(tmp_path):
    meta = json.loads(initialize_context(tmp_path).read_text())
    assert meta["version"] == "1.0"
    assert meta["features"] == {
        "ai_discussions": True,
        "code_annotations": True,
        "anchor_tracking": True,
    }
    for sub in ("discussions", "annotations", "ai_sessions"):
        assert (tmp_path / "context" / sub).is_dir()


def test_initialize_repository(project):
    with mock.patch("subprocess.run", return_value=_completed(128)):
        stored = initialize_repository(project)
    forge = project / ".dx" / "forge"
    assert sorted(path for path, _ in stored) == [".hidden", "README.md", "src/main.rs"]
    assert (forge / "HEAD").exists()
    assert (forge / "logs" / "HEAD").exists()
    assert (forge / "context" / "metadata.json").exists()
    assert count_files(project) == 2