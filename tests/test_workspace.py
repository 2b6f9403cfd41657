from pathlib import Path

from dxforge import workspace


def test_detect_root_finds_git_marker(tmp_path):
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert workspace.detect_workspace_root(nested) == tmp_path.resolve()


def test_detect_root_finds_dx_marker(tmp_path):
    (tmp_path / ".dx").mkdir()
    nested = tmp_path / "src"
    nested.mkdir()
    assert workspace.detect_workspace_root(nested) == tmp_path.resolve()


def test_nearest_marker_wins(tmp_path):
    (tmp_path / ".git").mkdir()
    inner = tmp_path / "inner"
    (inner / ".dx").mkdir(parents=True)
    assert workspace.detect_workspace_root(inner) == inner.resolve()


def test_detect_root_without_marker_is_start_or_marked_ancestor(tmp_path):
    start = tmp_path / "plain"
    start.mkdir()
    root = workspace.detect_workspace_root(start)
    resolved = start.resolve()
    if root == resolved:
        assert root == resolved
    else:
        assert root in resolved.parents
        assert (root / ".dx").exists() or (root / ".git").exists()


def test_detect_root_defaults_to_cwd(tmp_path, monkeypatch):
    (tmp_path / ".git").mkdir()
    sub = tmp_path / "deep"
    sub.mkdir()
    monkeypatch.chdir(sub)
    assert workspace.detect_workspace_root() == Path.cwd().parent


def test_ci_status_and_members_are_empty():
    assert workspace.query_current_ci_status() == {}
    assert workspace.list_all_workspace_members() == []