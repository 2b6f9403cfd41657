import logging

import pytest

from dxforge.experience import (
    await_editor_idle_state,
    create_watcher_ignored_scratch_file,
    display_inline_code_suggestion,
    dx_global_cache_directory,
    execute_full_security_audit,
    generate_comprehensive_project_report,
    log_structured_tool_action,
    path_to_forge_manifest,
    project_root_directory,
    schedule_task_for_idle_time,
    trigger_ai_powered_suggestion,
)


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "src" / "deep"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    return tmp_path.resolve()


def test_project_root_and_manifest(workspace):
    assert project_root_directory().resolve() == workspace
    assert path_to_forge_manifest().resolve() == workspace / "dx.toml"


def test_global_cache_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert dx_global_cache_directory() == tmp_path / ".dx" / "cache"


def test_scratch_file_is_created_empty(workspace):
    path = create_watcher_ignored_scratch_file("notes.txt")
    assert path.resolve() == workspace / ".dx" / "scratch" / "notes.txt"
    assert path.read_text() == ""


def test_suggestion_ids_are_unique():
    first = display_inline_code_suggestion("a.ts", 3, "use const")
    second = display_inline_code_suggestion("a.ts", 3, "use const")
    assert first.startswith("suggestion-")
    assert first != second


def test_project_report_and_ai_suggestion():
    assert "# DX Forge Project Report" in generate_comprehensive_project_report()
    assert trigger_ai_powered_suggestion("ctx") == "AI suggestion placeholder"
    assert execute_full_security_audit() == []


def test_structured_action_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="dx_tool_action"):
        log_structured_tool_action("dx-ui", "build", {"files": 2})
    records = [r for r in caplog.records if r.name == "dx_tool_action"]
    assert records[-1].tool == "dx-ui"
    assert records[-1].action == "build"
    assert records[-1].metadata == {"files": 2}


@pytest.mark.asyncio
async def test_idle_tasks_run_once():
    ran = []
    schedule_task_for_idle_time("first", lambda: ran.append("first"))
    schedule_task_for_idle_time("second", lambda: ran.append("second"))
    assert await await_editor_idle_state(1) == ["first", "second"]
    assert ran == ["first", "second"]
    assert await await_editor_idle_state(1) == []