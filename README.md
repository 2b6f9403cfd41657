# dxforge

`dxforge` helps developer tools work together inside one project. Tools
can announce what they are doing on a shared event bus, vote on whether a
proposed file change is safe before it is written, stage packages in a
cart, and record which lines of a file were generated and which tool owns
a file.

It also ships a small content-addressed file store for a project
directory and a read-only web file browser.

## Installation

```
pip install dxforge
```

To run the test suite:

```
pip install "dxforge[test]"
pytest
```

## Modules

| Module | Purpose |
| --- | --- |
| `dxforge.events` | Process-wide event bus: `ForgeEvent`, `EventKind`, `publish_event`, `subscribe_to_event_stream` and the `emit_*` helpers. |
| `dxforge.pipeline` | Pipeline execution with suspend/resume and order overrides: `Pipeline`, `PipelineSuspendedError`, `execute_pipeline`, `restart_current_pipeline`, ... |
| `dxforge.reactivity` | Realtime, debounced (0.3 s) and idle (2 s) triggers, and batch operations. |
| `dxforge.branching` | Green/Yellow/Red voting on `FileChange`s, applying and reverting changes on disk. |
| `dxforge.cart` | Stage `CartItem`s, commit them together, export and import them as JSON. |
| `dxforge.codegen` | Mark line ranges as generated (`GeneratedRegion`) and record file ownership. |
| `dxforge.packages` | Package hooks (`PackageInfo`); installation reports start and success on the event bus. |
| `dxforge.versions` | Semantic-version declarations and exact-version enforcement (`VersionMismatchError`). |
| `dxforge.workspace` | Workspace root detection (nearest directory holding `.dx` or `.git`) and CI hooks. |
| `dxforge.dx_directory` | Paths inside the project's `.dx/` directory and an offline tool-binary cache. |
| `dxforge.offline` | Offline detection (a forced flag or a network probe) and binary cache updates. |
| `dxforge.experience` | Editor-facing helpers: scratch files, idle tasks, suggestions, reports. |
| `dxforge.repository` | Initialise a `.dx/forge` store: refs, logs, context metadata and content-addressed objects. |
| `dxforge.browser` | File tree, file contents, ZIP export and an HTTP server for browsing a directory. |
| `dxforge.demo` | A tiny demonstration program (`greet`, `factorial`). |

## Examples

### Listening to events

```python
from dxforge.events import subscribe_to_event_stream, emit_tool_started_event

with subscribe_to_event_stream() as subscription:
    emit_tool_started_event("dx-style")
    event = subscription.recv(timeout=1.0)
    print(event.kind, event.payload)   # EventKind.TOOL_STARTED {'tool_id': 'dx-style'}
```

Only subscriptions that exist when an event is published receive it.
`recv` raises `TimeoutError` when nothing arrives in time; `try_recv`
returns `None` instead of waiting. A subscription keeps at most 10000
waiting events and counts the dropped ones in `lagged`.

### Pipelines

```python
from dxforge.pipeline import (
    PipelineSuspendedError,
    execute_pipeline,
    resume_pipeline_execution,
    suspend_pipeline_execution,
)

execute_pipeline("default")

suspend_pipeline_execution()
try:
    execute_pipeline("deploy")
except PipelineSuspendedError:
    print("pipeline is paused")
resume_pipeline_execution()
```

`Pipeline` offers the same operations on an instance of its own when the
process-wide state is not wanted.

### Branching safety

Tools vote on a file before a change to it is applied. Any Red vote is a
veto; otherwise any Yellow vote asks for review; otherwise the change is
Green.

```python
from pathlib import Path
from dxforge.branching import (
    FileChange,
    apply_changes,
    issue_immediate_veto,
    query_predicted_branch_color,
    reset_branching_engine_state,
    revert_most_recent_application,
)

target = Path("src/components/Button.tsx")
issue_immediate_veto(target, "dx-security", "touches auth flow")
print(query_predicted_branch_color(target))   # BranchColor.RED

written = apply_changes([FileChange(target, "export {}\n", "dx-ui")])
print(written)                                # [] - red changes are rejected

reset_branching_engine_state()
apply_changes([FileChange(target, "export {}\n", "dx-ui")])
revert_most_recent_application()              # restores the previous content
```

`apply_changes` and `apply_changes_with_preapproved_votes` write the new
content to disk and remember the previous content, so the most recent of
them can be reverted. `apply_changes_force_unchecked` writes without
voting and is not recorded.

### Versions

```python
from dxforge.versions import (
    VersionMismatchError,
    current_forge_version,
    declare_tool_version,
    enforce_exact_version,
)

declare_tool_version("my-tool", "1.0.0")     # ValueError on an invalid version
print(current_forge_version())               # 0.1.3

try:
    enforce_exact_version("my-tool", "1.0.0", "2.0.0")
except VersionMismatchError as exc:
    print(exc)
```

### Generated code

```python
from pathlib import Path
from dxforge.codegen import (
    claim_full_ownership_of_file,
    get_file_owner,
    is_region_dx_generated,
    mark_code_region_as_dx_generated,
)

generated = Path("src/generated/types.ts")
mark_code_region_as_dx_generated(generated, 1, 40, "dx-codegen")
print(is_region_dx_generated(generated, 12))   # True

claim_full_ownership_of_file(generated, "dx-codegen")
print(get_file_owner(generated))               # "dx-codegen"
```

### Idle tasks

```python
import asyncio
from dxforge.experience import await_editor_idle_state, schedule_task_for_idle_time

schedule_task_for_idle_time("reindex", lambda: print("reindexing"))
print(asyncio.run(await_editor_idle_state(100)))   # ['reindex']
```

### Content-addressed store

```python
from pathlib import Path
from dxforge.repository import count_files, initialize_repository

project = Path("my-project")
stored = initialize_repository(project)   # [(relative path, sha256), ...]
print(count_files(project))
```

`initialize_repository` creates `.dx/forge` with `HEAD` pointing at the
current git branch (or `main`), `logs/HEAD`, `context/metadata.json`, and
stores each file under `objects/<first two hex digits>/<rest>` keyed by
its SHA-256 digest. `.dx`, `.git` and `.forge` directories are skipped,
and content already stored is not written again.

## Commands

```
dxforge-demo
```

Prints a greeting and the sum of a short list.

```
dxforge-browser [--root DIR] [--host HOST] [--port PORT]
```

Serves a web file browser for `DIR` (default `examples/forge-demo`) at
`http://127.0.0.1:3000` unless told otherwise. If the directory has no
`.dx/forge` store yet, one is initialised first. The browser lists
directories before files, shows file contents with a detected language,
lets you download single files, and offers the whole tree as a ZIP
archive. Hidden entries are left out, except `.forge`.

The same pieces are available from Python: `build_file_tree`,
`read_file_content`, `read_file_bytes`, `build_zip` and `make_server` in
`dxforge.browser`.

## What it does not do

Several functions are hooks that record or log a request but do no
further work:

- CI functions in `dxforge.workspace` only log; `query_current_ci_status`
  and `list_all_workspace_members` return empty results.
- `dxforge.packages` does not download or install anything: install,
  uninstall, update and search return empty lists.
- `commit_current_dx_state` returns a fresh id but stores no state;
  checkout, push and pull only log, and `list_dx_history` is empty.
- `download_missing_tool_binaries` fetches nothing and returns the names
  it was given; `verify_binary_integrity_and_signature` always returns
  `True`.
- Pipelines record the active pipeline and ordering but run no tools;
  the reactivity triggers wait for their delay and do nothing else.
- Editor helpers in `dxforge.experience` do not talk to an editor;
  `execute_full_security_audit` returns no findings and
  `generate_comprehensive_project_report` returns a fixed text.
- The file store is local only: there is no remote or cloud storage.