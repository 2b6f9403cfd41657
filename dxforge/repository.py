"""Initialisation of a forge repository: refs, logs, context and content-addressed blobs."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

_SKIPPED_DIRS = frozenset({".dx", ".git", ".forge"})
_HEAD_PREFIX = "ref: refs/heads/"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _write_json(path: Path, data: object) -> None:
    path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")


def get_current_git_branch(repo_path: PathLike) -> str:
    """Name of the checked-out git branch in ``repo_path``.

    Asks git first, then falls back to reading ``.git/HEAD``. Raises
    LookupError when neither names a branch.
    """
    repo_path = Path(repo_path)
    try:
        result = subprocess.run(
            ["git", "branch", "--show-current"],
            cwd=repo_path,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        logger.debug("Could not run git in %s: %s", repo_path, exc)
    else:
        if result.returncode == 0:
            branch = result.stdout.strip()
            if branch:
                return branch

    git_head = repo_path / ".git" / "HEAD"
    if git_head.exists():
        content = git_head.read_text(encoding="utf-8")
        if content.startswith(_HEAD_PREFIX):
            return content[len(_HEAD_PREFIX):].strip()

    raise LookupError("Not in a Git repository")


def initialize_refs(forge_path: PathLike) -> str:
    """Create the refs tree and HEAD; returns the branch HEAD points at."""
    forge_path = Path(forge_path)
    refs_path = forge_path / "refs"
    for sub in ("heads", "tags", "remotes"):
        (refs_path / sub).mkdir(parents=True, exist_ok=True)

    try:
        head_ref = get_current_git_branch(forge_path.parent)
    except LookupError:
        head_ref = "main"

    (forge_path / "HEAD").write_text(f"{_HEAD_PREFIX}{head_ref}", encoding="utf-8")

    branch_ref_path = refs_path / "heads" / head_ref
    branch_ref_path.parent.mkdir(parents=True, exist_ok=True)
    initial_commit = f"{_now().strftime('%Y%m%d-%H%M%S')}-init"
    branch_ref_path.write_text(initial_commit, encoding="utf-8")

    logger.info("Initialized refs: HEAD -> refs/heads/%s", head_ref)
    return head_ref


def initialize_logs(forge_path: PathLike) -> Path:
    """Create the logs tree with an initial audit entry; returns the log file."""
    logs_path = Path(forge_path) / "logs"
    (logs_path / "refs").mkdir(parents=True, exist_ok=True)

    actor = os.environ.get("USER") or os.environ.get("USERNAME") or "unknown"
    entry = {
        "timestamp": _now().isoformat(),
        "action": "init",
        "message": "Repository initialized",
        "actor": actor,
    }
    log_file = logs_path / "HEAD"
    _write_json(log_file, entry)
    logger.info("Initialized logs: operation audit trail")
    return log_file


def initialize_context(forge_path: PathLike) -> Path:
    """Create the context tree with its metadata; returns the metadata file."""
    context_path = Path(forge_path) / "context"
    for sub in ("discussions", "annotations", "ai_sessions"):
        (context_path / sub).mkdir(parents=True, exist_ok=True)

    metadata = {
        "version": "1.0",
        "initialized_at": _now().isoformat(),
        "features": {
            "ai_discussions": True,
            "code_annotations": True,
            "anchor_tracking": True,
        },
    }
    meta_file = context_path / "metadata.json"
    _write_json(meta_file, metadata)
    logger.info("Initialized context: AI discussions and annotations")
    return meta_file


def store_directory_blobs(
    repo_root: PathLike, dir_path: PathLike, forge_path: PathLike
) -> List[Tuple[str, str]]:
    """Store every file under ``dir_path`` as a SHA-256 addressed object.

    ``.dx``, ``.git`` and ``.forge`` are skipped. Returns (relative path, hash)
    for each object newly written; content already stored is not written again.
    """
    repo_root = Path(repo_root)
    objects = Path(forge_path) / "objects"
    stored: List[Tuple[str, str]] = []

    for entry in sorted(Path(dir_path).iterdir()):
        if entry.name in _SKIPPED_DIRS:
            continue
        if entry.is_dir():
            stored.extend(store_directory_blobs(repo_root, entry, forge_path))
            continue

        content = entry.read_bytes()
        digest = hashlib.sha256(content).hexdigest()
        hash_dir = objects / digest[:2]
        hash_dir.mkdir(parents=True, exist_ok=True)
        blob_path = hash_dir / digest[2:]
        if blob_path.exists():
            continue
        blob_path.write_bytes(content)
        try:
            relative = entry.relative_to(repo_root).as_posix()
        except ValueError:
            relative = str(entry)
        logger.info("Stored: %s (%s)", relative, digest[:8])
        stored.append((relative, digest))

    return stored


def count_files(repo_root: PathLike) -> int:
    """Count regular files below ``repo_root``, ignoring hidden entries."""
    total = 0
    for entry in Path(repo_root).iterdir():
        if entry.name.startswith("."):
            continue
        total += count_files(entry) if entry.is_dir() else 1
    return total


def initialize_repository(repo_root: PathLike) -> List[Tuple[str, str]]:
    """Set up ``.dx/forge`` under ``repo_root`` and store its files as blobs.

    Returns the (relative path, hash) pairs stored.
    """
    repo_root = Path(repo_root)
    forge_path = repo_root / ".dx" / "forge"
    forge_path.mkdir(parents=True, exist_ok=True)
    initialize_refs(forge_path)
    initialize_logs(forge_path)
    initialize_context(forge_path)
    return store_directory_blobs(repo_root, repo_root, forge_path)