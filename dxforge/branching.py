"""Safe application of file changes, decided by a Green/Yellow/Red voting engine."""

from __future__ import annotations

import enum
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class BranchColor(enum.Enum):
    """A voter's verdict on a change."""

    GREEN = "Green"
    YELLOW = "Yellow"
    RED = "Red"
    NO_OPINION = "NoOpinion"


_ICONS = {
    BranchColor.GREEN: "🟢",
    BranchColor.YELLOW: "🟡",
    BranchColor.RED: "🔴",
    BranchColor.NO_OPINION: "⚪",
}


@dataclass
class FileChange:
    """New content proposed by a tool for one file."""

    path: Path
    new_content: str
    tool_id: str
    old_content: Optional[str] = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)


@dataclass
class BranchingVote:
    """A vote on a file; ``confidence`` runs from 0.0 to 1.0."""

    voter_id: str
    color: BranchColor
    reason: str
    confidence: float = 1.0


_Backup = Tuple[Path, Optional[bytes]]


class _BranchingState:
    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.voters: List[str] = []
        self.votes: Dict[Path, List[BranchingVote]] = {}
        self.last_application: Optional[List[_Backup]] = None


_STATE = _BranchingState()


def _write_change(change: FileChange) -> _Backup:
    path = change.path
    previous = path.read_bytes() if path.exists() else None
    logger.debug("Writing file: %s", path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(change.new_content, encoding="utf-8")
    return path, previous


def apply_changes(changes: Iterable[FileChange]) -> List[Path]:
    """Apply changes according to their predicted colour; red ones are rejected.

    Returns the paths that were written.
    """
    changes = list(changes)
    logger.info("Applying %d changes with branching safety", len(changes))
    backups: List[_Backup] = []
    with _STATE.lock:
        for change in changes:
            color = query_predicted_branch_color(change.path)
            if color is BranchColor.RED:
                logger.error("Manual resolution required: %s", change.path)
                automatically_reject_red_conflicts([change])
                continue
            if color is BranchColor.YELLOW:
                logger.warning("Review recommended for: %s", change.path)
                prompt_review_for_yellow_conflicts([change])
            backups.append(_write_change(change))
            if color is BranchColor.GREEN:
                logger.info("Auto-applied: %s", change.path)
        _STATE.last_application = backups
    return [path for path, _ in backups]


def apply_changes_with_preapproved_votes(changes: Iterable[FileChange]) -> List[Path]:
    """Apply changes a tool already knows are safe, skipping the vote."""
    changes = list(changes)
    logger.info("Fast-path applying %d pre-approved changes", len(changes))
    backups = [_write_change(change) for change in changes]
    with _STATE.lock:
        _STATE.last_application = backups
    return [path for path, _ in backups]


def apply_changes_force_unchecked(changes: Iterable[FileChange]) -> List[Path]:
    """Apply changes with no safety checks; not recorded for revert."""
    changes = list(changes)
    logger.warning("FORCE APPLYING %d changes WITHOUT SAFETY CHECKS", len(changes))
    return [_write_change(change)[0] for change in changes]


def preview_proposed_changes(changes: Iterable[FileChange]) -> str:
    """Describe what would happen to each change without applying it."""
    lines = [
        "╔══════════════════════════════════════════════════════════════╗\n",
        "║          PROPOSED CHANGES PREVIEW                            ║\n",
        "╚══════════════════════════════════════════════════════════════╝\n\n",
    ]
    for change in changes:
        color = query_predicted_branch_color(change.path)
        lines.append(f'{_ICONS[color]} "{change.path}"\n')
        lines.append(f"   Tool: {change.tool_id}\n")
        lines.append(f"   Risk: {color.value}\n\n")
    return "".join(lines)


def automatically_accept_green_conflicts(changes: Iterable[FileChange]) -> List[Path]:
    """Apply only the changes predicted Green."""
    green = [
        change
        for change in changes
        if query_predicted_branch_color(change.path) is BranchColor.GREEN
    ]
    logger.info("Auto-accepting %d green changes", len(green))
    return apply_changes_with_preapproved_votes(green)


def prompt_review_for_yellow_conflicts(changes: Iterable[FileChange]) -> List[Path]:
    """Flag changes for review; returns the paths under review."""
    paths = [change.path for change in changes]
    logger.info("Prompting review for %d yellow changes", len(paths))
    return paths


def automatically_reject_red_conflicts(changes: Iterable[FileChange]) -> List[Path]:
    """Reject changes that need manual resolution; returns the rejected paths."""
    paths = [change.path for change in changes]
    logger.error("Rejecting %d red changes", len(paths))
    for path in paths:
        logger.error("  %s - Manual resolution required", path)
    return paths


def revert_most_recent_application() -> List[Path]:
    """Restore the files written by the last recorded application.

    Raises LookupError if nothing has been applied yet.
    """
    with _STATE.lock:
        backups = _STATE.last_application
        if backups is None:
            raise LookupError("No recent application to revert")
        logger.info("Reverting %d files", len(backups))
        for path, previous in reversed(backups):
            if previous is None:
                path.unlink(missing_ok=True)
            else:
                path.write_bytes(previous)
        return [path for path, _ in backups]


def submit_branching_vote(file: PathLike, vote: BranchingVote) -> None:
    with _STATE.lock:
        _STATE.votes.setdefault(Path(file), []).append(vote)


def register_permanent_branching_voter(voter_id: str) -> bool:
    """Register a voter; returns False if it was already registered."""
    with _STATE.lock:
        if voter_id in _STATE.voters:
            return False
        logger.info("Registered permanent voter: %s", voter_id)
        _STATE.voters.append(voter_id)
        return True


def query_predicted_branch_color(file: PathLike) -> BranchColor:
    """Red if anyone vetoes, else Yellow if anyone hesitates, else Green."""
    with _STATE.lock:
        votes = list(_STATE.votes.get(Path(file), ()))
    colors = {vote.color for vote in votes}
    if BranchColor.RED in colors:
        return BranchColor.RED
    if BranchColor.YELLOW in colors:
        return BranchColor.YELLOW
    return BranchColor.GREEN


def is_change_guaranteed_safe(file: PathLike) -> bool:
    """True only if the file has votes and every one of them is Green."""
    with _STATE.lock:
        votes = _STATE.votes.get(Path(file))
        if votes is None:
            return False
        return all(vote.color is BranchColor.GREEN for vote in votes)


def issue_immediate_veto(file: PathLike, voter_id: str, reason: str) -> None:
    """Cast a full-confidence Red vote."""
    logger.error("VETO issued for %s by %s: %s", file, voter_id, reason)
    submit_branching_vote(
        file,
        BranchingVote(voter_id=voter_id, color=BranchColor.RED, reason=reason, confidence=1.0),
    )


def reset_branching_engine_state() -> None:
    """Forget all votes; registered voters stay."""
    with _STATE.lock:
        logger.info("Resetting branching engine state")
        _STATE.votes.clear()