# editforge/commit/core.py
import contextlib
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..errors.path import PathViolation


log = logging.getLogger(__name__)

_ACTIONS = ("create", "modify")


@dataclass
class Change:
    """A single file write slated for commit."""
    action: str  # "create" or "modify"
    path: str
    new_content: Optional[str] = None
    original_content: Optional[str] = None


@dataclass
class CommitSummary:
    """Outcome of a commit operation."""

    success: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    dry_run: bool = False
    # Map relative path -> error string (when failed)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def resolve_within(base_real: str, rel_path: str) -> str:
    """
    Join and normalize a base-relative path while enforcing containment.
    Symlinks are followed (also for paths that do not exist yet), so a link
    inside base_real pointing elsewhere raises PathViolation too.
    """
    target_path = os.path.join(base_real, *rel_path.replace("\\", "/").split("/"))
    resolved = os.path.realpath(target_path)
    if os.path.commonpath([base_real, resolved]) != base_real:
        raise PathViolation(f"Path traversal attempt detected for '{rel_path}'")
    return resolved


def _backup_path(dest: str, backup_ext: str) -> str:
    ext = backup_ext if backup_ext.startswith(".") else "." + backup_ext
    return dest + ext


def _restore(promoted: List[Tuple[str, Change]]) -> None:
    """Undo promoted writes, newest first. Best effort."""
    for pth, ch in reversed(promoted):
        if ch.action == "create":
            with contextlib.suppress(OSError):
                if os.path.exists(pth):
                    os.remove(pth)
        elif ch.original_content is not None:
            with contextlib.suppress(OSError):
                with open(pth, "w", encoding="utf-8", newline="") as f:
                    f.write(ch.original_content)


def commit_changes(
    base_path: str,
    changes: List[Change],
    *,
    mode: str = "best_effort",
    atomic: bool = False,
    dry_run: bool = False,
    backup_ext: str | None = None,
) -> CommitSummary:
    """
    Write a batch of edited files safely, with validation, optional atomic
    staging, and configurable error handling.

    Args:
        base_path: Root directory for operations.
        changes: Sequence of Change instances ("create" or "modify").
        mode: "best_effort" (default) writes what it can and accumulates failures;
              "fail_fast" aborts at the first validation/write error.
        atomic: If True, stage contents to same-directory tempfiles and then
                promote via os.replace(). With mode="fail_fast", already
                promoted files are restored if a later promotion fails.
        dry_run: If True, validate and report the plan without writing.
        backup_ext: Optional extension used to back up modified files
                    (e.g., ".bak" or "bak"). New files get no backup.

    Returns:
        CommitSummary describing successes/failures deterministically.
    """
    if mode not in {"best_effort", "fail_fast"}:
        raise ValueError("mode must be one of {'best_effort','fail_fast'}")

    summary = CommitSummary(dry_run=dry_run)
    base_real = os.path.realpath(base_path)

    normalized: List[Tuple[Change, str]] = []
    for ch in changes:
        try:
            if ch.action not in _ACTIONS:
                raise ValueError(f"Unsupported action '{ch.action}'")
            resolved = resolve_within(base_real, ch.path)
            if ch.action == "modify" and not os.path.exists(resolved):
                raise FileNotFoundError(f"File expected for modification not found: '{ch.path}'")
            normalized.append((ch, resolved))
        except (OSError, ValueError, PathViolation) as e:
            summary.failed.append(ch.path)
            summary.errors[ch.path] = str(e)
            if mode == "fail_fast":
                return summary

    if dry_run:
        for ch, resolved in normalized:
            dirpath = os.path.dirname(resolved)
            if os.path.exists(dirpath) and not os.access(dirpath, os.W_OK):
                summary.failed.append(ch.path)
                summary.errors[ch.path] = f"No write permission for directory '{dirpath}'"
                if mode == "fail_fast":
                    return summary
                continue
            summary.success.append(
                f"DRY RUN: Would {ch.action} file {ch.path} ({len(ch.new_content or '')} bytes)"
            )
        return summary

    if atomic:
        staged: Dict[str, str] = {}  # dest -> tmp
        staging_failed = False
        for ch, resolved in normalized:
            try:
                dirpath = os.path.dirname(resolved)
                os.makedirs(dirpath, exist_ok=True)
                fd, tmp = tempfile.mkstemp(prefix=".ef-", suffix=".tmp", dir=dirpath)
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                    f.write(ch.new_content or "")
                staged[resolved] = tmp
            except OSError as e:
                summary.failed.append(ch.path)
                summary.errors[ch.path] = str(e)
                staging_failed = True
                if mode == "fail_fast":
                    break

        if staging_failed and mode == "fail_fast":
            # Nothing promoted yet: drop stage files; filesystem unchanged.
            for tmp in staged.values():
                with contextlib.suppress(OSError):
                    os.remove(tmp)
            return summary

        promoted: List[Tuple[str, Change]] = []
        for ch, resolved in normalized:
            tmp = staged.get(resolved)
            if tmp is None:
                continue
            try:
                if backup_ext and ch.action == "modify" and os.path.exists(resolved):
                    shutil.copy2(resolved, _backup_path(resolved, backup_ext))
                os.replace(tmp, resolved)  # atomic within a filesystem
                summary.success.append(ch.path)
                promoted.append((resolved, ch))
            except OSError as e:
                summary.failed.append(ch.path)
                summary.errors[ch.path] = str(e)
                with contextlib.suppress(OSError):
                    if os.path.exists(tmp):
                        os.remove(tmp)
                if mode == "fail_fast":
                    log.debug(f"rolling back {len(promoted)} promoted file(s)")
                    _restore(promoted)
                    for pending in list(staged.values()):
                        with contextlib.suppress(OSError):
                            if os.path.exists(pending):
                                os.remove(pending)
                    summary.success.clear()
                    return summary
        return summary

    # Non-atomic path: write each file directly, no rollback.
    for ch, resolved in normalized:
        try:
            os.makedirs(os.path.dirname(resolved), exist_ok=True)
            if backup_ext and ch.action == "modify" and os.path.exists(resolved):
                shutil.copy2(resolved, _backup_path(resolved, backup_ext))
            with open(resolved, "w", encoding="utf-8", newline="") as f:
                f.write(ch.new_content or "")
            summary.success.append(ch.path)
        except OSError as e:
            summary.failed.append(ch.path)
            summary.errors[ch.path] = str(e)
            if mode == "fail_fast":
                return summary

    return summary
