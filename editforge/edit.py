# editforge/edit.py
"""
File-level edit tool: read a file under a base directory, apply one fuzzy
replacement, and write the result back safely.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Optional

from ._logging import resolve_logger
from .commit.core import Change, commit_changes, resolve_within
from .errors import CommitError, EditError, InvalidArgumentsError, PathViolation
from .replace.core import replace_text
from .utils.gitignore import build_protected_spec

__all__ = ["EditResult", "edit_file"]


@dataclass
class EditResult:
    """Outcome of a successful edit_file call."""

    path: str  # relative to the base directory, forward slashes
    created: bool
    original_content: str
    new_content: str
    dry_run: bool = False

    @property
    def message(self) -> str:
        if self.created:
            return f"File successfully created at {self.path}"
        return "Edit applied successfully."


def _resolve_target(base_real: str, file_path: str) -> str:
    if os.path.isabs(file_path):
        resolved = os.path.realpath(file_path)
        try:
            inside = os.path.commonpath([base_real, resolved]) == base_real
        except ValueError:
            inside = False
        if not inside:
            raise PathViolation(f"Path '{file_path}' is outside of '{base_real}'")
        return resolved
    return resolve_within(base_real, file_path)


def _read(path: str) -> str:
    # newline="" keeps CRLF files byte-faithful through the edit.
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def edit_file(
    base_path: str,
    file_path: str,
    old_string: str,
    new_string: str,
    replace_all: bool = False,
    *,
    protected: Optional[Iterable[str]] = None,
    use_gitignore: bool = False,
    atomic: bool = True,
    backup_ext: str | None = None,
    dry_run: bool = False,
    single_candidate_threshold: float = 0.0,
    multiple_candidates_threshold: float = 0.3,
    logger=None,
    log: bool = False,
) -> EditResult:
    """
    Replace `old_string` with `new_string` in `file_path` (relative to
    `base_path`, or absolute inside it).

    An empty `old_string` creates the file, or overwrites it, with
    `new_string`. Otherwise the file must exist and the replacement goes
    through `replace_text`, whose errors propagate unchanged.

    Raises:
        InvalidArgumentsError: missing path or identical strings.
        PathViolation: path escapes `base_path` or is protected.
        EditError: target missing or a directory.
        CommitError: the result could not be written.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    if not file_path:
        raise InvalidArgumentsError("filePath is required")
    if old_string == new_string:
        raise InvalidArgumentsError("oldString and newString must be different")

    base_real = os.path.realpath(base_path)
    resolved = _resolve_target(base_real, file_path)
    rel = os.path.relpath(resolved, base_real).replace(os.sep, "/")

    spec = build_protected_spec(base_real, protected, use_gitignore=use_gitignore)
    if spec.match_file(rel):
        raise PathViolation(f"Edits to protected path '{rel}' are not allowed")

    if os.path.isdir(resolved):
        raise EditError(f"Path is a directory, not a file: {rel}")

    if old_string == "":
        created = not os.path.exists(resolved)
        original = "" if created else _read(resolved)
        new_content = new_string
        log.debug(f"writing {len(new_string)} characters to {rel}")
        change = Change(
            action="create" if created else "modify",
            path=rel,
            new_content=new_content,
            original_content=original,
        )
    else:
        if not os.path.exists(resolved):
            raise EditError(f"File {rel} not found")
        created = False
        original = _read(resolved)
        new_content = replace_text(
            original,
            old_string,
            new_string,
            replace_all,
            single_candidate_threshold=single_candidate_threshold,
            multiple_candidates_threshold=multiple_candidates_threshold,
            logger=log,
        )
        change = Change(action="modify", path=rel, new_content=new_content, original_content=original)

    summary = commit_changes(
        base_real,
        [change],
        mode="fail_fast",
        atomic=atomic,
        dry_run=dry_run,
        backup_ext=backup_ext,
    )
    if summary.failed:
        raise CommitError(f"Failed to write '{rel}': {summary.errors.get(rel, 'unknown error')}", summary.errors)

    log.debug(f"{'dry run for' if dry_run else 'committed'} {rel}")
    return EditResult(
        path=rel,
        created=created,
        original_content=original,
        new_content=new_content,
        dry_run=dry_run,
    )
