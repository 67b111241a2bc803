"""Parsers for the machine-readable output formats of ``git diff`` and ``git status``."""

import re
from typing import Dict, List

from ..models.git_models import FileStats, NameStatusEntry
from ..schemas.git import GitFileStatus

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
UNTRACKED_MARKER = "??"

_NAME_STATUS_CODES = {
    "A": GitFileStatus.ADDED,
    "D": GitFileStatus.DELETED,
    "M": GitFileStatus.MODIFIED,
    "R": GitFileStatus.RENAMED,
    "C": GitFileStatus.COPIED,
}

# "dir/{old => new}/file" as printed by --numstat for renames inside a directory
_BRACE_RENAME = re.compile(r"^(?P<prefix>.*)\{(?P<old>[^{}]*) => (?P<new>[^{}]*)\}(?P<suffix>.*)$")


def parse_lines(output: str) -> List[str]:
    """Split command output into trimmed, non-empty lines."""
    return [line.strip() for line in output.split("\n") if line.strip()]


def strip_ansi_colors(line: str) -> str:
    return ANSI_ESCAPE.sub("", line)


_C_ESCAPES = {
    "a": b"\a",
    "b": b"\b",
    "f": b"\f",
    "n": b"\n",
    "r": b"\r",
    "t": b"\t",
    "v": b"\v",
    '"': b'"',
    "\\": b"\\",
}
_OCTAL_DIGITS = "01234567"


def unquote_path(path: str) -> str:
    """
    Undo git's C-style path quoting.

    git wraps paths holding whitespace, quotes, control or non-ASCII bytes
    in double quotes and escapes them (``"my notes.txt"``,
    ``"caf\\303\\251.md"``). Unquoted paths are returned unchanged.
    """
    if len(path) < 2 or path[0] != '"' or path[-1] != '"':
        return path

    body = path[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\":
            raw.extend(char.encode("utf-8"))
            i += 1
            continue

        escape = body[i + 1 : i + 2]
        octal = body[i + 1 : i + 4]
        if escape in _C_ESCAPES:
            raw.extend(_C_ESCAPES[escape])
            i += 2
        elif len(octal) == 3 and all(d in _OCTAL_DIGITS for d in octal):
            raw.append(int(octal, 8) & 0xFF)
            i += 4
        else:
            raw.extend(b"\\")
            i += 1
    return raw.decode("utf-8", errors="replace")


def parse_untracked_files(status_output: str) -> List[str]:
    """Paths of untracked files from ``git status --short`` output."""
    untracked = []
    for line in parse_lines(status_output):
        line = strip_ansi_colors(line)
        if line.startswith(UNTRACKED_MARKER):
            untracked.append(unquote_path(line[3:].strip()))
    return untracked


def _parse_count(value: str) -> int:
    # Binary files report "-" for both counts
    if value == "-":
        return 0
    return int(value)


def _numstat_new_path(path: str) -> str:
    """Resolve the rename notations numstat uses in its path column to the new path."""
    match = _BRACE_RENAME.match(path)
    if match:
        new_path = match.group("prefix") + match.group("new") + match.group("suffix")
        return new_path.replace("//", "/")
    if " => " in path:
        return path.rsplit(" => ", 1)[1]
    return path


def parse_numstat(numstat_output: str) -> Dict[str, FileStats]:
    """
    Parse ``git diff --numstat`` output into per-file line counts.

    Lines are ``additions<TAB>deletions<TAB>path``. When a fourth column is
    present it holds the new path of a rename and becomes the key. Lines
    with missing columns or non-numeric counts are skipped.
    """
    file_stats: Dict[str, FileStats] = {}
    for line in parse_lines(numstat_output):
        parts = line.split("\t")
        if len(parts) < 3 or not (parts[0] and parts[1] and parts[2]):
            continue

        try:
            additions = _parse_count(parts[0])
            deletions = _parse_count(parts[1])
        except ValueError:
            continue

        if len(parts) >= 4 and parts[3]:
            file_path = unquote_path(parts[3])
        else:
            file_path = unquote_path(_numstat_new_path(parts[2]))

        file_stats[file_path] = FileStats(additions=additions, deletions=deletions)
    return file_stats


def parse_name_status(name_status_output: str) -> Dict[str, NameStatusEntry]:
    """
    Parse ``git diff --name-status`` output into per-file change types.

    Renames and copies (``R100``, ``C075``...) carry the old path in column 2
    and the new path in column 3. Unknown codes are reported as modified.
    """
    file_statuses: Dict[str, NameStatusEntry] = {}
    for line in parse_lines(name_status_output):
        parts = line.split("\t")
        if len(parts) < 2 or not (parts[0] and parts[1]):
            continue

        status = _NAME_STATUS_CODES.get(parts[0][0], GitFileStatus.MODIFIED)
        paths = [unquote_path(part) for part in parts[1:]]
        if status in (GitFileStatus.RENAMED, GitFileStatus.COPIED):
            file_path = paths[1] if len(paths) > 1 else paths[0]
            file_statuses[file_path] = NameStatusEntry(
                status=status, old_file_path=paths[0]
            )
        else:
            file_statuses[paths[0]] = NameStatusEntry(status=status)
    return file_statuses


def count_lines(output: str) -> int:
    return len(parse_lines(output))
