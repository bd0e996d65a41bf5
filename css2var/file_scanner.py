"""Discovery of candidate stylesheet files under a scan root."""

from __future__ import annotations

import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".idea",
    ".vscode",
}

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


@dataclass
class IgnoreRule:
    """An ``exclude_paths`` entry from .css2var.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in rel_path.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives, which pathlib globbing does not support."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: List[str] = []
    for option in match.group(1).split(","):
        for candidate in expand_braces(f"{head}{option}{tail}"):
            if candidate not in expanded:
                expanded.append(candidate)
    return expanded


class FileScanner:
    """Resolves a glob pattern to a stable, ordered list of files."""

    def __init__(self, exclude_paths: Iterable[str] = ()) -> None:
        self.rules: List[IgnoreRule] = [
            rule for rule in (build_ignore_rule(p) for p in exclude_paths) if rule is not None
        ]

    def scan(self, root: str | Path, pattern: str) -> List[Path]:
        """Return absolute paths matching ``pattern``, sorted by relative path."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Directory not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {root}")

        found: Dict[str, Path] = {}
        for expanded in expand_braces(pattern):
            for path in root_path.glob(expanded):
                if not path.is_file():
                    continue
                rel_path = path.relative_to(root_path).as_posix()
                if rel_path in found or self._excluded(rel_path):
                    continue
                found[rel_path] = path
        return [found[rel_path] for rel_path in sorted(found)]

    def _excluded(self, rel_path: str) -> bool:
        parts = rel_path.split("/")
        if any(part in _EXCLUDED_DIRS for part in parts[:-1]):
            return True
        return _should_ignore(rel_path, parts, self.rules)


def _should_ignore(rel_path: str, parts: Sequence[str], rules: Sequence[IgnoreRule]) -> bool:
    for rule in rules:
        if rule.matches(rel_path, False):
            return True
        for depth in range(1, len(parts)):
            if rule.matches("/".join(parts[:depth]), True):
                return True
    return False


__all__ = ["FileScanner", "IgnoreRule", "build_ignore_rule", "expand_braces"]
