"""Glob, name and regex matching shared by every location-restricted check."""

import logging
import posixpath
import re
from collections.abc import Iterable, Sequence
from fnmatch import fnmatchcase
from typing import Optional

logger = logging.getLogger(__name__)


def _match_segments(value_parts: Sequence[str], pattern_parts: Sequence[str]) -> bool:
    if not pattern_parts:
        return not value_parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        if not rest:
            return True
        return any(_match_segments(value_parts[skip:], rest) for skip in range(len(value_parts) + 1))
    if not value_parts or not fnmatchcase(value_parts[0], head):
        return False
    return _match_segments(value_parts[1:], rest)


def matches_glob(value: str, pattern: str) -> bool:
    """
    Case-sensitive glob match, one path segment at a time.

    ``*`` and ``?`` stay within a segment, so ``src/*`` matches ``src/a`` but
    not ``src/a/b``. A ``**`` segment matches any number of segments,
    including none: ``**/domain`` matches ``domain`` and ``src/**`` matches
    ``src`` itself.
    """
    value_parts = value.split("/") if value else []
    return _match_segments(value_parts, pattern.split("/"))


def file_matches(filename: str, folders: Sequence[str], files: Sequence[str]) -> bool:
    """
    Decide whether ``filename`` is selected by folder and file globs.

    The directory part is tested against ``folders`` and the base name against
    ``files``. With both kinds given, both must match (some folder and some
    file). With only one kind given, that kind alone decides. With neither,
    nothing matches.
    """
    filename = filename.replace("\\", "/")
    directory = posixpath.dirname(filename)
    base = posixpath.basename(filename)

    has_folders = len(folders) > 0
    has_files = len(files) > 0
    if not has_folders and not has_files:
        return False

    folder_match = any(matches_glob(directory, pattern) for pattern in folders)
    file_match = any(matches_glob(base, pattern) for pattern in files)
    if has_folders and has_files:
        return folder_match and file_match
    if has_folders:
        return folder_match
    return file_match


def applies_to_file(filename: str, folders: Sequence[str], files: Sequence[str]) -> bool:
    """A rule without folder or file globs applies everywhere."""
    if not folders and not files:
        return True
    return file_matches(filename, folders, files)


def matches_name(name: str, candidates: Iterable[str]) -> bool:
    """Case-insensitive membership test."""
    lowered = name.lower()
    return any(candidate.lower() == lowered for candidate in candidates)


def is_restricted(
    name: str,
    filename: str,
    *,
    allow: Sequence[str],
    disable: Sequence[str],
    folders: Sequence[str],
    files: Sequence[str],
) -> bool:
    """
    Allow/deny policy for one restriction rule.

    An allow list turns the rule into "only here": a name on the allow list is
    restricted outside the selected files, and names not on it are left to
    other rules. Otherwise names on the disable list are restricted inside the
    selected files.
    """
    unscoped = not folders and not files
    in_scope = applies_to_file(filename, folders, files)

    if allow:
        if matches_name(name, allow):
            return False if unscoped else not in_scope
        return False

    if not in_scope:
        return False
    return matches_name(name, disable)


def compile_ignore_pattern(pattern: Optional[str]) -> Optional[re.Pattern[str]]:
    """Compile a user supplied ignore regex; invalid or empty patterns disable ignoring."""
    if not pattern:
        return None
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.warning("Ignoring invalid ignore pattern %r: %s", pattern, exc)
        return None


def has_prefix(name: str, prefixes: Iterable[str]) -> bool:
    """Case-insensitive prefix test."""
    lowered = name.lower()
    return any(lowered.startswith(prefix.lower()) for prefix in prefixes)
