"""Resolve user-supplied file paths to canonical stored paths."""

from __future__ import annotations

from collections.abc import Callable

from cgexplorer.core.config import DEFAULT_MIN_SUFFIX_LENGTH

ExistsLookup = Callable[[str], bool]
SuffixLookup = Callable[[str, int], list[str]]

# Two matches are enough to tell "unique" from "ambiguous".
_SUFFIX_MATCH_CAP = 2


def normalize_path(input_path: str) -> str:
    """Trim and convert backslashes to forward slashes."""
    return input_path.strip().replace("\\", "/")


def exact_candidates(normalized: str) -> list[str]:
    """Exact-match candidates in precedence order, without duplicates."""
    candidates = [
        normalized,
        normalized[2:] if normalized.startswith("./") else normalized,
        normalized.lstrip("/"),
    ]
    ordered: list[str] = []
    for candidate in candidates:
        if candidate and candidate not in ordered:
            ordered.append(candidate)
    return ordered


def suffix_candidates(normalized: str, min_length: int = DEFAULT_MIN_SUFFIX_LENGTH) -> list[str]:
    """Path suffixes, longest first, skipping those shorter than ``min_length``."""
    segments = normalized.split("/")
    suffixes: list[str] = []
    for start in range(len(segments)):
        suffix = "/".join(segments[start:])
        if len(suffix) < min_length or suffix in suffixes:
            continue
        suffixes.append(suffix)
    return suffixes


def resolve_source_path(
    input_path: str | None,
    exists: ExistsLookup,
    find_by_suffix: SuffixLookup,
    min_suffix_length: int = DEFAULT_MIN_SUFFIX_LENGTH,
) -> str | None:
    """Map a possibly foreign-rooted path to the one canonical stored path.

    Exact candidates are tried first. Otherwise suffixes are tried from longest
    to shortest and the first one matching exactly one stored file wins; a
    suffix shared by several files is never guessed at.
    """
    if input_path is None:
        return None
    normalized = normalize_path(input_path)
    if not normalized:
        return None

    for candidate in exact_candidates(normalized):
        if exists(candidate):
            return candidate

    for suffix in suffix_candidates(normalized, min_suffix_length):
        matches = find_by_suffix(suffix, _SUFFIX_MATCH_CAP)
        if len(matches) == 1:
            return matches[0]

    return None


class SourcePathResolver:
    """Resolver bound to a store's source lookups."""

    def __init__(
        self,
        exists: ExistsLookup,
        find_by_suffix: SuffixLookup,
        min_suffix_length: int = DEFAULT_MIN_SUFFIX_LENGTH,
    ) -> None:
        self._exists = exists
        self._find_by_suffix = find_by_suffix
        self.min_suffix_length = min_suffix_length

    def resolve(self, input_path: str | None) -> str | None:
        return resolve_source_path(
            input_path, self._exists, self._find_by_suffix, self.min_suffix_length
        )
