"""In-memory directory tree over the stored source files."""

from __future__ import annotations

from collections.abc import Iterable

from cgexplorer.core.models import DirectoryEntry, EntryType

ROOT = ""


def normalize_browse_path(input_path: str | None) -> str:
    """Trim, use forward slashes, and strip leading/trailing slashes."""
    return (input_path or "").strip().replace("\\", "/").strip("/")


class FileBrowserIndex:
    """Directory tree synthesized from a flat list of file paths.

    Directories exist only because some file lives below them; the root
    always exists.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, dict[str, DirectoryEntry]] = {ROOT: {}}

    @classmethod
    def build(cls, files: Iterable[tuple[str, str | None]]) -> FileBrowserIndex:
        """Build the index from (file, package) pairs."""
        index = cls()
        for file, package in files:
            index.add_file(file, package)
        return index

    def add_file(self, file: str, package: str | None = None) -> None:
        """Register a file and every ancestor directory. O(depth)."""
        file_path = normalize_browse_path(file)
        if not file_path:
            return

        parts = [part for part in file_path.split("/") if part]
        current = ROOT
        for name in parts[:-1]:
            dir_path = f"{current}/{name}" if current else name
            self._entries.setdefault(dir_path, {})
            self._entries[current][name] = DirectoryEntry(
                type=EntryType.DIRECTORY, name=name, path=dir_path
            )
            current = dir_path

        file_name = parts[-1]
        self._entries[current][file_name] = DirectoryEntry(
            type=EntryType.FILE, name=file_name, path="/".join(parts), package=package
        )

    def has_directory(self, path: str) -> bool:
        return path in self._entries

    def list_directory(self, path: str) -> list[DirectoryEntry]:
        """Immediate children: directories first, then files, each by name."""
        entries = self._entries.get(path)
        if not entries:
            return []
        return sorted(
            entries.values(),
            key=lambda e: (e.type is not EntryType.DIRECTORY, e.name),
        )

    @property
    def num_directories(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"FileBrowserIndex(directories={self.num_directories})"
