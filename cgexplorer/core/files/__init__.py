"""
File browsing: path resolution and the directory index.

    - resolve_source_path(): map a user path to the canonical stored path
    - FileBrowserIndex: directory tree synthesized from stored file paths
"""

from cgexplorer.core.files.browser import FileBrowserIndex, normalize_browse_path
from cgexplorer.core.files.resolver import SourcePathResolver, resolve_source_path

__all__ = [
    "FileBrowserIndex",
    "SourcePathResolver",
    "normalize_browse_path",
    "resolve_source_path",
]
