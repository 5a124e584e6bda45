"""Content sources: where project files come from.

The parsers and the analyzer only ever list a directory, read a file, join a
path and take a basename. Anything implementing :class:`ContentSource` can feed
them, whether files live on disk or were already loaded by a caller.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Mapping, Optional, Protocol, runtime_checkable

from pcb_review.models.errors import ProjectError


@runtime_checkable
class ContentSource(Protocol):
    def list_files(self, directory: str) -> list[str]:
        """Names (not paths) of the entries in *directory*."""
        ...

    def read_file(self, path: str) -> str:
        """Full text of one file."""
        ...

    def join_path(self, *parts: str) -> str:
        ...

    def get_basename(self, path: str, ext: Optional[str] = None) -> str:
        """Final path component, with *ext* stripped when it matches."""
        ...


def _strip_ext(name: str, ext: Optional[str]) -> str:
    if ext and name.endswith(ext) and name != ext:
        return name[: -len(ext)]
    return name


class LocalFileSource:
    """Reads project files from the local filesystem."""

    def list_files(self, directory: str) -> list[str]:
        p = Path(directory)
        if not p.is_dir():
            raise ProjectError(f"Not a directory: {p}", {"path": str(p)})
        return sorted(entry.name for entry in p.iterdir())

    def read_file(self, path: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ProjectError(f"Cannot read file: {e}", {"path": str(path)}) from e

    def join_path(self, *parts: str) -> str:
        return str(Path(*parts))

    def get_basename(self, path: str, ext: Optional[str] = None) -> str:
        return _strip_ext(Path(path).name, ext)


class MemoryFileSource:
    """Serves file contents already held in memory.

    Keys are ``/``-separated paths such as ``"project/board.kicad_pcb"``.
    """

    def __init__(self, files: Mapping[str, str]) -> None:
        self._files = {posixpath.normpath(path): content for path, content in files.items()}

    def list_files(self, directory: str) -> list[str]:
        directory = posixpath.normpath(directory)
        names = [
            posixpath.basename(path)
            for path in self._files
            if posixpath.dirname(path) == ("" if directory == "." else directory)
        ]
        return sorted(names)

    def read_file(self, path: str) -> str:
        try:
            return self._files[posixpath.normpath(path)]
        except KeyError:
            raise ProjectError(f"Cannot read file: {path} not loaded", {"path": path}) from None

    def join_path(self, *parts: str) -> str:
        return posixpath.join(*parts)

    def get_basename(self, path: str, ext: Optional[str] = None) -> str:
        return _strip_ext(posixpath.basename(path), ext)
