"""
Read-only file providers that fragment sources are loaded from.
"""
import logging
import posixpath
from pathlib import Path
from typing import Dict, Mapping, Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class FileSystem(Protocol):
    """Anything that can return the text of a file by path."""

    def read_text(self, path: str) -> str:
        """
        Return the contents of ``path``.

        Raises:
            FileNotFoundError: If the path does not exist
            OSError: If the file exists but cannot be read
        """
        ...


def _clean_path(path: str) -> str:
    """Normalize a slash-separated relative path, rejecting escapes."""
    if not path or path.startswith("/") or "\\" in path or "\x00" in path:
        raise FileNotFoundError(f"Invalid path: {path!r}")
    cleaned = posixpath.normpath(path)
    if cleaned == "." or cleaned == ".." or cleaned.startswith("../"):
        raise FileNotFoundError(f"Invalid path: {path!r}")
    return cleaned


class DirectoryFileSystem:
    """
    File system rooted at a directory on disk.

    Paths are relative and slash separated. Paths that are absolute or that
    would escape the root directory are treated as missing.
    """

    def __init__(self, root: Union[str, Path], encoding: str = "utf-8"):
        """
        Initialize the file system.

        Args:
            root: Directory that all paths are resolved against
            encoding: Text encoding of the files
        """
        self.root = Path(root).resolve()
        self.encoding = encoding
        if not self.root.is_dir():
            logger.warning(f"Template root is not a directory: {self.root}")

    def read_text(self, path: str) -> str:
        full_path = self.root.joinpath(*_clean_path(path).split("/"))
        logger.debug(f"Reading {path} from {full_path}")
        return full_path.read_text(encoding=self.encoding)

    def __repr__(self) -> str:
        return f"DirectoryFileSystem({str(self.root)!r})"


class MemoryFileSystem:
    """File system backed by an in-memory mapping of path to contents."""

    def __init__(self, files: Mapping[str, Union[str, bytes]]):
        self.files: Dict[str, Union[str, bytes]] = {
            posixpath.normpath(path): content for path, content in files.items()
        }

    def read_text(self, path: str) -> str:
        content = self.files.get(_clean_path(path))
        if content is None:
            raise FileNotFoundError(f"No such file: {path!r}")
        if isinstance(content, bytes):
            return content.decode("utf-8")
        return content

    def __repr__(self) -> str:
        return f"MemoryFileSystem({sorted(self.files)!r})"
