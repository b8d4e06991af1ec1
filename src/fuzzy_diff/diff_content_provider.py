"""Content providers used to read and write the files a diff targets."""

import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, List

from fuzzy_diff.diff_exceptions import DiffContentError


class DiffContentProvider(ABC):
    """Abstract source and sink for the files a diff touches."""

    @abstractmethod
    def resolve_path(self, filename: str) -> str:
        """
        Map a filename recorded in a diff to the path this provider uses.

        Args:
            filename: Filename from the diff headers

        Returns:
            Path understood by the other provider methods
        """

    @abstractmethod
    def path_exists(self, path: str) -> bool:
        """Check if a file exists at the given path."""

    @abstractmethod
    def read_content(self, path: str) -> str:
        """
        Read the current content of a file.

        Args:
            path: Resolved path

        Returns:
            File content

        Raises:
            DiffContentError: If the file cannot be read
        """

    @abstractmethod
    def write_content(self, path: str, content: str) -> None:
        """
        Replace the content of a file, creating it if necessary.

        Args:
            path: Resolved path
            content: New content

        Raises:
            DiffContentError: If the file cannot be written
        """

    @abstractmethod
    def ensure_parent_directory(self, path: str) -> None:
        """
        Make sure the directory that will hold `path` exists.

        Raises:
            DiffContentError: If the directory cannot be created
        """


class FilesystemContentProvider(DiffContentProvider):
    """Content provider backed by files under a root directory."""

    def __init__(self, root_dir: str, encoding: str = 'utf-8'):
        """
        Initialize the provider.

        Args:
            root_dir: Directory that relative diff filenames are resolved against
            encoding: Text encoding used for reads and writes
        """
        self._root_dir = os.path.abspath(root_dir)
        self._encoding = encoding
        self._logger = logging.getLogger("FilesystemContentProvider")

    def resolve_path(self, filename: str) -> str:
        """
        Join a relative filename onto the root directory.

        Paths are normalized but not confined to the root: absolute filenames are
        used as given and `..` components may lead outside it.
        """
        if os.path.isabs(filename):
            return filename

        return os.path.normpath(os.path.join(self._root_dir, filename))

    def path_exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def read_content(self, path: str) -> str:
        try:
            # newline='' keeps \r\n intact so line endings can be preserved
            with open(path, 'r', encoding=self._encoding, newline='') as f:
                return f.read()

        except FileNotFoundError as e:
            raise DiffContentError(f"File not found: {path}", {'path': path}) from e

        except (OSError, UnicodeDecodeError) as e:
            raise DiffContentError(f"Failed to read file: {e}", {'path': path}) from e

    def write_content(self, path: str, content: str) -> None:
        try:
            with open(path, 'w', encoding=self._encoding, newline='') as f:
                f.write(content)

        except (OSError, UnicodeEncodeError) as e:
            raise DiffContentError(f"Failed to write file: {e}", {'path': path}) from e

        self._logger.debug("Wrote %d characters to %s", len(content), path)

    def ensure_parent_directory(self, path: str) -> None:
        directory = os.path.dirname(path)
        if not directory or os.path.isdir(directory):
            return

        try:
            os.makedirs(directory, exist_ok=True)

        except OSError as e:
            raise DiffContentError(f"Failed to create directory: {e}", {'path': directory}) from e

        self._logger.info("Created directory: %s", directory)


class DryRunContentProvider(DiffContentProvider):
    """
    Wraps another provider, reading through it but holding writes in memory.

    Reads after a pending write see the pending content, so several changes to the
    same file in one diff behave as they would for real.
    """

    def __init__(self, wrapped: DiffContentProvider):
        self._wrapped = wrapped
        self._pending: Dict[str, str] = {}

    def pending_writes(self) -> Dict[str, str]:
        """Get the content that would have been written, keyed by path."""
        return dict(self._pending)

    def pending_paths(self) -> List[str]:
        """Get the paths that would have been written, in write order."""
        return list(self._pending)

    def resolve_path(self, filename: str) -> str:
        return self._wrapped.resolve_path(filename)

    def path_exists(self, path: str) -> bool:
        return path in self._pending or self._wrapped.path_exists(path)

    def read_content(self, path: str) -> str:
        if path in self._pending:
            return self._pending[path]

        return self._wrapped.read_content(path)

    def write_content(self, path: str, content: str) -> None:
        self._pending[path] = content

    def ensure_parent_directory(self, path: str) -> None:
        pass
