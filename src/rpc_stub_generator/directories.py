"""Recursive directory listing and classification of the files found in it."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

BINDINGS_FILE_NAME = "bindings.ts"
RPC_MARKER = "lib-rpc"
HANDLER_SUFFIX = "_rpc.rs"
EXCLUDED_DIRECTORY = "target"


class InvalidPathError(Exception):
    """Raised when the root path does not point to a readable directory."""

    pass


@dataclass
class Directory:
    """A directory with its files and (recursively listed) subdirectories.

    Entries of a directory are sorted by name, so walking the tree is deterministic.
    """

    path: str
    directories: list[Directory] = field(default_factory=list)
    files: list[str] = field(default_factory=list)

    @classmethod
    def new(cls, root: str) -> Directory:
        """List the directory tree below `root`.

        Args:
            root (str): The starting directory.

        Raises:
            InvalidPathError: If `root` is not an existing directory.

        Returns:
            Directory: The fully expanded tree.
        """
        if not root or not os.path.isdir(root):
            raise InvalidPathError(f"Not a directory: '{root}'")

        return create_dirs(cls(path=root))

    def walk_files(self) -> Iterator[str]:
        """Yield all file paths depth first, the files of a directory before its subdirectories."""
        yield from self.files
        for directory in self.directories:
            yield from directory.walk_files()


def get_dir_content(path: str) -> list[os.DirEntry[str]]:
    """List the entries of a directory, sorted by name.

    Raises:
        InvalidPathError: If the directory itself cannot be listed.
    """
    try:
        with os.scandir(path) as entries:
            return sorted(entries, key=lambda entry: entry.name)
    except OSError as e:
        raise InvalidPathError(f"Cannot list directory '{path}': {e}") from e


def create_dirs(directory: Directory) -> Directory:
    """Fill `directory` with its files and recursively expanded subdirectories.

    Entries that cannot be inspected are dropped.
    """
    for entry in get_dir_content(directory.path):
        try:
            is_dir = entry.is_dir()
            is_file = entry.is_file()
        except OSError as e:
            logger.debug(f"Skipping unreadable entry '{entry.path}': {e}")
            continue

        if is_dir:
            try:
                directory.directories.append(create_dirs(Directory(path=entry.path)))
            except InvalidPathError as e:
                logger.debug(f"Skipping {e}")
        elif is_file:
            directory.files.append(entry.path)

    return directory


@dataclass
class FileClassifier:
    """Decides which files hold type bindings and which hold RPC handlers.

    Attributes:
        bindings_file_name: Name of the file generated by typeshare
        rpc_marker: Path segment that every handler file path contains
        handler_suffix: Suffix of handler file names, stripped to get the entity tag
        excluded_directory: Build artifact directory that is never scanned
    """

    bindings_file_name: str = BINDINGS_FILE_NAME
    rpc_marker: str = RPC_MARKER
    handler_suffix: str = HANDLER_SUFFIX
    excluded_directory: str = EXCLUDED_DIRECTORY

    def _is_excluded(self, path: str) -> bool:
        return f"/{self.excluded_directory}/" in path.replace(os.sep, "/")

    def is_bindings_file(self, path: str) -> bool:
        return path.endswith(self.bindings_file_name) and not self._is_excluded(path)

    def is_rpc_file(self, path: str) -> bool:
        return self.rpc_marker in path and path.endswith(self.handler_suffix) and not self._is_excluded(path)

    def entity_tag(self, path: str) -> str:
        """The entity a handler file belongs to, e.g. `patient` for `patient_rpc.rs`."""
        return os.path.basename(path).removesuffix(self.handler_suffix)
