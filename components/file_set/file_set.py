"""The set of files that belong to a project."""

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Union

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _compile(pattern: str) -> Pattern[str]:
    """
    Translate a glob into a regex over POSIX relative paths.

    ``*`` and ``?`` stay within one path segment; ``**/`` matches zero or more
    directories and any other ``**`` matches across segments.
    """
    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts))


def _matches(relative_path: str, pattern: str) -> bool:
    return _compile(pattern).fullmatch(relative_path) is not None


class FileSet:
    """
    Answers which files are part of a project.

    Patterns are POSIX-style globs relative to the root path; a file is in
    scope when it matches at least one include pattern and no exclude pattern.
    """

    def __init__(
        self,
        root_path: Union[str, Path],
        includes: Iterable[str],
        excludes: Iterable[str] = (),
    ):
        self.root_path = Path(root_path).expanduser().resolve()
        self.includes = list(includes)
        self.excludes = list(excludes)

    def _relative(self, file_path: Union[str, Path]) -> Optional[str]:
        path = Path(file_path).expanduser().resolve()
        try:
            return path.relative_to(self.root_path).as_posix()
        except ValueError:
            return None

    def includes_file(self, file_path: Union[str, Path]) -> bool:
        """Check whether a file path is within the project scope."""
        relative = self._relative(file_path)
        if relative is None:
            return False

        if not any(_matches(relative, pattern) for pattern in self.includes):
            return False
        return not any(_matches(relative, pattern) for pattern in self.excludes)

    def all_files(self) -> List[str]:
        """
        Enumerate every in-scope file under the root.

        Returns:
            Absolute file paths, sorted for a deterministic scan order.
        """
        if not self.root_path.is_dir():
            logger.warning(f"Project root does not exist: {self.root_path}")
            return []

        files = []
        for root, dirs, names in os.walk(self.root_path):
            # Prune excluded directories early, node_modules can be huge
            dirs[:] = [
                d
                for d in dirs
                if not any(
                    _matches(f"{self._relative(Path(root) / d)}/", pattern)
                    for pattern in self.excludes
                )
            ]
            for name in names:
                file_path = Path(root) / name
                if self.includes_file(file_path):
                    files.append(str(file_path))

        files.sort()
        logger.debug(f"Found {len(files)} files in scope under {self.root_path}")
        return files
