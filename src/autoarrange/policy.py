"""Path policy: root expansion and exclude matching."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

USERNAME_PLACEHOLDER = "%USERNAME%"


def current_username() -> str:
    """Login name used for %USERNAME% placeholders."""
    return os.environ.get("USERNAME") or os.environ.get("USER") or "User"


def expand_path(path: str) -> Path:
    """Expand %USERNAME%, ~ and environment variables in path."""
    path = path.replace(USERNAME_PLACEHOLDER, current_username())
    return Path(os.path.expanduser(os.path.expandvars(path)))


def expand_exclude(entry: str) -> str:
    """Expand %USERNAME% and ~ in an exclude entry; "$" is kept literally."""
    entry = entry.replace(USERNAME_PLACEHOLDER, current_username())
    return os.path.expanduser(entry)


def normalize_path(path: str | Path) -> str:
    """Absolute, normalized form of a path."""
    return os.path.normpath(os.path.abspath(str(path)))


def _match_key(path: str) -> str:
    return os.path.normcase(os.path.normpath(path)).lower()


class PathPolicy:
    """Decides which directories are pruned from a walk.

    An exclude entry matches every path that contains it, compared
    case-insensitively after normalization.
    """

    def __init__(self, exclude_paths: list[str]):
        self._excludes = [
            _match_key(expand_exclude(entry)) for entry in exclude_paths if entry.strip()
        ]

    def is_excluded(self, path: str | Path) -> bool:
        candidate = _match_key(normalize_path(path))
        return any(exclude in candidate for exclude in self._excludes)

    def resolve_roots(self, roots: list[str]) -> tuple[list[Path], list[str]]:
        """
        Expand and check scan roots.

        Args:
            roots: Root paths as configured (may contain ~ or %USERNAME%)

        Returns:
            Tuple of (existing directories, skipped root paths). Missing roots
            are logged and skipped rather than failing the scan.
        """
        existing: list[Path] = []
        skipped: list[str] = []
        for root in roots:
            expanded = Path(normalize_path(expand_path(root)))
            if not expanded.exists():
                logger.warning("Scan root does not exist: %s", expanded)
                skipped.append(str(expanded))
                continue
            if not expanded.is_dir():
                logger.warning("Scan root is not a directory: %s", expanded)
                skipped.append(str(expanded))
                continue
            existing.append(expanded)
        return existing, skipped
