"""Depth-bounded directory traversal for autoarrange."""

import logging
import mimetypes
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from autoarrange.buckets import relative_age, size_category
from autoarrange.errors import ScanCancelled
from autoarrange.models import ClassificationPolicy, FileRecord, ScanStats
from autoarrange.policy import PathPolicy, normalize_path

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."
DEFAULT_MAX_DEPTH = 10
DEFAULT_MIME_TYPE = "application/octet-stream"

EXECUTABLE_EXTENSIONS = frozenset({".exe", ".msi", ".bat", ".cmd", ".com", ".scr"})
ARCHIVE_EXTENSIONS = frozenset({".zip", ".rar", ".7z", ".tar", ".gz", ".bz2"})
MEDIA_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".mp4", ".avi", ".mp3", ".wav"})

# Takes precedence over the platform mimetypes registry
MIME_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".mp4": "video/mp4",
    ".mp3": "audio/mpeg",
    ".zip": "application/zip",
    ".exe": "application/x-msdownload",
}


def get_mime_type(extension: str) -> str:
    """Best-effort MIME type for a lower-cased extension."""
    if not extension:
        return DEFAULT_MIME_TYPE
    if extension in MIME_TYPES:
        return MIME_TYPES[extension]
    guessed, _ = mimetypes.guess_type(f"file{extension}", strict=False)
    return guessed or DEFAULT_MIME_TYPE


def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def is_recent(created_time: datetime, modified_time: datetime, cutoff: datetime) -> bool:
    """True if the file was created or modified at or after cutoff."""
    return created_time >= cutoff or modified_time >= cutoff


def created_time_of(st: os.stat_result) -> datetime:
    """Creation time where the platform records one, else inode change time."""
    birth = getattr(st, "st_birthtime", None)
    return datetime.fromtimestamp(birth if birth is not None else st.st_ctime)


def build_record(
    path: str,
    st: os.stat_result,
    policy: ClassificationPolicy,
    now: Optional[datetime] = None,
) -> FileRecord:
    """
    Build a FileRecord from a file's stat result.

    Args:
        path: Absolute, normalized file path
        st: Result of stat() on the file
        policy: Policy supplying the size buckets
        now: Reference time for the relative age label

    Returns:
        FileRecord with metadata and derived flags; category is left unset
    """
    name = os.path.basename(path)
    extension = os.path.splitext(name)[1].lower()
    created = created_time_of(st)

    return FileRecord(
        path=path,
        name=name,
        extension=extension,
        size=st.st_size,
        created_time=created,
        modified_time=datetime.fromtimestamp(st.st_mtime),
        accessed_time=datetime.fromtimestamp(st.st_atime),
        is_directory=False,
        is_file=True,
        size_category=size_category(st.st_size, policy.size_categories),
        relative_age=relative_age(created, now),
        mime_type=get_mime_type(extension),
        is_executable=extension in EXECUTABLE_EXTENSIONS,
        is_archive=extension in ARCHIVE_EXTENSIONS,
        is_media=extension in MEDIA_EXTENSIONS,
    )


class DirectoryWalker:
    """Depth-first walker producing FileRecords under one or more roots.

    The root is depth 0. Directories at depth ``max_depth`` are listed but
    their subdirectories are not entered. Children are visited in name
    order so repeated walks of an unchanged tree yield the same sequence.
    Symlinks are neither followed nor reported.

    Unreadable directories and entries whose metadata cannot be read are
    logged, counted in ``stats`` and skipped.
    """

    def __init__(
        self,
        policy: ClassificationPolicy,
        max_depth: int = DEFAULT_MAX_DEPTH,
        include_hidden: bool = False,
        cancel_event: Optional[threading.Event] = None,
        now: Optional[datetime] = None,
    ):
        self.policy = policy
        self.path_policy = PathPolicy(policy.exclude_paths)
        self.max_depth = max_depth
        self.include_hidden = include_hidden
        self.cancel_event = cancel_event
        self.now = now
        self.stats = ScanStats()

    def walk(self, root: str | Path, cutoff: Optional[datetime]) -> Iterator[FileRecord]:
        """
        Lazily yield files under root.

        Args:
            root: Directory to walk
            cutoff: Keep files created or modified at or after this time;
                None keeps every file

        Raises:
            ScanCancelled: If the cancellation event is set mid-walk
        """
        yield from self._walk_directory(normalize_path(root), cutoff, 0)

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ScanCancelled("scan cancelled")

    def _walk_directory(
        self, directory: str, cutoff: Optional[datetime], depth: int
    ) -> Iterator[FileRecord]:
        self._check_cancelled()

        if self.path_policy.is_excluded(directory):
            logger.debug("Excluded directory: %s", directory)
            self.stats.excluded_dirs += 1
            return

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except PermissionError:
            logger.warning("No permission to list directory: %s", directory)
            self.stats.unreadable_dirs += 1
            return
        except OSError as e:
            logger.warning("Cannot list directory %s: %s", directory, e)
            self.stats.unreadable_dirs += 1
            return

        for entry in entries:
            self._check_cancelled()

            if not self.include_hidden and is_hidden(entry.name):
                continue

            try:
                is_file = entry.is_file(follow_symlinks=False)
                is_dir = not is_file and entry.is_dir(follow_symlinks=False)
                st = entry.stat(follow_symlinks=False) if is_file else None
            except OSError as e:
                logger.warning("Cannot read metadata for %s: %s", entry.path, e)
                self.stats.failed_entries += 1
                continue

            if is_file:
                if cutoff is not None and not is_recent(
                    created_time_of(st), datetime.fromtimestamp(st.st_mtime), cutoff
                ):
                    continue
                yield build_record(entry.path, st, self.policy, self.now)
            elif is_dir and depth < self.max_depth:
                yield from self._walk_directory(entry.path, cutoff, depth + 1)


def walk(
    root: str | Path,
    cutoff: Optional[datetime],
    policy: ClassificationPolicy,
    max_depth: int = DEFAULT_MAX_DEPTH,
    include_hidden: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> list[FileRecord]:
    """Walk a single root and return every qualifying file."""
    walker = DirectoryWalker(
        policy,
        max_depth=max_depth,
        include_hidden=include_hidden,
        cancel_event=cancel_event,
    )
    return list(walker.walk(root, cutoff))
