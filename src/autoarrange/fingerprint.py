"""Cheap identity keys and deduplication for scanned files.

The fingerprint is derived from (path, size, modified time). It identifies
the same physical file reached through two overlapping scan roots; it says
nothing about file content.
"""

import hashlib
from typing import Iterable

from autoarrange.models import FileRecord


def fingerprint(record: FileRecord) -> str:
    """Identity key for a record, from its path, size and modification time."""
    mtime_ns = int(record.modified_time.timestamp() * 1_000_000_000)
    key = f"{record.path}:{record.size}:{mtime_ns}"
    return hashlib.blake2b(key.encode("utf-8"), digest_size=8).hexdigest()


def deduplicate(records: Iterable[FileRecord]) -> list[FileRecord]:
    """
    Drop records whose fingerprint was already seen.

    Fingerprints are computed for records that have none. The first record
    per key wins and input order is kept.

    Args:
        records: Records from all walked roots, in scan order

    Returns:
        Unique records in first-seen order
    """
    unique: dict[str, FileRecord] = {}
    for record in records:
        if not record.fingerprint:
            record.fingerprint = fingerprint(record)
        if record.fingerprint not in unique:
            unique[record.fingerprint] = record
    return list(unique.values())
