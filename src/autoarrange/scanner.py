"""Scan pipeline for autoarrange: walk, deduplicate, classify, aggregate."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Optional

from autoarrange.aggregator import Aggregator
from autoarrange.classifier import get_classifier
from autoarrange.errors import ConfigurationInvalid
from autoarrange.fingerprint import deduplicate
from autoarrange.models import (
    ClassificationPolicy,
    ClassificationResult,
    FileRecord,
    ScanParameters,
    ScanStats,
    SearchCriteria,
)
from autoarrange.policy import PathPolicy
from autoarrange.walker import DirectoryWalker

logger = logging.getLogger(__name__)


def _require_policy(policy: ClassificationPolicy) -> None:
    if not isinstance(policy, ClassificationPolicy):
        raise ConfigurationInvalid("a classification policy is required")


def _walk_root(
    root: Path,
    cutoff: Optional[datetime],
    policy: ClassificationPolicy,
    max_depth: int,
    include_hidden: bool,
    cancel_event: Optional[threading.Event],
    now: Optional[datetime],
) -> tuple[list[FileRecord], ScanStats]:
    walker = DirectoryWalker(
        policy,
        max_depth=max_depth,
        include_hidden=include_hidden,
        cancel_event=cancel_event,
        now=now,
    )
    logger.debug("Scanning %s", root)
    records = list(walker.walk(root, cutoff))
    logger.debug("Finished %s: %d files", root, len(records))
    return records, walker.stats


def walk_roots(
    roots: list[str],
    cutoff: Optional[datetime],
    policy: ClassificationPolicy,
    max_depth: int = 10,
    include_hidden: bool = False,
    max_workers: int = 1,
    cancel_event: Optional[threading.Event] = None,
    now: Optional[datetime] = None,
) -> tuple[list[FileRecord], ScanStats]:
    """
    Walk every root and collect qualifying files.

    Roots are walked one after another unless max_workers > 1, in which
    case each root gets its own worker thread. Either way the records are
    returned in root order followed by walk order.

    Args:
        roots: Root paths (may contain ~ or %USERNAME%)
        cutoff: Earliest created/modified time kept, or None for all files
        policy: Classification policy
        max_depth: Deepest directory level listed
        include_hidden: Whether to visit dot-entries
        max_workers: Number of roots walked concurrently
        cancel_event: Set to abort the walk with ScanCancelled
        now: Reference time for relative age labels

    Returns:
        Tuple of (records, scan stats), records not yet deduplicated
    """
    existing, skipped = PathPolicy(policy.exclude_paths).resolve_roots(roots)
    stats = ScanStats(skipped_roots=skipped)

    if max_workers <= 1 or len(existing) <= 1:
        args = (cutoff, policy, max_depth, include_hidden, cancel_event, now)
        results = [_walk_root(root, *args) for root in existing]
    else:
        # Workers must see a token so an interrupt in this thread can stop them
        cancel_event = cancel_event or threading.Event()
        args = (cutoff, policy, max_depth, include_hidden, cancel_event, now)
        with ThreadPoolExecutor(max_workers=min(max_workers, len(existing))) as executor:
            futures = [executor.submit(_walk_root, root, *args) for root in existing]
            try:
                results = [future.result() for future in futures]
            except KeyboardInterrupt:
                cancel_event.set()
                raise

    records: list[FileRecord] = []
    for root_records, root_stats in results:
        records.extend(root_records)
        stats.merge(root_stats)
    return records, stats


def scan_recent_files(
    params: ScanParameters,
    policy: ClassificationPolicy,
    cancel_event: Optional[threading.Event] = None,
    now: Optional[datetime] = None,
) -> tuple[list[FileRecord], ScanStats]:
    """
    Find files created or modified within the last ``params.days`` days.

    Args:
        params: Scan parameters
        policy: Classification policy
        cancel_event: Set to abort the scan with ScanCancelled
        now: Reference time (defaults to the current time)

    Returns:
        Tuple of (deduplicated records in scan order, scan stats)

    Raises:
        ConfigurationInvalid: If the policy is missing
        ScanCancelled: If cancel_event is set during the walk
    """
    _require_policy(policy)
    now = now or datetime.now()
    roots = params.paths if params.paths else policy.scan_paths
    logger.info("Scanning %d root(s) for files from the last %d day(s)", len(roots), params.days)

    records, stats = walk_roots(
        roots,
        params.cutoff(now),
        policy,
        max_depth=params.max_depth,
        include_hidden=params.include_hidden,
        max_workers=params.max_workers,
        cancel_event=cancel_event,
        now=now,
    )
    unique = deduplicate(records)

    if stats.skipped_count:
        logger.warning(
            "Skipped %d root(s), %d unreadable director(ies), %d unreadable entr(ies)",
            len(stats.skipped_roots),
            stats.unreadable_dirs,
            stats.failed_entries,
        )
    logger.info("Scan complete: %d files (%d duplicates dropped)", len(unique), len(records) - len(unique))
    return unique, stats


def run_scan(
    params: ScanParameters,
    policy: ClassificationPolicy,
    cancel_event: Optional[threading.Event] = None,
    now: Optional[datetime] = None,
) -> ClassificationResult:
    """
    Run the full pipeline: scan, classify with one classifier, aggregate.

    Raises:
        ConfigurationInvalid: If the policy is missing
        ScanCancelled: If cancel_event is set during the walk
    """
    now = now or datetime.now()
    records, stats = scan_recent_files(params, policy, cancel_event=cancel_event, now=now)

    classifier = get_classifier(policy, content_hints=params.content_hints)
    classifier.classify_all(records)

    return Aggregator(policy, now=now).aggregate(
        records, classifier=classifier.name, scan_stats=stats
    )


def search_files(
    criteria: SearchCriteria,
    policy: ClassificationPolicy,
    cancel_event: Optional[threading.Event] = None,
) -> tuple[list[FileRecord], ScanStats]:
    """
    Find files matching search criteria, regardless of age.

    Returns:
        Tuple of (matching deduplicated records in scan order, scan stats)
    """
    _require_policy(policy)
    roots = criteria.paths if criteria.paths else policy.scan_paths
    logger.info("Searching %d root(s)", len(roots))

    records, stats = walk_roots(
        roots,
        None,
        policy,
        max_depth=criteria.max_depth,
        include_hidden=criteria.include_hidden,
        cancel_event=cancel_event,
    )
    matches = deduplicate(r for r in records if criteria.matches(r))
    logger.info("Search complete: %d matching files", len(matches))
    return matches, stats
