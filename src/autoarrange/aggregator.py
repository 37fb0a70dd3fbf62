"""Category summaries and statistics for classified files."""

import logging
import math
from datetime import datetime
from typing import Optional

from autoarrange.buckets import UNKNOWN_SIZE, relative_age, size_category
from autoarrange.models import (
    DEFAULT_COLOR,
    DEFAULT_DESCRIPTION,
    CategorySummary,
    CategoryTag,
    ClassificationPolicy,
    ClassificationResult,
    ExtensionStat,
    FileRecord,
    ScanStats,
    SizeStats,
    Statistics,
)

logger = logging.getLogger(__name__)

TOP_N = 10
TOP_EXTENSIONS = 20
MAX_DUPLICATE_GROUPS = 10
NO_EXTENSION = "none"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def largest_files(records: list[FileRecord], limit: int = TOP_N) -> list[FileRecord]:
    """Largest first; equal sizes keep scan order."""
    return sorted(records, key=lambda r: r.size, reverse=True)[:limit]


def oldest_files(records: list[FileRecord], limit: int = TOP_N) -> list[FileRecord]:
    return sorted(records, key=lambda r: r.created_time)[:limit]


def newest_files(records: list[FileRecord], limit: int = TOP_N) -> list[FileRecord]:
    return sorted(records, key=lambda r: r.created_time, reverse=True)[:limit]


def extension_stats(records: list[FileRecord], limit: int = TOP_EXTENSIONS) -> list[ExtensionStat]:
    """
    Count and size per extension, most common first.

    Ties keep the order in which extensions were first seen.
    """
    stats: dict[str, ExtensionStat] = {}
    for record in records:
        ext = record.extension or NO_EXTENSION
        if ext not in stats:
            stats[ext] = ExtensionStat(extension=ext, category=record.category)
        stats[ext].count += 1
        stats[ext].total_size += record.size

    return sorted(stats.values(), key=lambda s: s.count, reverse=True)[:limit]


def duplicate_groups(
    records: list[FileRecord], limit: int = MAX_DUPLICATE_GROUPS
) -> list[list[FileRecord]]:
    """
    Candidate duplicates: distinct paths sharing size and modification time.

    This is a heuristic. File content is never compared.

    Returns:
        Up to ``limit`` groups of two or more records, in the order each
        group's first member was scanned
    """
    groups: dict[tuple[int, datetime], list[FileRecord]] = {}
    for record in records:
        group = groups.setdefault((record.size, record.modified_time), [])
        if all(member.path != record.path for member in group):
            group.append(record)

    return [group for group in groups.values() if len(group) >= 2][:limit]


class Aggregator:
    """Builds a ClassificationResult from classified, deduplicated records."""

    def __init__(self, policy: ClassificationPolicy, now: Optional[datetime] = None):
        self.policy = policy
        self.now = now

    def aggregate(
        self,
        records: list[FileRecord],
        classifier: str = "extension",
        scan_stats: Optional[ScanStats] = None,
    ) -> ClassificationResult:
        """
        Aggregate records into categories and statistics.

        Args:
            records: Deduplicated records in scan order, already classified.
                Records without a category are placed under the fallback.
            classifier: Name of the classifier that tagged the records
            scan_stats: Recoverable problems met while scanning

        Returns:
            ClassificationResult; every record appears in exactly one category
        """
        now = self.now or datetime.now()

        categories: dict[CategoryTag, list[FileRecord]] = {
            tag: [] for tag in self.policy.category_order()
        }
        for record in records:
            if record.category is None:
                logger.warning("Unclassified record placed under %s: %s", CategoryTag.OTHER.value, record.path)
                record.category = CategoryTag.OTHER
            if record.size_category is None:
                record.size_category = size_category(record.size, self.policy.size_categories)
            if record.relative_age is None:
                record.relative_age = relative_age(record.created_time, now)
            categories.setdefault(record.category, []).append(record)

        total_files = len(records)
        result = ClassificationResult(
            categories=categories,
            summary=self._summarize(categories, total_files),
            statistics=Statistics(
                size_distribution=self._size_distribution(records),
                time_distribution=self._time_distribution(records),
                extension_stats=extension_stats(records),
                duplicate_files=duplicate_groups(records),
                largest_files=largest_files(records),
                oldest_files=oldest_files(records),
                newest_files=newest_files(records),
            ),
            total_files=total_files,
            total_size=sum(r.size for r in records),
            classification_time=now,
            classifier=classifier,
            scan_stats=scan_stats or ScanStats(),
        )

        logger.info(
            "Classified %d files into %d categories",
            total_files,
            len(result.used_categories),
        )
        return result

    def _summarize(
        self, categories: dict[CategoryTag, list[FileRecord]], total_files: int
    ) -> dict[CategoryTag, CategorySummary]:
        summary: dict[CategoryTag, CategorySummary] = {}
        for tag, records in categories.items():
            if not records:
                continue
            total_size = sum(r.size for r in records)
            rule = self.policy.rule_for(tag)
            summary[tag] = CategorySummary(
                count=len(records),
                total_size=total_size,
                average_size=round_half_up(total_size / len(records)),
                percentage=round(len(records) / total_files * 100, 2),
                color=rule.color if rule else DEFAULT_COLOR,
                description=rule.description if rule else DEFAULT_DESCRIPTION,
            )
        return summary

    def _size_distribution(self, records: list[FileRecord]) -> dict[str, SizeStats]:
        """Non-empty buckets in declared order, "Unknown" last."""
        buckets: dict[str, SizeStats] = {
            name: SizeStats() for name in [*self.policy.size_categories, UNKNOWN_SIZE]
        }
        for record in records:
            stats = buckets.setdefault(record.size_category or UNKNOWN_SIZE, SizeStats())
            stats.count += 1
            stats.total_size += record.size
        return {name: stats for name, stats in buckets.items() if stats.count}

    def _time_distribution(self, records: list[FileRecord]) -> dict[str, int]:
        distribution: dict[str, int] = {}
        for record in records:
            label = record.relative_age or "Unknown"
            distribution[label] = distribution.get(label, 0) + 1
        return distribution


def aggregate(records: list[FileRecord], policy: ClassificationPolicy) -> ClassificationResult:
    """Aggregate classified records with a policy."""
    return Aggregator(policy).aggregate(records)
