"""Data models for autoarrange."""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Upper bound marking a size bucket as open-ended
UNBOUNDED = -1

# Fallbacks for categories that have no entry in the policy
DEFAULT_COLOR = "#B2B2B2"
DEFAULT_DESCRIPTION = "未分类文件"


class CategoryTag(str, Enum):
    """Closed set of categories a file can be assigned to."""

    DOCUMENT = "文档类"
    IMAGE = "图片类"
    VIDEO = "视频类"
    AUDIO = "音频类"
    ARCHIVE = "压缩包"
    PROGRAM = "程序类"
    CODE = "代码类"
    OTHER = "其他类"


class _Model(BaseModel):
    """Base model: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenModel(_Model):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    return ext


# =============================================================================
# Policy
# =============================================================================


class CategoryRule(_FrozenModel):
    """Extension table and display metadata for one category."""

    extensions: list[str] = Field(default_factory=list, description="Lower-cased extensions, with dot")
    color: str = Field(DEFAULT_COLOR, description="Display colour (hex)")
    description: str = Field(DEFAULT_DESCRIPTION, description="What this category contains")

    @field_validator("extensions")
    @classmethod
    def _lower_extensions(cls, value: list[str]) -> list[str]:
        normalized = []
        for ext in value:
            if not ext.strip().startswith("."):
                raise ValueError(f"extension must start with '.': {ext!r}")
            normalized.append(ext.strip().lower())
        return normalized


class SizeBucket(_FrozenModel):
    """Half-open size range [min, max); max == -1 means unbounded."""

    min: int = Field(..., ge=0, description="Inclusive lower bound in bytes")
    max: int = Field(..., description="Exclusive upper bound in bytes, -1 for none")

    @model_validator(mode="after")
    def _check_range(self) -> "SizeBucket":
        if self.max != UNBOUNDED and self.max <= self.min:
            raise ValueError(f"size bucket max ({self.max}) must exceed min ({self.min})")
        return self

    def contains(self, size: int) -> bool:
        return size >= self.min and (self.max == UNBOUNDED or size < self.max)


class ClassificationPolicy(_FrozenModel):
    """Immutable classification policy shared by walker, classifier and aggregator.

    ``file_categories`` is an ordered rule table: when an extension appears
    under two categories, the first one declared wins.
    """

    file_categories: dict[CategoryTag, CategoryRule] = Field(
        ..., description="Ordered category -> extension table"
    )
    size_categories: dict[str, SizeBucket] = Field(
        ..., description="Ordered size bucket table, contiguous from 0"
    )
    exclude_paths: list[str] = Field(
        default_factory=list, description="Path fragments pruned from traversal"
    )
    scan_paths: list[str] = Field(
        default_factory=list, description="Default roots when none are given"
    )

    @model_validator(mode="after")
    def _check_tables(self) -> "ClassificationPolicy":
        if not self.file_categories:
            raise ValueError("at least one file category is required")

        other = self.file_categories.get(CategoryTag.OTHER)
        if other is not None and other.extensions:
            raise ValueError(f"{CategoryTag.OTHER.value} is the fallback and cannot list extensions")

        if not self.size_categories:
            raise ValueError("at least one size category is required")

        buckets = list(self.size_categories.items())
        expected_min = 0
        for index, (name, bucket) in enumerate(buckets):
            if bucket.min != expected_min:
                raise ValueError(
                    f"size category {name!r} starts at {bucket.min}, expected {expected_min}"
                )
            if bucket.max == UNBOUNDED:
                if index != len(buckets) - 1:
                    raise ValueError(f"only the last size category may be unbounded, not {name!r}")
            else:
                expected_min = bucket.max

        if buckets[-1][1].max != UNBOUNDED:
            raise ValueError("the last size category must be unbounded (max == -1)")
        return self

    def rule_for(self, tag: CategoryTag) -> Optional[CategoryRule]:
        """Get the rule for a category, or None if the policy does not declare it."""
        return self.file_categories.get(tag)

    def category_order(self) -> list[CategoryTag]:
        """Declared categories in order, always ending with the fallback."""
        order = [tag for tag in self.file_categories if tag != CategoryTag.OTHER]
        order.append(CategoryTag.OTHER)
        return order

    def describe(self) -> dict:
        """Summary of the policy tables."""
        return {
            "totalCategories": len(self.file_categories),
            "categories": [tag.value for tag in self.file_categories],
            "sizeCategories": list(self.size_categories),
            "excludePaths": len(self.exclude_paths),
            "scanPaths": len(self.scan_paths),
        }


class ScanParameters(_Model):
    """Per-invocation scan options."""

    days: int = Field(7, ge=0, description="Keep files created or modified this many days back")
    paths: Optional[list[str]] = Field(None, description="Explicit roots overriding the policy")
    include_hidden: bool = Field(False, description="Visit dot-files and dot-directories")
    max_depth: int = Field(10, ge=0, description="Deepest directory level that is listed")
    max_workers: int = Field(1, ge=1, description="Roots walked concurrently")
    content_hints: bool = Field(False, description="Use the content-hint classifier")

    def cutoff(self, now: Optional[datetime] = None) -> datetime:
        """Earliest created/modified time a file must reach to be kept."""
        return (now or datetime.now()) - timedelta(days=self.days)


class SearchCriteria(_Model):
    """Filters for a criteria search over one or more roots."""

    paths: Optional[list[str]] = None
    extensions: list[str] = Field(default_factory=list)
    name_pattern: Optional[str] = Field(None, description="Case-insensitive name substring")
    size_min: int = Field(0, ge=0)
    size_max: Optional[int] = Field(None, ge=0)
    modified_after: Optional[datetime] = None
    modified_before: Optional[datetime] = None
    include_hidden: bool = False
    max_depth: int = Field(10, ge=0)

    @field_validator("extensions")
    @classmethod
    def _lower_extensions(cls, value: list[str]) -> list[str]:
        return [_normalize_extension(ext) for ext in value if ext.strip()]

    def matches(self, record: "FileRecord") -> bool:
        if self.extensions and record.extension not in self.extensions:
            return False
        if self.name_pattern and self.name_pattern.lower() not in record.name.lower():
            return False
        if record.size < self.size_min:
            return False
        if self.size_max is not None and record.size > self.size_max:
            return False
        if self.modified_after and record.modified_time < self.modified_after:
            return False
        if self.modified_before and record.modified_time > self.modified_before:
            return False
        return True


# =============================================================================
# Records and results
# =============================================================================


class FileRecord(_Model):
    """One filesystem entry that survived the cutoff filter."""

    path: str = Field(..., description="Absolute, normalized path")
    name: str
    extension: str = Field("", description="Lower-cased, with leading dot, or empty")
    size: int = Field(0, ge=0, description="Size in bytes")
    created_time: datetime
    modified_time: datetime
    accessed_time: datetime
    is_directory: bool = False
    is_file: bool = True
    fingerprint: str = Field("", description="Cheap identity key, not a content hash")
    category: Optional[CategoryTag] = None
    size_category: Optional[str] = None
    relative_age: Optional[str] = None
    mime_type: str = "application/octet-stream"
    is_executable: bool = False
    is_archive: bool = False
    is_media: bool = False

    @model_validator(mode="after")
    def _check_kind(self) -> "FileRecord":
        if self.is_directory == self.is_file:
            raise ValueError("a record is either a directory or a file")
        return self


class CategorySummary(_Model):
    count: int
    total_size: int
    average_size: int
    percentage: float
    color: str
    description: str


class SizeStats(_Model):
    count: int = 0
    total_size: int = 0


class ExtensionStat(_Model):
    extension: str = Field(..., description="Extension, or 'none'")
    count: int = 0
    total_size: int = 0
    category: Optional[CategoryTag] = Field(None, description="Category of the first file seen")


class Statistics(_Model):
    size_distribution: dict[str, SizeStats] = Field(default_factory=dict)
    time_distribution: dict[str, int] = Field(default_factory=dict)
    extension_stats: list[ExtensionStat] = Field(default_factory=list)
    duplicate_files: list[list[FileRecord]] = Field(default_factory=list)
    largest_files: list[FileRecord] = Field(default_factory=list)
    oldest_files: list[FileRecord] = Field(default_factory=list)
    newest_files: list[FileRecord] = Field(default_factory=list)


class ScanStats(_Model):
    """Recoverable problems met during a scan."""

    skipped_roots: list[str] = Field(default_factory=list, description="Roots that do not exist")
    unreadable_dirs: int = Field(0, description="Directories that could not be listed")
    failed_entries: int = Field(0, description="Entries whose metadata could not be read")
    excluded_dirs: int = Field(0, description="Directories pruned by the exclude list")

    @property
    def skipped_count(self) -> int:
        """Paths and entries left out because of errors."""
        return len(self.skipped_roots) + self.unreadable_dirs + self.failed_entries

    def merge(self, other: "ScanStats") -> None:
        self.skipped_roots.extend(other.skipped_roots)
        self.unreadable_dirs += other.unreadable_dirs
        self.failed_entries += other.failed_entries
        self.excluded_dirs += other.excluded_dirs


class ClassificationResult(_Model):
    """Output of one scan: categorised records plus statistics."""

    categories: dict[CategoryTag, list[FileRecord]] = Field(default_factory=dict)
    summary: dict[CategoryTag, CategorySummary] = Field(default_factory=dict)
    statistics: Statistics = Field(default_factory=Statistics)
    total_files: int = 0
    total_size: int = 0
    classification_time: datetime = Field(default_factory=datetime.now)
    classifier: str = "extension"
    scan_stats: ScanStats = Field(default_factory=ScanStats)

    @property
    def used_categories(self) -> list[CategoryTag]:
        """Categories holding at least one record."""
        return [tag for tag, records in self.categories.items() if records]

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize with camelCase keys."""
        return self.model_dump_json(by_alias=True, indent=indent)
