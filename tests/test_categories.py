"""Tests for the built-in classification policy."""

from autoarrange.buckets import size_category
from autoarrange.categories import (
    CATEGORIES,
    DEFAULT_POLICY,
    EXCLUDE_PATHS,
    SCAN_PATHS,
    SIZE_CATEGORIES,
)
from autoarrange.models import UNBOUNDED, CategoryTag


class TestCategories:
    def test_categories_not_empty(self):
        assert len(CATEGORIES) > 0

    def test_every_tag_declared(self):
        assert set(CATEGORIES) == set(CategoryTag)

    def test_other_is_last_and_empty(self):
        assert list(CATEGORIES)[-1] == CategoryTag.OTHER
        assert CATEGORIES[CategoryTag.OTHER].extensions == []

    def test_all_categories_have_display_fields(self):
        for tag, rule in CATEGORIES.items():
            assert rule.color.startswith("#"), tag
            assert rule.description, tag

    def test_extensions_are_lowercase_with_dot(self):
        for rule in CATEGORIES.values():
            for ext in rule.extensions:
                assert ext.startswith(".")
                assert ext == ext.lower()

    def test_no_extension_in_two_categories(self):
        seen: dict[str, CategoryTag] = {}
        for tag, rule in CATEGORIES.items():
            for ext in rule.extensions:
                assert ext not in seen, f"{ext} in {seen.get(ext)} and {tag}"
                seen[ext] = tag

    def test_common_extensions(self):
        assert ".pdf" in CATEGORIES[CategoryTag.DOCUMENT].extensions
        assert ".jpg" in CATEGORIES[CategoryTag.IMAGE].extensions
        assert ".exe" in CATEGORIES[CategoryTag.PROGRAM].extensions


class TestSizeCategories:
    def test_last_bucket_unbounded(self):
        assert list(SIZE_CATEGORIES.values())[-1].max == UNBOUNDED

    def test_boundary_between_small_and_medium(self):
        assert SIZE_CATEGORIES["小"].max == 1048576
        assert SIZE_CATEGORIES["中"].min == 1048576
        assert size_category(1048576, SIZE_CATEGORIES) == "中"
        assert size_category(1048575, SIZE_CATEGORIES) == "小"

    def test_every_size_matches_exactly_one_bucket(self):
        sizes = [0, 1, 10239, 10240, 1048576, 104857599, 104857600, 2**30, 2**40]
        for size in sizes:
            matches = [name for name, bucket in SIZE_CATEGORIES.items() if bucket.contains(size)]
            assert len(matches) == 1, size


class TestDefaultPolicy:
    def test_uses_builtin_tables(self):
        assert DEFAULT_POLICY.file_categories == CATEGORIES
        assert DEFAULT_POLICY.size_categories == SIZE_CATEGORIES

    def test_scan_paths_use_tilde(self):
        assert SCAN_PATHS
        for path in SCAN_PATHS:
            assert path.startswith("~/")

    def test_excludes_dependency_folders(self):
        assert "node_modules" in EXCLUDE_PATHS
        assert DEFAULT_POLICY.exclude_paths == EXCLUDE_PATHS
