"""Tests for the classifiers."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from autoarrange.categories import DEFAULT_POLICY, SIZE_CATEGORIES
from autoarrange.classifier import (
    ContentHintClassifier,
    ExtensionClassifier,
    classify,
    classify_by_file_name,
    classify_by_mime_type,
    get_classifier,
)
from autoarrange.models import CategoryRule, CategoryTag, ClassificationPolicy, FileRecord

NOW = datetime(2026, 10, 19, 12, 0, 0)


def make_record(name: str, **kwargs) -> FileRecord:
    """Helper to create file records."""
    extension = kwargs.pop("extension", None)
    if extension is None:
        extension = "." + name.rsplit(".", 1)[-1].lower() if "." in name else ""
    return FileRecord(
        path=f"/data/{name}",
        name=name,
        extension=extension,
        size=kwargs.pop("size", 100),
        created_time=NOW,
        modified_time=NOW,
        accessed_time=NOW,
        **kwargs,
    )


class TestExtensionClassifier:
    def test_basic_categories(self):
        classifier = ExtensionClassifier(DEFAULT_POLICY)
        assert classifier.classify(make_record("a.pdf")) == CategoryTag.DOCUMENT
        assert classifier.classify(make_record("b.jpg")) == CategoryTag.IMAGE
        assert classifier.classify(make_record("c.exe")) == CategoryTag.PROGRAM
        assert classifier.classify(make_record("d.xyz")) == CategoryTag.OTHER

    def test_no_extension_is_other(self):
        classifier = ExtensionClassifier(DEFAULT_POLICY)
        assert classifier.classify(make_record("Makefile")) == CategoryTag.OTHER

    def test_extension_case_insensitive(self):
        classifier = ExtensionClassifier(DEFAULT_POLICY)
        assert classifier.classify(make_record("Photo.JPG", extension=".JPG")) == CategoryTag.IMAGE

    def test_first_declared_category_wins(self):
        policy = ClassificationPolicy(
            file_categories={
                CategoryTag.CODE: CategoryRule(extensions=[".txt"]),
                CategoryTag.DOCUMENT: CategoryRule(extensions=[".txt"]),
            },
            size_categories=SIZE_CATEGORIES,
        )
        assert ExtensionClassifier(policy).classify(make_record("notes.txt")) == CategoryTag.CODE

    def test_never_raises(self):
        policy = MagicMock()
        policy.file_categories.items.side_effect = RuntimeError("broken table")

        assert ExtensionClassifier(policy).classify(make_record("a.pdf")) == CategoryTag.OTHER

    def test_classify_function(self):
        assert classify(make_record("song.mp3"), DEFAULT_POLICY) == CategoryTag.AUDIO
        assert classify(make_record("main.py"), DEFAULT_POLICY) == CategoryTag.CODE


class TestContentHintClassifier:
    def test_flags_first(self):
        classifier = ContentHintClassifier()
        assert classifier.classify(make_record("tool.bin", is_executable=True)) == CategoryTag.PROGRAM
        assert classifier.classify(make_record("bundle.bin", is_archive=True)) == CategoryTag.ARCHIVE

    @pytest.mark.parametrize(
        "name, mime, expected",
        [
            ("photo.png", "image/png", CategoryTag.IMAGE),
            ("song.mp3", "audio/mpeg", CategoryTag.AUDIO),
            ("clip.mp4", "video/mp4", CategoryTag.VIDEO),
        ],
    )
    def test_media(self, name, mime, expected):
        record = make_record(name, mime_type=mime, is_media=True)
        assert ContentHintClassifier().classify(record) == expected

    def test_mime_type(self):
        record = make_record("report.pdf", mime_type="application/pdf")
        assert ContentHintClassifier().classify(record) == CategoryTag.DOCUMENT

    def test_falls_back_to_file_name(self):
        classifier = ContentHintClassifier()
        assert classifier.classify(make_record("README")) == CategoryTag.DOCUMENT
        assert classifier.classify(make_record("app.config")) == CategoryTag.CODE
        assert classifier.classify(make_record("setup.bin")) == CategoryTag.PROGRAM

    def test_unknown_is_other(self):
        assert ContentHintClassifier().classify(make_record("blob.xyz")) == CategoryTag.OTHER

    def test_mime_helpers(self):
        assert classify_by_mime_type("text/markdown") == CategoryTag.DOCUMENT
        assert classify_by_mime_type("application/zip") == CategoryTag.ARCHIVE
        assert classify_by_mime_type("application/octet-stream") == CategoryTag.OTHER

    def test_name_helper_order(self):
        # "doc" is checked before "script"
        assert classify_by_file_name("script_docs.txt") == CategoryTag.DOCUMENT
        assert classify_by_file_name("holiday.txt") == CategoryTag.OTHER


class TestGetClassifier:
    def test_default_is_extension(self):
        classifier = get_classifier(DEFAULT_POLICY)
        assert isinstance(classifier, ExtensionClassifier)
        assert classifier.name == "extension"

    def test_content_hints(self):
        classifier = get_classifier(DEFAULT_POLICY, content_hints=True)
        assert isinstance(classifier, ContentHintClassifier)
        assert classifier.name == "content"


class TestClassifyAll:
    def test_sets_category_in_order(self):
        records = [make_record("a.pdf"), make_record("b.jpg"), make_record("c.exe"), make_record("d.xyz")]

        classified = ExtensionClassifier(DEFAULT_POLICY).classify_all(records)

        assert [r.name for r in classified] == ["a.pdf", "b.jpg", "c.exe", "d.xyz"]
        assert [r.category for r in classified] == [
            CategoryTag.DOCUMENT,
            CategoryTag.IMAGE,
            CategoryTag.PROGRAM,
            CategoryTag.OTHER,
        ]

    def test_deterministic(self):
        classifier = ExtensionClassifier(DEFAULT_POLICY)
        first = [r.category for r in classifier.classify_all([make_record("x.docx"), make_record("y.zip")])]
        second = [r.category for r in classifier.classify_all([make_record("x.docx"), make_record("y.zip")])]
        assert first == second == [CategoryTag.DOCUMENT, CategoryTag.ARCHIVE]
