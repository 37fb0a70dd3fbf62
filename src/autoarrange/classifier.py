"""File classification for autoarrange.

Two independent classifiers are available. A scan uses exactly one of them:

- ExtensionClassifier: ordered extension table from the policy (default)
- ContentHintClassifier: derived flags, then MIME type, then file name hints
"""

import logging
import re
from typing import Iterable

from autoarrange.models import CategoryTag, ClassificationPolicy, FileRecord

logger = logging.getLogger(__name__)

IMAGE_EXTENSION_RE = re.compile(r"\.(jpg|jpeg|png|gif|bmp|svg|tiff|ico|webp)$", re.IGNORECASE)

# Checked in order, first prefix match wins
MIME_PREFIXES: list[tuple[str, CategoryTag]] = [
    ("text/", CategoryTag.DOCUMENT),
    ("application/pdf", CategoryTag.DOCUMENT),
    ("application/msword", CategoryTag.DOCUMENT),
    ("application/vnd.openxml", CategoryTag.DOCUMENT),
    ("image/", CategoryTag.IMAGE),
    ("video/", CategoryTag.VIDEO),
    ("audio/", CategoryTag.AUDIO),
    ("application/zip", CategoryTag.ARCHIVE),
    ("application/x-rar", CategoryTag.ARCHIVE),
    ("application/x-7z", CategoryTag.ARCHIVE),
    ("application/x-msdownload", CategoryTag.PROGRAM),
]

NAME_HINTS: list[tuple[CategoryTag, list[re.Pattern]]] = [
    (
        CategoryTag.DOCUMENT,
        [re.compile(p, re.IGNORECASE) for p in (r"readme", r"license", r"changelog", r"doc", r"manual")],
    ),
    (
        CategoryTag.CODE,
        [re.compile(p, re.IGNORECASE) for p in (r"config", r"src", r"lib", r"script", r"\.min\.")],
    ),
    (
        CategoryTag.PROGRAM,
        [re.compile(p, re.IGNORECASE) for p in (r"setup", r"install", r"installer", r"launcher")],
    ),
]


class Classifier:
    """Assigns every record exactly one category. Never raises."""

    name = "base"

    def classify(self, record: FileRecord) -> CategoryTag:
        raise NotImplementedError

    def classify_all(self, records: Iterable[FileRecord]) -> list[FileRecord]:
        """Set ``category`` on each record, keeping input order."""
        classified = []
        for record in records:
            record.category = self.classify(record)
            classified.append(record)
        return classified


class ExtensionClassifier(Classifier):
    """First category in policy order whose extension set holds the extension."""

    name = "extension"

    def __init__(self, policy: ClassificationPolicy):
        self.policy = policy

    def classify(self, record: FileRecord) -> CategoryTag:
        try:
            if not record.extension:
                return CategoryTag.OTHER

            extension = record.extension.lower()
            for tag, rule in self.policy.file_categories.items():
                if extension in rule.extensions:
                    return tag
        except Exception as e:
            logger.warning("Classification failed for %s: %s", record.path, e)
        return CategoryTag.OTHER


class ContentHintClassifier(Classifier):
    """Classify from derived flags, MIME type and file name, in that order."""

    name = "content"

    def classify(self, record: FileRecord) -> CategoryTag:
        try:
            if record.is_executable:
                return CategoryTag.PROGRAM
            if record.is_archive:
                return CategoryTag.ARCHIVE
            if record.is_media:
                if IMAGE_EXTENSION_RE.search(record.extension):
                    return CategoryTag.IMAGE
                if record.mime_type.startswith("audio/"):
                    return CategoryTag.AUDIO
                return CategoryTag.VIDEO

            tag = classify_by_mime_type(record.mime_type)
            if tag != CategoryTag.OTHER:
                return tag
            return classify_by_file_name(record.name)
        except Exception as e:
            logger.warning("Content classification failed for %s: %s", record.path, e)
            return CategoryTag.OTHER


def classify_by_mime_type(mime_type: str) -> CategoryTag:
    for prefix, tag in MIME_PREFIXES:
        if mime_type.startswith(prefix):
            return tag
    return CategoryTag.OTHER


def classify_by_file_name(file_name: str) -> CategoryTag:
    for tag, patterns in NAME_HINTS:
        for pattern in patterns:
            if pattern.search(file_name):
                return tag
    return CategoryTag.OTHER


def get_classifier(policy: ClassificationPolicy, content_hints: bool = False) -> Classifier:
    """Pick the single classifier used for a scan."""
    if content_hints:
        return ContentHintClassifier()
    return ExtensionClassifier(policy)


def classify(record: FileRecord, policy: ClassificationPolicy) -> CategoryTag:
    """Classify one record with the policy's extension table."""
    return ExtensionClassifier(policy).classify(record)
