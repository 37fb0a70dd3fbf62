"""Built-in classification policy for autoarrange."""

from autoarrange.models import (
    UNBOUNDED,
    CategoryRule,
    CategoryTag,
    ClassificationPolicy,
    SizeBucket,
)

KB = 1024
MB = 1024 * KB
GB = 1024 * MB

# Ordered: an extension listed twice resolves to the first category declared
CATEGORIES: dict[CategoryTag, CategoryRule] = {
    CategoryTag.DOCUMENT: CategoryRule(
        extensions=[
            ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
            ".txt", ".md", ".rtf", ".odt", ".ods", ".odp", ".csv", ".epub",
        ],
        color="#4472C4",
        description="文档、表格和演示文稿",
    ),
    CategoryTag.IMAGE: CategoryRule(
        extensions=[
            ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".svg", ".tiff",
            ".tif", ".ico", ".webp", ".heic", ".raw", ".psd",
        ],
        color="#70AD47",
        description="图片和设计文件",
    ),
    CategoryTag.VIDEO: CategoryRule(
        extensions=[".mp4", ".avi", ".mkv", ".mov", ".wmv", ".flv", ".webm", ".m4v", ".3gp"],
        color="#ED7D31",
        description="视频文件",
    ),
    CategoryTag.AUDIO: CategoryRule(
        extensions=[".mp3", ".wav", ".flac", ".aac", ".ogg", ".wma", ".m4a"],
        color="#FFC000",
        description="音频文件",
    ),
    CategoryTag.ARCHIVE: CategoryRule(
        extensions=[".zip", ".rar", ".7z", ".tar", ".gz", ".bz2", ".xz", ".iso"],
        color="#A5A5A5",
        description="压缩包和镜像文件",
    ),
    CategoryTag.PROGRAM: CategoryRule(
        extensions=[".exe", ".msi", ".bat", ".cmd", ".com", ".scr", ".dmg", ".pkg", ".deb", ".apk", ".appimage"],
        color="#C00000",
        description="可执行程序和安装包",
    ),
    CategoryTag.CODE: CategoryRule(
        extensions=[
            ".py", ".js", ".ts", ".java", ".c", ".cpp", ".h", ".cs", ".go",
            ".rs", ".rb", ".php", ".html", ".css", ".json", ".xml", ".yaml",
            ".yml", ".sh", ".sql",
        ],
        color="#5B9BD5",
        description="源代码和配置文件",
    ),
    CategoryTag.OTHER: CategoryRule(
        extensions=[],
        color="#B2B2B2",
        description="未分类文件",
    ),
}

SIZE_CATEGORIES: dict[str, SizeBucket] = {
    "微小": SizeBucket(min=0, max=10 * KB),
    "小": SizeBucket(min=10 * KB, max=MB),
    "中": SizeBucket(min=MB, max=100 * MB),
    "大": SizeBucket(min=100 * MB, max=GB),
    "超大": SizeBucket(min=GB, max=UNBOUNDED),
}

EXCLUDE_PATHS: list[str] = [
    "node_modules",
    ".git",
    "__pycache__",
    "$recycle.bin",
    "system volume information",
    "appdata/local/temp",
]

SCAN_PATHS: list[str] = [
    "~/Desktop",
    "~/Downloads",
    "~/Documents",
]

DEFAULT_POLICY = ClassificationPolicy(
    file_categories=CATEGORIES,
    size_categories=SIZE_CATEGORIES,
    exclude_paths=EXCLUDE_PATHS,
    scan_paths=SCAN_PATHS,
)
