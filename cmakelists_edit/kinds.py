"""
File kind detection — a coarse classification of source files by
extension, used as a placement hint when adding files.
"""

import os
from typing import Optional


# ── Extension → kind mapping ──

EXTENSION_MAP = {
    ".h": "header",
    ".hh": "header",
    ".hpp": "header",
    ".hxx": "header",
    ".inl": "header",
    ".c": "source",
    ".cc": "source",
    ".cpp": "source",
    ".cxx": "source",
    ".c++": "source",
    ".m": "source",
    ".mm": "source",
    ".cu": "source",
    ".qrc": "resource",
    ".rc": "resource",
    ".ui": "ui",
    ".qml": "qml",
    ".js": "qml",
}

FILE_KINDS = frozenset(EXTENSION_MAP.values()) | {"other"}


def detect_file_kind(file_path: str) -> Optional[str]:
    """Return the kind of *file_path*, "other" for unknown extensions.

    Returns None for paths without an extension.
    """
    ext = os.path.splitext(file_path)[1].lower()
    if not ext:
        return None
    return EXTENSION_MAP.get(ext, "other")
