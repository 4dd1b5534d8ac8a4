"""Path utilities for the media library.

Rules shared by media_library and the media endpoints:
- Relative media paths use '/' separators, no leading or trailing slash; root is ''.
- Entry names are single path segments; traversal segments are a security error.
- Uploaded filenames are reduced to [A-Za-z0-9_.-] and never start with a dot.
"""

from __future__ import annotations

import re

from app.packages.cms.core.exceptions import PathTraversalError, ValidationError

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def norm_rel_path(p: str | None) -> str:
    s = (p or "").replace("\\", "/").strip()
    parts = [part for part in s.split("/") if part and part != "."]
    return "/".join(parts)


def validate_entry_name(name: str | None) -> str:
    s = (name or "").strip()
    if not s:
        raise ValidationError("名称不能为空")
    if s in {".", ".."} or "/" in s or "\\" in s:
        raise PathTraversalError(f"非法名称: {s}")
    if "\x00" in s:
        raise ValidationError("名称包含非法字符")
    if s.startswith("."):
        raise ValidationError("名称不能以 . 开头")
    return s


def sanitize_filename(original: str | None) -> str:
    base = (original or "").replace("\\", "/").rsplit("/", 1)[-1]
    safe = _UNSAFE_FILENAME_CHARS.sub("_", base)
    if safe.startswith("."):
        safe = "_" + safe[1:]
    if not safe:
        return "file"
    return safe
