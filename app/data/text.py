from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Optional


_MARKDOWN_CHARS = re.compile(r"[#*`_~\[\]]")
_WORDS_PER_MINUTE = 200


def slugify(text: str) -> str:
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def truncate(text: Optional[str], max_length: int = 100) -> Optional[str]:
    if not text or len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def strip_markdown(markdown: Optional[str]) -> str:
    if not markdown:
        return ""
    text = _MARKDOWN_CHARS.sub("", markdown)
    text = re.sub(r"\n\s*\n", " ", text)
    return text.replace("\n", " ").strip()


def reading_time(markdown: Optional[str]) -> int:
    """Minutes to read, never less than one."""
    words = len(strip_markdown(markdown).split())
    return max(1, math.ceil(words / _WORDS_PER_MINUTE))


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return f"{value:%B} {value.day}, {value.year}"


def format_relative_time(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    if value is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    hours = int((now - value).total_seconds() // 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours} hours ago"
    if hours < 48:
        return "Yesterday"
    if hours < 24 * 7:
        return f"{hours // 24} days ago"
    return format_date(value)
