"""
Shared utility functions for the Employment Plan Builder
"""

import os
import re
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional


def sanitize_for_path(text: str, max_len: int = 50, style: str = 'descriptive') -> str:
    """
    Sanitize text for use in file/directory names.
    """
    if not text or not isinstance(text, str):
        return ""

    # Remove or replace problematic characters
    sanitized = re.sub(r'[<>:"/\\|?*\x00-\x1f\[\]]', '', text)
    sanitized = re.sub(r'\s+', '_', sanitized.strip())
    sanitized = re.sub(r'_+', '_', sanitized)
    sanitized = sanitized.strip('_.')

    if style == 'compact':
        sanitized = re.sub(r'[^a-zA-Z0-9_-]', '', sanitized)
        max_len = min(max_len, 15)

    return sanitized[:max_len] if sanitized else "item"


def ensure_directory_exists(directory_path: str) -> None:
    """Ensure a directory exists, create if not."""
    os.makedirs(directory_path, exist_ok=True)


def cleanup_old_exports(base_dir: str, days: int = 30) -> None:
    """Remove exported documents older than specified days."""
    if not os.path.exists(base_dir):
        return

    cutoff = datetime.now() - timedelta(days=days)

    for item in os.listdir(base_dir):
        item_path = os.path.join(base_dir, item)
        if not os.path.isfile(item_path):
            continue
        file_time = datetime.fromtimestamp(os.path.getmtime(item_path))
        if file_time < cutoff:
            try:
                os.remove(item_path)
                print(f"🗑️ Cleaned up old export: {item}")
            except OSError as e:
                print(f"⚠️ Could not remove {item}: {e}")


def format_plan_date(value: Optional[date] = None) -> str:
    """Long US-style date used on the signature line, e.g. 'October 17, 2026'."""
    value = value or date.today()
    return f"{value:%B} {value.day}, {value.year}"


def split_requirements(text: str) -> List[str]:
    """
    Turns the one-per-line requirements textarea into a list.
    Lines are kept as typed so the textarea round-trips while the user edits.
    """
    if not text:
        return []
    return text.replace('\r\n', '\n').split('\n')


def join_requirements(requirements: Iterable[str]) -> str:
    """Sentence fragment used in the printed document."""
    return ', '.join(str(item) for item in requirements).lower()
