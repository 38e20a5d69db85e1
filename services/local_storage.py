"""
Local key-value storage - string values under string keys, kept in one JSON file
"""

import os
import json
from typing import Dict, Optional

from utils import ensure_directory_exists


class LocalStorage:
    """
    Durable string-keyed storage for the planner, mirroring browser localStorage:
    every write replaces the whole value stored under its key.
    """

    def __init__(self, storage_path: str):
        self.storage_path = storage_path

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"LocalStorage values must be strings, got {type(value).__name__}")
        entries = self._read_all()
        entries[key] = value
        self._write_all(entries)

    # ========================================================================
    # HELPER FUNCTIONS
    # ========================================================================

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.storage_path):
            return {}
        try:
            with open(self.storage_path, "r", encoding="utf-8") as f:
                entries = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"⚠️ Could not read local storage at {self.storage_path}: {e}")
            return {}
        if not isinstance(entries, dict):
            print(f"⚠️ Local storage at {self.storage_path} is not a key-value object, ignoring it")
            return {}
        return entries

    def _write_all(self, entries: Dict[str, str]) -> None:
        directory = os.path.dirname(self.storage_path)
        if directory:
            ensure_directory_exists(directory)

        tmp_path = f"{self.storage_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(entries, f, indent=4)
        os.replace(tmp_path, self.storage_path)
