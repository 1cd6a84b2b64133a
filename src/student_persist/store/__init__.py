"""
store — flat-file persistence layer for Student records.

Public API
──────────
Student       — dataclass for one record (equality by id)
StudentDao    — abstract CRUD interface
StudentStore  — one-text-file-per-record implementation
get_store     — build a StudentStore from a StoreConfig or a properties file
"""

from typing import Optional

from student_persist.config import StoreConfig, load_config
from student_persist.store.base import StudentDao
from student_persist.store.file_store import StudentStore
from student_persist.store.models import Student

__all__ = ["Student", "StudentDao", "StudentStore", "get_store"]


def get_store(
    config: Optional[StoreConfig] = None,
    config_path: Optional[str] = None,
) -> StudentStore:
    """
    Factory: return a StudentStore for *config*.

    When no config is given it is loaded with load_config(config_path).
    """
    if config is None:
        config = load_config(config_path)
    return StudentStore(config)
