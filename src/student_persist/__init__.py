"""
student-persist — stores Student records as one comma-separated text file each.

Usage::

    from student_persist import Student, StoreConfig, get_store

    store = get_store(StoreConfig(storage_dir="./data/"))
    store.insert(Student(id=1, first_name="Ann", last_name="Lee"))
"""

from student_persist.config import StoreConfig, load_config
from student_persist.exceptions import (
    ConfigError,
    InvalidArgumentError,
    InvalidDataError,
    IOFailureError,
    NotFoundError,
    StoreError,
    StudentPersistError,
)
from student_persist.store import Student, StudentDao, StudentStore, get_store

__all__ = [
    "Student",
    "StudentDao",
    "StudentStore",
    "StoreConfig",
    "get_store",
    "load_config",
    "StudentPersistError",
    "ConfigError",
    "StoreError",
    "InvalidArgumentError",
    "NotFoundError",
    "InvalidDataError",
    "IOFailureError",
]

__version__ = "1.0.0"
