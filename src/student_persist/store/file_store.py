"""
StudentStore — one flat text file per Student record.

Usage::

    store = StudentStore(StoreConfig(storage_dir="/var/lib/students/"))

    store.insert(Student(id=1, first_name="Ann", last_name="Lee"))   # True
    store.fetch(1)                                                   # Student(1, Ann Lee)
    store.update_last_name(1, "Kim")                                 # True
    store.delete(1)                                                  # True

On-disk layout
──────────────
  <storage_dir>student<id>.txt   →   "<id>,<first_name>,<last_name>"

The path is built by plain concatenation, so storage_dir must end with a
path separator. Names are written verbatim: a comma inside a name is not
escaped and will shift the fields on the next read.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import shutil
import tempfile
from pathlib import Path

from student_persist.config import StoreConfig
from student_persist.exceptions import (
    InvalidArgumentError,
    InvalidDataError,
    IOFailureError,
    NotFoundError,
)

from .base import StudentDao
from .models import FIELD_SEPARATOR, Student

__all__ = ["StudentStore"]

logger = logging.getLogger(__name__)

_FILE_PREFIX = "student"
_FILE_SUFFIX = ".txt"

# characters that split a name across fields or lines when read back
_UNSAFE_CHARS = (FIELD_SEPARATOR, "\r", "\n")


class StudentStore(StudentDao):
    """
    File-per-record implementation of StudentDao.

    No state is kept between calls: every operation re-checks the filesystem,
    and each file handle lives only for the single read or write it serves.
    There is no locking; callers must serialise access to any one id.
    """

    def __init__(self, config: StoreConfig) -> None:
        self._config = config
        if not config.storage_dir:
            logger.critical(
                "StudentStore has no storage_dir; record files will resolve "
                "relative to the working directory"
            )
        else:
            logger.info("StudentStore initialised with storage_dir: %s", config.storage_dir)

    @property
    def config(self) -> StoreConfig:
        return self._config

    # ── Internal helpers ──────────────────────────────────────────────────

    def record_path(self, student_id: int) -> Path:
        """Return the record file path for *student_id*."""
        return Path(f"{self._config.storage_dir}{_FILE_PREFIX}{student_id}{_FILE_SUFFIX}")

    def _read_first_line(self, path: Path) -> str:
        """Return the first line of *path* ('' for an empty file)."""
        with open(path, "r", encoding=self._config.encoding, newline="") as fh:
            return fh.readline()

    def _write_record(self, path: Path, payload: bytes, mode: str = "wb") -> None:
        with open(path, mode) as fh:
            fh.write(payload)

    def _encode(self, student: Student) -> bytes:
        """Encode the record line before any file is touched."""
        try:
            return student.to_record().encode(self._config.encoding)
        except UnicodeEncodeError as exc:
            logger.error(
                "Student %d cannot be encoded as %s", student.id, self._config.encoding
            )
            raise InvalidArgumentError(
                f"Student {student.id} has characters not representable in "
                f"{self._config.encoding}."
            ) from exc

    @staticmethod
    def _check_name(value: object, field_name: str) -> None:
        if not isinstance(value, str):
            logger.error("%s must be a string, got %s", field_name, type(value).__name__)
            raise InvalidArgumentError(f"{field_name} must be a string.")

    @classmethod
    def _check_student(cls, student: Student) -> None:
        if student is None:
            logger.error("insert called with no student")
            raise InvalidArgumentError("Student object cannot be None.")
        sid = student.id
        if not isinstance(sid, int) or isinstance(sid, bool) or sid < 0:
            logger.error("Invalid student id: %r", sid)
            raise InvalidArgumentError(f"Student id must be a non-negative integer, got {sid!r}.")
        cls._check_name(student.first_name, "first_name")
        cls._check_name(student.last_name, "last_name")

    @staticmethod
    def _warn_on_separator(student: Student) -> None:
        for value in (student.first_name, student.last_name):
            found = [c for c in _UNSAFE_CHARS if c in value]
            if found:
                logger.warning(
                    "Student %d: name %r contains %r and will not read back intact",
                    student.id, value, "".join(found),
                )

    def _replace_atomic(self, path: Path, payload: bytes) -> None:
        """Write *payload* to a temp file beside *path*, then rename it over."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.",
            suffix=".tmp",
            dir=str(path.parent),
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
            shutil.copymode(path, tmp_name)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def _replace_legacy(self, path: Path, payload: bytes, student_id: int) -> None:
        """Delete the old record, then recreate it. The record is lost if the write fails."""
        try:
            path.unlink()
        except OSError as exc:
            logger.error("Failed to delete old record file for student %d", student_id)
            raise IOFailureError("Failed to delete the old student file.") from exc
        self._write_record(path, payload)

    def _update(self, student_id: int, **changes: str) -> bool:
        for field_name, value in changes.items():
            self._check_name(value, field_name)

        path = self.record_path(student_id)
        if not path.exists():
            logger.warning("Update skipped: no record file for student %d", student_id)
            return False

        try:
            line = self._read_first_line(path)
        except UnicodeDecodeError as exc:
            logger.error("Record file for student %d is not valid %s", student_id, self._config.encoding)
            raise InvalidDataError(f"Undecodable student data for id {student_id}.") from exc
        except OSError as exc:
            logger.error("Failed to read record file for student %d", student_id)
            raise IOFailureError(f"Failed to read student data for id {student_id}.") from exc
        if not line:
            logger.error("Record file for student %d is empty", student_id)
            raise IOFailureError(f"Failed to read student data for id {student_id}.")

        try:
            current = Student.from_record(line)
        except InvalidDataError:
            logger.error("Malformed record file for student %d", student_id)
            raise
        updated = dataclasses.replace(current, **changes)
        payload = self._encode(updated)
        self._warn_on_separator(updated)

        try:
            if self._config.atomic_updates:
                self._replace_atomic(path, payload)
            else:
                self._replace_legacy(path, payload, student_id)
        except (OSError, ValueError) as exc:
            logger.error("Failed to write updated record for student %d", student_id)
            raise IOFailureError("Failed to write updated student data.") from exc

        logger.info("Updated %s for student %d", ", ".join(sorted(changes)), student_id)
        return True

    # ── Public API ────────────────────────────────────────────────────────

    def insert(self, student: Student) -> bool:
        """
        Write a new record file for *student*.

        The record is encoded before the file is created, and the file is
        opened in exclusive-create mode, so an existing record is never
        overwritten and an unencodable name leaves nothing on disk.

        Returns:
            True if written, False if a record with the same id already exists.

        Raises:
            InvalidArgumentError: student is None, its id is not a non-negative
                int, a name is not a str, or a name cannot be encoded.
        """
        self._check_student(student)
        payload = self._encode(student)

        path = self.record_path(student.id)
        if path.exists():
            logger.info("Insert skipped: record for student %d already exists", student.id)
            return False

        self._warn_on_separator(student)
        try:
            self._write_record(path, payload, mode="xb")
        except FileExistsError:
            logger.info("Insert skipped: record for student %d already exists", student.id)
            return False
        except OSError as exc:
            logger.error("Failed to write record file for student %d", student.id)
            raise IOFailureError("Failed to write student data to file.") from exc

        logger.info("Inserted student %d", student.id)
        return True

    def fetch(self, student_id: int) -> Student:
        """Read the first line of the record file and decode it."""
        path = self.record_path(student_id)
        if not path.exists():
            logger.warning("Fetch failed: no record file for student %d", student_id)
            raise NotFoundError(f"Student file not found for id {student_id}.")

        try:
            line = self._read_first_line(path)
        except UnicodeDecodeError as exc:
            logger.error("Record file for student %d is not valid %s", student_id, self._config.encoding)
            raise InvalidDataError(f"Undecodable student data for id {student_id}.") from exc
        except OSError as exc:
            logger.error("Error reading record file for student %d", student_id)
            raise IOFailureError(f"Failed to read student data for id {student_id}.") from exc

        try:
            student = Student.from_record(line)
        except InvalidDataError:
            logger.error("Incomplete student data in record file for student %d", student_id)
            raise

        logger.debug("Fetched %s", student)
        return student

    def delete(self, student_id: int) -> bool:
        """Remove the record file; False if there was none."""
        path = self.record_path(student_id)
        if not path.exists():
            logger.info("Delete skipped: no record file for student %d", student_id)
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            logger.info("Delete skipped: record file for student %d vanished", student_id)
            return False
        except OSError as exc:
            logger.error("Failed to delete record file for student %d", student_id)
            raise IOFailureError("Unable to delete student data.") from exc

        logger.info("Deleted student %d", student_id)
        return True

    def update_first_name(self, student_id: int, first_name: str) -> bool:
        return self._update(student_id, first_name=first_name)

    def update_last_name(self, student_id: int, last_name: str) -> bool:
        return self._update(student_id, last_name=last_name)
