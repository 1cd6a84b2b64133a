"""Data models for the store module."""

from __future__ import annotations

from dataclasses import dataclass

from student_persist.exceptions import InvalidDataError

__all__ = ["Student", "FIELD_SEPARATOR"]

FIELD_SEPARATOR = ","
_FIELD_COUNT = 3


@dataclass(eq=False)
class Student:
    """
    One student record.

    Fields
    ──────
    id          — external identity key, also names the record file
    first_name  — stored verbatim (commas are not escaped)
    last_name   — stored verbatim (commas are not escaped)

    Two Student objects are equal when their ids are equal.
    """
    id:         int
    first_name: str
    last_name:  str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Student):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"Student(id={self.id}, name={self.first_name} {self.last_name})"

    # ── Record codec ──────────────────────────────────────────────────────

    def to_record(self) -> str:
        """Serialise to the one-line on-disk form ``id,first_name,last_name``."""
        return FIELD_SEPARATOR.join((str(self.id), self.first_name, self.last_name))

    @classmethod
    def from_record(cls, line: str) -> "Student":
        """
        Parse one record line. Fields past the third are ignored.

        Raises:
            InvalidDataError: fewer than 3 fields, or the id is not an integer.
        """
        fields = line.rstrip("\r\n").split(FIELD_SEPARATOR)
        if len(fields) < _FIELD_COUNT:
            raise InvalidDataError(
                f"Incomplete student data: expected {_FIELD_COUNT} fields, got {len(fields)}"
            )
        try:
            student_id = int(fields[0])
        except ValueError as exc:
            raise InvalidDataError(f"Invalid student id field: {fields[0]!r}") from exc
        return cls(id=student_id, first_name=fields[1], last_name=fields[2])
