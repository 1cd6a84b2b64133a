"""Abstract base class for student record stores."""

from abc import ABC, abstractmethod

from .models import Student

__all__ = ["StudentDao"]


class StudentDao(ABC):
    """
    CRUD contract for Student records keyed by id.

    Boolean results report expected outcomes (already exists / not found);
    anything unexpected is raised as a StoreError subclass.
    """

    @abstractmethod
    def insert(self, student: Student) -> bool:
        """
        Store a new student.

        Returns:
            True if stored, False if a record with the same id already exists.

        Raises:
            InvalidArgumentError: student is None.
            IOFailureError: the record could not be written.
        """
        ...

    @abstractmethod
    def fetch(self, student_id: int) -> Student:
        """
        Load the student with *student_id*.

        Raises:
            NotFoundError: no record for that id.
            InvalidDataError: the stored record is malformed.
            IOFailureError: the record could not be read.
        """
        ...

    @abstractmethod
    def delete(self, student_id: int) -> bool:
        """
        Remove the student with *student_id*.

        Returns:
            True if removed, False if there was nothing to remove.

        Raises:
            IOFailureError: the record exists but could not be removed.
        """
        ...

    @abstractmethod
    def update_first_name(self, student_id: int, first_name: str) -> bool:
        """Replace the first name; False if no record exists for the id."""
        ...

    @abstractmethod
    def update_last_name(self, student_id: int, last_name: str) -> bool:
        """Replace the last name; False if no record exists for the id."""
        ...
