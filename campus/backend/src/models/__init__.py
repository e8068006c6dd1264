"""ORM models exposed for easy imports."""

from .attendance import Attendance
from .student import Student
from .teacher import Teacher

__all__ = [
    "Attendance",
    "Student",
    "Teacher",
]
