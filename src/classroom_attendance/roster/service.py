from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from ..core.exceptions import DomainError
from .model import Section, Student
from .repository import RosterRepository
from .sample import generate_sample_students

logger = logging.getLogger(__name__)


class RosterCache:
    """Read-only roster, loaded once per app start.

    When the repository cannot be reached and ``sample_size`` is positive the
    cache falls back to a generated demo roster.
    """

    def __init__(self, students: RosterRepository, sections: Iterable[Section], *, sample_size: int = 0):
        self._repo = students
        self._sections = tuple(sections)
        self._sample_size = int(sample_size)
        self._students: Optional[tuple[Student, ...]] = None

    @property
    def loaded(self) -> bool:
        return self._students is not None

    def load(self) -> Sequence[Student]:
        if self._students is not None:
            return self._students

        try:
            students = list(self._repo.list_students())
            if not students and self._sample_size > 0:
                logger.warning("Roster is empty, using %d sample students", self._sample_size)
                students = generate_sample_students(self._sample_size)
        except DomainError as e:
            if self._sample_size <= 0:
                raise
            logger.warning("Failed to load students (%s), using %d sample students", e, self._sample_size)
            students = generate_sample_students(self._sample_size)

        self._students = tuple(students)
        logger.info("Loaded %d students for attendance tracking", len(self._students))
        return self._students

    def sections(self) -> Sequence[Section]:
        return self._sections

    def resolve_section(self, section_id) -> Optional[Section]:
        for section in self._sections:
            if str(section.id) == str(section_id):
                return section
        return None

    def students_in_section(self, section_name: str) -> List[Student]:
        return [s for s in self.load() if s.section_name == section_name]


class RosterService:
    """Server-side use case behind GET /students."""

    def __init__(self, students: RosterRepository):
        self._students = students

    def list_students(self) -> Sequence[Student]:
        return self._students.list_students()
