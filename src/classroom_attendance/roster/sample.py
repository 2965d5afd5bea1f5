from __future__ import annotations

from typing import List

from .model import Student


def generate_sample_students(count: int) -> List[Student]:
    """Demo roster: 30 students per section starting at S33."""
    students = []
    for i in range(1, count + 1):
        students.append(
            Student(
                id=i,
                name=f"Student {i:02d}",
                face_id=f"FACE{i:03d}",
                section_name=f"S{33 + (i - 1) // 30}",
                id_number=f"25000{32000 + i}",
            )
        )
    return students
