from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Section:
    id: int
    name: str


@dataclass(frozen=True)
class Student:
    """Roster entry; reference data shared read-only by every session."""

    id: int
    name: str
    id_number: str
    section_name: str
    face_id: Optional[str] = None
    face_descriptor: Optional[Tuple[float, ...]] = None

    def to_api(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "face_id": self.face_id,
            "section": self.section_name,
            "id_number": self.id_number,
        }
        if self.face_descriptor is not None:
            data["face_descriptor"] = list(self.face_descriptor)
        return data

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Student":
        descriptor = data.get("face_descriptor")
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            id_number=str(data["id_number"]),
            section_name=str(data.get("section") or ""),
            face_id=data.get("face_id"),
            face_descriptor=tuple(float(v) for v in descriptor) if descriptor else None,
        )
