from __future__ import annotations

from dataclasses import dataclass

from ..core.exceptions import ValidationError
from .strategies.base import DetectionAssignmentStrategy
from .strategies.identity_hint_strategy import IdentityHintStrategy
from .strategies.positional_strategy import PositionalStrategy


@dataclass
class AssignmentStrategyFactory:
    """Factory Pattern: build the assignment strategy named in settings."""

    def for_name(self, name: str) -> DetectionAssignmentStrategy:
        key = (name or "").strip().lower()
        if key in {"", PositionalStrategy.name}:
            return PositionalStrategy()
        if key == IdentityHintStrategy.name:
            return IdentityHintStrategy()
        raise ValidationError(f"Unknown assignment strategy: {name}")
