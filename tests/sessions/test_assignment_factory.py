import pytest

from classroom_attendance.core.exceptions import ValidationError
from classroom_attendance.sessions.factory import AssignmentStrategyFactory
from classroom_attendance.sessions.strategies.identity_hint_strategy import IdentityHintStrategy
from classroom_attendance.sessions.strategies.positional_strategy import PositionalStrategy


def test_factory_defaults_to_positional():
    factory = AssignmentStrategyFactory()

    assert isinstance(factory.for_name(""), PositionalStrategy)
    assert isinstance(factory.for_name("Positional"), PositionalStrategy)


def test_factory_identity_hint():
    strategy = AssignmentStrategyFactory().for_name("identity_hint")

    assert isinstance(strategy, IdentityHintStrategy)


def test_factory_rejects_unknown_strategy():
    with pytest.raises(ValidationError):
        AssignmentStrategyFactory().for_name("random")
