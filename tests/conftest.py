import pytest

from rabbitmq_wiring import RegistrationRegistry


@pytest.fixture
def registry() -> RegistrationRegistry:
    return RegistrationRegistry()
