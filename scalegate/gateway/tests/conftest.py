from unittest.mock import AsyncMock

import pytest

from scalegate.gateway.models.function import FunctionIdentity, ScalingPolicy
from scalegate.gateway.tests.outcomes import READY


@pytest.fixture
def identity() -> FunctionIdentity:
    return FunctionIdentity(name="myfn", namespace="prod")


@pytest.fixture
def policy() -> ScalingPolicy:
    return ScalingPolicy(max_attempts=4, retry_delay=0.5)


@pytest.fixture
def scaler() -> AsyncMock:
    mock = AsyncMock()
    mock.scale.return_value = READY
    return mock


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()
