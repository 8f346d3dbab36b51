import pytest
from doubles import RecordingGateway, ScriptedInference


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def inference():
    return ScriptedInference()
