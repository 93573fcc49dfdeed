import pytest
from cooling_tower import FlowConfiguration


@pytest.fixture
def design_point():
    # hot water, cold water, wet bulb (°C)
    return 37.0, 32.0, 27.0


@pytest.fixture(params=[FlowConfiguration.COUNTER, FlowConfiguration.CROSS])
def flow(request):
    return request.param
