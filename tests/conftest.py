import pytest


@pytest.fixture(autouse=True)
def _reset_session_state():
    """Each test starts from a fresh global session."""
    from geomockery.state import state
    state.reset()
    yield
    state.reset()


@pytest.fixture
def square_feature():
    """Roughly 1.1km x 1.1km square polygon feature near the equator."""
    return {
        "type": "Feature",
        "properties": {"name": "square"},
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[0.0, 0.0], [0.01, 0.0], [0.01, 0.01], [0.0, 0.01], [0.0, 0.0]]],
        },
    }
