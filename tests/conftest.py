"""
Global test configuration and fixtures
"""

import time

import pytest

from tests.fakes.fake_object_graph import WindowFixture, build_window_graph
from webcat_engine.web_catalog.infrastructure.object_graph import ObjectGraph

# Slow test threshold (seconds)
SLOW_TEST_THRESHOLD = 5.0


@pytest.fixture(autouse=True)
def track_test_duration(request):
    """Warn about slow tests"""
    start_time = time.time()

    yield

    duration = time.time() - start_time
    if duration > SLOW_TEST_THRESHOLD:
        print(f"\n⚠️  SLOW TEST ({duration:.2f}s): {request.node.nodeid}")


@pytest.fixture
def window_fixture() -> WindowFixture:
    """Standard browser-like graph with node ids by role"""
    return build_window_graph()


@pytest.fixture
def window_graph(window_fixture) -> ObjectGraph:
    return window_fixture.build()


# Pytest hooks
def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "cli: Command line tests")


def pytest_collection_modifyitems(config, items):
    """Path based markers"""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        if "cli" in path:
            item.add_marker(pytest.mark.cli)
