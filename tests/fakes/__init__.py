"""
Test Fakes Module

Snapshot builders for tests; no real browser captures needed.
"""

from tests.fakes.fake_object_graph import (
    EXPECTED_WINDOW_CATALOG,
    ObjectGraphBuilder,
    WindowFixture,
    build_window_graph,
)

__all__ = [
    "EXPECTED_WINDOW_CATALOG",
    "ObjectGraphBuilder",
    "WindowFixture",
    "build_window_graph",
]
