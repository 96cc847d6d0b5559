"""Shared fixtures for graph tests."""

import pytest

from aigraph.core.graph import Graph
from tests.core.graph.workflows import ContentState, build_content_graph


@pytest.fixture
def content_graph() -> Graph:
    """Fixture providing the uncompiled content workflow."""
    return build_content_graph()


@pytest.fixture
def initial_state() -> ContentState:
    """Fixture providing the documented initial state."""
    return ContentState(message="Hello World", count=0, quality_score=0)


@pytest.fixture
def simple_graph() -> Graph:
    """Fixture providing an empty graph."""
    return Graph()
