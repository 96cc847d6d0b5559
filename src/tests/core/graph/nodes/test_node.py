"""Tests for node and edge models."""

import pytest

from aigraph.core.graph import END, START, ConditionalEdge, Edge, Node
from aigraph.core.graph.nodes.base.node import is_sentinel
from aigraph.core.graph.nodes import maybe_await


async def double(state: int) -> int:
    return state * 2


class TestNode:
    """Test suite for Node."""

    def test_node_init(self):
        node = Node(id="double", func=double)
        assert node.id == "double"
        assert node.metadata == {}

    def test_node_without_id(self):
        with pytest.raises(ValueError):
            Node(id="", func=double)

    def test_node_requires_callable(self):
        with pytest.raises(ValueError):
            Node(id="x", func=42)

    def test_node_is_frozen(self):
        node = Node(id="double", func=double)
        with pytest.raises(ValueError):
            node.id = "other"

    async def test_invoke_async(self):
        assert await Node(id="double", func=double).invoke(4) == 8

    async def test_invoke_sync(self):
        assert await Node(id="inc", func=lambda state: state + 1).invoke(4) == 5

    async def test_invoke_propagates(self):
        def boom(state):
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            await Node(id="boom", func=boom).invoke(None)


class TestEdges:
    """Test suite for Edge and ConditionalEdge."""

    def test_edge(self):
        edge = Edge(source="a", target=END)
        assert (edge.source, edge.target) == ("a", END)

    async def test_route_async(self):
        async def route(state):
            return "left" if state else "right"

        conditional = ConditionalEdge(source="a", condition=route, mapping={"left": "b", "right": END})
        assert await conditional.route(True) == "left"
        assert conditional.resolve("left") == "b"
        assert conditional.resolve("up") is None

    async def test_route_sync(self):
        conditional = ConditionalEdge(source="a", condition=lambda state: "x", mapping={"x": END})
        assert await conditional.route(None) == "x"

    def test_targets_deduplicated(self):
        conditional = ConditionalEdge(
            source="a", condition=lambda state: "x", mapping={"x": "b", "y": "b", "z": END}
        )
        assert conditional.targets == ["b", END]

    def test_none_mapping(self):
        conditional = ConditionalEdge(source="a", condition=lambda state: "x", mapping=None)
        assert conditional.mapping == {}


class TestMaybeAwait:
    async def test_plain_value(self):
        assert await maybe_await(3) == 3

    async def test_coroutine(self):
        assert await maybe_await(double(2)) == 4


class TestSentinels:
    def test_is_sentinel(self):
        assert is_sentinel(START)
        assert is_sentinel(END)
        assert not is_sentinel("start")
