"""Tests for the in-memory content graph."""

import pytest

from sitegen.models.node import Tag
from sitegen.services.content_graph import (
    ContentGraph,
    DuplicateNodeError,
    NodeNotFoundError,
)


def test_add_and_lookup():
    graph = ContentGraph()
    graph.add_node(Tag(id="go"))
    tags = graph.get_collection("Tag")
    assert len(tags) == 1
    assert tags.get_node_by_id("go").id == "go"


def test_data_preserves_insertion_order():
    graph = ContentGraph()
    for tag_id in ["b", "a", "c"]:
        graph.add_node(Tag(id=tag_id))
    assert [t.id for t in graph.get_collection("Tag").data()] == ["b", "a", "c"]


def test_missing_collection_is_empty():
    assert ContentGraph().get_collection("BlogPost").data() == []


def test_unknown_id_raises():
    graph = ContentGraph()
    with pytest.raises(NodeNotFoundError) as exc_info:
        graph.get_collection("Tag").get_node_by_id("nope")
    assert exc_info.value.node_id == "nope"
    assert isinstance(exc_info.value, LookupError)


def test_duplicate_id_raises():
    graph = ContentGraph()
    graph.add_node(Tag(id="go"))
    with pytest.raises(DuplicateNodeError):
        graph.add_node(Tag(id="go"))


def test_replace_node():
    graph = ContentGraph()
    tag = graph.add_node(Tag(id="go", count=1))
    graph.replace_node(tag.model_copy(update={"count": 5}))
    assert graph.get_collection("Tag").get_node_by_id("go").count == 5


def test_replace_unknown_node_raises():
    with pytest.raises(NodeNotFoundError):
        ContentGraph().replace_node(Tag(id="ghost"))
