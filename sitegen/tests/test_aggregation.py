"""Tests for the cross-collection aggregation pass."""

import logging
from datetime import datetime, timezone

import pytest

from sitegen.models.node import BlogPost, NodeInternal, Series, Tag
from sitegen.services.aggregation import (
    MissingTagError,
    count_tags,
    run_aggregation,
)
from sitegen.services.content_graph import ContentGraph
from sitegen.services.enrichment import enrich_node

NOW = datetime(2026, 10, 19, tzinfo=timezone.utc)


def _post(
    post_id: str, tags=None, series_dir: str | None = None, day: int = 1
) -> BlogPost:
    origin = f"blog/{post_id}.md"
    if series_dir:
        origin = f"blog/$series-{series_dir}/{post_id}.md"
    return BlogPost(
        id=post_id,
        title=f"Post {post_id}",
        date=datetime(2024, 3, day, tzinfo=timezone.utc),
        tags=tags,
        internal=NodeInternal(type_name="BlogPost", origin=origin),
    )


def _series(name: str) -> Series:
    return Series(
        id="generated",
        title=name.title(),
        internal=NodeInternal(type_name="Series", origin=f"series/{name}.md"),
    )


def _graph(*nodes) -> ContentGraph:
    graph = ContentGraph()
    for node in nodes:
        graph.add_node(enrich_node(node, now=NOW))
    return graph


class TestTagCounts:
    def test_tag_count_scenario(self, mock_settings):
        graph = _graph(
            _post("a", ["go", "rust"]),
            _post("b", ["go"]),
            _post("c", ["rust", "go"]),
            Tag(id="go"),
            Tag(id="rust"),
        )
        run_aggregation(graph)
        tags = graph.get_collection("Tag")
        assert tags.get_node_by_id("go").count == 3
        assert tags.get_node_by_id("rust").count == 2

    def test_duplicate_tag_on_one_post_counts_once(self, mock_settings):
        graph = _graph(_post("a", ["go", "go"]), Tag(id="go"))
        assert count_tags(graph)["go"] == 1

    def test_missing_tag_is_fatal(self, mock_settings):
        graph = _graph(_post("a", ["go", "elixir"]), Tag(id="go"))
        with pytest.raises(MissingTagError) as exc_info:
            run_aggregation(graph)
        assert exc_info.value.tag_id == "elixir"
        assert exc_info.value.post_ids == ["a"]

    def test_unreferenced_tag_keeps_provisional_count(self, mock_settings, caplog):
        graph = _graph(_post("a", ["go"]), Tag(id="go"), Tag(id="cobol"))
        with caplog.at_level(logging.WARNING, logger="sitegen.services.aggregation"):
            stats = run_aggregation(graph)
        assert graph.get_collection("Tag").get_node_by_id("cobol").count == 1
        assert stats.unreferenced_tags == 1
        assert "cobol" in caplog.text

    def test_posts_without_tags(self, mock_settings):
        graph = _graph(_post("a"), _post("b", []))
        stats = run_aggregation(graph)
        assert stats.tags_counted == 0


class TestSeriesAggregation:
    def test_has_posts_and_last_post(self, mock_settings):
        graph = _graph(
            _post("a", series_dir="backend", day=2),
            _post("b", series_dir="backend", day=9),
            _post("c", series_dir="frontend", day=5),
            _post("d", day=20),
            _series("backend"),
            _series("frontend"),
            _series("empty"),
        )
        stats = run_aggregation(graph)
        series = graph.get_collection("Series")

        backend = series.get_node_by_id("backend")
        assert backend.has_posts is True
        assert backend.last_post == datetime(2024, 3, 9, tzinfo=timezone.utc)

        frontend = series.get_node_by_id("frontend")
        assert frontend.last_post == datetime(2024, 3, 5, tzinfo=timezone.utc)

        empty = series.get_node_by_id("empty")
        assert empty.has_posts is False
        assert empty.last_post is None

        assert stats.series_with_posts == 2

    def test_stats_to_dict(self, mock_settings):
        stats = run_aggregation(_graph(_series("solo")))
        assert stats.to_dict() == {
            "series_with_posts": 0,
            "tags_counted": 0,
            "unreferenced_tags": 0,
        }
