"""Cross-collection pass, run once after every node is loaded."""

import logging
from collections import Counter
from dataclasses import dataclass

from sitegen.models.node import BlogPost, Series, Tag
from sitegen.services.content_graph import ContentGraph, NodeNotFoundError

logger = logging.getLogger(__name__)


class MissingTagError(LookupError):
    """A post references a tag id that has no Tag node."""

    def __init__(self, tag_id: str, post_ids: list[str]) -> None:
        super().__init__(
            f"Tag {tag_id!r} referenced by {len(post_ids)} post(s) "
            f"({', '.join(post_ids[:5])}) does not exist"
        )
        self.tag_id = tag_id
        self.post_ids = post_ids


@dataclass
class AggregationStats:
    """Stats from an aggregation pass."""

    series_with_posts: int
    tags_counted: int
    unreferenced_tags: int

    def to_dict(self) -> dict:
        return {
            "series_with_posts": self.series_with_posts,
            "tags_counted": self.tags_counted,
            "unreferenced_tags": self.unreferenced_tags,
        }


def aggregate_series(graph: ContentGraph) -> int:
    """Set has_posts and last_post on every series.

    Returns the number of series with at least one post.
    """
    posts: list[BlogPost] = graph.get_collection(BlogPost.TYPE_NAME).data()
    with_posts = 0
    for series in graph.get_collection(Series.TYPE_NAME).data():
        dates = [p.date for p in posts if p.series == series.id]
        updated = series.model_copy(
            update={
                "has_posts": bool(dates),
                "last_post": max(dates) if dates else None,
            }
        )
        graph.replace_node(updated)
        if dates:
            with_posts += 1
    return with_posts


def count_tags(graph: ContentGraph) -> Counter[str]:
    """Count how many posts reference each tag id."""
    counts: Counter[str] = Counter()
    for post in graph.get_collection(BlogPost.TYPE_NAME).data():
        # A tag listed twice on one post still counts that post once
        for tag_id in dict.fromkeys(post.tags or []):
            counts[tag_id] += 1
    return counts


def apply_tag_counts(graph: ContentGraph, counts: Counter[str]) -> None:
    """Write counts back onto Tag nodes.

    Raises:
        MissingTagError: If a counted tag id has no Tag node.
    """
    tags = graph.get_collection(Tag.TYPE_NAME)
    for tag_id, count in counts.items():
        try:
            tag = tags.get_node_by_id(tag_id)
        except NodeNotFoundError as exc:
            post_ids = [
                p.id
                for p in graph.get_collection(BlogPost.TYPE_NAME).data()
                if tag_id in (p.tags or [])
            ]
            raise MissingTagError(tag_id, post_ids) from exc
        graph.replace_node(tag.model_copy(update={"count": count}))


def run_aggregation(graph: ContentGraph) -> AggregationStats:
    """Join posts against series and tags.

    Raises:
        MissingTagError: On a dangling tag reference; nothing is swallowed.
    """
    series_with_posts = aggregate_series(graph)

    counts = count_tags(graph)
    logger.info("Tag counts: %s", dict(counts))
    apply_tag_counts(graph, counts)

    # Never-referenced tags keep the provisional count from creation time
    unreferenced = [
        t.id for t in graph.get_collection(Tag.TYPE_NAME).data() if t.id not in counts
    ]
    if unreferenced:
        logger.warning(
            "%d tag(s) not referenced by any post keep count=1: %s",
            len(unreferenced),
            ", ".join(unreferenced),
        )

    return AggregationStats(
        series_with_posts=series_with_posts,
        tags_counted=len(counts),
        unreferenced_tags=len(unreferenced),
    )
