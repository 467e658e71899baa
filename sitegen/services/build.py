"""Site build orchestrator: load, enrich, aggregate, then pages and images."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from sitegen.config import get_settings
from sitegen.models.node import BlogPost, Series, Tag
from sitegen.models.page import PageDeclaration
from sitegen.services.aggregation import run_aggregation
from sitegen.services.content_graph import ContentGraph
from sitegen.services.enrichment import enrich_node
from sitegen.services.loader import load_content
from sitegen.services.pages import create_pages, pregenerate_page_images

logger = logging.getLogger(__name__)


@dataclass
class BuildStats:
    """Stats from a build run."""

    posts: int
    series: int
    tags: int
    pages: int
    future_posts: int
    images: int

    def to_dict(self) -> dict:
        return {
            "posts": self.posts,
            "series": self.series,
            "tags": self.tags,
            "pages": self.pages,
            "future_posts": self.future_posts,
            "images": self.images,
        }


def build_graph(
    content_dir: str | None = None, now: datetime | None = None
) -> ContentGraph:
    """Load content and run the per-node and aggregation passes."""
    if now is None:
        now = datetime.now(timezone.utc)

    graph = ContentGraph()
    for node in load_content(content_dir):
        graph.add_node(enrich_node(node, now=now))

    agg = run_aggregation(graph)
    logger.info(
        "Aggregated: %d series with posts, %d tags counted",
        agg.series_with_posts,
        agg.tags_counted,
    )
    return graph


def write_pages_manifest(pages: list[PageDeclaration]) -> Path:
    """Write the page declarations as JSON under the static dir."""
    settings = get_settings()
    target = Path(settings.static_dir) / settings.pages_manifest
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        json.dumps([p.model_dump(mode="json") for p in pages], indent=2) + "\n"
    )
    return target


def run_build(
    content_dir: str | None = None, now: datetime | None = None
) -> BuildStats:
    """Run a full build: load -> enrich -> aggregate -> pages -> images.

    Raises:
        ContentLoadError: If a content file is malformed.
        MissingTagError: If a post references a tag that does not exist.
    """
    logger.info("Starting site build")
    graph = build_graph(content_dir, now=now)

    pages = create_pages(graph)
    images = pregenerate_page_images(pages)
    manifest = write_pages_manifest(pages)
    logger.info("Wrote %d page declarations to %s", len(pages), manifest)

    posts = graph.get_collection(BlogPost.TYPE_NAME).data()
    stats = BuildStats(
        posts=len(posts),
        series=len(graph.get_collection(Series.TYPE_NAME)),
        tags=len(graph.get_collection(Tag.TYPE_NAME)),
        pages=len(pages),
        future_posts=sum(1 for p in posts if p.is_future),
        images=len(set(images)),
    )
    logger.info(
        "Build complete: %d posts (%d future), %d series, %d tags, %d pages",
        stats.posts,
        stats.future_posts,
        stats.series,
        stats.tags,
        stats.pages,
    )
    return stats
