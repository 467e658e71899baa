"""Per-node enrichment, run once as each node is created.

Every node goes through the same three steps in order:

1. ``assign_slug_and_date`` fills date_info and slug for any node type.
2. kind-specific enrichment picked from the node class (post, series, tag).
3. ``finalize_path`` substitutes the ``/slug`` placeholder segment.

``enrich_node`` works on a copy and returns it; the caller owns the result.
"""

import hashlib
import logging
import re
from datetime import datetime, timezone
from pathlib import PurePosixPath

from sitegen.config import get_settings
from sitegen.models.node import EPOCH, BlogPost, ContentNode, Series, Tag
from sitegen.services.placeholder_image import ensure_image
from sitegen.services.slugs import create_date_info, make_slug

logger = logging.getLogger(__name__)

# Origin paths may come from either OS (or a "a|b" style virtual path)
_ORIGIN_SPLIT_RE = re.compile(r"[/|\\]")

# "/slug" as a whole path segment only
_SLUG_PLACEHOLDER_RE = re.compile(r"/slug(?=/|$)")


def assign_slug_and_date(node: ContentNode) -> ContentNode:
    """Derive date_info from the date and make the slug URL-safe.

    An explicit slug is slugified as well; without one the slug comes from
    title, name or id, in that order.
    """
    if node.date is not None:
        node.date_info = create_date_info(node.date)
    node.slug = make_slug(node.slug, node.title, node.name, node.id)
    if not node.slug:
        # Nothing slug-worthy in slug/title/name/id (e.g. only punctuation)
        node.slug = hashlib.sha256(node.id.encode()).hexdigest()[:12]
    return node


def parse_series(origin: str, marker: str | None = None) -> str | None:
    """Find the series id encoded in an origin path.

    The first path segment starting with the series marker names the
    series, e.g. ``blog/$series-backend/intro.md`` -> ``backend``.
    """
    if marker is None:
        marker = get_settings().series_marker
    for part in _ORIGIN_SPLIT_RE.split(origin or ""):
        if part.startswith(marker):
            series = part[len(marker):]
            if series.startswith("-"):
                series = series[1:]
            return series
    return None


def enrich_blog_post(post: BlogPost, now: datetime | None = None) -> BlogPost:
    settings = get_settings()
    post.tags = post.tags or []
    post.description = post.description or ""
    post.path = f"{settings.blog_path_prefix}{post.date_info.path}{post.slug}"

    ensure_image(post, post.title or post.slug)

    if now is None:
        now = datetime.now(timezone.utc)
    post.is_future = post.date > now

    series = parse_series(post.internal.origin, settings.series_marker)
    if series is not None:
        post.series = series
    return post


def enrich_series(series: Series) -> Series:
    """Key the series by its file name and reset the aggregation fields."""
    origin = series.internal.origin
    if origin:
        series.id = PurePosixPath(origin.replace("\\", "/")).stem
    series.description = series.description or ""
    ensure_image(series, series.id)
    series.has_posts = False
    series.last_post = EPOCH
    return series


def enrich_tag(tag: Tag) -> Tag:
    # Provisional; aggregation overwrites it for referenced tags
    tag.count = 1
    return tag


def finalize_path(node: ContentNode) -> ContentNode:
    """Replace each ``/slug`` path segment with the node's real slug."""
    if node.path and node.slug:
        node.path = _SLUG_PLACEHOLDER_RE.sub(lambda _: f"/{node.slug}", node.path)
    return node


def enrich_node(node: ContentNode, now: datetime | None = None) -> ContentNode:
    """Run the full creation-time pass and return the enriched copy.

    Raises:
        InvalidDateError: If the node carries a date that cannot be parsed.
        TypeError: If the node is not a BlogPost, Series or Tag.
    """
    node = node.model_copy(deep=True)
    assign_slug_and_date(node)

    if isinstance(node, BlogPost):
        enrich_blog_post(node, now=now)
    elif isinstance(node, Series):
        enrich_series(node)
    elif isinstance(node, Tag):
        enrich_tag(node)
    else:
        raise TypeError(f"Unsupported node kind: {type(node).__name__}")

    finalize_path(node)
    logger.debug("Enriched %s %s -> %s", node.internal.type_name, node.id, node.path)
    return node
