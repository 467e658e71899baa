"""Markdown content loader: turns front matter files into content nodes.

Layout under the content directory::

    blog/**/*.md      BlogPost  (a "$series-<id>" directory assigns a series)
    series/*.md       Series    (the file name is the series id)
    tags/*.md         Tag       (the file name is the tag id)
"""

import hashlib
import logging
from pathlib import Path
from typing import Any

import frontmatter
import yaml
from pydantic import ValidationError

from sitegen.config import get_settings
from sitegen.models.node import BlogPost, ContentNode, Series, Tag

logger = logging.getLogger(__name__)


class ContentLoadError(Exception):
    """Raised when a content file cannot be turned into a node."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path


def _generate_node_id(origin: str) -> str:
    """Generate a stable node ID from its origin path."""
    return hashlib.sha256(origin.encode()).hexdigest()[:16]


def _normalize_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Coerce YAML scalars that commonly come back as non-strings."""
    for key in ("id", "title", "name", "slug", "description"):
        if metadata.get(key) is not None:
            metadata[key] = str(metadata[key])
    tags = metadata.get("tags")
    if isinstance(tags, str):
        metadata["tags"] = [tags]
    elif isinstance(tags, list):
        metadata["tags"] = [str(t) for t in tags]
    return metadata


def load_node(node_cls: type[ContentNode], path: Path, root: Path) -> ContentNode:
    """Parse one Markdown file into a node of *node_cls*.

    Raises:
        ContentLoadError: If the front matter is not valid YAML or does not
            validate against the node model (e.g. a malformed date).
    """
    origin = path.relative_to(root).as_posix()
    try:
        post = frontmatter.load(str(path))
    except yaml.YAMLError as exc:
        raise ContentLoadError(path, f"invalid front matter: {exc}") from exc

    metadata = _normalize_metadata(dict(post.metadata))
    if not metadata.get("id"):
        metadata["id"] = (
            _generate_node_id(origin) if node_cls is BlogPost else path.stem
        )
    metadata["content"] = post.content
    metadata["internal"] = {"type_name": node_cls.TYPE_NAME, "origin": origin}

    try:
        return node_cls.model_validate(metadata)
    except ValidationError as exc:
        raise ContentLoadError(path, str(exc)) from exc


def _load_dir(
    node_cls: type[ContentNode], directory: Path, root: Path, pattern: str
) -> list[ContentNode]:
    if not directory.is_dir():
        logger.info("No %s directory at %s", node_cls.TYPE_NAME, directory)
        return []
    return [
        load_node(node_cls, path, root) for path in sorted(directory.glob(pattern))
    ]


def _create_missing_tags(
    posts: list[ContentNode], tags: list[ContentNode]
) -> list[Tag]:
    """Build Tag nodes for tag ids that posts reference but no tag file defines."""
    known = {t.id for t in tags}
    referencing: dict[str, list[str]] = {}
    for post in posts:
        for tag_id in dict.fromkeys(post.tags or []):
            if tag_id not in known:
                referencing.setdefault(tag_id, []).append(post.internal.origin)

    created = []
    for tag_id, origins in referencing.items():
        logger.warning(
            "Creating tag %r with no tag file, referenced by: %s",
            tag_id,
            ", ".join(origins),
        )
        created.append(Tag(id=tag_id, title=tag_id))
    return created


def load_content(content_dir: str | None = None) -> list[ContentNode]:
    """Load every post, series and tag file under the content directory.

    Tag nodes are created for referenced tag ids without a tag file only
    when ``create_missing_tags`` is enabled; otherwise such references
    surface as MissingTagError during aggregation.
    """
    settings = get_settings()
    root = Path(content_dir or settings.content_dir)

    posts = _load_dir(BlogPost, root / "blog", root, "**/*.md")
    series = _load_dir(Series, root / "series", root, "*.md")
    tags = _load_dir(Tag, root / "tags", root, "*.md")
    logger.info(
        "Loaded %d posts, %d series, %d tags from %s",
        len(posts),
        len(series),
        len(tags),
        root,
    )

    if settings.create_missing_tags:
        tags.extend(_create_missing_tags(posts, tags))

    return [*posts, *series, *tags]
