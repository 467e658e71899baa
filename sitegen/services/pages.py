"""Page declarations and page image pre-generation."""

import logging

from sitegen.config import get_settings
from sitegen.models.node import BlogPost
from sitegen.models.page import PageDeclaration
from sitegen.services.content_graph import ContentGraph
from sitegen.services.placeholder_image import save_image

logger = logging.getLogger(__name__)

POST_TEMPLATE = "./src/templates/blog/Post.vue"

# Listing pages rendered once each, in declaration order
LISTING_PAGES = [
    ("/series/", "./src/templates/series/Summary.vue"),
    ("/blog/", "./src/templates/blog/List.vue"),
    ("/tags/", "./src/templates/tags/List.vue"),
]


def published_posts(graph: ContentGraph) -> list[BlogPost]:
    """Posts that are not future-dated, oldest first."""
    posts = [
        p for p in graph.get_collection(BlogPost.TYPE_NAME).data() if not p.is_future
    ]
    return sorted(posts, key=lambda p: p.date)


def create_pages(graph: ContentGraph) -> list[PageDeclaration]:
    """Declare one page per published post plus the listing pages.

    Post pages carry the ids of their chronological neighbours so the
    template can link prev/next.
    """
    settings = get_settings()
    posts = published_posts(graph)
    pages: list[PageDeclaration] = []

    for i, post in enumerate(posts):
        prev_post = posts[i - 1] if i > 0 else None
        next_post = posts[i + 1] if i + 1 < len(posts) else None
        path = f"{settings.blog_path_prefix}{post.date_info.path}{post.slug}"
        logger.debug("%s %s", post.date.isoformat(), path)
        pages.append(
            PageDeclaration(
                path=path,
                component=POST_TEMPLATE,
                query_variables={
                    "id": post.id,
                    "prev": prev_post.id if prev_post else None,
                    "next": next_post.id if next_post else None,
                },
            )
        )

    for path, component in LISTING_PAGES:
        pages.append(PageDeclaration(path=path, component=component))

    logger.info("Declared %d pages (%d posts)", len(pages), len(posts))
    return pages


def pregenerate_page_images(pages: list[PageDeclaration]) -> list[str]:
    """Write a placeholder image for every page, keyed by its path.

    Returns the image URL paths in page order.
    """
    return [save_image(page.path) for page in pages]
