"""Run the site content build from the command line.

Usage:
    python -m scripts.build                 # Build from CONTENT_DIR (default: content/)
    python -m scripts.build path/to/content # Build from another content directory
"""

import logging
import sys

from sitegen.services.aggregation import MissingTagError
from sitegen.services.build import run_build
from sitegen.services.loader import ContentLoadError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> int:
    content_dir = sys.argv[1] if len(sys.argv) > 1 else None

    print("Starting site build...")
    try:
        stats = run_build(content_dir)
    except (ContentLoadError, MissingTagError) as e:
        logger.error("Build failed: %s", e)
        return 1

    print("\nBuild complete:")
    print(f"  Posts:    {stats.posts}")
    print(f"  Future:   {stats.future_posts}")
    print(f"  Series:   {stats.series}")
    print(f"  Tags:     {stats.tags}")
    print(f"  Pages:    {stats.pages}")
    print(f"  Images:   {stats.images}")

    if stats.posts == 0:
        print("ERROR: No blog posts found")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
