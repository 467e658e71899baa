"""Build configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Build settings loaded from environment."""

    # Content sources (Markdown with YAML front matter)
    content_dir: str = "content"

    # Static output dir for generated images and the pages manifest
    static_dir: str = "static"
    generated_images_dir: str = "images/generated"
    pages_manifest: str = "pages.json"

    # URLs
    blog_path_prefix: str = "/blog"

    # Directory prefix marking which series a post belongs to ($series-backend/)
    series_marker: str = "$series"

    # Opt-in: create Tag nodes for tag ids referenced by posts but lacking a
    # tag file. Off, a dangling tag reference fails the build.
    create_missing_tags: bool = False

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
