"""Shared fixtures for sitegen tests."""

import pytest


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset module-level caches between tests."""
    yield

    from sitegen.config import get_settings

    get_settings.cache_clear()


@pytest.fixture
def mock_settings(monkeypatch, tmp_path):
    """Provide a Settings object whose directories live under tmp_path."""
    from sitegen.config import Settings, get_settings

    test_settings = Settings(
        content_dir=str(tmp_path / "content"),
        static_dir=str(tmp_path / "static"),
        generated_images_dir="images/generated",
        pages_manifest="pages.json",
        blog_path_prefix="/blog",
        series_marker="$series",
    )

    get_settings.cache_clear()
    monkeypatch.setattr("sitegen.config.get_settings", lambda: test_settings)

    # Patch get_settings in every module that imports it directly
    # (from sitegen.config import get_settings creates a local binding that
    # the sitegen.config monkeypatch above does not affect)
    for mod_path in [
        "sitegen.services.placeholder_image",
        "sitegen.services.enrichment",
        "sitegen.services.loader",
        "sitegen.services.pages",
        "sitegen.services.build",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


@pytest.fixture
def write_content(tmp_path):
    """Write a Markdown file under the test content dir and return its path."""

    def _write(rel_path: str, text: str):
        path = tmp_path / "content" / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    return _write
