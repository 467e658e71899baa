"""Page declaration models."""

from typing import Any

from pydantic import BaseModel


class PageDeclaration(BaseModel):
    """A route the site renders: URL path, template and variables."""

    path: str
    component: str
    context: dict[str, Any] = {}
    query_variables: dict[str, Any] = {}
