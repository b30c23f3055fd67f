"""Typed records describing the site a trail is built for."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PERMALINK_TAGS = (
    "%year%",
    "%monthnum%",
    "%day%",
    "%hour%",
    "%minute%",
    "%second%",
    "%post_id%",
    "%postname%",
    "%category%",
    "%author%",
)
PERMALINK_TAG_PATTERN = re.compile(r"%[a-z_]+%")


class RecordModel(BaseModel):
    """Base Pydantic model with strict field handling."""

    model_config = ConfigDict(extra="forbid", frozen=False)


class SiteSettings(RecordModel):
    """Site-wide options that influence classification and permalinks."""

    name: str = ""
    home_url: str = "http://localhost"
    show_on_front: Literal["posts", "page"] = "posts"
    page_on_front: int = 0
    page_for_posts: int = 0
    permalink_structure: str = "/%postname%/"
    pagination_base: str = "page"
    url_scheme: Literal["automatic", "http", "https"] = "automatic"

    @field_validator("permalink_structure")
    @classmethod
    def _known_tags(cls, value: str) -> str:
        unknown = sorted(set(PERMALINK_TAG_PATTERN.findall(value)) - set(PERMALINK_TAGS))
        if unknown:
            raise ValueError(f"Unsupported permalink tags: {', '.join(unknown)}")
        return value

    @property
    def pretty_permalinks(self) -> bool:
        return self.permalink_structure != ""

    @property
    def trailing_slash(self) -> bool:
        return self.permalink_structure.endswith("/")


class PostType(RecordModel):
    """Registered content type."""

    name: str
    label: str = ""
    hierarchical: bool = False
    has_archive: bool = False
    archive_slug: str = ""
    rewrite_slug: str = ""
    public: bool = True
    supports_title: bool = True


class Taxonomy(RecordModel):
    """Registered taxonomy; ``object_types`` lists the post types it applies to."""

    name: str
    label: str = ""
    hierarchical: bool = False
    public: bool = True
    rewrite_slug: str = ""
    object_types: List[str] = Field(default_factory=list)


class Term(RecordModel):
    """Single taxonomy term."""

    id: int
    taxonomy: str
    name: str = ""
    slug: str = ""
    parent: int = 0


class Post(RecordModel):
    """Single piece of content.

    ``terms`` maps taxonomy names to assigned term ids, in assignment order.
    ``meta`` carries arbitrary metadata; explicit primary terms are stored as
    ``_primary_term_<taxonomy>``.
    ``author`` and ``date`` feed the matching permalink structure tags.
    """

    id: int
    type: str = "post"
    title: str = ""
    slug: str = ""
    parent: int = 0
    author: int = 0
    date: Optional[datetime] = None
    content: str = ""
    terms: Dict[str, List[int]] = Field(default_factory=dict)
    meta: Dict[str, Any] = Field(default_factory=dict)


class Author(RecordModel):
    """Content author."""

    id: int
    display_name: str = ""
    nicename: str = ""


class SiteDocument(RecordModel):
    """Top-level shape of a site description file."""

    settings: SiteSettings = Field(default_factory=SiteSettings)
    post_types: List[PostType] = Field(default_factory=list)
    taxonomies: List[Taxonomy] = Field(default_factory=list)
    terms: List[Term] = Field(default_factory=list)
    posts: List[Post] = Field(default_factory=list)
    authors: List[Author] = Field(default_factory=list)
    request: Dict[str, Any] | None = None


def primary_term_meta_key(taxonomy: str) -> str:
    """Return the metadata key holding the explicit primary term for ``taxonomy``."""
    return f"_primary_term_{taxonomy}"
