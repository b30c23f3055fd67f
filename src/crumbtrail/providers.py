"""Interfaces the trail engine expects from its collaborators."""

from __future__ import annotations

from typing import List, Optional, Protocol

from .site.schema import Author, Post, PostType, SiteSettings, Taxonomy, Term

__all__ = [
    "ContentHierarchy",
    "MetadataStore",
    "PermalinkProvider",
    "TitleProvider",
]


class ContentHierarchy(Protocol):
    """Look-ups for posts, terms and their ancestry."""

    settings: SiteSettings

    def get_post(self, post_id: int) -> Optional[Post]: ...

    def get_post_type(self, name: str) -> Optional[PostType]: ...

    def post_type_of(self, post_id: int) -> str: ...

    def post_ancestors(self, post_id: int) -> List[int]: ...

    def get_taxonomy(self, name: str) -> Optional[Taxonomy]: ...

    def object_taxonomies(self, post_type: str) -> List[Taxonomy]: ...

    def taxonomy_post_types(self, taxonomy: str) -> List[str]: ...

    def get_term(self, term_id: int, taxonomy: str = "") -> Optional[Term]: ...

    def term_ancestors(self, term_id: int, taxonomy: str) -> List[int]: ...

    def post_terms(self, post_id: int, taxonomy: str) -> List[Term]: ...

    def get_author(self, author_id: int) -> Optional[Author]: ...


class MetadataStore(Protocol):
    """Per-(post, taxonomy) explicit primary term storage; ``0`` means unset."""

    def get_primary_term_id(self, post_id: int, taxonomy: str) -> int: ...

    def set_primary_term_id(self, post_id: int, taxonomy: str, term_id: int) -> None: ...


class PermalinkProvider(Protocol):
    """Canonical URL builders. ``bare_*`` builders never paginate."""

    def bare_front_page_url(self) -> str: ...

    def bare_singular_url(self, post_id: int) -> str: ...

    def bare_term_url(self, term_id: int, taxonomy: str) -> str: ...

    def bare_post_type_archive_url(self, post_type: str) -> str: ...

    def post_type_archive_url(self, post_type: str, page: int = 1) -> str: ...

    def bare_author_url(self, author_id: int) -> str: ...

    def author_url(self, author_id: int, page: int = 1) -> str: ...

    def bare_date_url(self, year: int, month: int = 0, day: int = 0) -> str: ...

    def bare_search_url(self, search_query: str) -> str: ...

    def search_url(self, search_query: str, page: int = 1) -> str: ...


class TitleProvider(Protocol):
    """Display names for resources."""

    def front_page_title(self) -> str: ...

    def post_title(self, post_id: int) -> str: ...

    def term_title(self, term_id: int, taxonomy: str) -> str: ...

    def post_type_archive_title(self, post_type: str) -> str: ...

    def author_title(self, author_id: int) -> str: ...

    def date_title(self, year: int, month: int = 0, day: int = 0) -> str: ...

    def search_title(self, search_query: str) -> str: ...

    def not_found_title(self) -> str: ...
