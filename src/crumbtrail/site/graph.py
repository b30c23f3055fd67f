"""In-memory content hierarchy loaded from a site description."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .schema import (
    Author,
    Post,
    PostType,
    SiteDocument,
    SiteSettings,
    Taxonomy,
    Term,
    primary_term_meta_key,
)

__all__ = ["BUILTIN_POST_TYPES", "BUILTIN_TAXONOMIES", "SiteDataError", "SiteGraph"]

LOGGER = logging.getLogger(__name__)

BUILTIN_POST_TYPES = (
    PostType(name="post", label="Posts"),
    PostType(name="page", label="Pages", hierarchical=True),
    PostType(name="attachment", label="Media"),
)

BUILTIN_TAXONOMIES = (
    Taxonomy(
        name="category",
        label="Categories",
        hierarchical=True,
        rewrite_slug="category",
        object_types=["post"],
    ),
    Taxonomy(name="post_tag", label="Tags", rewrite_slug="tag", object_types=["post"]),
)


class SiteDataError(ValueError):
    """Raised when a site description is malformed."""


def _index_unique(records: List[Any], kind: str) -> Dict[int, Any]:
    index: Dict[int, Any] = {}
    for record in records:
        if record.id in index:
            raise SiteDataError(f"Duplicate {kind} id {record.id}")
        index[record.id] = record
    return index


class SiteGraph:
    """Content-hierarchy and metadata provider backed by plain records.

    Built-in post types and taxonomies are registered first; declared ones
    with the same name replace them in place, others are appended in
    declaration order. That registration order is the listing order used for
    taxonomy lookups.
    """

    def __init__(self, document: SiteDocument | None = None) -> None:
        document = document or SiteDocument()
        self.settings: SiteSettings = document.settings
        self.request: Dict[str, Any] | None = document.request

        self._post_types: Dict[str, PostType] = {item.name: item for item in BUILTIN_POST_TYPES}
        for post_type in document.post_types:
            self._post_types[post_type.name] = post_type

        self._taxonomies: Dict[str, Taxonomy] = {item.name: item for item in BUILTIN_TAXONOMIES}
        for taxonomy in document.taxonomies:
            self._taxonomies[taxonomy.name] = taxonomy

        self._terms: Dict[int, Term] = _index_unique(document.terms, "term")
        self._posts: Dict[int, Post] = _index_unique(document.posts, "post")
        self._authors: Dict[int, Author] = _index_unique(document.authors, "author")
        self._validate()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SiteGraph":
        try:
            document = SiteDocument.model_validate(dict(data))
        except ValidationError as error:
            raise SiteDataError(f"Site description did not validate: {error}") from error
        return cls(document)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "SiteGraph":
        site_path = Path(path)
        try:
            with site_path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as error:
            raise SiteDataError(f"Failed to read site description {site_path}: {error}") from error
        if not isinstance(data, Mapping):
            raise SiteDataError(f"Expected mapping at top level of {site_path}")
        return cls.from_mapping(data)

    def _validate(self) -> None:
        for term in self._terms.values():
            if term.taxonomy not in self._taxonomies:
                raise SiteDataError(f"Term {term.id} uses unknown taxonomy '{term.taxonomy}'")
            if term.parent and term.parent not in self._terms:
                LOGGER.warning("Term %s references missing parent %s", term.id, term.parent)
        for post in self._posts.values():
            if post.type not in self._post_types:
                raise SiteDataError(f"Post {post.id} uses unknown post type '{post.type}'")
            if post.parent and post.parent not in self._posts:
                LOGGER.warning("Post %s references missing parent %s", post.id, post.parent)

    # Posts ---------------------------------------------------------------------------
    def get_post(self, post_id: int) -> Optional[Post]:
        return self._posts.get(post_id)

    def get_post_type(self, name: str) -> Optional[PostType]:
        return self._post_types.get(name)

    def post_type_of(self, post_id: int) -> str:
        post = self._posts.get(post_id)
        return post.type if post else ""

    def post_ancestors(self, post_id: int) -> List[int]:
        """Return the structural ancestors of a post, nearest parent first."""
        post = self._posts.get(post_id)
        if post is None:
            return []
        ancestors: List[int] = []
        parent_id = post.parent
        while parent_id and parent_id != post_id and parent_id not in ancestors:
            parent = self._posts.get(parent_id)
            if parent is None:
                break
            ancestors.append(parent_id)
            parent_id = parent.parent
        return ancestors

    # Taxonomies ----------------------------------------------------------------------
    def get_taxonomy(self, name: str) -> Optional[Taxonomy]:
        return self._taxonomies.get(name)

    def object_taxonomies(self, post_type: str) -> List[Taxonomy]:
        """Return taxonomies attached to ``post_type`` in registration order."""
        return [
            taxonomy
            for taxonomy in self._taxonomies.values()
            if post_type in taxonomy.object_types
        ]

    def taxonomy_post_types(self, taxonomy: str) -> List[str]:
        record = self._taxonomies.get(taxonomy)
        return list(record.object_types) if record else []

    # Terms ---------------------------------------------------------------------------
    def get_term(self, term_id: int, taxonomy: str = "") -> Optional[Term]:
        term = self._terms.get(term_id)
        if term is None:
            return None
        if taxonomy and term.taxonomy != taxonomy:
            return None
        return term

    def term_ancestors(self, term_id: int, taxonomy: str) -> List[int]:
        """Return the ancestors of a term, nearest parent first."""
        term = self.get_term(term_id, taxonomy)
        if term is None:
            return []
        ancestors: List[int] = []
        parent_id = term.parent
        while parent_id and parent_id != term_id and parent_id not in ancestors:
            parent = self.get_term(parent_id, taxonomy)
            if parent is None:
                break
            ancestors.append(parent_id)
            parent_id = parent.parent
        return ancestors

    def post_terms(self, post_id: int, taxonomy: str) -> List[Term]:
        """Return the terms assigned to a post in ``taxonomy``, in assignment order."""
        post = self._posts.get(post_id)
        if post is None:
            return []
        terms: List[Term] = []
        for term_id in post.terms.get(taxonomy, []):
            term = self.get_term(term_id, taxonomy)
            if term is not None:
                terms.append(term)
        return terms

    # Authors -------------------------------------------------------------------------
    def get_author(self, author_id: int) -> Optional[Author]:
        return self._authors.get(author_id)

    # Metadata ------------------------------------------------------------------------
    def get_primary_term_id(self, post_id: int, taxonomy: str) -> int:
        post = self._posts.get(post_id)
        if post is None:
            return 0
        value = post.meta.get(primary_term_meta_key(taxonomy), 0)
        try:
            return int(value or 0)
        except (TypeError, ValueError):
            return 0

    def set_primary_term_id(self, post_id: int, taxonomy: str, term_id: int) -> None:
        post = self._posts.get(post_id)
        if post is None:
            raise KeyError(f"Unknown post {post_id}")
        post.meta[primary_term_meta_key(taxonomy)] = int(term_id)
