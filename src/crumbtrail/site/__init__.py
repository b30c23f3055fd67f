"""Site records and the providers built on top of them."""

from .graph import SiteDataError, SiteGraph
from .schema import Author, Post, PostType, SiteDocument, SiteSettings, Taxonomy, Term
from .store import PrimaryTermStore

__all__ = [
    "Author",
    "Post",
    "PostType",
    "PrimaryTermStore",
    "SiteDataError",
    "SiteDocument",
    "SiteGraph",
    "SiteSettings",
    "Taxonomy",
    "Term",
]
