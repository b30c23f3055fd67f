"""Canonical URL construction for site resources.

``bare_*`` builders return a resource's canonical URL without any pagination.
The paginated counterparts accept the page number to link to and fall back to
the bare URL for the first page. Unknown resources produce an empty string.
"""

from __future__ import annotations

from typing import Dict, List
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from .memo import MemoStore
from .providers import ContentHierarchy
from .site.schema import PERMALINK_TAG_PATTERN, Post, SiteSettings

__all__ = [
    "SitePermalinks",
    "trailingslashit",
    "untrailingslashit",
]

DEFAULT_CATEGORY_SLUG = "uncategorized"
DATE_TAG_FORMATS: Dict[str, str] = {
    "%year%": "%Y",
    "%monthnum%": "%m",
    "%day%": "%d",
    "%hour%": "%H",
    "%minute%": "%M",
    "%second%": "%S",
}


def trailingslashit(value: str) -> str:
    return untrailingslashit(value) + "/"


def untrailingslashit(value: str) -> str:
    return value.rstrip("/\\")


class SitePermalinks:
    """Permalink provider for a ``ContentHierarchy`` and its settings."""

    def __init__(self, site: ContentHierarchy) -> None:
        self._site = site
        self._static = MemoStore()

    @property
    def settings(self) -> SiteSettings:
        return self._site.settings

    # Helpers ---------------------------------------------------------------------------
    def _home(self) -> str:
        return untrailingslashit(self.settings.home_url)

    def user_trailingslashit(self, path: str) -> str:
        """Apply the permalink structure's trailing-slash convention."""
        if self.settings.trailing_slash:
            return trailingslashit(path)
        return untrailingslashit(path)

    def _pretty(self, *segments: str) -> str:
        path = "/".join(quote(segment.strip("/"), safe="") for segment in segments if segment)
        return self.user_trailingslashit(f"{self._home()}/{path}")

    def _plain(self, **query: object) -> str:
        return f"{trailingslashit(self._home())}?{urlencode(query)}"

    def preferred_scheme(self) -> str:
        scheme = self.settings.url_scheme
        if scheme == "automatic":
            return urlsplit(self.settings.home_url).scheme or "http"
        return scheme

    def set_preferred_url_scheme(self, url: str) -> str:
        if not url:
            return ""
        parts = urlsplit(url)
        if not parts.scheme:
            return url
        return urlunsplit(parts._replace(scheme=self.preferred_scheme()))

    def add_pagination_to_url(self, url: str, page: int, *, use_base: bool = True) -> str:
        """Return ``url`` pointing at ``page``.

        ``use_base`` selects archive-style pagination (``/page/N``, ``paged=N``)
        over content-style pagination (``/N``, ``page=N``).
        """
        if not url or page < 2:
            return url
        parts = urlsplit(url)
        if self.settings.pretty_permalinks:
            if use_base:
                suffix = f"{self.settings.pagination_base}/{page}"
            else:
                suffix = str(page)
            path = self.user_trailingslashit(trailingslashit(parts.path) + suffix)
            return urlunsplit(parts._replace(path=path))
        key = "paged" if use_base else "page"
        query = [(name, value) for name, value in parse_qsl(parts.query) if name != key]
        query.append((key, str(page)))
        return urlunsplit(parts._replace(query=urlencode(query)))

    # Front page ------------------------------------------------------------------------
    def bare_front_page_url(self) -> str:
        return self._static.remember(
            "front_page_url",
            lambda: self.slash_front_page_url(self.set_preferred_url_scheme(self.settings.home_url)),
        )

    def slash_front_page_url(self, url: str) -> str:
        parts = urlsplit(url)
        if parts.query:
            # Left alone: the query was likely added by a language switcher.
            return url
        if parts.path and parts.path != "/":
            path = self.user_trailingslashit(parts.path)
        else:
            path = "/"
        return urlunsplit(parts._replace(path=path))

    # Singular --------------------------------------------------------------------------
    def bare_singular_url(self, post_id: int) -> str:
        post = self._site.get_post(post_id)
        if post is None:
            return ""
        settings = self.settings
        if settings.show_on_front == "page" and settings.page_on_front == post.id:
            return self.bare_front_page_url()

        post_type = self._site.get_post_type(post.type)
        if not settings.pretty_permalinks or post.type == "attachment":
            if post.type == "post":
                url = self._plain(p=post.id)
            elif post.type == "page":
                url = self._plain(page_id=post.id)
            elif post.type == "attachment":
                url = self._plain(attachment_id=post.id)
            else:
                url = self._plain(post_type=post.type, p=post.id)
            return self.set_preferred_url_scheme(url)

        slug = post.slug or str(post.id)
        if post.type == "post":
            structure = settings.permalink_structure.strip("/")
            path = PERMALINK_TAG_PATTERN.sub(
                lambda match: self._tag_value(match.group(0), post), structure
            )
            return self.set_preferred_url_scheme(self._pretty(*path.split("/")))

        segments: List[str] = []
        if post.type != "page" and post_type is not None:
            segments.append(post_type.rewrite_slug or post_type.name)
        if post_type is not None and post_type.hierarchical:
            for ancestor_id in reversed(self._site.post_ancestors(post.id)):
                ancestor = self._site.get_post(ancestor_id)
                if ancestor is not None:
                    segments.append(ancestor.slug or str(ancestor.id))
        segments.append(slug)
        return self.set_preferred_url_scheme(self._pretty(*segments))

    def _tag_value(self, tag: str, post: Post) -> str:
        """Return the path text a permalink structure tag expands to for ``post``."""
        if tag == "%postname%":
            return post.slug or str(post.id)
        if tag == "%post_id%":
            return str(post.id)
        if tag == "%category%":
            return self._category_path(post)
        if tag == "%author%":
            author = self._site.get_author(post.author)
            return author.nicename if author and author.nicename else ""
        if post.date is None:
            return ""
        return post.date.strftime(DATE_TAG_FORMATS[tag])

    def _category_path(self, post: Post) -> str:
        # The lowest-id category and its ancestors, root first.
        categories = self._site.post_terms(post.id, "category")
        if not categories:
            return DEFAULT_CATEGORY_SLUG
        category = min(categories, key=lambda term: term.id)
        slugs: List[str] = []
        for ancestor_id in reversed(self._site.term_ancestors(category.id, "category")):
            ancestor = self._site.get_term(ancestor_id, "category")
            if ancestor is not None:
                slugs.append(ancestor.slug or str(ancestor.id))
        slugs.append(category.slug or str(category.id))
        return "/".join(slugs)

    # Terms -----------------------------------------------------------------------------
    def bare_term_url(self, term_id: int, taxonomy: str) -> str:
        term = self._site.get_term(term_id, taxonomy)
        if term is None:
            return ""
        taxonomy = term.taxonomy
        if not self.settings.pretty_permalinks:
            if taxonomy == "category":
                url = self._plain(cat=term.id)
            elif taxonomy == "post_tag":
                url = self._plain(tag=term.slug or term.id)
            else:
                url = self._plain(**{taxonomy: term.slug or term.id})
            return self.set_preferred_url_scheme(url)

        record = self._site.get_taxonomy(taxonomy)
        segments = [record.rewrite_slug if record and record.rewrite_slug else taxonomy]
        if record is not None and record.hierarchical:
            for ancestor_id in reversed(self._site.term_ancestors(term.id, taxonomy)):
                ancestor = self._site.get_term(ancestor_id, taxonomy)
                if ancestor is not None:
                    segments.append(ancestor.slug or str(ancestor.id))
        segments.append(term.slug or str(term.id))
        return self.set_preferred_url_scheme(self._pretty(*segments))

    # Post type archives ----------------------------------------------------------------
    def bare_post_type_archive_url(self, post_type: str) -> str:
        record = self._site.get_post_type(post_type)
        if record is None:
            return ""
        if post_type == "post":
            # The posts archive is the blog page, or the front page without one.
            settings = self.settings
            if settings.show_on_front == "page" and settings.page_for_posts:
                return self.bare_singular_url(settings.page_for_posts)
            return self.bare_front_page_url()
        if not record.has_archive:
            return ""
        if not self.settings.pretty_permalinks:
            return self.set_preferred_url_scheme(self._plain(post_type=post_type))
        slug = record.archive_slug or record.rewrite_slug or record.name
        return self.set_preferred_url_scheme(self._pretty(slug))

    def post_type_archive_url(self, post_type: str, page: int = 1) -> str:
        return self.add_pagination_to_url(self.bare_post_type_archive_url(post_type), page)

    # Authors ---------------------------------------------------------------------------
    def bare_author_url(self, author_id: int) -> str:
        author = self._site.get_author(author_id)
        if author is None:
            return ""
        if not self.settings.pretty_permalinks:
            return self.set_preferred_url_scheme(self._plain(author=author.id))
        return self.set_preferred_url_scheme(self._pretty("author", author.nicename or str(author.id)))

    def author_url(self, author_id: int, page: int = 1) -> str:
        return self.add_pagination_to_url(self.bare_author_url(author_id), page)

    # Dates -----------------------------------------------------------------------------
    def bare_date_url(self, year: int, month: int = 0, day: int = 0) -> str:
        """Return the most specific date archive link available."""
        if not year:
            return ""
        if day:
            parts = [f"{year:04d}", f"{month:02d}", f"{day:02d}"]
        elif month:
            parts = [f"{year:04d}", f"{month:02d}"]
        else:
            parts = [f"{year:04d}"]
        if not self.settings.pretty_permalinks:
            return self.set_preferred_url_scheme(self._plain(m="".join(parts)))
        return self.set_preferred_url_scheme(self._pretty(*parts))

    # Search ----------------------------------------------------------------------------
    def bare_search_url(self, search_query: str) -> str:
        if not self.settings.pretty_permalinks:
            return self.set_preferred_url_scheme(self._plain(s=search_query))
        return self.set_preferred_url_scheme(self._pretty("search", search_query))

    def search_url(self, search_query: str, page: int = 1) -> str:
        return self.add_pagination_to_url(self.bare_search_url(search_query), page)
