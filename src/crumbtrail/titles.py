"""Display names for site resources."""

from __future__ import annotations

import calendar

from .providers import ContentHierarchy
from .utils.text import normalize_title

__all__ = ["NOT_FOUND_TITLE", "SiteTitles", "UNTITLED"]

UNTITLED = "Untitled"
NOT_FOUND_TITLE = "Page not found"


class SiteTitles:
    """Title provider reading names straight from a ``ContentHierarchy``.

    Resource titles that come out empty fall back to ``UNTITLED``.
    """

    def __init__(self, site: ContentHierarchy) -> None:
        self._site = site

    @staticmethod
    def _or_untitled(value: str) -> str:
        return normalize_title(value) or UNTITLED

    def front_page_title(self) -> str:
        return normalize_title(self._site.settings.name)

    def post_title(self, post_id: int) -> str:
        post = self._site.get_post(post_id)
        title = ""
        if post is not None:
            post_type = self._site.get_post_type(post.type)
            if post_type is None or post_type.supports_title:
                title = post.title
        return self._or_untitled(title)

    def term_title(self, term_id: int, taxonomy: str) -> str:
        term = self._site.get_term(term_id, taxonomy)
        return self._or_untitled(term.name if term else "")

    def post_type_archive_title(self, post_type: str) -> str:
        record = self._site.get_post_type(post_type)
        return self._or_untitled((record.label or record.name) if record else "")

    def author_title(self, author_id: int) -> str:
        author = self._site.get_author(author_id)
        return self._or_untitled(author.display_name if author else "")

    def date_title(self, year: int, month: int = 0, day: int = 0) -> str:
        if not year:
            return UNTITLED
        if not 0 < month <= 12:
            return str(year)
        if day:
            return f"{calendar.month_name[month]} {day}, {year}"
        if month:
            return f"{calendar.month_name[month]} {year}"
        return str(year)

    def search_title(self, search_query: str) -> str:
        return normalize_title(f"Search Results for “{search_query}”")

    def not_found_title(self) -> str:
        return NOT_FOUND_TITLE
