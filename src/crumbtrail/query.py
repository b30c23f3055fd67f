"""Classification of ambient or explicit requests into resource contexts."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .context import (
    AuthorArchive,
    DateArchive,
    FrontPage,
    NotFound,
    PostTypeArchive,
    ResourceContext,
    Search,
    Singular,
    TermArchive,
    TrailArgs,
)
from .memo import GatedMemo, MemoStore, ReadinessGate
from .providers import ContentHierarchy

__all__ = ["AdminScreen", "NEXTPAGE_MARKER", "QueryClassifier", "QueryState"]

LOGGER = logging.getLogger(__name__)

NEXTPAGE_MARKER = "<!--nextpage-->"


class AdminScreen(BaseModel):
    """Administrative screen currently displayed, if any."""

    model_config = ConfigDict(extra="forbid")

    base: str = ""
    post_type: str = ""
    taxonomy: str = ""
    object_id: int = 0


class QueryState(BaseModel):
    """Snapshot of what the host environment is currently serving.

    Populated once per request by the environment adapter; the classifier only
    reads it. ``initialized`` tells whether the host query has been set up and
    ``batch`` marks non-interactive command contexts.
    """

    model_config = ConfigDict(extra="forbid")

    initialized: bool = False
    batch: bool = False
    admin_screen: Optional[AdminScreen] = None

    is_front_page: bool = False
    is_home: bool = False
    is_singular: bool = False
    is_archive: bool = False
    is_category: bool = False
    is_tag: bool = False
    is_tax: bool = False
    is_post_type_archive: bool = False
    is_author: bool = False
    is_date: bool = False
    is_search: bool = False
    is_404: bool = False
    is_feed: bool = False

    queried_object_id: int = 0
    queried_taxonomy: str = ""
    queried_post_type: str = ""
    feed_post_id: int = 0

    year: int = 0
    month: int = 0
    day: int = 0
    search_query: str = ""

    paged: int = 0
    page: int = 0
    max_num_pages: int = 0

    def cache_readiness(self) -> bool | None:
        """Return whether query results may be memoized; ``None`` while undecided."""
        if self.batch:
            return False
        if self.initialized or self.admin_screen is not None:
            return True
        return None


class QueryClassifier:
    """Answers questions about the current request and classifies it."""

    def __init__(
        self,
        state: QueryState,
        site: ContentHierarchy,
        *,
        gate: ReadinessGate | None = None,
    ) -> None:
        self.state = state
        self.site = site
        self.gate = gate or ReadinessGate(state.cache_readiness)
        self._memo = GatedMemo(self.gate)
        self._static = MemoStore()

    # Classification ------------------------------------------------------------------
    def classify(self, args: TrailArgs | None = None) -> ResourceContext | None:
        """Map explicit ``args`` or the ambient request onto a resource context.

        ``None`` means nothing resolvable was requested.
        """
        if args is not None:
            return self._memo.remember(
                "classify_args",
                lambda: self._classify_args(args),
                args.id,
                args.taxonomy,
                args.post_type_archive,
                args.author_id,
            )
        return self._memo.remember("classify_query", self._classify_query)

    def _classify_args(self, args: TrailArgs) -> ResourceContext | None:
        if args.taxonomy:
            context: ResourceContext | None = TermArchive(term_id=args.id, taxonomy=args.taxonomy)
        elif args.post_type_archive:
            context = PostTypeArchive(post_type=args.post_type_archive)
        elif args.author_id:
            context = AuthorArchive(author_id=args.author_id)
        elif self.is_real_front_page_by_id(args.id):
            context = FrontPage()
        elif args.id:
            context = Singular(content_id=args.id)
        else:
            context = None
        LOGGER.debug("Classified arguments %r as %r", args, context)
        return context

    def _classify_query(self) -> ResourceContext | None:
        # Host flags overlap (a blog page is both "home" and a page); order decides.
        if self.is_real_front_page():
            context: ResourceContext | None = FrontPage()
        elif self.is_singular():
            context = Singular()
        elif self.is_archive():
            if self.is_editable_term():
                context = TermArchive()
            elif self.is_post_type_archive():
                context = PostTypeArchive()
            elif self.is_author():
                context = AuthorArchive()
            elif self.is_date():
                context = DateArchive(year=self.state.year, month=self.state.month, day=self.state.day)
            else:
                context = None
        elif self.is_search():
            context = Search(search_query=self.state.search_query)
        else:
            context = NotFound()
        LOGGER.debug("Classified ambient request as %r", context)
        return context

    # Identity ------------------------------------------------------------------------
    @property
    def is_admin(self) -> bool:
        return self.state.admin_screen is not None

    def real_id(self) -> int:
        """Return the id of the object being displayed, ``0`` when there is none."""
        if self.state.admin_screen is not None:
            return self.state.admin_screen.object_id
        return self._memo.remember("real_id", self._compute_real_id)

    def _compute_real_id(self) -> int:
        if self.state.is_feed and self.state.feed_post_id:
            return self.state.feed_post_id
        return self.state.queried_object_id

    def front_page_id(self) -> int:
        settings = self.site.settings
        return self._static.remember(
            "front_page_id",
            lambda: settings.page_on_front if self.has_page_on_front() else 0,
        )

    def has_page_on_front(self) -> bool:
        return self.site.settings.show_on_front == "page"

    def has_blog_page(self) -> bool:
        return not self.has_page_on_front() or bool(self.site.settings.page_for_posts)

    def current_taxonomy(self) -> str:
        if self.state.admin_screen is not None:
            return self.state.admin_screen.taxonomy
        return self._memo.remember("current_taxonomy", lambda: self.state.queried_taxonomy)

    def current_post_type(self) -> str:
        if self.state.admin_screen is not None:
            return self.state.admin_screen.post_type
        return self._memo.remember("current_post_type", self._compute_current_post_type)

    def _compute_current_post_type(self) -> str:
        if self.is_archive():
            if self.is_editable_term():
                post_types = self.site.taxonomy_post_types(self.current_taxonomy())
                return post_types[0] if post_types else ""
            return self.state.queried_post_type
        return self.site.post_type_of(self.real_id())

    # Front page ----------------------------------------------------------------------
    def is_real_front_page(self) -> bool:
        return self._memo.remember(
            "is_real_front_page",
            lambda: self.state.is_front_page
            or (
                self.is_blog()
                and self.real_id() == 0
                and self.site.settings.show_on_front != "posts"
            ),
        )

    def is_real_front_page_by_id(self, content_id: int) -> bool:
        return self.front_page_id() == content_id

    def is_static_front_page(self, content_id: int = 0) -> bool:
        settings = self.site.settings
        front_id = self._static.remember(
            "static_front_page_id",
            lambda: settings.page_on_front
            if self.has_page_on_front() and settings.page_on_front
            else None,
        )
        return front_id is not None and (content_id or self.real_id()) == front_id

    # Blog listing --------------------------------------------------------------------
    def is_blog(self, content_id: int | None = None) -> bool:
        if content_id is not None:
            return bool(content_id) and self.site.settings.page_for_posts == content_id
        # Without a blog page the host's "home" flag is meaningless.
        return self.has_blog_page() and self.state.is_home

    def is_blog_as_page(self, content_id: int | None = None) -> bool:
        return self.is_blog(content_id) if self.has_page_on_front() else False

    def is_singular_archive(self, content_id: int | None = None) -> bool:
        return self._memo.remember(
            "is_singular_archive",
            lambda: self.is_blog_as_page(content_id),
            content_id,
        )

    # Singular ------------------------------------------------------------------------
    def is_singular(self) -> bool:
        screen = self.state.admin_screen
        if screen is not None:
            return screen.base in ("edit", "post")
        return self._memo.remember(
            "is_singular",
            lambda: self.state.is_singular or self.is_singular_archive(),
        )

    # Archives ------------------------------------------------------------------------
    def is_archive(self) -> bool:
        screen = self.state.admin_screen
        if screen is not None:
            return screen.base in ("edit-tags", "term")
        return self._memo.remember("is_archive", self._compute_is_archive)

    def _compute_is_archive(self) -> bool:
        state = self.state
        if state.is_archive and not self.is_singular():
            return True
        if state.initialized and not self.is_singular():
            return any(
                (
                    state.is_tax,
                    state.is_category,
                    state.is_tag,
                    state.is_post_type_archive,
                    state.is_author,
                    state.is_date,
                )
            )
        return False

    def _matches_queried_term(self, expected: int | str) -> bool:
        if expected == "" or expected == 0:
            return True
        if isinstance(expected, int):
            return self.state.queried_object_id == expected
        term = self.site.get_term(self.state.queried_object_id)
        return term is not None and expected in (term.slug, term.name)

    def is_category(self, category: int | str = "") -> bool:
        if self.is_admin:
            return self.is_archive() and self.current_taxonomy() == "category"
        return self._memo.remember(
            "is_category",
            lambda: self.state.is_category and self._matches_queried_term(category),
            category,
        )

    def is_tag(self, tag: int | str = "") -> bool:
        if self.is_admin:
            return self.is_archive() and self.current_taxonomy() == "post_tag"
        return self._memo.remember(
            "is_tag",
            lambda: self.state.is_tag and self._matches_queried_term(tag),
            tag,
        )

    def is_tax(self, taxonomy: str = "", term: int | str = "") -> bool:
        return self._memo.remember(
            "is_tax",
            lambda: self.state.is_tax
            and (not taxonomy or self.state.queried_taxonomy == taxonomy)
            and self._matches_queried_term(term),
            taxonomy,
            term,
        )

    def is_editable_term(self) -> bool:
        return self._memo.remember(
            "is_editable_term",
            lambda: self.is_category() or self.is_tag() or self.is_tax(),
        )

    def is_post_type_archive(self) -> bool:
        return self.state.is_post_type_archive

    def is_author(self, author: int | str = "") -> bool:
        if not author:
            return self.state.is_author
        return self._memo.remember("is_author", lambda: self._matches_author(author), author)

    def _matches_author(self, author: int | str) -> bool:
        if not self.state.is_author:
            return False
        if isinstance(author, int):
            return self.real_id() == author
        record = self.site.get_author(self.real_id())
        return record is not None and author in (record.nicename, record.display_name)

    def is_date(self) -> bool:
        return self.state.is_date

    def is_search(self) -> bool:
        return self.state.is_search and not self.is_admin

    def is_404(self) -> bool:
        return self.state.is_404

    # Pagination ----------------------------------------------------------------------
    def numpages(self) -> int:
        """Return the number of pages the current request spans."""
        if self.is_admin:
            return 1
        return self._memo.remember("numpages", self._compute_numpages)

    def _compute_numpages(self) -> int:
        post = None
        if self.is_singular() and not self.is_singular_archive():
            post = self.site.get_post(self.real_id())
        if post is not None:
            content = post.content
            if NEXTPAGE_MARKER in content:
                content = content.replace("\n" + NEXTPAGE_MARKER, NEXTPAGE_MARKER)
                if content.startswith(NEXTPAGE_MARKER):
                    content = content[len(NEXTPAGE_MARKER):]
                return len(content.split(NEXTPAGE_MARKER))
            return 1
        return self.state.max_num_pages

    def is_multipage(self) -> bool:
        return self.numpages() > 1

    def page(self) -> int:
        """Return the current content page of a paginated singular post."""
        return self._memo.remember("page", self._compute_page)

    def _compute_page(self) -> int:
        if not self.is_multipage():
            return 1
        page = self.state.page or 1
        maximum = self.numpages()
        if page > maximum:
            # The host serves the first page on overflow, except on a static front page.
            page = maximum if self.is_static_front_page() else 1
        return page

    def paged(self) -> int:
        """Return the current archive page number."""
        return self._memo.remember("paged", self._compute_paged)

    def _compute_paged(self) -> int:
        if not self.is_multipage():
            return 1
        return min(self.state.paged or 1, self.numpages())
