"""Assembly of ordered breadcrumb trails."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from .context import (
    AuthorArchive,
    DateArchive,
    FrontPage,
    NotFound,
    PostTypeArchive,
    ResourceContext,
    ResourceKind,
    Search,
    Singular,
    TermArchive,
    TrailArgs,
    coerce_args,
)
from .memo import GatedMemo
from .providers import ContentHierarchy, MetadataStore, PermalinkProvider, TitleProvider
from .query import QueryClassifier, QueryState
from .terms import PrimaryTermOverride, PrimaryTermResolver
from .titles import SiteTitles
from .urls import SitePermalinks

__all__ = ["Crumb", "Trail", "TrailBuilder", "TrailFilter", "trail_to_dicts"]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Crumb:
    """One navigation entry. ``url`` is empty when the resource has no address."""

    url: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "name": self.name}


Trail = List[Crumb]
TrailFilter = Callable[[Trail, Optional[TrailArgs]], Sequence[Crumb]]
Assembler = Callable[[Any], Trail]


def trail_to_dicts(trail: Sequence[Crumb]) -> List[Dict[str, str]]:
    """Return the ``{url, name}`` mappings handed to renderers."""
    return [crumb.to_dict() for crumb in trail]


class TrailBuilder:
    """Builds the crumb list leading from the site root to a resource.

    The first crumb is always the front page; the last is the resource itself.
    Names and URLs come from the injected title and permalink providers; this
    class only decides which resources to ask about and in which order.
    """

    def __init__(
        self,
        *,
        classifier: QueryClassifier,
        site: ContentHierarchy,
        permalinks: PermalinkProvider,
        titles: TitleProvider,
        resolver: PrimaryTermResolver,
        trail_filter: TrailFilter | None = None,
    ) -> None:
        self.classifier = classifier
        self._site = site
        self._permalinks = permalinks
        self._titles = titles
        self._resolver = resolver
        self._trail_filter = trail_filter
        self._memo = GatedMemo(classifier.gate)
        self._assemblers: Dict[ResourceKind, Assembler] = {
            ResourceKind.FRONT_PAGE: self._front_page_trail,
            ResourceKind.SINGULAR: self._singular_trail,
            ResourceKind.TERM_ARCHIVE: self._term_trail,
            ResourceKind.POST_TYPE_ARCHIVE: self._post_type_archive_trail,
            ResourceKind.AUTHOR_ARCHIVE: self._author_trail,
            ResourceKind.DATE_ARCHIVE: self._date_trail,
            ResourceKind.SEARCH: self._search_trail,
            ResourceKind.NOT_FOUND: self._not_found_trail,
        }

    @classmethod
    def for_site(
        cls,
        site: ContentHierarchy,
        state: QueryState,
        *,
        metadata: MetadataStore | None = None,
        permalinks: PermalinkProvider | None = None,
        titles: TitleProvider | None = None,
        primary_term_override: PrimaryTermOverride | None = None,
        trail_filter: TrailFilter | None = None,
    ) -> "TrailBuilder":
        """Wire a builder with the default site-backed collaborators.

        Without a ``metadata`` store the site itself answers primary-term
        look-ups.
        """
        store: Any = metadata if metadata is not None else site
        return cls(
            classifier=QueryClassifier(state, site),
            site=site,
            permalinks=permalinks or SitePermalinks(site),
            titles=titles or SiteTitles(site),
            resolver=PrimaryTermResolver(site, store, override=primary_term_override),
            trail_filter=trail_filter,
        )

    @property
    def resolver(self) -> PrimaryTermResolver:
        return self._resolver

    # Entry points ----------------------------------------------------------------------
    def build_trail(self, args: TrailArgs | Mapping[str, Any] | None = None) -> Trail:
        """Return the trail for explicit ``args``, or for the ambient request."""
        explicit = coerce_args(args)
        if explicit is not None:
            trail = self.build_from_context(self.classifier.classify(explicit))
        else:
            # Ambient state is stable once the gate opens, so one answer serves the request.
            trail = list(
                self._memo.remember(
                    "ambient_trail",
                    lambda: tuple(self.build_from_context(self.classifier.classify())),
                )
            )
        if self._trail_filter is not None:
            trail = list(self._trail_filter(trail, explicit))
        return trail

    def build_from_context(self, context: ResourceContext | None) -> Trail:
        if context is None:
            return []
        return self._assemblers[context.kind](context)

    # Shared crumbs ---------------------------------------------------------------------
    def front_crumb(self) -> Crumb:
        return Crumb(
            url=self._permalinks.bare_front_page_url(),
            name=self._titles.front_page_title(),
        )

    def _singular_crumb(self, post_id: int) -> Crumb:
        return self._memo.remember(
            "singular_crumb",
            lambda: Crumb(
                url=self._permalinks.bare_singular_url(post_id),
                name=self._titles.post_title(post_id),
            ),
            post_id,
        )

    def _term_crumb(self, term_id: int, taxonomy: str) -> Crumb:
        return self._memo.remember(
            "term_crumb",
            lambda: Crumb(
                url=self._permalinks.bare_term_url(term_id, taxonomy),
                name=self._titles.term_title(term_id, taxonomy),
            ),
            term_id,
            taxonomy,
        )

    def _term_chain(self, term_id: int, taxonomy: str) -> Trail:
        """Crumbs for a term's ancestors, root first, followed by the term."""
        ancestors = self._site.term_ancestors(term_id, taxonomy)
        crumbs = [self._term_crumb(ancestor_id, taxonomy) for ancestor_id in reversed(ancestors)]
        crumbs.append(self._term_crumb(term_id, taxonomy))
        return crumbs

    def primary_taxonomy(self, post_type: str) -> str:
        """Return the first hierarchical, public taxonomy of ``post_type``."""
        for taxonomy in self._site.object_taxonomies(post_type):
            if taxonomy.hierarchical and taxonomy.public:
                return taxonomy.name
        return ""

    # Assemblers ------------------------------------------------------------------------
    def _front_page_trail(self, context: FrontPage) -> Trail:
        return [self.front_crumb()]

    def _singular_trail(self, context: Singular) -> Trail:
        content_id = context.content_id
        if content_id is None:
            content_id = self.classifier.real_id()
        post = self._site.get_post(content_id)
        if post is None:
            LOGGER.debug("No content %s; singular trail is empty", content_id)
            return []

        crumbs: Trail = []
        post_type = self._site.get_post_type(post.type)
        if post_type is not None and post_type.has_archive:
            crumbs.append(
                Crumb(
                    url=self._permalinks.bare_post_type_archive_url(post.type),
                    name=self._titles.post_type_archive_title(post.type),
                )
            )

        taxonomy = self.primary_taxonomy(post.type)
        primary_term_id = self._resolver.resolve_primary_term_id(post.id, taxonomy) if taxonomy else 0
        if primary_term_id:
            crumbs.extend(self._term_chain(primary_term_id, taxonomy))

        for ancestor_id in reversed(self._site.post_ancestors(post.id)):
            crumbs.append(self._singular_crumb(ancestor_id))

        crumbs.append(self._singular_crumb(post.id))
        return [self.front_crumb(), *crumbs]

    def _term_trail(self, context: TermArchive) -> Trail:
        if context.term_id is not None:
            term_id = context.term_id
            taxonomy = context.taxonomy
            if not taxonomy:
                term = self._site.get_term(term_id)
                taxonomy = term.taxonomy if term else ""
        else:
            term_id = self.classifier.real_id()
            taxonomy = self.classifier.current_taxonomy()

        if self._site.get_term(term_id, taxonomy) is None:
            LOGGER.debug("No %s term %s; term trail is empty", taxonomy or "unknown", term_id)
            return []
        return [self.front_crumb(), *self._term_chain(term_id, taxonomy)]

    def _post_type_archive_trail(self, context: PostTypeArchive) -> Trail:
        if context.post_type is not None:
            post_type = context.post_type
            url = self._permalinks.bare_post_type_archive_url(post_type)
        else:
            post_type = self.classifier.current_post_type()
            url = self._permalinks.post_type_archive_url(post_type, self.classifier.paged())

        if self._site.get_post_type(post_type) is None:
            return []
        return [
            self.front_crumb(),
            Crumb(url=url, name=self._titles.post_type_archive_title(post_type)),
        ]

    def _author_trail(self, context: AuthorArchive) -> Trail:
        if context.author_id is not None:
            author_id = context.author_id
            url = self._permalinks.bare_author_url(author_id)
        else:
            author_id = self.classifier.real_id()
            url = self._permalinks.author_url(author_id, self.classifier.paged())

        if self._site.get_author(author_id) is None:
            return []
        return [
            self.front_crumb(),
            Crumb(url=url, name=self._titles.author_title(author_id)),
        ]

    def _date_trail(self, context: DateArchive) -> Trail:
        if not context.year:
            return []
        return [
            self.front_crumb(),
            Crumb(
                url=self._permalinks.bare_date_url(context.year, context.month, context.day),
                name=self._titles.date_title(context.year, context.month, context.day),
            ),
        ]

    def _search_trail(self, context: Search) -> Trail:
        return [
            self.front_crumb(),
            Crumb(
                url=self._permalinks.search_url(context.search_query, self.classifier.paged()),
                name=self._titles.search_title(context.search_query),
            ),
        ]

    def _not_found_trail(self, context: NotFound) -> Trail:
        return [
            self.front_crumb(),
            Crumb(url="", name=self._titles.not_found_title()),
        ]
