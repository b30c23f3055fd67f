"""Deterministic primary-term selection for content with several terms."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from .providers import ContentHierarchy, MetadataStore
from .site.schema import Term

__all__ = ["PrimaryTermOverride", "PrimaryTermResolver"]

LOGGER = logging.getLogger(__name__)

PrimaryTermOverride = Callable[[Optional[Term], int, str], Optional[Term]]


class PrimaryTermResolver:
    """Pick one term per ``(content, taxonomy)`` to anchor a content's trail.

    Resolution order:

    1. An explicitly stored primary term, when it is still assigned.
    2. Otherwise the lowest-id assigned term, then repeatedly its assigned
       child for as long as one exists.

    Results, including "no term", are cached. The cache is capped rather than
    managed: once it holds more than ``CACHE_LIMIT`` entries it is cut back to
    its ``CACHE_KEEP`` earliest-inserted entries before a new one is computed.
    """

    CACHE_LIMIT = 69
    CACHE_KEEP = 7

    def __init__(
        self,
        site: ContentHierarchy,
        metadata: MetadataStore,
        *,
        override: PrimaryTermOverride | None = None,
    ) -> None:
        self._site = site
        self._metadata = metadata
        self._override = override
        # Absent key: not computed. ``None`` value: computed, no term.
        self._cache: Dict[Tuple[int, str], Optional[Term]] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def cached_keys(self) -> List[Tuple[int, str]]:
        return list(self._cache)

    def resolve_primary_term(self, content_id: int, taxonomy: str) -> Optional[Term]:
        key = (content_id, taxonomy)
        if key in self._cache:
            return self._cache[key]

        if len(self._cache) > self.CACHE_LIMIT:
            LOGGER.debug(
                "Primary term cache holds %d entries; keeping the first %d",
                len(self._cache),
                self.CACHE_KEEP,
            )
            self._cache = dict(list(self._cache.items())[: self.CACHE_KEEP])

        term = self._compute(content_id, taxonomy)
        if self._override is not None:
            term = self._override(term, content_id, taxonomy)

        self._cache[key] = term
        LOGGER.debug(
            "Primary %s term for %s resolved to %s",
            taxonomy,
            content_id,
            term.id if term else None,
        )
        return term

    def resolve_primary_term_id(self, content_id: int, taxonomy: str) -> int:
        """Return the primary term id, ``0`` when none resolves."""
        term = self.resolve_primary_term(content_id, taxonomy)
        return term.id if term else 0

    def _compute(self, content_id: int, taxonomy: str) -> Optional[Term]:
        terms = self._site.post_terms(content_id, taxonomy)
        if not terms:
            return None

        stored_id = self._metadata.get_primary_term_id(content_id, taxonomy)
        if stored_id:
            for term in terms:
                if term.id == stored_id:
                    return term
            # A stale assignment falls through to the computed choice.
            LOGGER.debug(
                "Stored primary term %s is no longer assigned to %s", stored_id, content_id
            )

        return self._descend(terms)

    @staticmethod
    def _descend(terms: List[Term]) -> Term:
        """Start at the lowest id and follow assigned children down the tree."""
        by_id = {term.id: term for term in terms}
        candidate = by_id[min(by_id)]
        if len(terms) < 2:
            return candidate

        # Later assignments win when several assigned terms share a parent.
        child_by_parent = {term.parent: term.id for term in terms}

        steps = 0
        while candidate.id in child_by_parent:
            child = by_id.get(child_by_parent[candidate.id])
            if child is None:
                break
            steps += 1
            if steps > len(terms):
                LOGGER.warning(
                    "Aborting primary term descent at term %s: parent chain loops", candidate.id
                )
                break
            candidate = child
        return candidate
