from __future__ import annotations

import logging

from crumbtrail.site import SiteGraph
from crumbtrail.terms import PrimaryTermResolver


def _resolver(site: SiteGraph, **kwargs) -> PrimaryTermResolver:
    return PrimaryTermResolver(site, site, **kwargs)


def test_descends_from_lowest_id_through_assigned_children(site: SiteGraph) -> None:
    resolver = _resolver(site)

    assert resolver.resolve_primary_term_id(101, "category") == 12
    assert resolver.resolve_primary_term_id(100, "category") == 11


def test_single_assigned_term_is_primary(site: SiteGraph) -> None:
    assert _resolver(site).resolve_primary_term_id(100, "post_tag") == 20


def test_no_assigned_terms_resolves_to_zero(site: SiteGraph) -> None:
    resolver = _resolver(site)

    assert resolver.resolve_primary_term(200, "category") is None
    assert resolver.resolve_primary_term_id(999, "category") == 0
    # "No term" is cached like any other answer.
    assert (200, "category") in resolver.cached_keys()


def test_stored_primary_term_wins_when_assigned(site: SiteGraph) -> None:
    site.set_primary_term_id(101, "category", 13)

    assert _resolver(site).resolve_primary_term_id(101, "category") == 13


def test_stale_stored_primary_term_falls_back(site: SiteGraph) -> None:
    site.set_primary_term_id(100, "category", 13)

    assert _resolver(site).resolve_primary_term_id(100, "category") == 11


def test_later_assignment_wins_between_siblings(site_data) -> None:
    site_data["terms"].append(
        {"id": 14, "taxonomy": "category", "name": "Asia", "slug": "asia", "parent": 11}
    )
    site_data["posts"][1]["terms"]["category"] = [10, 11, 14, 12]
    site = SiteGraph.from_mapping(site_data)

    assert _resolver(site).resolve_primary_term_id(101, "category") == 12


def test_results_are_cached_per_content_and_taxonomy(site: SiteGraph) -> None:
    resolver = _resolver(site)

    assert resolver.resolve_primary_term_id(101, "category") == 12
    site.set_primary_term_id(101, "category", 13)

    assert resolver.resolve_primary_term_id(101, "category") == 12
    assert resolver.cached_keys() == [(101, "category")]


def test_cache_is_cut_back_to_earliest_entries(site: SiteGraph) -> None:
    resolver = _resolver(site)
    for content_id in range(1, 71):
        resolver.resolve_primary_term(content_id, "category")
    assert len(resolver) == 70

    resolver.resolve_primary_term(71, "category")

    assert len(resolver) == PrimaryTermResolver.CACHE_KEEP + 1
    assert resolver.cached_keys() == [(content_id, "category") for content_id in range(1, 8)] + [
        (71, "category")
    ]


def test_override_replaces_computed_term(site: SiteGraph) -> None:
    calls = []

    def override(term, content_id, taxonomy):
        calls.append((term.id if term else None, content_id, taxonomy))
        return site.get_term(10, taxonomy)

    resolver = _resolver(site, override=override)

    assert resolver.resolve_primary_term_id(101, "category") == 10
    assert resolver.resolve_primary_term_id(101, "category") == 10
    assert calls == [(12, 101, "category")]


def test_cyclic_parents_stop_descent(site_data, caplog) -> None:
    site_data["terms"].extend(
        [
            {"id": 40, "taxonomy": "category", "name": "Loop A", "parent": 41},
            {"id": 41, "taxonomy": "category", "name": "Loop B", "parent": 40},
        ]
    )
    site_data["posts"].append({"id": 500, "title": "Loop", "terms": {"category": [41, 40]}})
    site = SiteGraph.from_mapping(site_data)

    with caplog.at_level(logging.WARNING, logger="crumbtrail.terms"):
        term_id = _resolver(site).resolve_primary_term_id(500, "category")

    assert term_id == 40
    assert "parent chain loops" in caplog.text


def test_unrelated_terms_resolve_to_lowest_id(site_data) -> None:
    site_data["terms"].extend(
        {"id": term_id, "taxonomy": "category", "name": f"Topic {term_id}"} for term_id in (2, 5, 9)
    )
    site_data["posts"].append({"id": 700, "title": "Topics", "terms": {"category": [5, 2, 9]}})
    site = SiteGraph.from_mapping(site_data)

    assert _resolver(site).resolve_primary_term_id(700, "category") == 2


def test_descent_reaches_assigned_child_of_lowest_term(site_data) -> None:
    site_data["terms"].extend(
        [
            {"id": 2, "taxonomy": "category", "name": "Parent"},
            {"id": 7, "taxonomy": "category", "name": "Child", "parent": 2},
            {"id": 9, "taxonomy": "category", "name": "Other"},
        ]
    )
    site_data["posts"].append({"id": 701, "title": "Nested", "terms": {"category": [9, 7, 2]}})
    site = SiteGraph.from_mapping(site_data)

    assert _resolver(site).resolve_primary_term_id(701, "category") == 7
